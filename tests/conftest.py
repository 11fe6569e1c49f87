"""Shared fixtures: an in-memory package backend and the bendn fixture tree."""

from __future__ import annotations

from typing import Dict, Generator, List, Optional, Set, Tuple

import pytest

from gdpm.models import Package
from gdpm.utils.console import reconfigure_console

TEST_INTEGRITY = (
    "sha512-hyPGxDG8poa2ekmWr1BeTCUa7YaZYfhsN7jcLJ3q2cQVlowcTnzqmz4iV3t21QFy"
    "abE5R+rV+y6d5dAItrJeDw=="
)
GDCLI_INTEGRITY = (
    "sha512-/YOAd1+K4JlKvPTmpX8B7VWxGtFrxKq4R0A6u5qOaaVPK6uGsl4dGZaIHpxuqcurE"
    "cwPEOabkoShXKZaOXB0lw=="
)

WANTED_LOCKFILE = [
    {"name": "@bendn/test", "version": "2.0.10", "integrity": TEST_INTEGRITY},
    {"name": "@bendn/gdcli", "version": "1.2.5", "integrity": GDCLI_INTEGRITY},
]

Key = Tuple[str, str]


class FakeRegistry:
    """In-memory stand-in for the network/registry backend.

    Attributes:
        graph: ``(name, version)`` -> list of ``(name, version)`` deps.
        integrities: ``(name, version)`` -> integrity string.
        failing: Packages whose integrity computation raises.
        downloads: Display forms of downloaded packages, in call order.
        integrity_calls: Display forms passed to ``compute_integrity``.
    """

    def __init__(
        self,
        graph: Optional[Dict[Key, List[Key]]] = None,
        integrities: Optional[Dict[Key, str]] = None,
    ) -> None:
        self.graph: Dict[Key, List[Key]] = graph or {}
        self.integrities: Dict[Key, str] = integrities or {}
        self.failing: Set[Key] = set()
        self.downloads: List[str] = []
        self.integrity_calls: List[str] = []

    def fetch_dependencies(self, package: Package) -> List[Package]:
        return [
            Package(name=name, version=version, backend=self).resolve()
            for name, version in self.graph.get((package.name, package.version), [])
        ]

    def download(self, package: Package) -> None:
        self.downloads.append(str(package))

    def compute_integrity(self, package: Package) -> str:
        key = (package.name, package.version)
        self.integrity_calls.append(str(package))
        if key in self.failing:
            raise RuntimeError(f"tarball for {package} is corrupt")
        return self.integrities[key]


@pytest.fixture
def registry() -> FakeRegistry:
    """Backend knowing ``@bendn/test@2.0.10 -> @bendn/gdcli@1.2.5``."""
    return FakeRegistry(
        graph={("@bendn/test", "2.0.10"): [("@bendn/gdcli", "1.2.5")]},
        integrities={
            ("@bendn/test", "2.0.10"): TEST_INTEGRITY,
            ("@bendn/gdcli", "1.2.5"): GDCLI_INTEGRITY,
        },
    )


def make_tree() -> List[Package]:
    """Build a small forest with known pre-order ``a b c d e f g``.

    ::

        a ─┬─ b ── c
           └─ d
        e ─── f ── g
    """
    c = Package("c", "1.0.0")
    b = Package("b", "1.0.0", dependencies=[c])
    d = Package("d", "1.0.0")
    a = Package("a", "1.0.0", dependencies=[b, d])
    g = Package("g", "1.0.0")
    f = Package("f", "1.0.0", dependencies=[g])
    e = Package("e", "1.0.0", dependencies=[f])
    return [a, e]


def make_chain(depth: int, *, installed: bool = False) -> Package:
    """Build ``n0 -> n1 -> ... `` with ``depth`` nodes and return ``n0``.

    Installed nodes carry a ready integrity so no backend is needed.
    """
    integrity = "sha512-chain" if installed else ""
    root = Package("n0", "1", installed=installed, integrity=integrity)
    node = root
    for index in range(1, depth):
        child = Package(f"n{index}", "1", installed=installed, integrity=integrity)
        node.dependencies.append(child)
        node = child
    return root


@pytest.fixture
def forest() -> List[Package]:
    """Forest from :func:`make_tree`."""
    return make_tree()


@pytest.fixture(autouse=True)
def reset_console(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give every test a fresh, colorless console singleton."""
    monkeypatch.setenv("NO_COLOR", "1")
    reconfigure_console()
    yield
    reconfigure_console()
