"""
Package data model for gdpm.

A :class:`Package` is one node of the dependency forest: a name, an opaque
version specifier, the ordered list of dependencies it exclusively owns,
its installed state and a lazily filled integrity hash.

Network retrieval, registry resolution and hashing live behind the
:class:`PackageBackend` protocol; a package only forwards to it.
"""

from __future__ import annotations

from functools import lru_cache
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from packaging.version import InvalidVersion, Version

from gdpm.exceptions import BackendError, GdpmError, IntegrityError
from gdpm.models.lock_entry import LockEntry


class PackageBackend(Protocol):
    """Collaborator that knows how to fetch, install and hash packages."""

    def fetch_dependencies(self, package: "Package") -> List["Package"]:
        """Return the fully populated dependency sub-trees of ``package``."""
        ...

    def download(self, package: "Package") -> None:
        """Retrieve and install ``package``. Blocks until complete."""
        ...

    def compute_integrity(self, package: "Package") -> str:
        """Return ``<algorithm>-<base64 digest>`` for ``package``."""
        ...


VersionKey = Tuple[int, Union[Version, str]]


@lru_cache(maxsize=1024)
def _version_key(version: str) -> VersionKey:
    """Sort key for a version specifier.

    PEP 440 versions compare semantically and sort before anything else;
    other specifiers (``^1.2``, ``latest``...) compare as plain strings.
    """
    try:
        return (0, Version(version))
    except InvalidVersion:
        return (1, version)


@dataclass
class Package:
    """
    One node of the package forest.

    Attributes:
        name: Package name, unique among siblings only (e.g. ``@scope/pkg``).
        version: Opaque version specifier.
        dependencies: Ordered, exclusively owned dependency nodes.
        integrity: ``<algorithm>-<base64>`` hash, empty until computed.
        installed: Whether the package is installed.
        backend: Collaborator used for resolution, download and hashing.
    """

    name: str
    version: str
    dependencies: List["Package"] = field(default_factory=list)
    integrity: str = ""
    installed: bool = False
    backend: Optional[PackageBackend] = field(
        default=None,
        repr=False,
        compare=False,
    )

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_installed(self) -> bool:
        """Return True if the package is installed."""
        return self.installed

    def has_dependencies(self) -> bool:
        """Return True if the package has at least one dependency."""
        return bool(self.dependencies)

    # ------------------------------------------------------------------
    # Backend delegation
    # ------------------------------------------------------------------

    def resolve(self) -> "Package":
        """Populate :attr:`dependencies` from the backend.

        Without a backend the package stays a leaf.

        Returns:
            ``self``, for chaining.
        """
        if self.backend is not None:
            self.dependencies = list(self.backend.fetch_dependencies(self))
        return self

    def download(self) -> None:
        """Download the package through the backend and mark it installed.

        Raises:
            BackendError: No backend is configured or the download failed.
        """
        if self.backend is None:
            raise BackendError(
                "No backend configured",
                package=str(self),
                operation="download",
            )

        try:
            self.backend.download(self)
        except GdpmError:
            raise
        except Exception as exc:
            raise BackendError(
                f"Download failed: {exc}",
                package=str(self),
                operation="download",
            ) from exc

        self.installed = True

    def get_integrity(self) -> str:
        """Compute the integrity hash through the backend.

        Does not store the result; callers decide where it goes.

        Raises:
            IntegrityError: No backend, the backend failed, or it returned
                an empty value.
        """
        if self.backend is None:
            raise IntegrityError(
                "Cannot compute integrity without a backend",
                package=str(self),
            )

        try:
            integrity = self.backend.compute_integrity(self)
        except IntegrityError:
            raise
        except Exception as exc:
            raise IntegrityError(
                f"Failed to compute integrity: {exc}",
                package=str(self),
                original_error=exc,
            ) from exc

        if not integrity:
            raise IntegrityError(
                "Backend returned an empty integrity value",
                package=str(self),
            )
        return integrity

    # ------------------------------------------------------------------
    # Ordering & serialization
    # ------------------------------------------------------------------

    def sort_key(self) -> Tuple[str, VersionKey, str]:
        """Total order over packages: name, then version."""
        return (self.name, _version_key(self.version), self.version)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def to_lock_entry(self) -> LockEntry:
        """Return the lockfile record for this package."""
        return LockEntry(
            name=self.name,
            version=self.version,
            integrity=self.integrity,
        )

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def _clone_node(self) -> "Package":
        # The backend is a shared collaborator, never copied
        return Package(
            name=self.name,
            version=self.version,
            integrity=self.integrity,
            installed=self.installed,
            backend=self.backend,
        )

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Package":
        # Explicit stack, deep chains must not hit the recursion limit
        clone = self._clone_node()
        memo[id(self)] = clone
        stack: List[Tuple[Package, Package]] = [(self, clone)]

        while stack:
            source, target = stack.pop()
            for dependency in source.dependencies:
                copied = memo.get(id(dependency))
                if copied is None:
                    copied = dependency._clone_node()
                    memo[id(dependency)] = copied
                    stack.append((dependency, copied))
                target.dependencies.append(copied)

        return clone

    def __str__(self) -> str:
        """Return the stable display form ``name@version``."""
        return f"{self.name}@{self.version}"
