"""Unit tests for gdpm.models.package.

Covers the collaborator contract a Package offers to the core: predicates,
backend delegation, ordering, display form and copying.
"""

from __future__ import annotations

import copy
from typing import List

import pytest

from conftest import GDCLI_INTEGRITY, TEST_INTEGRITY, FakeRegistry, make_chain
from gdpm.exceptions import BackendError, IntegrityError
from gdpm.models import LockEntry, Package


class TestPackageInit:
    """Tests for Package initialization."""

    def test_leaf_defaults(self) -> None:
        """Test a new package is an uninstalled leaf without integrity."""
        pkg = Package("@bendn/test", "2.0.10")

        assert pkg.dependencies == []
        assert pkg.integrity == ""
        assert pkg.is_installed() is False
        assert pkg.has_dependencies() is False
        assert pkg.backend is None

    def test_dependency_lists_not_shared(self) -> None:
        """Test each package owns its own dependency list."""
        first = Package("a", "1")
        second = Package("b", "1")
        first.dependencies.append(Package("c", "1"))

        assert second.dependencies == []

    def test_display_form(self) -> None:
        """Test str() is ``name@version``."""
        assert str(Package("@bendn/gdcli", "1.2.5")) == "@bendn/gdcli@1.2.5"

    def test_repr_hides_backend(self, registry: FakeRegistry) -> None:
        """Test the backend does not leak into repr."""
        pkg = Package("a", "1", backend=registry)

        assert "backend" not in repr(pkg)

    def test_equality_ignores_backend(self, registry: FakeRegistry) -> None:
        """Test packages compare by data, not by collaborator."""
        assert Package("a", "1", backend=registry) == Package("a", "1")


class TestOrdering:
    """Tests for the package total order."""

    def test_by_name_first(self) -> None:
        """Test names dominate the ordering."""
        assert Package("a", "9.0") < Package("b", "1.0")

    def test_semantic_versions(self) -> None:
        """Test PEP 440 versions compare numerically, not lexically."""
        packages = [Package("a", "2.0.10"), Package("a", "2.0.9"), Package("a", "10.0")]

        assert [p.version for p in sorted(packages)] == ["2.0.9", "2.0.10", "10.0"]

    def test_opaque_specifiers_after_versions(self) -> None:
        """Test non-PEP 440 specifiers sort after versions, lexically."""
        packages = [
            Package("a", "^1.2.0"),
            Package("a", "latest"),
            Package("a", "1.0.0"),
        ]

        assert [p.version for p in sorted(packages)] == ["1.0.0", "^1.2.0", "latest"]

    def test_equivalent_versions_tie_broken_by_text(self) -> None:
        """Test equal PEP 440 versions still order deterministically."""
        packages = [Package("a", "1.0.0"), Package("a", "1.0")]

        assert [p.version for p in sorted(packages)] == ["1.0", "1.0.0"]

    def test_compare_with_other_type(self) -> None:
        """Test comparing with a non-package is unsupported."""
        with pytest.raises(TypeError):
            Package("a", "1") < "a@1"  # noqa: B015


class TestBackendDelegation:
    """Tests for resolve, download and get_integrity."""

    def test_resolve_populates_dependencies(self, registry: FakeRegistry) -> None:
        """Test resolve builds the dependency tree through the backend."""
        pkg = Package("@bendn/test", "2.0.10", backend=registry).resolve()

        assert [str(d) for d in pkg.dependencies] == ["@bendn/gdcli@1.2.5"]
        assert pkg.dependencies[0].backend is registry

    def test_resolve_without_backend_is_noop(self) -> None:
        """Test resolve keeps a backend-less package a leaf."""
        pkg = Package("a", "1")

        assert pkg.resolve() is pkg
        assert pkg.dependencies == []

    def test_download_marks_installed(self, registry: FakeRegistry) -> None:
        """Test download delegates and flips the installed state."""
        pkg = Package("@bendn/test", "2.0.10", backend=registry)

        pkg.download()

        assert pkg.is_installed()
        assert registry.downloads == ["@bendn/test@2.0.10"]

    def test_download_without_backend(self) -> None:
        """Test download requires a backend."""
        with pytest.raises(BackendError) as exc_info:
            Package("a", "1").download()

        assert exc_info.value.operation == "download"
        assert exc_info.value.package == "a@1"

    def test_download_failure_wrapped(self, registry: FakeRegistry) -> None:
        """Test backend failures become BackendError and leave state."""

        def explode(package: Package) -> None:
            raise OSError("connection reset")

        registry.download = explode  # type: ignore[method-assign]
        pkg = Package("a", "1", backend=registry)

        with pytest.raises(BackendError, match="connection reset"):
            pkg.download()

        assert not pkg.is_installed()

    def test_get_integrity(self, registry: FakeRegistry) -> None:
        """Test integrity comes from the backend and is not stored."""
        pkg = Package("@bendn/gdcli", "1.2.5", backend=registry)

        assert pkg.get_integrity() == GDCLI_INTEGRITY
        assert pkg.integrity == ""

    def test_get_integrity_failure(self, registry: FakeRegistry) -> None:
        """Test backend failures become IntegrityError."""
        registry.failing.add(("@bendn/test", "2.0.10"))
        pkg = Package("@bendn/test", "2.0.10", backend=registry)

        with pytest.raises(IntegrityError) as exc_info:
            pkg.get_integrity()

        assert exc_info.value.package == "@bendn/test@2.0.10"

    def test_get_integrity_empty_value(self, registry: FakeRegistry) -> None:
        """Test an empty integrity from the backend is a failure."""
        registry.integrities[("a", "1")] = ""

        with pytest.raises(IntegrityError, match="empty"):
            Package("a", "1", backend=registry).get_integrity()


class TestCopyAndSerialization:
    """Tests for deep copies and lock entries."""

    def test_deepcopy_shares_backend(self, registry: FakeRegistry) -> None:
        """Test copies keep the same backend but own their sub-tree."""
        pkg = Package("@bendn/test", "2.0.10", backend=registry).resolve()

        clone = copy.deepcopy(pkg)

        assert clone == pkg
        assert clone.backend is registry
        assert clone.dependencies[0] is not pkg.dependencies[0]
        assert clone.dependencies[0].backend is registry

    def test_to_lock_entry(self) -> None:
        """Test the lock record carries name, version and integrity."""
        pkg = Package("@bendn/test", "2.0.10", integrity=TEST_INTEGRITY)

        assert pkg.to_lock_entry() == LockEntry(
            "@bendn/test", "2.0.10", TEST_INTEGRITY
        )

    def test_has_dependencies(self) -> None:
        """Test the predicate follows the dependency list."""
        children: List[Package] = [Package("b", "1")]

        assert Package("a", "1", dependencies=children).has_dependencies()

    def test_deepcopy_deep_chain(self) -> None:
        """Test copying a chain deeper than the recursion limit."""
        root = make_chain(5000)

        clone = copy.deepcopy(root)

        node, depth = clone, 1
        while node.dependencies:
            assert node.dependencies[0] is not root
            node = node.dependencies[0]
            depth += 1
        assert depth == 5000
        assert node.name == "n4999"

    def test_deepcopy_keeps_shared_node_shared(self) -> None:
        """Test a node reached twice is copied once, like copy.deepcopy does."""
        shared = Package("x", "1")
        root = Package("a", "1", dependencies=[shared, shared])

        clone = copy.deepcopy(root)

        assert clone.dependencies[0] is clone.dependencies[1]
        assert clone.dependencies[0] is not shared
