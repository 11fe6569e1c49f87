"""Pre-order traversal of the package forest.

Every walk visits a node before any node of its dependency sub-tree,
visits siblings in their stored order, and finishes a node's whole
sub-tree before moving on to its next sibling.

Traversal uses an explicit stack, so deep dependency chains never hit the
interpreter's recursion limit. :func:`walk` and :func:`collect` borrow the
complete visit order before the first callback runs: callbacks may update
scalar fields (download, installed state, integrity) but adding, removing
or reordering dependencies during a walk is unsupported and does not
affect the order already taken.

Logically identical packages (same name and version) reached through
different branches are visited once per occurrence; nothing is
deduplicated here.
"""

from __future__ import annotations

import copy
from typing import Callable, Iterable, Iterator, List

from gdpm.models.package import Package
from gdpm.utils.logger import get_logger

logger = get_logger("walker")

__all__ = ["PackageVisitor", "collect", "iter_preorder", "traversal_order", "walk"]

#: Callback invoked once per visited package.
PackageVisitor = Callable[[Package], None]


def iter_preorder(packages: Iterable[Package]) -> Iterator[Package]:
    """Lazily yield every package of the forest in pre-order.

    Dependencies of a node are read when the node is yielded back, so
    prefer :func:`traversal_order` when the caller mutates the tree.
    """
    stack: List[Package] = list(packages)
    stack.reverse()

    while stack:
        package = stack.pop()
        yield package
        if package.has_dependencies():
            stack.extend(reversed(package.dependencies))


def traversal_order(packages: Iterable[Package]) -> List[Package]:
    """Return the complete pre-order visit sequence of the forest."""
    return list(iter_preorder(packages))


def walk(packages: Iterable[Package], visitor: PackageVisitor) -> int:
    """Invoke ``visitor`` on every package of the forest exactly once.

    Args:
        packages: Top-level packages.
        visitor: Called with each package, in pre-order. Blocks the walk
            until it returns.

    Returns:
        Number of visited packages.
    """
    order = traversal_order(packages)
    logger.debug("Walking %d package(s)", len(order))

    for package in order:
        visitor(package)

    return len(order)


def collect(packages: Iterable[Package]) -> List[Package]:
    """Flatten the forest into owned copies of every node, in pre-order.

    The forest is deep-copied once and the copy is flattened, so the
    result can be mutated without touching the original tree. A collected
    node's dependencies are the collected nodes that follow it.
    """
    copies = copy.deepcopy(list(packages))
    collected = traversal_order(copies)
    logger.debug("Collected %d package(s)", len(collected))
    return collected
