"""
Console output utilities for gdpm using Rich.

User-facing output helpers for applications embedding gdpm. For
diagnostic or debug output, use :mod:`gdpm.utils.logger`.

Guidelines:
- build_tree / print_tree: dependency forest rendering
- Logging should never go through this module
"""

from __future__ import annotations

import os
import sys
import threading
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from rich.tree import Tree
from rich.markup import escape
from rich.theme import Theme
from rich.console import Console

if TYPE_CHECKING:
    from gdpm.models.package import Package

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

GDPM_THEME = Theme(
    {
        "package": "bold",
        "installed": "green",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=GDPM_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Dependency tree rendering
# ---------------------------------------------------------------------------


def _label(package: "Package") -> str:
    # Versions may contain brackets
    text = escape(str(package))
    if package.is_installed():
        return f"[installed]{text}[/installed]"
    return text


def build_tree(packages: Iterable["Package"], *, title: str = "packages") -> Tree:
    """Build a Rich tree mirroring the package forest.

    Uses an explicit stack, so arbitrarily deep dependency chains render
    without recursion. Installed packages are highlighted.

    Args:
        packages: Top-level packages.
        title: Label of the root node.

    Returns:
        A :class:`rich.tree.Tree` whose labels are ``name@version``.
    """
    root = Tree(f"[package]{title}[/package]")
    stack: List[Tuple[Tree, "Package"]] = [
        (root, package) for package in reversed(list(packages))
    ]

    while stack:
        parent, package = stack.pop()
        branch = parent.add(_label(package))
        for dependency in reversed(package.dependencies):
            stack.append((branch, dependency))

    return root


def print_tree(packages: Iterable["Package"], *, title: str = "packages") -> None:
    """Print the package forest, see :func:`build_tree`."""
    _get_console().print(build_tree(packages, title=title))
