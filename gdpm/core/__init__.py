"""
Core functionality exports for gdpm.

Importing from here keeps user-facing imports clean and stable:

    from gdpm.core import ConfigFile, build_lockfile
"""

from __future__ import annotations

from gdpm.core.config_file import ConfigFile
from gdpm.core.manifest import extract_packages, parse_manifest, parse_structured
from gdpm.core.walker import collect, iter_preorder, traversal_order, walk
from gdpm.core.lockfile import (
    build_lock_entries,
    build_lockfile,
    dump_lockfile,
    load_lockfile,
    read_lockfile,
    write_lockfile,
)

__all__ = [
    "ConfigFile",
    "extract_packages",
    "parse_manifest",
    "parse_structured",
    "collect",
    "iter_preorder",
    "traversal_order",
    "walk",
    "build_lock_entries",
    "build_lockfile",
    "dump_lockfile",
    "load_lockfile",
    "read_lockfile",
    "write_lockfile",
]
