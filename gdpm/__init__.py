"""
gdpm — package manifest, dependency tree and lockfile core

gdpm turns a hand-written manifest (Hjson, YAML, TOML or JSON) into an
ordered package model, walks the resulting dependency forest and produces
a deterministic lockfile snapshot with integrity hashes.

Retrieving, installing and hashing packages is delegated to a
:class:`~gdpm.models.PackageBackend` supplied by the caller.
"""

from __future__ import annotations

from gdpm.__version__ import __version__
from gdpm.core import ConfigFile
from gdpm.models import LockEntry, Package, PackageBackend

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__license__ = "Apache-2.0"
__description__ = "Manifest parsing, dependency walking and lockfiles for Godot packages."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "ConfigFile",
    "LockEntry",
    "Package",
    "PackageBackend",
]
