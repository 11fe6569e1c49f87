"""
Unified data model exports for gdpm.

Example:
    >>> from gdpm.models import Package, LockEntry
"""

from __future__ import annotations

from gdpm.models.lock_entry import LockEntry
from gdpm.models.package import Package, PackageBackend

__all__ = [
    "Package",
    "PackageBackend",
    "LockEntry",
]
