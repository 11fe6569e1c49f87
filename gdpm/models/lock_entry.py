"""
Lockfile record model for gdpm.

A :class:`LockEntry` is the flat, serializable snapshot of one installed
package: its name, resolved version and integrity hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from gdpm.constants import LOCK_ENTRY_FIELDS
from gdpm.exceptions import LockfileError


@dataclass(frozen=True)
class LockEntry:
    """
    One record of a lockfile.

    Attributes:
        name: Package name.
        version: Version specifier as declared.
        integrity: ``<algorithm>-<base64 digest>`` string.
    """

    name: str
    version: str
    integrity: str

    @property
    def algorithm(self) -> str:
        """Hash algorithm prefix of :attr:`integrity` (e.g. ``sha512``)."""
        algorithm, sep, _ = self.integrity.partition("-")
        return algorithm if sep else ""

    def to_json(self) -> Dict[str, str]:
        """Serialize to a dict with keys in lockfile order."""
        return {
            "name": self.name,
            "version": self.version,
            "integrity": self.integrity,
        }

    @classmethod
    def from_json(cls, data: Any) -> "LockEntry":
        """Build an entry from a decoded JSON record.

        Raises:
            LockfileError: ``data`` is not an object, or a field is missing
                or not a string.
        """
        if not isinstance(data, Mapping):
            raise LockfileError(
                f"Lock entry must be an object, got {type(data).__name__}"
            )

        values: Dict[str, str] = {}
        for key in LOCK_ENTRY_FIELDS:
            value = data.get(key)
            if not isinstance(value, str):
                raise LockfileError(f"Lock entry field {key!r} must be a string")
            values[key] = value

        return cls(**values)

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
