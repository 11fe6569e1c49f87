"""Lockfile building and reading for gdpm.

A lockfile is a pretty-printed JSON array with one record per *installed*
package of the forest, in pre-order flatten order::

    [
      {
        "name": "@bendn/test",
        "version": "2.0.10",
        "integrity": "sha512-..."
      }
    ]

Building is all-or-nothing: if the integrity of any installed package
cannot be computed, :exc:`IntegrityError` propagates and no text is
produced. Uninstalled packages are skipped silently; that is a filter, not
an error.

Nothing in this module is wired into an install flow. The builder returns
text; persisting it is up to the caller (see :func:`write_lockfile`).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from gdpm.core.walker import collect
from gdpm.models import LockEntry, Package
from gdpm.exceptions import LockfileError
from gdpm.constants import DEFAULT_LOCKFILE_INDENT
from gdpm.utils.logger import get_logger
from gdpm.utils.filesystem import safe_read_file, safe_write_file

logger = get_logger("lockfile")

__all__ = [
    "build_lock_entries",
    "build_lockfile",
    "dump_lockfile",
    "load_lockfile",
    "read_lockfile",
    "write_lockfile",
]


def build_lock_entries(packages: Iterable[Package]) -> List[LockEntry]:
    """Snapshot every installed package of the forest.

    Missing integrity values are computed on the flattened copies; the
    original tree is left untouched.

    Args:
        packages: Top-level packages.

    Returns:
        Lock entries in pre-order flatten order.

    Raises:
        IntegrityError: Integrity computation failed for a package.
    """
    flattened = collect(packages)
    installed = [package for package in flattened if package.is_installed()]

    logger.debug(
        "Locking %d installed package(s), skipped %d not installed",
        len(installed),
        len(flattened) - len(installed),
    )

    entries: List[LockEntry] = []
    for package in installed:
        if not package.integrity:
            logger.debug("Computing integrity for %s", package)
            package.integrity = package.get_integrity()
        entries.append(package.to_lock_entry())

    return entries


def dump_lockfile(
    entries: Sequence[LockEntry],
    *,
    indent: int = DEFAULT_LOCKFILE_INDENT,
) -> str:
    """Serialize lock entries to pretty-printed JSON text."""
    return json.dumps(
        [entry.to_json() for entry in entries],
        indent=indent,
        ensure_ascii=False,
    )


def build_lockfile(
    packages: Iterable[Package],
    *,
    indent: int = DEFAULT_LOCKFILE_INDENT,
) -> str:
    """Build the lockfile text for a package forest.

    See :func:`build_lock_entries` for filtering and failure semantics.
    """
    return dump_lockfile(build_lock_entries(packages), indent=indent)


def load_lockfile(text: str) -> List[LockEntry]:
    """Decode lockfile text back into lock entries.

    Raises:
        LockfileError: Invalid JSON, a non-array document, or a malformed
            record.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LockfileError(f"Invalid lockfile JSON: {exc.msg}") from exc

    if not isinstance(document, list):
        raise LockfileError(
            f"Lockfile must be an array, got {type(document).__name__}"
        )

    entries: List[LockEntry] = []
    for index, record in enumerate(document):
        try:
            entries.append(LockEntry.from_json(record))
        except LockfileError as exc:
            raise LockfileError(exc.message, index=index) from exc
    return entries


def write_lockfile(path: Union[str, Path], text: str) -> Path:
    """Atomically write lockfile ``text`` to ``path``."""
    written = safe_write_file(path, text if text.endswith("\n") else text + "\n")
    logger.info("Wrote lockfile %s", written)
    return written


def read_lockfile(path: Union[str, Path]) -> List[LockEntry]:
    """Read and decode the lockfile at ``path``.

    Raises:
        FileOperationError: The file cannot be read.
        LockfileError: The content is malformed.
    """
    return load_lockfile(safe_read_file(path))
