"""
Filesystem utilities for gdpm.

Safe helpers for reading manifests, writing lockfiles atomically and
locating manifest files. All filesystem errors are normalized to
``FileOperationError``.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from gdpm.utils.logger import get_logger
from gdpm.exceptions import FileOperationError
from gdpm.constants import MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Ensure ``path`` is an existing regular file and resolve it."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except OSError as exc:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing files above ``max_size`` bytes.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: Missing file, directory, oversized file or
            decoding/reading failure.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Write text to ``file_path`` atomically.

    Readers never observe a half-written file: content goes to a temporary
    sibling first and is then moved over the target.

    Returns:
        The path that was written.
    """
    path = Path(file_path)
    _atomic_write(path, content)
    logger.debug("Wrote %d byte(s) to %s", len(content.encode("utf-8")), path)
    return path


def find_manifest(
    name: str,
    directory: PathLike = ".",
) -> Optional[Path]:
    """Return ``directory / name`` if it is a file, else ``None``."""
    candidate = Path(directory) / name
    if candidate.is_file():
        return candidate.resolve()
    return None
