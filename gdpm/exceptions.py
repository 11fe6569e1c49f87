"""
Custom exception hierarchy for gdpm.

All exceptions inherit from :class:`GdpmError` and carry optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Errors deriving from :class:`FatalError` signal that the whole operation
must stop; gdpm never catches them itself. Every other error is a
recoverable, typed failure that callers may handle or report.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class GdpmError(Exception):
    """Base exception for all gdpm errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class FatalError(GdpmError):
    """Marker base for errors that abort the whole operation."""


class ManifestUnparseableError(FatalError):
    """Raised when no supported manifest format accepts the input.

    Args:
        message: Error description.
        attempts: Mapping of format name to the reason it was rejected.
        content: Raw manifest text, truncated for safety.
    """

    __slots__ = ("attempts",)

    def __init__(
        self,
        message: str,
        *,
        attempts: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        if attempts:
            details["formats"] = ", ".join(attempts)
        if content is not None:
            details["content"] = _truncate(content)

        super().__init__(message, details)

        self.attempts = dict(attempts) if attempts else {}


class StructuredLoadError(GdpmError):
    """Raised when the structured (JSON) manifest entry point fails.

    Args:
        message: Error description.
        line_number: Line where decoding failed, if known.
        column: Column where decoding failed, if known.
    """

    __slots__ = ("line_number", "column")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "line", line_number)
        _add_if(details, "column", column)

        super().__init__(message, details)

        self.line_number = line_number
        self.column = column


class BackendError(GdpmError):
    """Raised when a package backend is missing or fails.

    Args:
        message: Error description.
        package: Display form (``name@version``) of the package involved.
        operation: Backend operation being performed.
    """

    __slots__ = ("package", "operation")

    def __init__(
        self,
        message: str,
        *,
        package: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package)
        _add_if(details, "operation", operation)

        super().__init__(message, details)

        self.package = package
        self.operation = operation


class IntegrityError(GdpmError):
    """Raised when a package integrity hash cannot be computed.

    Aborts the lock operation as a whole; no partial lockfile is produced.

    Args:
        message: Error description.
        package: Display form (``name@version``) of the package involved.
        original_error: Original exception raised by the backend.
    """

    __slots__ = ("package", "original_error")

    def __init__(
        self,
        message: str,
        *,
        package: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.package = package
        self.original_error = original_error


class LockfileError(GdpmError):
    """Raised when lockfile text cannot be decoded into lock entries.

    Args:
        message: Error description.
        index: Position of the offending record, if known.
    """

    __slots__ = ("index",)

    def __init__(self, message: str, *, index: Optional[int] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "index", index)

        super().__init__(message, details)

        self.index = index


class FileOperationError(GdpmError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(GdpmError):
    """Raised when the gdpm settings file is missing or invalid.

    Args:
        message: Error description.
        config_path: Path of the settings file involved.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option
