"""Settings loader for gdpm.

Settings tune where gdpm looks for files and how it writes them. They are
separate from the *manifest* (``godot.package``), which declares packages.
Two formats are supported:

- ``gdpm.toml`` — settings under the ``[gdpm]`` table
- ``pyproject.toml`` — settings under the ``[tool.gdpm]`` table

Discovery order:

1. Explicit path argument, else the ``GDPM_CONFIG`` environment variable
2. ``gdpm.toml`` in the given directory
3. ``pyproject.toml`` with a ``[tool.gdpm]`` section in the given directory

Example (``gdpm.toml``)::

    [gdpm]
    manifest = "godot.package"
    lockfile = "godot.lock"
    lockfile_indent = 2
"""

from __future__ import annotations

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import tomli

from gdpm.exceptions import ConfigError
from gdpm.utils.logger import get_logger
from gdpm.constants import (
    DEFAULT_LOCKFILE_INDENT,
    DEFAULT_LOCKFILE_NAME,
    DEFAULT_MANIFEST_NAME,
    SETTINGS_ENV_VAR,
    SETTINGS_FILE_NAME,
)

logger = get_logger("config")


@dataclass
class GdpmSettings:
    """Parsed and validated gdpm settings.

    All fields have defaults, so an empty settings file is valid.

    Attributes:
        manifest: File name of the manifest, relative to the project root.
        lockfile: File name of the lockfile, relative to the project root.
        lockfile_indent: Indentation used when pretty-printing lockfiles.
        source_path: Path to the loaded settings file, or ``None``.
    """

    manifest: str = DEFAULT_MANIFEST_NAME
    lockfile: str = DEFAULT_LOCKFILE_NAME
    lockfile_indent: int = DEFAULT_LOCKFILE_INDENT

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def manifest_path(self, root: Optional[Path] = None) -> Path:
        """Resolve the manifest location against ``root`` (default: cwd)."""
        return (root or Path.cwd()) / self.manifest

    def lockfile_path(self, root: Optional[Path] = None) -> Path:
        """Resolve the lockfile location against ``root`` (default: cwd)."""
        return (root or Path.cwd()) / self.lockfile

    def to_log_dict(self) -> Dict[str, Any]:
        """Return settings as a dictionary for debug logging."""
        return {
            "manifest": self.manifest,
            "lockfile": self.lockfile,
            "lockfile_indent": self.lockfile_indent,
        }


def discover_settings_file(
    explicit_path: Optional[Path] = None,
    *,
    root: Optional[Path] = None,
) -> Optional[Path]:
    """Find the settings file to load.

    Args:
        explicit_path: Explicit settings path. If provided, must exist.
        root: Directory searched for ``gdpm.toml`` / ``pyproject.toml``;
            defaults to the current working directory.

    Returns:
        Resolved path to the settings file, or ``None`` if not found.

    Raises:
        ConfigError: An explicit path (argument or environment) does not
            exist.
    """
    if explicit_path is None and os.environ.get(SETTINGS_ENV_VAR):
        explicit_path = Path(os.environ[SETTINGS_ENV_VAR])
        logger.debug("Using %s=%s", SETTINGS_ENV_VAR, explicit_path)

    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Settings file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        return resolved

    base = root or Path.cwd()

    gdpm_toml = base / SETTINGS_FILE_NAME
    if gdpm_toml.is_file():
        logger.debug("Found %s: %s", SETTINGS_FILE_NAME, gdpm_toml)
        return gdpm_toml

    pyproject_toml = base / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_gdpm_section(pyproject_toml):
        logger.debug("Found [tool.gdpm] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No settings file found")
    return None


def _pyproject_has_gdpm_section(path: Path) -> bool:
    """Check whether ``pyproject.toml`` has a ``[tool.gdpm]`` table.

    A broken ``pyproject.toml`` belongs to someone else; it simply does not
    count as a gdpm settings file.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "gdpm" in tool


def load_settings(
    settings_path: Optional[Path] = None,
    *,
    root: Optional[Path] = None,
) -> GdpmSettings:
    """Load and validate gdpm settings.

    Args:
        settings_path: Explicit path to a settings file. If ``None``, uses
            discovery (see :func:`discover_settings_file`).
        root: Directory used for discovery.

    Returns:
        Validated :class:`GdpmSettings`, defaults if no file was found.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid
            values.
    """
    resolved = discover_settings_file(settings_path, root=root)

    if resolved is None:
        return GdpmSettings()

    logger.info("Loading settings from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("gdpm", {})
    else:
        section = raw.get("gdpm", {})

    if not section:
        logger.debug("Settings file has no gdpm section, using defaults")
        return GdpmSettings(source_path=resolved)

    settings = _parse_section(section, config_path=str(resolved))
    settings.source_path = resolved

    logger.debug("Loaded settings: %s", settings.to_log_dict())
    return settings


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomli.load(fh)
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read settings file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _require_name(section: Dict[str, Any], key: str, config_path: str) -> str:
    value = section[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"{key} must be a non-empty string, got {value!r}",
            config_path=config_path,
            option=key,
        )
    return value


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> GdpmSettings:
    """Validate a ``[gdpm]`` / ``[tool.gdpm]`` table.

    Raises:
        ConfigError: Unknown keys or wrong value types.
    """
    settings = GdpmSettings()

    known = {"manifest", "lockfile", "lockfile_indent"}
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown settings keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "manifest" in section:
        settings.manifest = _require_name(section, "manifest", config_path)

    if "lockfile" in section:
        settings.lockfile = _require_name(section, "lockfile", config_path)

    if "lockfile_indent" in section:
        val = section["lockfile_indent"]
        # bool is an int subclass
        if isinstance(val, bool) or not isinstance(val, int) or val < 0:
            raise ConfigError(
                f"lockfile_indent must be a non-negative integer, got {val!r}",
                config_path=config_path,
                option="lockfile_indent",
            )
        settings.lockfile_indent = val

    return settings
