"""
Centralized constants for gdpm.

This module defines immutable values used across gdpm, including manifest
and lockfile naming, accepted manifest keys, settings defaults and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Manifest & lockfile files
# ---------------------------------------------------------------------------

#: Default file name of the user-authored manifest.
DEFAULT_MANIFEST_NAME: Final[str] = "godot.package"

#: Default file name of the generated lockfile.
DEFAULT_LOCKFILE_NAME: Final[str] = "godot.lock"

#: Default indentation used when pretty-printing lockfiles.
DEFAULT_LOCKFILE_INDENT: Final[int] = 2

#: Primary manifest key holding the ``name -> version`` table.
PACKAGES_KEY: Final[str] = "packages"

#: Legacy alias accepted for npm ``package.json`` compatibility.
PACKAGES_KEY_ALIAS: Final[str] = "dependencies"

#: Field order of a single lockfile record.
LOCK_ENTRY_FIELDS: Final[Sequence[str]] = ("name", "version", "integrity")

# ---------------------------------------------------------------------------
# Settings files
# ---------------------------------------------------------------------------

#: Dedicated settings file name.
SETTINGS_FILE_NAME: Final[str] = "gdpm.toml"

#: Environment variable pointing to an explicit settings file.
SETTINGS_ENV_VAR: Final[str] = "GDPM_CONFIG"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests or lockfiles.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
