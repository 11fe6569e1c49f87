"""
Utility helpers for gdpm.

- Console output and dependency tree rendering (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from gdpm.utils.filesystem import find_manifest, safe_read_file, safe_write_file
from gdpm.utils.logger import (
    disable_logging,
    get_logger,
    level_for_verbosity,
    setup_logging,
)
from gdpm.utils.console import (
    build_tree,
    get_raw_console,
    print_tree,
    reconfigure_console,
)

__all__ = [
    # Console
    "build_tree",
    "print_tree",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "level_for_verbosity",
    # Filesystem
    "find_manifest",
    "safe_read_file",
    "safe_write_file",
]
