"""
gdpm version information.

Single source of truth for the package version, following Semantic
Versioning: https://semver.org/
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Main version (single source of truth)
# ---------------------------------------------------------------------------

__version__ = "0.1.0.dev0"

# ---------------------------------------------------------------------------
# Human-readable version (for diagnostics)
# ---------------------------------------------------------------------------

VERSION_STRING = f"gdpm {__version__}"
