"""Manifest parser for gdpm.

A manifest declares the top-level packages of a project as a table of
``name: version-specifier`` entries under a ``packages`` key. The npm
spelling ``dependencies`` is accepted as an alias so a ``package.json``
can be used directly.

Two entry points share the same result shape (``Dict[str, str]``):

- :func:`parse_manifest` tries Hjson, then YAML, then TOML and stops at the
  first format that yields a valid table. If every format rejects the
  input a :exc:`ManifestUnparseableError` is raised; the manifest is
  mandatory, so this aborts the operation.
- :func:`parse_structured` accepts JSON only and raises the recoverable
  :exc:`StructuredLoadError` on failure.

Typical usage::

    from gdpm.core.manifest import parse_manifest

    table = parse_manifest('dependencies:\\n  "@bendn/test": 2.0.10')
    # {"@bendn/test": "2.0.10"}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Tuple

import hjson
import tomli
import yaml

from gdpm.utils.logger import get_logger
from gdpm.exceptions import ManifestUnparseableError, StructuredLoadError
from gdpm.constants import PACKAGES_KEY, PACKAGES_KEY_ALIAS

logger = get_logger("manifest")

__all__ = [
    "ManifestShapeError",
    "MANIFEST_FORMATS",
    "extract_packages",
    "parse_manifest",
    "parse_structured",
]


class ManifestShapeError(ValueError):
    """A document decoded fine but does not have the manifest shape."""


# ---------------------------------------------------------------------------
# Format loaders
# ---------------------------------------------------------------------------


class _NumberText(str):
    """Numeric Hjson scalar kept as its source text.

    The decoder checks ``int(value) == value`` to turn integral floats into
    ints. Text never equals an int, so ``__int__`` only has to succeed.
    """

    def __int__(self) -> int:
        return 0


def _load_hjson(text: str) -> Any:
    return hjson.loads(text, parse_float=_NumberText, parse_int=_NumberText)


def _load_yaml(text: str) -> Any:
    # BaseLoader resolves no implicit types, every scalar stays a string
    return yaml.load(text, Loader=yaml.BaseLoader)


def _load_toml(text: str) -> Any:
    return tomli.loads(text, parse_float=str)


#: Trial order of the primary path, with the errors each loader raises on
#: malformed input.
MANIFEST_FORMATS: List[Tuple[str, Callable[[str], Any], Tuple[type, ...]]] = [
    ("hjson", _load_hjson, (hjson.HjsonDecodeError, ValueError)),
    ("yaml", _load_yaml, (yaml.YAMLError,)),
    ("toml", _load_toml, (tomli.TOMLDecodeError,)),
]


# ---------------------------------------------------------------------------
# Shape extraction
# ---------------------------------------------------------------------------


def _coerce_version(name: str, value: Any) -> str:
    """Return the version specifier for ``name`` as a plain string.

    Loaders keep scalars as their source text. The one exception is a TOML
    integer, which is written back in decimal. Booleans, nulls, floats and
    containers are rejected.
    """
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ManifestShapeError(
        f"Version of {name!r} must be a string, got {type(value).__name__}"
    )


def extract_packages(document: Any) -> Dict[str, str]:
    """Pull the ``name -> version`` table out of a decoded document.

    The table lives under ``packages`` or its alias ``dependencies``. A
    document with neither key declares no packages.

    Args:
        document: Result of decoding manifest text in any format.

    Returns:
        Mapping of package name to version specifier.

    Raises:
        ManifestShapeError: The document is not a mapping, uses both keys,
            or the table has a non-mapping value or invalid entries.
    """
    if not isinstance(document, Mapping):
        raise ManifestShapeError(
            f"Manifest must be a mapping, got {type(document).__name__}"
        )

    present = [key for key in (PACKAGES_KEY, PACKAGES_KEY_ALIAS) if key in document]
    if len(present) > 1:
        raise ManifestShapeError(
            f"Duplicate package table: both {PACKAGES_KEY!r} and "
            f"{PACKAGES_KEY_ALIAS!r} are present"
        )
    if not present:
        return {}

    table = document[present[0]]
    # A YAML key with no value reads as "" without implicit typing
    if table is None or table == "":
        return {}
    if not isinstance(table, Mapping):
        raise ManifestShapeError(
            f"{present[0]!r} must be a mapping, got {type(table).__name__}"
        )

    packages: Dict[str, str] = {}
    for name, value in table.items():
        if not isinstance(name, str):
            raise ManifestShapeError(f"Package name must be a string: {name!r}")
        packages[name] = _coerce_version(name, value)
    return packages


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def parse_manifest(text: str) -> Dict[str, str]:
    """Parse manifest text, trying Hjson, YAML and TOML in that order.

    A format is accepted only if it decodes the text *and* the result has
    the manifest shape; otherwise the next format is tried.

    Args:
        text: Raw manifest content.

    Returns:
        Mapping of package name to version specifier.

    Raises:
        ManifestUnparseableError: No format accepted the text. This is a
            :class:`~gdpm.exceptions.FatalError`.
    """
    attempts: Dict[str, str] = {}

    for format_name, loader, errors in MANIFEST_FORMATS:
        try:
            packages = extract_packages(loader(text))
        except errors + (ManifestShapeError,) as exc:
            attempts[format_name] = str(exc)
            logger.debug("Manifest rejected as %s: %s", format_name, exc)
            continue

        logger.debug(
            "Manifest parsed as %s (%d package(s))", format_name, len(packages)
        )
        return packages

    logger.error("Failed to parse the manifest in any supported format")
    raise ManifestUnparseableError(
        "Failed to parse the manifest as hjson, yaml or toml",
        attempts=attempts,
        content=text,
    )


def parse_structured(text: str) -> Dict[str, str]:
    """Parse a JSON manifest (e.g. an npm ``package.json``).

    Args:
        text: Raw JSON content.

    Returns:
        Mapping of package name to version specifier.

    Raises:
        StructuredLoadError: Invalid JSON or wrong document shape.
    """
    try:
        document = json.loads(text, parse_float=str, parse_int=str)
    except json.JSONDecodeError as exc:
        raise StructuredLoadError(
            f"Invalid JSON: {exc.msg}",
            line_number=exc.lineno,
            column=exc.colno,
        ) from exc

    try:
        packages = extract_packages(document)
    except ManifestShapeError as exc:
        raise StructuredLoadError(str(exc)) from exc

    logger.debug("Structured manifest parsed (%d package(s))", len(packages))
    return packages
