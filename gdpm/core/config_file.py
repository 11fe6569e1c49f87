"""The parsed manifest of a project.

:class:`ConfigFile` turns a ``name -> version`` table into an ordered list
of top-level :class:`~gdpm.models.Package` objects, sorted by name and then
version so that the result never depends on table iteration order or on
which manifest format was used.

Typical usage::

    config = ConfigFile.load(backend=registry)   # reads ./godot.package
    config.for_each(lambda package: package.download())
    text = config.lock()
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Union

from rich.tree import Tree

from gdpm.config import GdpmSettings, load_settings
from gdpm.core import lockfile, walker
from gdpm.core.manifest import parse_manifest, parse_structured
from gdpm.models import Package, PackageBackend
from gdpm.exceptions import FileOperationError
from gdpm.utils.console import build_tree
from gdpm.utils.filesystem import find_manifest, safe_read_file
from gdpm.utils.logger import get_logger

logger = get_logger("config_file")


class ConfigFile:
    """Ordered top-level packages of a manifest.

    Attributes:
        packages: Top-level packages, sorted by :meth:`Package.sort_key`.
        settings: Settings used for file locations and lockfile layout.
    """

    __slots__ = ("packages", "settings")

    def __init__(
        self,
        packages: Optional[List[Package]] = None,
        *,
        settings: Optional[GdpmSettings] = None,
    ) -> None:
        self.packages: List[Package] = sorted(
            packages or [], key=Package.sort_key
        )
        self.settings: GdpmSettings = settings or GdpmSettings()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, str],
        *,
        backend: Optional[PackageBackend] = None,
        settings: Optional[GdpmSettings] = None,
    ) -> "ConfigFile":
        """Build one package per table entry.

        With a ``backend``, each package's dependency tree is resolved
        before sorting.
        """
        packages = [
            Package(name=name, version=version, backend=backend).resolve()
            for name, version in mapping.items()
        ]
        logger.debug("Loaded %d top-level package(s)", len(packages))
        return cls(packages, settings=settings)

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        backend: Optional[PackageBackend] = None,
        settings: Optional[GdpmSettings] = None,
    ) -> "ConfigFile":
        """Parse manifest text in Hjson, YAML or TOML.

        Raises:
            ManifestUnparseableError: No format accepted the text. Fatal.
        """
        return cls.from_mapping(
            parse_manifest(text), backend=backend, settings=settings
        )

    @classmethod
    def from_json(
        cls,
        text: str,
        *,
        backend: Optional[PackageBackend] = None,
        settings: Optional[GdpmSettings] = None,
    ) -> "ConfigFile":
        """Parse a JSON manifest.

        Raises:
            StructuredLoadError: Invalid JSON or shape. Recoverable.
        """
        return cls.from_mapping(
            parse_structured(text), backend=backend, settings=settings
        )

    @classmethod
    def load(
        cls,
        path: Optional[Union[str, Path]] = None,
        *,
        backend: Optional[PackageBackend] = None,
        settings: Optional[GdpmSettings] = None,
    ) -> "ConfigFile":
        """Read and parse the manifest file.

        Args:
            path: Manifest path; defaults to the settings' manifest name in
                the current directory. Files ending in ``.json`` go through
                the structured JSON parser.
            backend: Package backend used to resolve dependency trees.
            settings: Settings; discovered with :func:`~gdpm.config.load_settings`
                next to the manifest (or in the current directory) when omitted.

        Raises:
            ConfigError: A discovered settings file is invalid.
            FileOperationError: The manifest cannot be read.
            ManifestUnparseableError: No format accepted the content.
            StructuredLoadError: A ``.json`` manifest is malformed.
        """
        settings = settings or load_settings(
            root=Path(path).parent if path is not None else None
        )
        if path is not None:
            manifest = Path(path)
        else:
            found = find_manifest(settings.manifest)
            if found is None:
                raise FileOperationError(
                    f"No {settings.manifest} found in {Path.cwd()}",
                    file_path=str(settings.manifest_path()),
                    operation="read",
                )
            manifest = found

        logger.info("Loading manifest %s", manifest)
        try:
            text = safe_read_file(manifest)
        except FileOperationError:
            logger.error("Cannot read manifest %s", manifest)
            raise

        if manifest.suffix == ".json":
            return cls.from_json(text, backend=backend, settings=settings)
        return cls.parse(text, backend=backend, settings=settings)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def for_each(self, visitor: walker.PackageVisitor) -> int:
        """Visit every package and dependency once, in pre-order.

        Returns:
            Number of visited packages.
        """
        return walker.walk(self.packages, visitor)

    def collect(self) -> List[Package]:
        """Return deep copies of every package and dependency, in pre-order."""
        return walker.collect(self.packages)

    # ------------------------------------------------------------------
    # Lockfile
    # ------------------------------------------------------------------

    def lock(self, *, indent: Optional[int] = None) -> str:
        """Return the lockfile text for the installed packages.

        Raises:
            IntegrityError: An integrity hash could not be computed; no
                lockfile is produced.
        """
        if indent is None:
            indent = self.settings.lockfile_indent
        return lockfile.build_lockfile(self.packages, indent=indent)

    def write_lock(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Build the lockfile and write it next to the manifest.

        Nothing is written if building fails.
        """
        text = self.lock()
        target = Path(path) if path is not None else self.settings.lockfile_path()
        return lockfile.write_lockfile(target, text)

    # ------------------------------------------------------------------
    # Presentation & dunder helpers
    # ------------------------------------------------------------------

    def render_tree(self) -> Tree:
        """Return a Rich tree of the package forest."""
        return build_tree(self.packages, title=self.settings.manifest)

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages)

    def __repr__(self) -> str:
        names = ", ".join(str(package) for package in self.packages)
        return f"ConfigFile([{names}])"
