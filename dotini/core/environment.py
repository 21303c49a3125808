"""Environment management for configuration sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import EnvironmentConfig
from .config_loader import ConfigLoader
from .filters import Filter
from .merge import merge_sources
from .source import RegisteredSource, Source
from ..sources.ini_file import IniFileSource

logger = logging.getLogger(__name__)

INI_SUFFIXES = {".ini", ".cfg", ".conf"}


class Environment:
    """A named, ordered stack of INI sources.

    Sources declared in dotini.yaml for this environment are registered
    first, followed by any passed explicitly. Later sources override
    earlier ones when the stack is materialized.
    """

    def __init__(
        self,
        name: str,
        sources: Optional[List[Union[str, Path]]] = None,
        config_path: Optional[Union[str, Path]] = None,
    ):
        """Initialize an Environment.

        Args:
            name: Name of the environment (e.g., "production", "development").
            sources: Optional list of INI files to register after the ones
                declared in dotini.yaml.
            config_path: Optional path to dotini.yaml. If not provided,
                searches the current and parent directories.

        Raises:
            ManifestError: If the manifest exists but is not valid.
        """
        self.name = name
        self._registered: List[RegisteredSource] = []
        self._config_loader = ConfigLoader(config_path)

        self._load_from_config_file()

        if sources:
            self.register_sources(*sources)

    def _load_from_config_file(self) -> None:
        for source_config in self._config_loader.get_sources(self.name):
            try:
                parsed = self._config_loader.parse_source(source_config)
                self.register_source(
                    parsed["path"],
                    filter=parsed.get("filter"),
                    name=parsed.get("name"),
                    mode=parsed.get("mode", "raw"),
                )
            except ValueError as e:
                logger.warning(
                    "Skipping source %r from %s: %s",
                    source_config, self._config_loader.config_path, e,
                )

    @property
    def sources(self) -> List[RegisteredSource]:
        return list(self._registered)

    def register_sources(self, *paths: Union[str, Path]) -> None:
        """Register multiple INI files at once, in override order."""
        for item in paths:
            self.register_source(item)

    def register_source(
        self,
        path: Union[str, Path],
        *,
        filter: Optional[Filter] = None,
        name: Optional[str] = None,
        mode: str = "raw",
    ) -> None:
        """Register a single INI file.

        Args:
            path: Path of the INI file. It is not read until get_config().
            filter: Optional filter applied to section names.
            name: Optional custom name for the source.
            mode: ``"raw"`` or ``"normal"`` (expand constants).

        Raises:
            ValueError: If the file type or mode is not supported.
        """
        src = self._create_source(path, name=name, mode=mode)
        self._registered.append(RegisteredSource(source=src, filter=filter))

    def _create_source(self, path: Union[str, Path], name: Optional[str], mode: str) -> Source:
        p = Path(path)
        if p.suffix.lower() in INI_SUFFIXES:
            return IniFileSource(p, name=name, mode=mode)
        raise ValueError(f"Unsupported source type: {path}")

    def add_source_type(self, source: Source) -> None:
        """Register a ready-made source instance."""
        self._registered.append(RegisteredSource(source=source))

    def get_config(self) -> EnvironmentConfig:
        """Materialize all registered sources into one config.

        Raises:
            SourceUnreadable: If any registered source cannot be loaded.
        """
        tree, provenance = merge_sources(self._registered)
        logger.debug(
            "Environment %s materialized from %d sources", self.name, len(self._registered)
        )
        return EnvironmentConfig(tree, provenance, self._registered)
