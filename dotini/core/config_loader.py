"""Loader for dotini.yaml manifest files."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ManifestError
from .filters import Filter

logger = logging.getLogger(__name__)

MANIFEST_NAME = "dotini.yaml"


class ConfigLoader:
    """Handles loading and parsing of dotini.yaml manifests.

    A manifest declares, per environment, the INI files to layer::

        environments:
          production:
            sources:
              - path: config/base.ini
              - path: config/production.ini
                mode: normal
                filter:
                  include_regex: "^(database|cache)$"
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config loader.

        Args:
            config_path: Path to dotini.yaml. If None, looks in current
                directory and parent directories.
        """
        self.config_path = self._find_config_file(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def _find_config_file(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        if config_path is not None:
            path = Path(config_path)
            if path.exists():
                return path
            return None

        current = Path.cwd()
        while True:
            candidate = current / MANIFEST_NAME
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent

    def load(self) -> Dict[str, Any]:
        """Load the manifest.

        Returns:
            Parsed manifest dictionary, or empty dict if there is none.

        Raises:
            ManifestError: If the manifest is not valid YAML or not a mapping.
        """
        if self.config_path is None:
            return {}

        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid {MANIFEST_NAME} at {self.config_path}: {e}") from e
        except OSError as e:
            logger.warning("Could not read %s: %s", self.config_path, e)
            return {}

        if not isinstance(data, dict):
            raise ManifestError(f"{self.config_path} must contain a mapping")
        self._config = data
        return self._config

    def get_environment_config(
        self, environment_name: str
    ) -> Optional[Dict[str, Any]]:
        environments = self.load().get("environments") or {}
        return environments.get(environment_name)

    def get_sources(self, environment_name: str) -> List[Dict[str, Any]]:
        """Get the raw source entries declared for an environment."""
        env_config = self.get_environment_config(environment_name)
        if env_config is None:
            return []
        return env_config.get("sources") or []

    def parse_source(self, source_config: Dict[str, Any]) -> Dict[str, Any]:
        """Parse a manifest source entry into Environment.register_source kwargs.

        Relative paths are resolved against the manifest's directory.

        Args:
            source_config: Raw source entry from YAML.

        Returns:
            Dictionary with ``path`` plus optional ``filter``, ``name`` and
            ``mode``.

        Raises:
            ManifestError: If the entry has no ``path``.
        """
        if "path" not in source_config:
            raise ManifestError("Source must have a 'path'")

        path = Path(source_config["path"])
        if not path.is_absolute() and self.config_path is not None:
            path = self.config_path.parent / path
        result: Dict[str, Any] = {"path": path}

        filter_config = source_config.get("filter")
        if filter_config:
            result["filter"] = self._parse_filter(filter_config)
        if "name" in source_config:
            result["name"] = source_config["name"]
        if "mode" in source_config:
            result["mode"] = source_config["mode"]

        return result

    def _parse_filter(self, filter_config: Dict[str, Any]) -> Filter:
        include_regex = None
        if "include_regex" in filter_config:
            try:
                include_regex = re.compile(filter_config["include_regex"])
            except re.error as e:
                raise ManifestError(f"Invalid include_regex: {e}") from e

        return Filter(include_regex=include_regex)
