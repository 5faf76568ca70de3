"""FileSystemAdapter - Adapter for loading/saving configuration and results.

Provides file-based storage with:
- YAML and JSON loading and saving
- Surface metadata and scenario sensitivity arrays (format from file suffix)
- SHA-256 integrity checking
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from src.core.domain.scenario_array import (
    sensitivities_array_from_dict,
    sensitivities_array_to_dict,
)
from src.core.domain.surface_metadata import surface_metadata_from_dict

if TYPE_CHECKING:
    from src.core.domain.scenario_array import ScenarioSensitivityArray
    from src.core.domain.sensitivity import CurrencyParameterSensitivities
    from src.core.domain.surface_metadata import DefaultSurfaceMetadata, SurfaceMetadata

YAML_SUFFIXES = (".yaml", ".yml")


class ConfigurationError(Exception):
    """Raised when a file is malformed or does not match the expected schema."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Configuration error in '{path}': {message}")


class FileSystemAdapter:
    """Adapter for file-based configuration and result storage.

    Supports YAML and JSON files with optional integrity checking.
    """

    def __init__(self, base_path: str | Path | None = None) -> None:
        """Initialize FileSystemAdapter.

        Args:
            base_path: Base directory for files (defaults to cwd)
        """
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def _resolve_path(self, path: str | Path) -> Path:
        """Resolve path relative to base path."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def load_yaml(self, path: str | Path) -> dict[str, Any]:
        """Load a dictionary from a YAML file.

        Args:
            path: Path to YAML file (absolute or relative to base_path)

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If YAML is invalid
        """
        full_path = self._resolve_path(path)

        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {full_path}")

        try:
            with open(full_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(str(path), f"Invalid YAML: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "Root element must be a dictionary")
        return data

    def save_yaml(
        self,
        path: str | Path,
        data: dict[str, Any],
        *,
        create_dirs: bool = True,
    ) -> None:
        """Save a dictionary to a YAML file.

        Raises:
            ConfigurationError: If data is not a dictionary
        """
        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "Data must be a dictionary")

        full_path = self._resolve_path(path)
        if create_dirs:
            full_path.parent.mkdir(parents=True, exist_ok=True)

        with open(full_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def load_json(self, path: str | Path) -> dict[str, Any]:
        """Load a dictionary from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If JSON is invalid
        """
        full_path = self._resolve_path(path)

        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {full_path}")

        try:
            with open(full_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(str(path), f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "Root element must be a dictionary")
        return data

    def save_json(
        self,
        path: str | Path,
        data: dict[str, Any],
        *,
        create_dirs: bool = True,
        indent: int = 2,
    ) -> None:
        """Save a dictionary to a JSON file."""
        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "Data must be a dictionary")

        full_path = self._resolve_path(path)
        if create_dirs:
            full_path.parent.mkdir(parents=True, exist_ok=True)

        with open(full_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, default=str)

    def load(self, path: str | Path) -> dict[str, Any]:
        """Load YAML or JSON depending on the file suffix."""
        if Path(path).suffix.lower() in YAML_SUFFIXES:
            return self.load_yaml(path)
        return self.load_json(path)

    def save(self, path: str | Path, data: dict[str, Any]) -> None:
        """Save YAML or JSON depending on the file suffix."""
        if Path(path).suffix.lower() in YAML_SUFFIXES:
            self.save_yaml(path, data)
        else:
            self.save_json(path, data)

    # =========================================================================
    # Domain objects
    # =========================================================================

    def save_surface_metadata(
        self,
        path: str | Path,
        metadata: "DefaultSurfaceMetadata",
    ) -> None:
        """Save surface metadata using its dictionary schema."""
        self.save(path, metadata.to_dict())

    def load_surface_metadata(self, path: str | Path) -> "SurfaceMetadata":
        """Load surface metadata.

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the content is not valid surface metadata
        """
        data = self.load(path)
        try:
            return surface_metadata_from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(str(path), f"Invalid surface metadata: {e}") from e

    def save_sensitivities_array(
        self,
        path: str | Path,
        array: "ScenarioSensitivityArray[CurrencyParameterSensitivities]",
    ) -> None:
        """Save a scenario sensitivity array using its dictionary schema."""
        self.save(path, sensitivities_array_to_dict(array))

    def load_sensitivities_array(
        self,
        path: str | Path,
    ) -> "ScenarioSensitivityArray[CurrencyParameterSensitivities]":
        """Load a scenario sensitivity array.

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the content is not a valid array
        """
        data = self.load(path)
        try:
            return sensitivities_array_from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(str(path), f"Invalid sensitivity array: {e}") from e

    # =========================================================================
    # Integrity
    # =========================================================================

    def exists(self, path: str | Path) -> bool:
        """Check if file exists."""
        return self._resolve_path(path).exists()

    def compute_hash(self, path: str | Path) -> str:
        """Compute SHA-256 hash of file for integrity checking.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        full_path = self._resolve_path(path)

        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {full_path}")

        sha256 = hashlib.sha256()
        with open(full_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)

        return sha256.hexdigest()

    def validate_hash(self, path: str | Path, expected_hash: str) -> bool:
        """Return True if the file matches the expected SHA-256 hash."""
        return self.compute_hash(path) == expected_hash.lower()
