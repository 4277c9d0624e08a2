"""Settings management for collection-filter.

Scope-aware YAML settings. Scope priority (most specific wins):
1. local (.collection-filter/settings.local.yaml) - gitignored, machine-specific
2. project (.collection-filter/settings.yaml) - committed, team-shared
3. global (~/.collection-filter/settings.yaml) - user defaults

Example settings.yaml:
```
excluded_kinds: [ConfigMap, Secret]
enable_service_discovery: true
required_collections:
  - istio/networking/v1alpha3/synthetic/serviceentries
transforms:
  - name: custom
    inputs: [k8s/core/v1/configmaps]
    outputs: [istio/mesh/v1alpha1/meshconfig]
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .errors import SettingsError
from .transformer import Providers
from .transformer import TransformConfig

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

SETTINGS_DIR_NAME = ".collection-filter"


class FilterSettings(BaseModel):
    """Effective filter configuration."""

    excluded_kinds: list[str] | None = Field(
        None, description="Kinds to exclude; None means the default excluded kinds"
    )
    enable_service_discovery: bool = Field(default=False, description="Re-enable kinds needed for service discovery")
    required_collections: list[str] = Field(
        default_factory=list, description="Required outputs; empty means every transform output"
    )
    transforms: list[TransformConfig] = Field(default_factory=list, description="Extra transforms")

    def providers(self, builtin: Providers | None = None) -> Providers:
        """Return builtin providers followed by the ones declared here."""
        result = Providers(builtin or [])
        result.extend(t.to_provider() for t in self.transforms)
        return result


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        return cls(
            global_settings=Path.home() / SETTINGS_DIR_NAME / "settings.yaml",
            project_settings=Path.cwd() / SETTINGS_DIR_NAME / "settings.yaml",
            local_settings=Path.cwd() / SETTINGS_DIR_NAME / "settings.local.yaml",
        )


class SettingsManager:
    """Scope-aware settings manager.

    Usage:
        settings = SettingsManager()
        config = settings.load()
        settings.set_excluded_kinds(["ConfigMap"], scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None, config_file: Path | None = None) -> None:
        self.paths = paths or SettingsPaths.default()
        self.config_file = config_file

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes, then the explicit config file."""
        result: dict[str, Any] = {}
        for path in self._search_paths():
            if path.exists():
                content = self._read_file(path)
                result = self._deep_merge(result, content)
        return result

    def load(self) -> FilterSettings:
        """Return the validated effective settings.

        Raises:
            SettingsError: If the merged settings do not match the schema
        """
        merged = self.get_merged_settings()
        try:
            return FilterSettings.model_validate(merged)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings: {e}") from e

    # ----- Filter settings -----

    def set_excluded_kinds(self, kinds: list[str], scope: Scope = "global") -> None:
        self._update_setting("excluded_kinds", kinds, scope)

    def clear_excluded_kinds(self, scope: Scope = "global") -> None:
        self._remove_setting("excluded_kinds", scope)

    def set_service_discovery(self, enabled: bool, scope: Scope = "global") -> None:
        self._update_setting("enable_service_discovery", enabled, scope)

    def set_required_collections(self, names: list[str], scope: Scope = "global") -> None:
        self._update_setting("required_collections", names, scope)

    def clear_required_collections(self, scope: Scope = "global") -> None:
        self._remove_setting("required_collections", scope)

    # ----- Scope utilities -----

    def _search_paths(self) -> list[Path]:
        paths = [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]
        if self.config_file is not None:
            paths.append(self.config_file)
        return paths

    def _get_scope_path(self, scope: Scope) -> Path:
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping unreadable settings file {path}: {e}")
            return {}
        if not isinstance(content, dict):
            logger.warning(f"Skipping settings file {path}: expected a mapping")
            return {}
        return content

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        return self._read_file(path)

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _update_setting(self, key: str, value: Any, scope: Scope) -> None:
        settings = self._read_scope(scope)
        settings[key] = value
        self._write_scope(scope, settings)

    def _remove_setting(self, key: str, scope: Scope) -> None:
        settings = self._read_scope(scope)
        if key in settings:
            del settings[key]
            self._write_scope(scope, settings)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def get_settings(config_file: Path | None = None) -> SettingsManager:
    """Get a settings manager with default paths."""
    return SettingsManager(config_file=config_file)
