"""Configuration management for expert-panel.

Settings are layered: built-in defaults, then the global config file, then
the project-local ``.expert-panel/config.yaml``. Credentials are only ever
read from environment variables.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from expert_panel.core.config.experts import DEFAULT_PANEL, panel_to_dict
from expert_panel.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOCAL_DIR_NAME = ".expert-panel"
CONFIG_FILE_NAME = "config.yaml"
PANELS_DIR_NAME = "panels"

_DEFAULT_CONFIG: dict[str, Any] = {
    "backend": {
        "provider": "azure-openai",
        "model": "gpt-4o",
        "endpoint": None,
        "temperature": None,
        "max_tokens": None,
    },
    "performance": {
        "concurrency": {
            # 0 launches every expert at once
            "max_concurrent_experts": 0,
            "connection_pool": {
                "max_connections": 100,
                "max_keepalive": 20,
                "keepalive_expiry": 30,
            },
        },
        "execution": {
            # None waits for the slowest expert
            "batch_timeout": None,
        },
    },
}

# Environment variables that override backend settings
_BACKEND_ENV_OVERRIDES = {
    "provider": "EXPERT_PANEL_PROVIDER",
    "model": "EXPERT_PANEL_MODEL",
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_file(file_path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning an empty dict when the file is absent."""
    if not file_path.exists():
        return {}

    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse config file {file_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {file_path} is not a mapping")
    return data


class ConfigurationManager:
    """Resolves configuration directories and layered settings."""

    def __init__(
        self,
        global_config_dir: Path | None = None,
        working_dir: Path | None = None,
    ) -> None:
        if global_config_dir is None:
            xdg_home = os.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg_home) if xdg_home else Path.home() / ".config"
            global_config_dir = base / "expert-panel"
        self.global_config_dir = global_config_dir
        self._working_dir = working_dir or Path.cwd()
        self.local_config_dir = self._discover_local_config()
        self._config: dict[str, Any] | None = None

    def _discover_local_config(self) -> Path | None:
        """Walk up from the working directory looking for a local config dir."""
        for directory in (self._working_dir, *self._working_dir.parents):
            candidate = directory / LOCAL_DIR_NAME
            if candidate.is_dir():
                return candidate
        return None

    def load_config(self) -> dict[str, Any]:
        """Return merged configuration (defaults < global < local)."""
        if self._config is not None:
            return self._config

        config = copy.deepcopy(_DEFAULT_CONFIG)
        config = _deep_merge(
            config, _load_yaml_file(self.global_config_dir / CONFIG_FILE_NAME)
        )
        if self.local_config_dir is not None:
            config = _deep_merge(
                config, _load_yaml_file(self.local_config_dir / CONFIG_FILE_NAME)
            )

        self._config = config
        return config

    def load_performance_config(self) -> dict[str, Any]:
        """Return the ``performance`` section."""
        performance: dict[str, Any] = self.load_config().get("performance", {})
        return performance

    def load_backend_config(self) -> dict[str, Any]:
        """Return the ``backend`` section with environment overrides applied."""
        backend = dict(self.load_config().get("backend", {}))
        for key, env_var in _BACKEND_ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                backend[key] = value
        return backend

    def get_panels_dirs(self) -> list[Path]:
        """Panel directories in lookup order, local first."""
        dirs: list[Path] = []
        if self.local_config_dir is not None:
            local_panels = self.local_config_dir / PANELS_DIR_NAME
            if local_panels.exists():
                dirs.append(local_panels)

        global_panels = self.global_config_dir / PANELS_DIR_NAME
        if global_panels.exists():
            dirs.append(global_panels)

        return dirs

    def init_local_config(self, project_dir: Path | None = None) -> Path:
        """Create ``.expert-panel/`` with a starter config and default panel."""
        root = project_dir or self._working_dir
        local_dir = root / LOCAL_DIR_NAME

        if local_dir.exists():
            raise ConfigurationError(f"Local config already exists: {local_dir}")

        panels_dir = local_dir / PANELS_DIR_NAME
        try:
            panels_dir.mkdir(parents=True)
            with open(local_dir / CONFIG_FILE_NAME, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    _DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False
                )
            with open(
                panels_dir / f"{DEFAULT_PANEL.name}.yaml", "w", encoding="utf-8"
            ) as f:
                yaml.safe_dump(
                    panel_to_dict(DEFAULT_PANEL),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to create local config in {local_dir}: {e}"
            ) from e

        logger.info("Initialized local configuration in %s", local_dir)
        self.local_config_dir = local_dir
        self._config = None
        return local_dir
