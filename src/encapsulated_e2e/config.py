"""E2E configuration management.

Handles persistent harness configuration stored in
~/.encapsulated-e2e/config.yaml. Supports environment variable overrides,
which take precedence over the file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Default values
DEFAULT_PACKAGE_MANAGER = "npm"
DEFAULT_TIMEOUT = 600
DEFAULT_LOG_LEVEL = "warning"

# Environment variable mappings
ENV_VARS = {
    "published_version": "PUBLISHED_VERSION",
    "package_manager": "SELECTED_PM",
    "e2e_root": "NX_E2E_ROOT",
    "timeout": "E2E_TIMEOUT",
    "keep_workspace": "NX_E2E_KEEP_WORKSPACE",
    "log_level": "E2E_LOG_LEVEL",
    "log_file": "E2E_LOG_FILE",
}

CONFIG_KEYS = list(ENV_VARS)
BOOL_KEYS = {"keep_workspace"}
INT_KEYS = {"timeout"}

_TRUTHY = {"1", "true", "yes", "on"}


def _is_ci() -> bool:
    return os.environ.get("CI", "").lower() in _TRUTHY


@dataclass
class E2EConfig:
    """E2E harness configuration."""

    published_version: str | None = None
    package_manager: str = DEFAULT_PACKAGE_MANAGER
    e2e_root: str | None = None
    timeout: int = DEFAULT_TIMEOUT
    keep_workspace: bool = field(default_factory=lambda: not _is_ci())
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def values(self) -> dict[str, Any]:
        """Public config values keyed by name."""
        return {key: getattr(self, key) for key in CONFIG_KEYS}


def get_config_path() -> Path:
    """Get the harness config file path.

    Returns:
        $ENCAPSULATED_E2E_CONFIG if set, else ~/.encapsulated-e2e/config.yaml
    """
    override = os.environ.get("ENCAPSULATED_E2E_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".encapsulated-e2e" / "config.yaml"


def coerce_value(key: str, value: Any) -> Any:
    """Convert a raw file/env/CLI value to the type of `key`.

    Raises:
        KeyError: If key is not a config key
        ValueError: If value cannot be converted
    """
    if key not in ENV_VARS:
        raise KeyError(key)
    if key in INT_KEYS:
        return int(value)
    if key in BOOL_KEYS:
        if isinstance(value, bool):
            return value
        return str(value).lower() in _TRUTHY
    return str(value)


def load_config() -> E2EConfig:
    """Load harness configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    Returns:
        E2EConfig with values and sources
    """
    config = E2EConfig()
    sources: dict[str, str] = {key: "default" for key in CONFIG_KEYS}

    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            file_config = {}  # Unreadable config file, use defaults

        for key in CONFIG_KEYS:
            if key in file_config and file_config[key] is not None:
                try:
                    setattr(config, key, coerce_value(key, file_config[key]))
                    sources[key] = "config file"
                except ValueError:
                    pass

    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, coerce_value(key, raw))
            sources[key] = "environment"
        except ValueError:
            pass

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key (see CONFIG_KEYS)
        value: Value to save
    """
    config_path = get_config_path()

    existing: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            existing = yaml.safe_load(f) or {}

    existing[key] = coerce_value(key, value)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def unset_config(key: str) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove

    Returns:
        True if key was removed, False if not found
    """
    config_path = get_config_path()
    if not config_path.exists():
        return False

    with open(config_path) as f:
        existing = yaml.safe_load(f) or {}

    if key not in existing:
        return False

    del existing[key]

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)

    return True
