"""Configuration file loading and merging."""

import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from taskquill.config.schema import DEFAULT_CONFIG, TaskquillConfig
from taskquill.prompts.override import (
    OverrideResolver,
    chain_resolvers,
    config_override_resolver,
    env_override_resolver,
)

CONFIG_FILENAME = "config.yaml"
TEMPLATES_USE_ENV = "TEMPLATES_USE"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.taskquill/config.yaml."""
    return Path.home() / ".taskquill" / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.taskquill/config.yaml."""
    return Path.cwd() / ".taskquill" / CONFIG_FILENAME


def home_config_exists() -> bool:
    """Check if the global home config exists."""
    return get_home_config_path().exists()


def local_config_exists() -> bool:
    """Check if the local project config exists."""
    return get_local_config_path().exists()


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found or empty."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
            if data is None:
                return None
            if not isinstance(data, dict):
                return None
            result: dict[str, object] = data
            return result
    except yaml.YAMLError:
        return None


def load_config(environ: Mapping[str, str] | None = None) -> TaskquillConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.taskquill/config.yaml)
    3. Local config (./.taskquill/config.yaml)
    4. TEMPLATES_USE environment variable

    Returns merged TaskquillConfig.
    """
    env = os.environ if environ is None else environ

    # Start with defaults
    config = DEFAULT_CONFIG

    # Layer home config
    home_data = load_yaml_config(get_home_config_path())
    if home_data:
        config = config.merge(TaskquillConfig.from_dict(home_data))

    # Layer local config
    local_data = load_yaml_config(get_local_config_path())
    if local_data:
        config = config.merge(TaskquillConfig.from_dict(local_data))

    templates_use = env.get(TEMPLATES_USE_ENV)
    if templates_use:
        config = config.merge(TaskquillConfig(templates_use=templates_use))

    return config


def save_config(config: TaskquillConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed.
    Only saves set values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
        )


def resolve_override_resolver(
    config: TaskquillConfig,
    environ: Mapping[str, str] | None = None,
) -> OverrideResolver:
    """Build the default override lookup for a config.

    Precedence (highest to lowest):
    1. MCP_PROMPT_<NAME> / MCP_PROMPT_<NAME>_APPEND env vars
    2. prompt_overrides from config files
    """
    return chain_resolvers(
        env_override_resolver(environ),
        config_override_resolver(config.prompt_overrides),
    )
