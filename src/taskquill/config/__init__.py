"""Configuration loading."""

from taskquill.config.loader import (
    home_config_exists,
    load_config,
    local_config_exists,
    resolve_override_resolver,
    save_config,
)
from taskquill.config.schema import DEFAULT_CONFIG, TaskquillConfig

__all__ = [
    "DEFAULT_CONFIG",
    "TaskquillConfig",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "resolve_override_resolver",
    "save_config",
]
