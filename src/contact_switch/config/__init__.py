"""Configuration loading and validation utilities."""

from .loader import (
    ConfigError,
    get_default_switch_params,
    load_raw_config,
    load_switch_config,
    migrate_config_dict,
    normalize_config_dict,
)
from .models import SwitchConfig

__all__ = [
    "ConfigError",
    "SwitchConfig",
    "get_default_switch_params",
    "load_raw_config",
    "load_switch_config",
    "migrate_config_dict",
    "normalize_config_dict",
]
