"""Configuration loading and validation for Onionware."""

from onionware.config.loader import find_config_file, load_config, parse_config
from onionware.config.env import expand_env_vars
from onionware.config.schema import LoggingSettings, MiddlewareConfig

__all__ = [
    "LoggingSettings",
    "MiddlewareConfig",
    "expand_env_vars",
    "find_config_file",
    "load_config",
    "parse_config",
]
