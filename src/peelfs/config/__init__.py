"""Configuration for peelfs."""

from .exceptions import ConfigError
from .loader import DEFAULT_CONFIG_PATH, ENV_PREFIX, ConfigLoader, parse_override
from .models import PeelConfig

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "PeelConfig",
    "parse_override",
]
