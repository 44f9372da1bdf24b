"""Exceptions raised by the configuration layer."""


class ConfigError(Exception):
    """Raised when peelfs configuration cannot be read, merged, or validated."""
