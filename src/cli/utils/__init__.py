"""CLI utilities."""

from .config import ClientConfig, ConfigError, ConfigManager, open_session, resolve_config
from .validation import parse_param, validate_host, validate_method, validate_steps

__all__ = [
    "ClientConfig",
    "ConfigError",
    "ConfigManager",
    "open_session",
    "resolve_config",
    "parse_param",
    "validate_host",
    "validate_method",
    "validate_steps",
]
