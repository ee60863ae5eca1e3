"""Configuration models, YAML loading and logging setup."""

from .config_parser import parse_config, parse_config_file
from .logging_config import init_logging
from .settings import NetConfig, SocketSettings, TLSConfig

__all__ = [
    "NetConfig",
    "SocketSettings",
    "TLSConfig",
    "init_logging",
    "parse_config",
    "parse_config_file",
]
