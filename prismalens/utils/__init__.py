"""Utility modules for configuration, logging, and error handling."""

from .config import load_config, Config, ProviderSettings
from .logger import get_logger

__all__ = [
    "load_config",
    "Config",
    "ProviderSettings",
    "get_logger",
]
