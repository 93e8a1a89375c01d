"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, data_dir, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "configure_logging",
    "data_dir",
    "get_database_config",
]
