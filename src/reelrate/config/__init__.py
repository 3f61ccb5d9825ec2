"""Application configuration helpers."""

from __future__ import annotations

from .env import env_choice, env_float, env_int, env_str, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .omdb import OmdbConfig, get_omdb_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "OmdbConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_choice",
    "env_float",
    "env_int",
    "env_str",
    "get_database_config",
    "get_omdb_config",
    "get_storage_config",
    "require_env_vars",
]
