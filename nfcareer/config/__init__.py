"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from nfcareer.config import settings

    print(settings.environment)
    print(settings.zk.build_dir)
"""

from nfcareer.config.settings import (
    DuplicatePolicy,
    Environment,
    LogLevel,
    Settings,
    StorageBackend,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "StorageBackend",
    "DuplicatePolicy",
]
