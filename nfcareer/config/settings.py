"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).parent.parent.parent


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackend(str, Enum):
    """Where disclosure records are kept."""

    MEMORY = "memory"
    FILESYSTEM = "filesystem"


class DuplicatePolicy(str, Enum):
    """How the matcher picks between several credentials of one type."""

    FIRST = "first"
    MOST_RECENT = "most_recent"
    HIGHEST = "highest"


class ZKSettings(BaseSettings):
    """Circuit assets and snarkjs toolchain configuration."""

    model_config = SettingsConfigDict(env_prefix="ZKP_")

    build_dir: Path = PROJECT_ROOT / "circuits" / "build"
    snarkjs_command: str = "npx snarkjs"

    @property
    def snarkjs_argv(self) -> list[str]:
        """Split the snarkjs command into argv form."""
        return self.snarkjs_command.split()


class StorageSettings(BaseSettings):
    """Disclosure record storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: StorageBackend = StorageBackend.MEMORY
    data_dir: Path = PROJECT_ROOT / "data" / "zkp-proofs"


class MatcherSettings(BaseSettings):
    """Credential condition matcher configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCHER_")

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FIRST


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    port: int = Field(default=8010, alias="CREDENTIAL_PROOFS_PORT")

    project_root: Path = Field(default_factory=lambda: PROJECT_ROOT)

    zk: ZKSettings = Field(default_factory=ZKSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    matcher: MatcherSettings = Field(default_factory=MatcherSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
