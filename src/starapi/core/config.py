"""
StarAPI Configuration Management

Provides centralized configuration with validation and environment support.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORE_KEY = "starapi-endpoints"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10_000_000, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class HTTPConfig(BaseModel):
    """Outgoing request configuration."""

    request_timeout: Optional[float] = Field(
        default=None, description="Total request timeout in seconds (None disables)"
    )
    follow_redirects: bool = Field(default=True, description="Follow redirects")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"Invalid request timeout: {v}. Must be positive")
        return v


class StoreConfig(BaseModel):
    """Saved endpoint storage configuration."""

    path: str = Field(
        default=str(Path.home() / ".starapi" / "storage.json"),
        description="Key-value storage file path",
    )
    key: str = Field(
        default=DEFAULT_STORE_KEY, description="Slot holding the saved endpoints"
    )

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Storage key must not be empty")
        return v


class StarAPIConfig(BaseSettings):
    """Main StarAPI configuration."""

    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    model_config = SettingsConfigDict(
        env_prefix="STARAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )


# Global configuration instance
_config: Optional[StarAPIConfig] = None


def get_config() -> StarAPIConfig:
    """
    Get the global configuration instance.

    Returns:
        The global StarAPIConfig instance
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def load_config(env_file: Optional[Path] = None) -> StarAPIConfig:
    """
    Load configuration from an env file and environment variables.

    Args:
        env_file: Optional path to a dotenv file (defaults to ./.env)

    Returns:
        Loaded configuration instance
    """
    if env_file is not None:
        return StarAPIConfig(_env_file=str(env_file))
    return StarAPIConfig()


def get_store_path(config: Optional[StarAPIConfig] = None) -> Path:
    """
    Get the configured key-value storage file path.

    Returns:
        Expanded path to the storage file
    """
    config = config or get_config()
    return Path(config.store.path).expanduser()
