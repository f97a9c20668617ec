"""
Configuration management for the Greyn Eco cart service
"""


import threading

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("database", "file")
DUPLICATE_ADD_POLICIES = ("ignore", "increment")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database configuration
    database_url: str = Field("sqlite:///data/greyn_eco.db")
    seed_default_projects: bool = Field(True)

    # Application settings
    environment: str = Field("development")
    log_level: str = Field("INFO")
    log_dir: str = Field("logs")
    enable_file_logging: bool = Field(True)

    # HTTP server
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    # Cart settings
    currency: str = Field("USD")
    cart_storage_backend: str = Field("database")
    cart_storage_dir: str = Field("data/carts")
    cart_storage_key: str = Field("carbonCart")
    duplicate_add_policy: str = Field("ignore")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}")
        return value

    @field_validator("cart_storage_backend")
    @classmethod
    def _validate_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in STORAGE_BACKENDS:
            raise ValueError(f"cart_storage_backend must be one of {STORAGE_BACKENDS}")
        return value

    @field_validator("duplicate_add_policy")
    @classmethod
    def _validate_policy(cls, value: str) -> str:
        value = value.lower()
        if value not in DUPLICATE_ADD_POLICIES:
            raise ValueError(
                f"duplicate_add_policy must be one of {DUPLICATE_ADD_POLICIES}"
            )
        return value

    @field_validator("currency")
    @classmethod
    def _validate_currency(cls, value: str) -> str:
        if len(value) != 3:
            raise ValueError("currency must be a 3-letter code")
        return value.upper()


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
