"""Configuration management for Group Ledger."""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .money import normalize_currency_code


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROUP_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency used when a ledger file does not name one
    default_currency: str = "USD"

    # Split settings
    auto_fix_splits: bool = False  # Repair inconsistent splits instead of failing

    # Display settings
    accounting_format: bool = True  # Show negatives as ($5.00)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("default_currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        return normalize_currency_code(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your GROUP_LEDGER_* environment "
            f"variables and .env file. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
