"""Configuration management for Ledger Tools."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

OrphanPolicy = Literal["ignore", "warn", "reject"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Splits/payments naming members outside the group
    orphan_policy: OrphanPolicy = "warn"

    # Minor units of drift tolerated per member before flagging an imbalance
    imbalance_tolerance: int = Field(default=1, ge=0)

    # Display settings
    currency_symbol: str = "$"


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the LEDGER_* variables in your "
            f"environment or .env file.\n"
            f"Error: {e}"
        ) from e
