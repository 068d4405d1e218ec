"""UnitBridge configuration and settings.

Settings come from ``UNITBRIDGE_*`` environment variables or a ``.env``
file. They are read once; tests call ``get_settings.cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Style = Literal["long", "short", "narrow"]


class UnitBridgeSettings(BaseSettings):
    """Runtime settings for the unit engine, CLI and MCP server."""

    model_config = SettingsConfigDict(
        env_prefix="UNITBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Formatting defaults
    default_locale: str = "en"
    default_style: Style = "long"

    # Application
    environment: Literal["development", "production", "testing"] = "development"
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None

    # JSON file of additional unit definitions, loaded on first use
    additional_units_file: Optional[Path] = None

    parse_cache_size: int = Field(default=4096, ge=0)

    # MCP quantity store
    max_quantities: int = Field(default=100, ge=1)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> UnitBridgeSettings:
    """Get the cached settings instance."""
    return UnitBridgeSettings()
