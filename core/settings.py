"""Runtime settings.

Read from ``BILLSHEET_*`` environment variables via pydantic-settings.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SheetSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BILLSHEET_", extra="ignore")

    log_level: str = Field(default="WARNING", description="Minimum log level")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")
    currency_symbol: str = Field(default="$", description="Prefix for money cells")


@lru_cache
def get_settings() -> SheetSettings:
    return SheetSettings()
