"""
Runtime settings, read from ``KITCHEN_LABELS_*`` environment variables or a
``.env`` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Labels
    history_capacity: int = Field(10, ge=1)
    expiring_soon_days: int = Field(2, ge=0)
    catalog_path: Optional[str] = None
    label_font_path: Optional[str] = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    output_dir: str = "output"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = SettingsConfigDict(
        env_prefix="KITCHEN_LABELS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
