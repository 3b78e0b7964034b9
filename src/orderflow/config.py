"""Runtime settings, read from ``ORDERFLOW_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# src/orderflow/config.py -> repository root
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ORDERFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default=_PROJECT_ROOT / "data")
    default_currency: str = "BRL"
    log_level: str = "WARNING"

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"

    @property
    def events_file(self) -> Path:
        return self.data_dir / "order_events.jsonl"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
