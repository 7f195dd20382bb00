from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Device Manager"

    DATA_DIR: Path = Path("data")

    DB_URL: str = Field(
        default="sqlite:///./data/devices.db",
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
    )
    DB_SCHEMA: str = "devices"
    DB_ECHO: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    API_SUPPORTED_VERSIONS: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["1.0"])
    API_VERSION_HEADER: str = "X-Api-Version"

    METRICS_ENABLED: bool = True

    @property
    def is_sqlite(self) -> bool:
        return self.DB_URL.startswith("sqlite")

    @field_validator("API_SUPPORTED_VERSIONS", mode="before")
    @classmethod
    def parse_supported_versions(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return ["1.0"]
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("API_SUPPORTED_VERSIONS must be a comma separated string or list")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if settings.is_sqlite:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
