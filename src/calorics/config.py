"""Application configuration."""

import os
from datetime import date

from pydantic_settings import BaseSettings, SettingsConfigDict

from calorics.errors import ValidationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    calorics_api_url: str = "http://localhost:8080/api"
    calorics_api_token: str | None = None
    request_timeout_seconds: float = 15.0
    rollback_failed_deletes: bool = True
    catalog_csv_path: str | None = None
    search_result_limit: int | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_day(raw: date | str) -> date:
    """Parse a calendar day given as a date or a YYYY-MM-DD string."""
    if isinstance(raw, date):
        return raw
    cleaned = raw.strip() if isinstance(raw, str) else ""
    try:
        return date.fromisoformat(cleaned)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {raw!r}") from exc
