"""Dependency helpers shared by the service layer."""

from __future__ import annotations

from functools import lru_cache

from .config import Settings
from .logging_config import setup_logging


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)


__all__ = ["configure_logging", "get_settings"]
