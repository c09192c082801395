import os
from dataclasses import dataclass
from typing import Optional

from src.utils.exceptions import ConfigurationError
from src.utils.helpers import parse_int, parse_float

CACHE_TTL_MIN_SECONDS = 10
CACHE_TTL_MAX_SECONDS = 60


@dataclass
class Settings:
    # App
    APP_VERSION: str = "0.0.0"
    LOG_LEVEL: str = "INFO"
    LOG_PATH: str = "logs/app.log"

    # Upstream document store
    AUTH_TOKEN: Optional[str] = None
    TRADES_DATABASE_ID: Optional[str] = None
    TARGETS_DATABASE_ID: Optional[str] = None
    NOTION_API_BASE: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_SECONDS: float = 10.0

    # Journal property names
    TRADE_DATE_PROPERTY: str = "Date"
    TRADE_PNL_PROPERTY: str = "Net P&L"
    TARGET_TYPE_PROPERTY: str = "Type"
    TARGET_VALUE_PROPERTY: str = "Target"

    # Engine
    CACHE_TTL_SECONDS: int = 60
    JOURNAL_TIMEZONE: Optional[str] = None  # IANA name; None = process local time
    ENGINE_BASE_URL: Optional[str] = None  # remote /api/engine for the UI view

    @property
    def targets_enabled(self) -> bool:
        return bool(self.TARGETS_DATABASE_ID)

    @property
    def cache_ttl(self) -> int:
        ttl = self.CACHE_TTL_SECONDS
        return max(CACHE_TTL_MIN_SECONDS, min(CACHE_TTL_MAX_SECONDS, ttl))


_settings: Optional[Settings] = None


def _load_from_env(settings: Settings) -> None:
    env = os.environ
    # Helper to set if env exists
    def set_if(name: str, cast, env_name: Optional[str] = None):
        key = env_name or name
        if key in env and env[key] != "":
            setattr(settings, name, cast(env[key]))

    set_if("APP_VERSION", str)
    set_if("LOG_LEVEL", str)
    set_if("LOG_PATH", str)

    # legacy names first so the canonical ones win when both are set
    set_if("AUTH_TOKEN", str, "NOTION_TOKEN")
    set_if("AUTH_TOKEN", str)
    set_if("TRADES_DATABASE_ID", str, "NOTION_DATABASE_ID")
    set_if("TRADES_DATABASE_ID", str)
    set_if("TARGETS_DATABASE_ID", str)
    set_if("NOTION_API_BASE", lambda v: v.rstrip("/"))
    set_if("NOTION_VERSION", str)
    set_if("NOTION_TIMEOUT_SECONDS", lambda v: parse_float(v, settings.NOTION_TIMEOUT_SECONDS))

    set_if("TRADE_DATE_PROPERTY", str)
    set_if("TRADE_PNL_PROPERTY", str)
    set_if("TARGET_TYPE_PROPERTY", str)
    set_if("TARGET_VALUE_PROPERTY", str)

    set_if("CACHE_TTL_SECONDS", lambda v: parse_int(v, settings.CACHE_TTL_SECONDS))
    set_if("JOURNAL_TIMEZONE", str)
    set_if("ENGINE_BASE_URL", lambda v: v.rstrip("/"))


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
        _load_from_env(_settings)
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the env."""
    global _settings
    _settings = None


def validate_settings(settings: Settings) -> None:
    """Raise ConfigurationError if a required value is missing."""
    missing = [
        name
        for name in ("TRADES_DATABASE_ID", "AUTH_TOKEN")
        if not getattr(settings, name)
    ]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
    if settings.JOURNAL_TIMEZONE:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(settings.JOURNAL_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown JOURNAL_TIMEZONE: {settings.JOURNAL_TIMEZONE}") from e
