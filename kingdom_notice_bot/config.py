"""Configuration handling for the notice bot."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigError


DEFAULT_DB_PATH = "data.db"
DEFAULT_POLL_INTERVAL_MINUTES = 10


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    discord_bot_token: str
    guild_id: int
    channel_id: int
    db_path: str = DEFAULT_DB_PATH
    poll_interval_minutes: int = DEFAULT_POLL_INTERVAL_MINUTES


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is mandatory")
    return value


def _require_int(name: str) -> int:
    raw = _require(name)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer") from exc


def get_settings() -> Settings:
    """Load settings from environment variables, raising on anything missing."""
    load_dotenv()

    token = _require("DISCORD_BOT_TOKEN")
    guild_id = _require_int("GUILD_ID")
    channel_id = _require_int("CHANNEL_ID")

    db_path = os.getenv("DB_PATH", DEFAULT_DB_PATH).strip() or DEFAULT_DB_PATH

    # 확인 주기 (분)
    interval_raw = os.getenv("POLL_INTERVAL_MINUTES", str(DEFAULT_POLL_INTERVAL_MINUTES))
    try:
        interval = int(interval_raw)
    except ValueError as exc:
        raise ConfigError("POLL_INTERVAL_MINUTES must be an integer") from exc
    if interval <= 0:
        raise ConfigError("POLL_INTERVAL_MINUTES must be positive")

    return Settings(
        discord_bot_token=token,
        guild_id=guild_id,
        channel_id=channel_id,
        db_path=db_path,
        poll_interval_minutes=interval,
    )
