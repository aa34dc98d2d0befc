import pytest

from kingdom_notice_bot import config, main
from kingdom_notice_bot.errors import ConfigError

ENV_NAMES = (
    "DISCORD_BOT_TOKEN",
    "GUILD_ID",
    "CHANNEL_ID",
    "DB_PATH",
    "POLL_INTERVAL_MINUTES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _set_required(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", " secret ")
    monkeypatch.setenv("GUILD_ID", "111")
    monkeypatch.setenv("CHANNEL_ID", "222")


def test_get_settings_defaults(monkeypatch):
    _set_required(monkeypatch)

    settings = config.get_settings()

    assert settings.discord_bot_token == "secret"
    assert settings.guild_id == 111
    assert settings.channel_id == 222
    assert settings.db_path == "data.db"
    assert settings.poll_interval_minutes == 10


def test_get_settings_overrides(monkeypatch):
    _set_required(monkeypatch)
    monkeypatch.setenv("DB_PATH", "/var/lib/bot/state.db")
    monkeypatch.setenv("POLL_INTERVAL_MINUTES", "5")

    settings = config.get_settings()

    assert settings.db_path == "/var/lib/bot/state.db"
    assert settings.poll_interval_minutes == 5


@pytest.mark.parametrize("missing", ["DISCORD_BOT_TOKEN", "GUILD_ID", "CHANNEL_ID"])
def test_get_settings_requires_mandatory_values(monkeypatch, missing):
    _set_required(monkeypatch)
    monkeypatch.delenv(missing)

    with pytest.raises(ConfigError, match=missing):
        config.get_settings()


def test_get_settings_rejects_non_integer_ids(monkeypatch):
    _set_required(monkeypatch)
    monkeypatch.setenv("CHANNEL_ID", "general")

    with pytest.raises(ConfigError):
        config.get_settings()


def test_get_settings_rejects_bad_interval(monkeypatch):
    _set_required(monkeypatch)
    monkeypatch.setenv("POLL_INTERVAL_MINUTES", "0")

    with pytest.raises(ValueError):
        config.get_settings()


def test_main_exits_on_config_error():
    assert main.main([]) == 1
