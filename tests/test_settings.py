import pytest

from src.config.settings import Settings, get_settings, reset_settings, validate_settings
from src.utils.exceptions import ConfigurationError

ENV_KEYS = [
    "AUTH_TOKEN", "NOTION_TOKEN", "TRADES_DATABASE_ID", "NOTION_DATABASE_ID",
    "TARGETS_DATABASE_ID", "CACHE_TTL_SECONDS", "ENGINE_BASE_URL", "JOURNAL_TIMEZONE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for k in ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    reset_settings()
    yield monkeypatch
    reset_settings()


def test_loads_required_values_from_env(clean_env):
    clean_env.setenv("AUTH_TOKEN", "tok")
    clean_env.setenv("TRADES_DATABASE_ID", "db1")
    s = get_settings()
    assert s.AUTH_TOKEN == "tok"
    assert s.TRADES_DATABASE_ID == "db1"
    assert s.targets_enabled is False
    validate_settings(s)


def test_legacy_names_are_fallbacks(clean_env):
    clean_env.setenv("NOTION_TOKEN", "legacy-tok")
    clean_env.setenv("NOTION_DATABASE_ID", "legacy-db")
    clean_env.setenv("TRADES_DATABASE_ID", "db2")
    s = get_settings()
    assert s.AUTH_TOKEN == "legacy-tok"
    assert s.TRADES_DATABASE_ID == "db2"


def test_missing_required_values_raise(clean_env):
    with pytest.raises(ConfigurationError) as exc:
        validate_settings(get_settings())
    assert "TRADES_DATABASE_ID" in str(exc.value)
    assert "AUTH_TOKEN" in str(exc.value)


def test_targets_database_is_optional(clean_env):
    clean_env.setenv("AUTH_TOKEN", "tok")
    clean_env.setenv("TRADES_DATABASE_ID", "db")
    clean_env.setenv("TARGETS_DATABASE_ID", "targets")
    s = get_settings()
    validate_settings(s)
    assert s.targets_enabled is True


@pytest.mark.parametrize("raw,expected", [("5", 10), ("30", 30), ("600", 60), ("junk", 60)])
def test_cache_ttl_is_clamped(clean_env, raw, expected):
    clean_env.setenv("CACHE_TTL_SECONDS", raw)
    assert get_settings().cache_ttl == expected


def test_unknown_timezone_is_a_configuration_error():
    s = Settings(AUTH_TOKEN="t", TRADES_DATABASE_ID="d", JOURNAL_TIMEZONE="Mars/Olympus")
    with pytest.raises(ConfigurationError):
        validate_settings(s)


def test_trailing_slash_stripped_from_urls(clean_env):
    clean_env.setenv("ENGINE_BASE_URL", "https://engine.example/")
    assert get_settings().ENGINE_BASE_URL == "https://engine.example"
