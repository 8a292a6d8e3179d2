import pytest
from pydantic import ValidationError

from config.settings import Settings

DB_VARS = ["DATABASE_URL", "DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME", "SQLITE_PATH", "CORS_ORIGINS"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in DB_VARS:
        monkeypatch.delenv(name, raising=False)


def test_sqlite_fallback():
    s = Settings(_env_file=None, SQLITE_PATH="/tmp/x.db")
    assert s.DATABASE_URL == "sqlite:////tmp/x.db"


def test_mysql_url_from_parts(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.local")
    monkeypatch.setenv("DB_USER", "grader")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_PORT", "3307")

    s = Settings(_env_file=None)

    assert s.DATABASE_URL == "mysql+pymysql://grader:pw@db.local:3307/grading_system"


def test_database_url_override_wins(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.local")
    monkeypatch.setenv("DB_USER", "grader")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///override.db")

    assert Settings(_env_file=None).DATABASE_URL == "sqlite:///override.db"


def test_cors_origins_comma_separated(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test ,")

    assert Settings(_env_file=None).CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_settings_are_frozen():
    s = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        s.PORT = 8080


def test_unknown_env_keys_are_ignored(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "leftover")

    s = Settings(_env_file=None)

    assert "SESSION_SECRET" not in Settings.model_fields
    assert not hasattr(s, "SESSION_SECRET")
