from __future__ import annotations

import pytest

from content_api.db.config import Settings


def test_sqlite_url_gets_async_driver():
    settings = Settings(DATABASE_URL="sqlite:///./content.db")

    assert settings.async_database_url == "sqlite+aiosqlite:///./content.db"
    assert settings.sync_database_url == "sqlite:///./content.db"


def test_postgres_url_built_from_parts():
    settings = Settings(
        DATABASE_URL=None,
        POSTGRES_USER="content",
        POSTGRES_PASSWORD="secret",
        POSTGRES_DB="cms",
        POSTGRES_HOST="db",
        POSTGRES_PORT=6543,
    )

    assert settings.async_database_url == "postgresql+asyncpg://content:secret@db:6543/cms"
    assert settings.sync_database_url == "postgresql://content:secret@db:6543/cms"


def test_missing_database_configuration_raises(monkeypatch):
    for name in ("DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    with pytest.raises(ValueError):
        _ = settings.database_url
