"""Tests for the Alembic migrations in alembic/versions."""

import sqlite3
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

from assetvault.config import get_settings
from assetvault.repository.models import AssetRow

ROOT = Path(__file__).resolve().parents[2]


def _alembic_config() -> Config:
    # No ini file: keeps alembic from reconfiguring logging mid-session
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    return config


@pytest.fixture
def migrated_db(tmp_path, monkeypatch):
    db_path = tmp_path / "migrations.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    get_settings.cache_clear()
    yield db_path
    get_settings.cache_clear()


@pytest.mark.slow
class TestMigrations:
    """Upgrade/downgrade against a file-backed SQLite database."""

    def test_upgrade_matches_model(self, migrated_db):
        command.upgrade(_alembic_config(), "head")

        with sqlite3.connect(migrated_db) as conn:
            columns = {row[1] for row in conn.execute("PRAGMA table_info(assets)")}
            indexes = {row[1] for row in conn.execute("PRAGMA index_list(assets)")}

        assert columns == set(AssetRow.__table__.columns.keys())
        assert {"ix_assets_owner_id", "ix_assets_visibility"} <= indexes

    def test_downgrade_drops_table(self, migrated_db):
        config = _alembic_config()
        command.upgrade(config, "head")
        command.downgrade(config, "base")

        with sqlite3.connect(migrated_db) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}

        assert "assets" not in tables
