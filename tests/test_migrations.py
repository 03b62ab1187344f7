"""
Tests for the Alembic migrations.

The upgrade SQL is rendered offline for the SQLite test database, so no
connection is needed.
"""

import io
from pathlib import Path

from alembic import command
from alembic.config import Config

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


def render_upgrade_sql() -> str:
    buffer = io.StringIO()
    config = Config(output_buffer=buffer)
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    command.upgrade(config, "head", sql=True)
    return buffer.getvalue()


class TestInitialMigration:
    def test_creates_catalog_tables(self):
        sql = render_upgrade_sql()

        for table in ("authors", "categories", "books", "book_categories"):
            assert f"CREATE TABLE {table}" in sql

    def test_timestamp_defaults_render_on_sqlite(self):
        sql = render_upgrade_sql()

        assert "now()" not in sql
        assert "CURRENT_TIMESTAMP" in sql
