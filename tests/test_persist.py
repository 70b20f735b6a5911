"""Tests for the optional snapshot persistence layer (no database needed)."""

import json
from datetime import datetime, timezone

import pytest

from blaze_live.core import db, persist


@pytest.fixture
def status():
    return {
        "timestamp": "2025-09-13T20:00:00+00:00",
        "team": "St. Louis Cardinals",
        "sport": "MLB",
        "source": "MLB Stats API",
        "accuracy": 99.2,
        "gameStatus": "LIVE",
        "score": "3 - 4",
    }


class TestSnapshotRows:
    def test_row_fields(self, status):
        (row,) = persist.snapshot_rows({"cardinals": status})
        assert row["team_key"] == "cardinals"
        assert row["source"] == "MLB Stats API"
        assert row["game_status"] == "LIVE"
        assert row["accuracy"] == 99.2
        assert json.loads(row["payload"]) == status
        assert row["captured_at"] == datetime(2025, 9, 13, 20, 0, tzinfo=timezone.utc)

    def test_bad_timestamp_uses_now(self, status):
        status["timestamp"] = "not a time"
        (row,) = persist.snapshot_rows({"cardinals": status})
        assert row["captured_at"].tzinfo is not None


class TestWrites:
    @pytest.mark.asyncio
    async def test_insert_passes_all_rows(self, status, monkeypatch):
        seen = {}

        async def fake_many(sql, rows):
            seen["sql"] = sql
            seen["rows"] = list(rows)

        monkeypatch.setattr(persist, "exec_many", fake_many)
        await persist.insert_team_snapshots({"cardinals": status, "titans": dict(status, team="Tennessee Titans")})
        assert "INSERT INTO team_snapshots" in seen["sql"]
        assert [r["team_key"] for r in seen["rows"]] == ["cardinals", "titans"]

    @pytest.mark.asyncio
    async def test_empty_batch_skips_write(self, monkeypatch):
        async def fail(*a, **kw):
            raise AssertionError("should not write")

        monkeypatch.setattr(persist, "exec_many", fail)
        await persist.insert_team_snapshots({})

    @pytest.mark.asyncio
    async def test_schema_applied_one_statement_at_a_time(self, monkeypatch):
        stmts = []

        async def fake_sql(sql, params=None):
            stmts.append(sql.strip())

        monkeypatch.setattr(persist, "exec_sql", fake_sql)
        await persist.ensure_schema()
        assert len(stmts) == 2
        assert stmts[0].startswith("CREATE TABLE IF NOT EXISTS team_snapshots")
        assert stmts[1].startswith("CREATE INDEX")

    @pytest.mark.asyncio
    async def test_exec_is_noop_without_engine(self):
        assert not db.is_enabled()
        assert await db.exec_sql("SELECT 1") is None


class TestDatabaseURL:
    def test_unset_disables(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert db.get_database_url() is None

    @pytest.mark.parametrize(
        "raw",
        [
            "postgres://u:p@db.example.com:5432/blaze",
            "postgresql://u:p@db.example.com:5432/blaze",
            "postgresql+asyncpg://u:p@db.example.com:5432/blaze",
        ],
    )
    def test_normalized_to_asyncpg(self, raw, monkeypatch):
        monkeypatch.delenv("DATABASE_SSL", raising=False)
        monkeypatch.setenv("DATABASE_URL", raw)
        assert db.get_database_url() == "postgresql+asyncpg://u:p@db.example.com:5432/blaze?ssl=require"

    def test_existing_ssl_kept(self):
        assert db.asyncpg_url("postgresql://u:p@h/blaze?ssl=disable").endswith("ssl=disable")

    def test_ssl_default_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_SSL", "prefer")
        assert db.asyncpg_url("postgres://u:p@h/blaze").endswith("ssl=prefer")

    def test_other_schemes_rejected(self):
        with pytest.raises(ValueError):
            db.asyncpg_url("mysql://u:p@h/blaze")
