# blaze_live/core/persist.py
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

from blaze_live.core.db import exec_many, exec_sql

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def _to_ts(dt_str: str | None) -> datetime:
    if dt_str:
        try:
            return datetime.fromisoformat(dt_str.replace("Z", "+00:00")).astimezone(timezone.utc)
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def snapshot_rows(teams: Mapping[str, Mapping[str, Any]]) -> list[Dict[str, Any]]:
    """One row per team, payload kept whole as JSON."""
    return [
        {
            "team_key": key,
            "sport": status["sport"],
            "source": status["source"],
            "accuracy": float(status["accuracy"]),
            "game_status": status["gameStatus"],
            "payload": json.dumps(dict(status)),
            "captured_at": _to_ts(status.get("timestamp")),
        }
        for key, status in teams.items()
    ]


async def insert_team_snapshots(teams: Mapping[str, Mapping[str, Any]]):
    sql = """
    INSERT INTO team_snapshots (team_key, sport, source, accuracy, game_status, payload, captured_at)
    VALUES (:team_key, :sport, :source, :accuracy, :game_status, CAST(:payload AS JSONB), :captured_at);
    """
    rows = snapshot_rows(teams)
    if rows:
        await exec_many(sql, rows)


async def ensure_schema():
    # asyncpg runs one statement per execute
    for stmt in SCHEMA_PATH.read_text(encoding="utf-8").split(";"):
        if stmt.strip():
            await exec_sql(stmt)
