# blaze_live/services/mlb_statsapi.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import httpx

from blaze_live.core.errors import ProviderShapeError
from blaze_live.models import mlb_model
from blaze_live.models.types import (
    COMPLETED,
    LIVE,
    SCHEDULED,
    UPCOMING,
    MLBLiveStatus,
    MLBSeasonStatus,
)
from blaze_live.services.http_retry import DEFAULT_POLICY, RetryPolicy, fetch_with_retry
from blaze_live.services.sources import ACCURACY, MLB_STATS_API, TeamDescriptor, base_url

logger = logging.getLogger("blaze_live.mlb")

NY = ZoneInfo("America/New_York")

# statusCode values MLB uses for in-progress games
LIVE_STATUS_CODES = {"I", "L"}
# abstractGameState values for a game that has not been played out
NOT_STARTED_STATES = {"Preview", "Live"}


def _today_iso() -> str:
    # MLB schedules by local US date, not UTC
    return datetime.now(NY).strftime("%Y-%m-%d")


# -----------------------------------------------------------
# Fetch
# -----------------------------------------------------------
async def fetch_mlb_statsapi(
    client: httpx.AsyncClient,
    team: TeamDescriptor,
    policy: RetryPolicy = DEFAULT_POLICY,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Pull today's schedule, the live linescore when a game is in progress,
    and season hitting/pitching stats for one team.

    Returns the raw bodies bundled as {"schedule", "linescore", "stats"}.
    """
    base = base_url(team.sport, "statsapi")
    team_id = team.provider_id("statsapi")

    schedule = await fetch_with_retry(
        client,
        f"{base}schedule",
        params={
            "sportId": 1,
            "date": date or _today_iso(),
            "teamId": team_id,
            "hydrate": "team,venue",
        },
        policy=policy,
    )

    linescore = None
    game = _current_game(schedule)
    if game and _status_code(game) in LIVE_STATUS_CODES:
        linescore = await fetch_with_retry(client, f"{base}game/{game['gamePk']}/linescore", policy=policy)

    stats = await fetch_with_retry(
        client,
        f"{base}teams/{team_id}/stats",
        params={"stats": "season,seasonAdvanced", "group": "hitting,pitching"},
        policy=policy,
    )
    return {"schedule": schedule, "linescore": linescore, "stats": stats}


# -----------------------------------------------------------
# Shape helpers
# -----------------------------------------------------------
def _current_game(schedule: Any) -> Optional[Dict[str, Any]]:
    """
    The game that matters today. On a doubleheader that is the one in
    progress, else the next one not yet final, else the first listed.
    """
    if not isinstance(schedule, dict):
        return None
    dates = schedule.get("dates") or []
    if not dates:
        return None
    games = [g for g in (dates[0] or {}).get("games") or [] if isinstance(g, dict)]
    if not games:
        return None
    live = next((g for g in games if _status_code(g) in LIVE_STATUS_CODES), None)
    if live:
        return live
    pending = next((g for g in games if _abstract_state(g) != "Final"), None)
    return pending or games[0]


def _status_code(game: Dict[str, Any]) -> str:
    return (game.get("status") or {}).get("statusCode") or ""


def _abstract_state(game: Dict[str, Any]) -> str:
    return (game.get("status") or {}).get("abstractGameState") or ""


def _group_stat(stats: List[Dict[str, Any]], group: str) -> Dict[str, Any]:
    for block in stats:
        if ((block.get("group") or {}).get("displayName") or "").lower() == group:
            splits = block.get("splits") or []
            if splits:
                return splits[0].get("stat") or {}
    return {}


def _fixed(value: Any, places: int) -> str:
    try:
        return f"{float(value or 0):.{places}f}"
    except (TypeError, ValueError):
        return f"{0:.{places}f}"


def _parse_game_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _is_home(game: Dict[str, Any], team: TeamDescriptor) -> bool:
    home = ((game.get("teams") or {}).get("home") or {}).get("team") or {}
    return str(home.get("id")) == team.provider_id("statsapi")


# -----------------------------------------------------------
# Format
# -----------------------------------------------------------
def format_mlb(
    team: TeamDescriptor,
    raw: Dict[str, Any],
    now: Optional[datetime] = None,
):
    """
    Normalize an MLB Stats API bundle into MLBLiveStatus or MLBSeasonStatus.

    Raises ProviderShapeError when the schedule has no `dates` list or the
    stats body has no `stats` list. Everything else defaults.
    """
    now = now or datetime.now(timezone.utc)
    schedule = raw.get("schedule")
    stats = raw.get("stats")
    linescore = raw.get("linescore")

    if not isinstance(schedule, dict) or not isinstance(schedule.get("dates"), list):
        raise ProviderShapeError("MLB schedule response has no dates list")
    if not isinstance(stats, dict) or not isinstance(stats.get("stats"), list):
        raise ProviderShapeError("MLB team stats response has no stats list")

    game = _current_game(schedule)
    stamp = now.isoformat()

    if game and isinstance(linescore, dict) and _status_code(game) in LIVE_STATUS_CODES:
        teams = linescore.get("teams") or {}
        live: MLBLiveStatus = {
            "timestamp": stamp,
            "team": team.display_name,
            "sport": "MLB",
            "source": MLB_STATS_API,
            "accuracy": ACCURACY[MLB_STATS_API],
            "gameStatus": LIVE,
            "score": f"{(teams.get('away') or {}).get('runs') or 0} - {(teams.get('home') or {}).get('runs') or 0}",
            "inning": int(linescore.get("currentInning") or 1),
            "inningHalf": linescore.get("inningHalf") or "Top",
            "balls": int(linescore.get("balls") or 0),
            "strikes": int(linescore.get("strikes") or 0),
            "outs": int(linescore.get("outs") or 0),
            "runners": mlb_model.runners_on_base(linescore),
            "leverage": mlb_model.leverage_index(linescore),
            "winProbability": mlb_model.win_probability(linescore, _is_home(game, team)),
            "nextPitch": ((linescore.get("offense") or {}).get("batter") or {}).get("fullName") or "Unknown",
        }
        return live

    if not game:
        status = SCHEDULED
    elif _abstract_state(game) == "Final":
        status = COMPLETED
    elif _abstract_state(game) in NOT_STARTED_STATES:
        # warmup, delayed start, or no linescore yet
        status = UPCOMING
    else:
        start = _parse_game_date(game.get("gameDate"))
        if start is None:
            status = SCHEDULED
        else:
            status = UPCOMING if start > now else COMPLETED

    blocks = stats["stats"]
    hitting = _group_stat(blocks, "hitting")
    pitching = _group_stat(blocks, "pitching")
    wins = int(pitching.get("wins") or hitting.get("wins") or 0)
    losses = int(pitching.get("losses") or hitting.get("losses") or 0)
    played = wins + losses

    season: MLBSeasonStatus = {
        "timestamp": stamp,
        "team": team.display_name,
        "sport": "MLB",
        "source": MLB_STATS_API,
        "accuracy": ACCURACY[MLB_STATS_API],
        "gameStatus": status,
        "record": f"{wins}-{losses}",
        "battingAvg": _fixed(hitting.get("avg"), 3),
        "era": _fixed(pitching.get("era"), 2),
        "runsScored": int(hitting.get("runs") or 0),
        "homeRuns": int(hitting.get("homeRuns") or 0),
        "rbi": int(hitting.get("rbi") or 0),
        "stolenBases": int(hitting.get("stolenBases") or 0),
        "readiness": 70 + round(30 * wins / played) if played else 70,
    }
    return season
