# blaze_live/services/espn_teams.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from blaze_live.core.errors import ProviderShapeError
from blaze_live.models.types import COMPLETED, LIVE, SCHEDULED, UPCOMING, ESPNTeamStatus
from blaze_live.services.http_retry import DEFAULT_POLICY, RetryPolicy, fetch_with_retry
from blaze_live.services.sources import (
    ACCURACY,
    ESPN_API,
    ESPN_WEB_API,
    TeamDescriptor,
    base_url,
)

logger = logging.getLogger("blaze_live.espn")

SOURCE_NAMES = {"espn": ESPN_API, "espn_web": ESPN_WEB_API}

# ESPN status.type.state -> gameStatus
STATE_MAP = {"in": LIVE, "pre": UPCOMING, "post": COMPLETED}


async def fetch_espn(
    client: httpx.AsyncClient,
    team: TeamDescriptor,
    policy: RetryPolicy = DEFAULT_POLICY,
    provider: str = "espn",
) -> Dict[str, Any]:
    """Team page and league scoreboard, fetched together."""
    base = base_url(team.sport, provider)
    team_body, scoreboard = await asyncio.gather(
        fetch_with_retry(client, f"{base}teams/{team.provider_id(provider)}", policy=policy),
        fetch_with_retry(client, f"{base}scoreboard", policy=policy),
        return_exceptions=True,
    )
    # let both settle, then fail on whichever broke
    for res in (team_body, scoreboard):
        if isinstance(res, Exception):
            raise res
    return {"team": team_body, "scoreboard": scoreboard}


def _competitor_id(c: Dict[str, Any]) -> str:
    return str(c.get("id") or (c.get("team") or {}).get("id") or "")


def _find_event(scoreboard: Any, espn_id: str) -> Optional[Dict[str, Any]]:
    if not isinstance(scoreboard, dict):
        return None
    for ev in scoreboard.get("events") or []:
        comp = (ev.get("competitions") or [{}])[0]
        if any(_competitor_id(c) == espn_id for c in comp.get("competitors") or []):
            return ev
    return None


def _score_value(c: Dict[str, Any]) -> int:
    score = c.get("score")
    if isinstance(score, dict):
        score = score.get("value")
    try:
        return int(float(score or 0))
    except (TypeError, ValueError):
        return 0


def _score_line(competitors: List[Dict[str, Any]]) -> str:
    home = next((c for c in competitors if c.get("homeAway") == "home"), {})
    away = next((c for c in competitors if c.get("homeAway") == "away"), {})
    return f"{_score_value(away)} - {_score_value(home)}"


def format_espn(
    team: TeamDescriptor,
    raw: Dict[str, Any],
    now: Optional[datetime] = None,
    provider: str = "espn",
) -> ESPNTeamStatus:
    """
    Normalize ESPN team + scoreboard bodies into an ESPNTeamStatus.

    The team body must carry a `team` object; a missing scoreboard or a
    scoreboard without this team's game just means SCHEDULED.
    """
    now = now or datetime.now(timezone.utc)
    team_body = raw.get("team")
    if not isinstance(team_body, dict) or not isinstance(team_body.get("team"), dict):
        raise ProviderShapeError("ESPN team response has no team block")

    info = team_body["team"]
    event = _find_event(raw.get("scoreboard"), team.provider_id(provider))
    source = SOURCE_NAMES.get(provider, ESPN_API)

    record_items = (info.get("record") or {}).get("items") or [{}]
    next_events = info.get("nextEvent") or [{}]

    if event:
        comp = (event.get("competitions") or [{}])[0]
        status = comp.get("status") or event.get("status") or {}
        state = (status.get("type") or {}).get("state")
        game_status = STATE_MAP.get(state, SCHEDULED)
        next_game = event.get("name") or "TBD"
        venue = (comp.get("venue") or {}).get("fullName") or "TBD"
        score = _score_line(comp.get("competitors") or []) if game_status in (LIVE, COMPLETED) else "0 - 0"
        period = int(status.get("period") or 0)
        clock = status.get("displayClock") or "0:00"
    else:
        game_status = SCHEDULED
        next_game = next_events[0].get("name") or "TBD"
        venue = "TBD"
        score = "0 - 0"
        period = 0
        clock = "0:00"

    return {
        "timestamp": now.isoformat(),
        "team": team.display_name,
        "sport": team.sport.upper(),
        "source": source,
        "accuracy": ACCURACY[source],
        "gameStatus": game_status,
        "record": record_items[0].get("summary") or "0-0",
        "ranking": int(info.get("rank") or 0),
        "nextGame": next_game,
        "venue": venue,
        "conference": ((info.get("groups") or {}).get("parent") or {}).get("name")
        or info.get("standingSummary")
        or "Unknown",
        "score": score,
        "period": period,
        "clock": clock,
    }
