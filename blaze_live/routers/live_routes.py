# blaze_live/routers/live_routes.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from blaze_live.core import db
from blaze_live.core.config import CORS_HEADERS
from blaze_live.core.errors import UnknownTeamError
from blaze_live.core.persist import insert_team_snapshots
from blaze_live.services.aggregator import LiveSportsAggregator

router = APIRouter(tags=["live"])
logger = logging.getLogger("blaze_live.routes")

# One aggregator per process so the TTL cache survives between requests.
_aggregator = LiveSportsAggregator()


def get_aggregator() -> LiveSportsAggregator:
    return _aggregator


async def _persist(teams: Mapping[str, Mapping[str, Any]]) -> None:
    if not db.is_enabled():
        return
    try:
        await insert_team_snapshots(teams)
    except Exception as e:
        logger.exception("snapshot insert failed: %s", e)


@router.get("/live-sports")
async def live_sports(agg: LiveSportsAggregator = Depends(get_aggregator)):
    """
    Status for every tracked team. Always 200; degraded data shows up as
    source="Enhanced Mock Data" and a lower accuracy, not as an HTTP error.
    """
    data = await agg.get_all_teams()
    await _persist(data["teams"])

    headers: Dict[str, str] = {
        **CORS_HEADERS,
        "Cache-Control": "no-cache",
        "X-Response-Time": str(data["responseTime"]),
        "X-Data-Sources": ", ".join(data["metadata"]["sources"]) or "Unknown",
    }
    return JSONResponse(content=data, headers=headers)


@router.get("/live-sports/cache")
async def live_sports_cache(agg: LiveSportsAggregator = Depends(get_aggregator)):
    return JSONResponse(content={"ttlMs": agg.cache.ttl_ms, **agg.cache.stats()}, headers=CORS_HEADERS)


@router.get("/live-sports/{team_key}")
async def live_sports_team(team_key: str, agg: LiveSportsAggregator = Depends(get_aggregator)):
    try:
        status = await agg.fetch_team(team_key.lower())
    except UnknownTeamError:
        raise HTTPException(status_code=404, detail="unknown_team", headers=CORS_HEADERS)
    return JSONResponse(content=status, headers={**CORS_HEADERS, "Cache-Control": "no-cache"})
