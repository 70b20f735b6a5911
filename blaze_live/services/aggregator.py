# blaze_live/services/aggregator.py
from __future__ import annotations

import asyncio
import logging
import random
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import partial
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from blaze_live.core.cache import TTLCache, cache_key
from blaze_live.core.config import BATCH_DEADLINE_SECONDS, HEADERS, HTTP_TIMEOUT
from blaze_live.core.errors import UnknownTeamError
from blaze_live.models.types import BatchResult, TeamStatus
from blaze_live.services.espn_teams import fetch_espn, format_espn
from blaze_live.services.fallback import generate_fallback
from blaze_live.services.http_retry import DEFAULT_POLICY, RetryPolicy
from blaze_live.services.mlb_statsapi import fetch_mlb_statsapi, format_mlb
from blaze_live.services.sources import TEAMS, TeamDescriptor

logger = logging.getLogger("blaze_live.aggregator")

Fetcher = Callable[[httpx.AsyncClient, TeamDescriptor, RetryPolicy], Awaitable[Dict[str, Any]]]
Formatter = Callable[[TeamDescriptor, Dict[str, Any]], TeamStatus]

# provider key -> (fetch raw bodies, normalize them)
PROVIDERS: Dict[str, Tuple[Fetcher, Formatter]] = {
    "statsapi": (fetch_mlb_statsapi, format_mlb),
    "espn": (partial(fetch_espn, provider="espn"), partial(format_espn, provider="espn")),
    "espn_web": (partial(fetch_espn, provider="espn_web"), partial(format_espn, provider="espn_web")),
}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LiveSportsAggregator:
    """
    Per team: cache -> primary provider -> secondary provider -> synthetic.

    The chain is strictly sequential for one team; teams run concurrently
    and every team resolves to *something*, so the batch never fails as a
    whole because one upstream is down.
    """

    def __init__(
        self,
        teams: Optional[Dict[str, TeamDescriptor]] = None,
        cache: Optional[TTLCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        policy: RetryPolicy = DEFAULT_POLICY,
        deadline: Optional[float] = BATCH_DEADLINE_SECONDS,
        providers: Optional[Dict[str, Tuple[Fetcher, Formatter]]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.teams = teams if teams is not None else TEAMS
        self.cache = cache if cache is not None else TTLCache()
        self.policy = policy
        self.deadline = deadline
        self.providers = providers if providers is not None else PROVIDERS
        self._client = client
        self._rng = rng

    # ---------- plumbing ----------

    @asynccontextmanager
    async def _client_scope(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT, headers=HEADERS) as client:
            yield client

    def _fallback(self, team: TeamDescriptor) -> TeamStatus:
        return generate_fallback(team, rng=self._rng)

    # ---------- one team ----------

    async def _run_chain(self, client: httpx.AsyncClient, team: TeamDescriptor) -> TeamStatus:
        key = cache_key(team.sport, team.key, "live")
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        for provider in team.providers:
            entry = self.providers.get(provider)
            if entry is None:
                logger.warning("no provider registered for %s (team=%s)", provider, team.key)
                continue
            fetch, fmt = entry
            try:
                raw = await fetch(client, team, self.policy)
                status = fmt(team, raw)
            except Exception as e:
                logger.warning("%s failed for %s, trying next source: %r", provider, team.key, e)
                continue
            self.cache.set(key, status)
            return status

        logger.warning("all live sources failed for %s, using synthetic data", team.key)
        return self._fallback(team)

    async def _resolve(self, client: httpx.AsyncClient, team: TeamDescriptor) -> TeamStatus:
        try:
            if self.deadline is not None:
                return await asyncio.wait_for(self._run_chain(client, team), timeout=self.deadline)
            return await self._run_chain(client, team)
        except asyncio.TimeoutError:
            logger.warning("deadline %.1fs hit for %s, using synthetic data", self.deadline, team.key)
        except Exception:
            logger.exception("unexpected error resolving %s", team.key)
        return self._fallback(team)

    async def fetch_team(self, team_key: str) -> TeamStatus:
        team = self.teams.get(team_key)
        if team is None:
            raise UnknownTeamError(team_key)
        async with self._client_scope() as client:
            return await self._resolve(client, team)

    # ---------- batch ----------

    async def _gather(self) -> Dict[str, TeamStatus]:
        async with self._client_scope() as client:
            keys = list(self.teams)
            results = await asyncio.gather(
                *(self._resolve(client, self.teams[k]) for k in keys),
                return_exceptions=True,
            )
        teams: Dict[str, TeamStatus] = {}
        for k, res in zip(keys, results):
            if isinstance(res, BaseException):
                logger.error("team %s raised through resolve: %r", k, res)
                res = self._fallback(self.teams[k])
            teams[k] = res
        return teams

    async def get_all_teams(self) -> BatchResult:
        t0 = time.perf_counter()
        try:
            teams = await self._gather()
        except Exception as e:
            logger.exception("live batch failed")
            fallback = {k: self._fallback(t) for k, t in self.teams.items()}
            dt = int((time.perf_counter() - t0) * 1000)
            return {
                "timestamp": _utc_now_iso(),
                "responseTime": dt,
                "status": "ERROR",
                "error": str(e) or e.__class__.__name__,
                "teams": fallback,
                "metadata": self._metadata(fallback, dt),
            }

        dt = int((time.perf_counter() - t0) * 1000)
        meta = self._metadata(teams, dt)
        logger.info("live batch: %d teams in %dms sources=%s", len(teams), dt, meta["sources"])
        return {
            "timestamp": _utc_now_iso(),
            "responseTime": dt,
            "status": "SUCCESS",
            "teams": teams,
            "metadata": meta,
        }

    def _metadata(self, teams: Dict[str, TeamStatus], latency: int) -> Dict[str, Any]:
        attribution = {k: t["source"] for k, t in teams.items()}
        accuracy = round(sum(t["accuracy"] for t in teams.values()) / len(teams), 1) if teams else 0.0
        return {
            "sources": list(dict.fromkeys(attribution.values())),
            "attribution": attribution,
            "accuracy": accuracy,
            "latency": latency,
            "cacheHits": self.cache.stats(),
        }
