"""
tests/conftest.py - shared fixtures

Upstream APIs are never hit: every test talks to a FakeUpstream wired in
through httpx.MockTransport, and retry policies never really sleep.
"""

from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from blaze_live.core.config import HEADERS
from blaze_live.services.http_retry import RetryPolicy

Reply = Union[Dict[str, Any], int, Exception, Callable[[httpx.Request], Any]]


class FakeUpstream:
    """
    URL-fragment -> canned reply. First matching fragment wins; anything
    unmatched is a 404. Every request URL is recorded in `calls`.

    Replies: a dict (200 JSON), an int (bare status), an exception (raised
    as a transport error), or a callable (sync or async) taking the request.
    """

    def __init__(self):
        self.routes: List[Tuple[str, Reply]] = []
        self.calls: List[str] = []

    def add(self, fragment: str, reply: Reply) -> "FakeUpstream":
        self.routes.append((fragment, reply))
        return self

    def count(self, fragment: str) -> int:
        return sum(1 for u in self.calls if fragment in u)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        for fragment, reply in self.routes:
            if fragment not in url:
                continue
            if callable(reply) and not isinstance(reply, type):
                reply = reply(request)
                if hasattr(reply, "__await__"):
                    reply = await reply
            if isinstance(reply, httpx.Response):
                return reply
            if isinstance(reply, Exception):
                raise reply
            if isinstance(reply, int):
                return httpx.Response(reply, request=request)
            return httpx.Response(200, json=reply, request=request)
        return httpx.Response(404, request=request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self), headers=HEADERS, timeout=5.0)


@pytest.fixture
def upstream():
    return FakeUpstream()


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def fast_policy(sleeps):
    """Default attempt count and backoff, but sleeps are only recorded."""
    return RetryPolicy(sleep=sleeps)


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# MLB Stats API bodies
# ---------------------------------------------------------------------------

@pytest.fixture
def mlb_live_schedule():
    return {
        "totalGames": 1,
        "dates": [
            {
                "date": "2025-09-13",
                "games": [
                    {
                        "gamePk": 776543,
                        "gameDate": "2025-09-13T18:15:00Z",
                        "status": {"abstractGameState": "Live", "statusCode": "I"},
                        "teams": {
                            "away": {"team": {"id": 112, "name": "Chicago Cubs"}},
                            "home": {"team": {"id": 138, "name": "St. Louis Cardinals"}},
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def mlb_linescore():
    return {
        "currentInning": 8,
        "inningHalf": "Bottom",
        "balls": 2,
        "strikes": 1,
        "outs": 1,
        "teams": {"home": {"runs": 4}, "away": {"runs": 3}},
        "offense": {
            "batter": {"id": 571448, "fullName": "Nolan Arenado"},
            "first": {"id": 1},
            "third": {"id": 2},
        },
    }


@pytest.fixture
def mlb_team_stats():
    return {
        "stats": [
            {
                "type": {"displayName": "season"},
                "group": {"displayName": "hitting"},
                "splits": [{"stat": {"avg": ".259", "runs": 612, "homeRuns": 150, "rbi": 590, "stolenBases": 88}}],
            },
            {
                "type": {"displayName": "season"},
                "group": {"displayName": "pitching"},
                "splits": [{"stat": {"wins": 72, "losses": 68, "era": "4.12"}}],
            },
        ]
    }


# ---------------------------------------------------------------------------
# ESPN bodies
# ---------------------------------------------------------------------------

@pytest.fixture
def espn_team_body():
    def build(espn_id: str, name: str, record: str = "3-7") -> Dict[str, Any]:
        return {
            "team": {
                "id": espn_id,
                "displayName": name,
                "record": {"items": [{"summary": record}]},
                "standingSummary": "3rd in AFC South",
            }
        }

    return build


@pytest.fixture
def espn_scoreboard():
    def build(espn_id: str, state: str = "in", home: str = "17", away: str = "14") -> Dict[str, Any]:
        return {
            "events": [
                {
                    "id": "401671",
                    "name": "Visitors at Home Team",
                    "competitions": [
                        {
                            "venue": {"fullName": "Nissan Stadium"},
                            "status": {"period": 3, "displayClock": "7:12", "type": {"state": state}},
                            "competitors": [
                                {"id": espn_id, "homeAway": "home", "score": home, "team": {"id": espn_id}},
                                {"id": "9999", "homeAway": "away", "score": away, "team": {"id": "9999"}},
                            ],
                        }
                    ],
                }
            ]
        }

    return build
