# blaze_live/services/fallback.py
from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Optional

from blaze_live.models.types import LIVE, UPCOMING, SyntheticStatus
from blaze_live.services.sources import ACCURACY, SYNTHETIC, TeamDescriptor


def _score(rnd: random.Random, high: int) -> str:
    return f"{rnd.randrange(high)} - {rnd.randrange(high)}"


def _status(rnd: random.Random, live_above: float) -> str:
    return LIVE if rnd.random() > live_above else UPCOMING


def generate_fallback(
    team: TeamDescriptor,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> SyntheticStatus:
    """
    Plausible stand-in data for when every live source failed.

    The shape is fixed per sport; only the values are random. `source` is
    always the synthetic marker so the UI can show reduced confidence.
    """
    rnd = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    sport = (team.sport or "").lower()

    out: SyntheticStatus = {
        "timestamp": now.isoformat(),
        "team": team.display_name,
        "sport": sport.upper() or "UNKNOWN",
        "source": SYNTHETIC,
        "accuracy": ACCURACY[SYNTHETIC],
        "gameStatus": UPCOMING,
    }

    if sport == "mlb":
        out.update(
            gameStatus=_status(rnd, 0.7),
            readiness=rnd.randint(70, 99),
            leverage=rnd.randint(60, 99),
            score=_score(rnd, 8),
            inning=rnd.randint(1, 9),
            runners=rnd.randrange(8),
            pitchCount=rnd.randint(50, 149),
            momentum=rnd.randrange(100),
            winProbability=rnd.randint(20, 79),
            battingAvg=f"{0.200 + rnd.random() * 0.150:.3f}",
            era=f"{2.50 + rnd.random() * 2.00:.2f}",
        )
    elif sport == "nfl":
        out.update(
            gameStatus=_status(rnd, 0.8),
            powerRanking=rnd.randint(15, 24),
            score=_score(rnd, 35),
            quarter=rnd.randint(1, 4),
            possession=team.abbreviation if rnd.random() > 0.5 else "OPP",
            down=rnd.randint(1, 4),
            distance=rnd.randint(1, 20),
            fieldPosition=rnd.randrange(100),
            winProbability=rnd.randint(20, 79),
        )
    elif sport == "ncaa":
        out.update(
            gameStatus=_status(rnd, 0.85),
            ranking=rnd.randint(8, 12),
            score=_score(rnd, 45),
            quarter=rnd.randint(1, 4),
            possession=team.abbreviation if rnd.random() > 0.5 else "OPP",
            recruitingClass="Top 5",
            winProbability=rnd.randint(25, 84),
        )
    elif sport == "nba":
        out.update(
            gameStatus=_status(rnd, 0.75),
            standing=rnd.randint(4, 11),
            score=_score(rnd, 130),
            quarter=rnd.randint(1, 4),
            pace=rnd.randint(90, 109),
            efficiency=rnd.randint(85, 114),
            winProbability=rnd.randint(20, 79),
        )

    return out
