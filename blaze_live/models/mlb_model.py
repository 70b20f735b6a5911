# blaze_live/models/mlb_model.py
from __future__ import annotations

from typing import Any, Dict

# Illustrative heuristics, not a validated model. Both functions are
# deterministic in the linescore so formatter output is reproducible.

LATE_INNING = 7


def _runs(linescore: Dict[str, Any], side: str) -> int:
    return int(((linescore.get("teams") or {}).get(side) or {}).get("runs") or 0)


def runners_on_base(linescore: Dict[str, Any]) -> int:
    """Bitmask of occupied bases: 1 = first, 2 = second, 4 = third."""
    offense = linescore.get("offense") or {}
    mask = 0
    if offense.get("first"):
        mask |= 1
    if offense.get("second"):
        mask |= 2
    if offense.get("third"):
        mask |= 4
    return mask


def leverage_index(linescore: Dict[str, Any]) -> int:
    """
    0-100 pressure score. Late innings and close games each double the
    base; every runner on adds 5.
    """
    inning = int(linescore.get("currentInning") or 1)
    diff = abs(_runs(linescore, "home") - _runs(linescore, "away"))
    late = 2 if inning >= LATE_INNING else 1
    close = 2 if diff <= 2 else 1
    on_base = bin(runners_on_base(linescore)).count("1")
    return min(100, 40 + 15 * late * close + 5 * on_base)


def win_probability(linescore: Dict[str, Any], is_home: bool = True) -> int:
    """
    Percent chance the tracked team wins, clamped to 5..95.
    8 points per run of lead, plus 5 more per run from the 7th on.
    """
    inning = int(linescore.get("currentInning") or 1)
    lead = _runs(linescore, "home") - _runs(linescore, "away")
    if not is_home:
        lead = -lead

    p = 50 + lead * 8
    if inning >= LATE_INNING:
        p += lead * 5
    return max(5, min(95, int(p)))
