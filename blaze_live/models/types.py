from typing import Any, Dict, Mapping, Tuple, Union

from typing_extensions import Literal, TypedDict

GameStatus = Literal["LIVE", "UPCOMING", "COMPLETED", "SCHEDULED"]

LIVE = "LIVE"
UPCOMING = "UPCOMING"
COMPLETED = "COMPLETED"
SCHEDULED = "SCHEDULED"

# Every TeamStatus variant carries these, always non-null.
REQUIRED_FIELDS: Tuple[str, ...] = ("timestamp", "team", "sport", "source", "accuracy", "gameStatus")


class MLBLiveStatus(TypedDict):
    timestamp: str
    team: str
    sport: str
    source: str
    accuracy: float
    gameStatus: Literal["LIVE"]
    score: str
    inning: int
    inningHalf: str
    balls: int
    strikes: int
    outs: int
    runners: int
    leverage: int
    winProbability: int
    nextPitch: str


class MLBSeasonStatus(TypedDict):
    timestamp: str
    team: str
    sport: str
    source: str
    accuracy: float
    gameStatus: Literal["UPCOMING", "COMPLETED", "SCHEDULED"]
    record: str
    battingAvg: str
    era: str
    runsScored: int
    homeRuns: int
    rbi: int
    stolenBases: int
    readiness: int


class ESPNTeamStatus(TypedDict):
    timestamp: str
    team: str
    sport: str
    source: str
    accuracy: float
    gameStatus: GameStatus
    record: str
    ranking: int
    nextGame: str
    venue: str
    conference: str
    score: str
    period: int
    clock: str


class _SyntheticRequired(TypedDict):
    timestamp: str
    team: str
    sport: str
    source: str
    accuracy: float
    gameStatus: Literal["LIVE", "UPCOMING"]


class SyntheticStatus(_SyntheticRequired, total=False):
    score: str
    winProbability: int
    # mlb
    readiness: int
    leverage: int
    inning: int
    runners: int
    pitchCount: int
    momentum: int
    battingAvg: str
    era: str
    # football
    quarter: int
    possession: str
    down: int
    distance: int
    fieldPosition: int
    powerRanking: int
    ranking: int
    recruitingClass: str
    # nba
    standing: int
    pace: int
    efficiency: int


TeamStatus = Union[MLBLiveStatus, MLBSeasonStatus, ESPNTeamStatus, SyntheticStatus]


class BatchMetadata(TypedDict):
    sources: list
    attribution: Dict[str, str]
    accuracy: float
    latency: int
    cacheHits: Dict[str, Any]


class _BatchRequired(TypedDict):
    timestamp: str
    responseTime: int
    status: Literal["SUCCESS", "ERROR"]
    teams: Dict[str, TeamStatus]
    metadata: BatchMetadata


class BatchResult(_BatchRequired, total=False):
    error: str


def missing_fields(status: Mapping[str, Any]) -> Tuple[str, ...]:
    """Required fields that are absent or None."""
    return tuple(f for f in REQUIRED_FIELDS if status.get(f) is None)
