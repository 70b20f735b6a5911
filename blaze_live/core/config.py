# blaze_live/core/config.py
from __future__ import annotations

import os
from typing import Optional

# Tunables for the live aggregator. Read once at import.
CACHE_TTL_MS = int(os.getenv("LIVE_CACHE_TTL_MS", "30000"))
HTTP_TIMEOUT = float(os.getenv("LIVE_HTTP_TIMEOUT", "5.0"))
RETRY_ATTEMPTS = int(os.getenv("LIVE_RETRY_ATTEMPTS", "3"))
RETRY_BACKOFF = float(os.getenv("LIVE_RETRY_BACKOFF", "1.0"))  # seconds * attempt
USER_AGENT = os.getenv("LIVE_USER_AGENT", "Blaze Intelligence Championship Platform/2.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _optional_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


# None = wait for every team to settle
BATCH_DEADLINE_SECONDS = _optional_float("BATCH_DEADLINE_SECONDS")

HEADERS = {"User-Agent": USER_AGENT, "Accept": "application/json"}

# Sent on every API response, same-origin or not
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
