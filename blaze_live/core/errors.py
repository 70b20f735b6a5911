# blaze_live/core/errors.py
from __future__ import annotations


class ProviderError(Exception):
    """A live provider could not produce a TeamStatus."""


class ProviderShapeError(ProviderError):
    """
    Upstream answered, but the body is missing the minimal structure a
    formatter needs. Retrying will not help; the aggregator moves on to
    the next provider.
    """


class UnknownTeamError(KeyError):
    pass
