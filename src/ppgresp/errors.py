"""Exception types raised by the respiratory-rate pipeline.

All of them derive from :class:`ValueError` so callers that only care about
"bad input" can catch that, while the evaluation layer can tell the three
failure modes apart.
"""

from __future__ import annotations


class RespRateError(ValueError):
    """Base class for every failure raised by the estimation core."""


class InvalidParameter(RespRateError):
    """Malformed configuration or malformed input series."""


class InsufficientData(RespRateError):
    """Too few samples / events for the requested operation."""


class EmptyBand(RespRateError):
    """No spectral bin falls inside the configured respiratory band."""
