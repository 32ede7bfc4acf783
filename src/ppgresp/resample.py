"""Irregular-to-uniform resampling of respiratory series.

Pulse-derived series have one point per beat, and beats are not evenly
spaced (0.6-1.0 s apart with normal heart-rate variability).  A DFT assumes
uniform spacing, so every series is first interpolated onto a regular grid:
piecewise linear inside ``[times[0], times[-1]]``, held constant outside.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ppgresp.errors import InsufficientData, InvalidParameter
from ppgresp.features import RespiratorySeries

# Interpolation target sample rate
RESAMPLE_RATE_HZ = 4.0


@dataclass
class UniformSeries:
    """Uniformly sampled series starting at ``t_start`` with spacing ``1 / rate``."""

    values: np.ndarray
    rate: float
    t_start: float = 0.0

    @property
    def times(self) -> np.ndarray:
        return self.t_start + np.arange(self.values.size) / self.rate

    def __len__(self) -> int:
        return int(self.values.size)

    def __repr__(self) -> str:
        return (
            f"UniformSeries(n={len(self)}, rate={self.rate:g} Hz, "
            f"t_start={self.t_start:.2f}s)"
        )


def uniform_grid(t_start: float, t_end: float, rate: float) -> np.ndarray:
    """``ceil((t_end - t_start) * rate)`` points from *t_start* at spacing ``1 / rate``."""
    n = int(math.ceil((t_end - t_start) * rate))
    return t_start + np.arange(max(n, 0)) / rate


def interpolate_at(
    times: np.ndarray,
    values: np.ndarray,
    targets: np.ndarray,
) -> np.ndarray:
    """Piecewise-linear interpolation with constant extrapolation.

    Args:
        times: Strictly increasing knot times (at least two).
        values: Knot values.
        targets: Times to evaluate at.

    Returns:
        Interpolated values, same shape as *targets*.
    """
    t = np.asarray(times, dtype=np.float64)
    v = np.asarray(values, dtype=np.float64)
    q = np.asarray(targets, dtype=np.float64)

    # Bisection: i such that t[i] <= q < t[i + 1]
    i = np.searchsorted(t, q, side="right") - 1
    i = np.clip(i, 0, t.size - 2)
    t0, t1 = t[i], t[i + 1]
    v0, v1 = v[i], v[i + 1]
    out = v0 + (v1 - v0) * (q - t0) / (t1 - t0)

    out = np.where(q <= t[0], v[0], out)
    out = np.where(q >= t[-1], v[-1], out)
    return out


def resample_uniform(
    series: RespiratorySeries,
    target_rate: float = RESAMPLE_RATE_HZ,
) -> UniformSeries:
    """Resample an irregular series onto a uniform grid.

    Raises:
        InsufficientData: fewer than two points (duration undefined).
        InvalidParameter: non-positive rate or times not strictly increasing.
    """
    if target_rate <= 0:
        raise InvalidParameter(f"target rate must be positive, got {target_rate}")
    if len(series) < 2:
        raise InsufficientData(
            f"need at least 2 points to resample, got {len(series)}"
        )
    if np.any(np.diff(series.times) <= 0):
        raise InvalidParameter("series times must be strictly increasing")

    t_start = float(series.times[0])
    grid = uniform_grid(t_start, float(series.times[-1]), target_rate)
    values = interpolate_at(series.times, series.values, grid)
    return UniformSeries(values=values, rate=float(target_rate), t_start=t_start)
