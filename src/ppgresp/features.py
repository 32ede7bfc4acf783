"""Respiratory-induced variation signals derived from the pulse train.

Breathing modulates the PPG in three ways, each giving an irregularly
sampled series (one point per pulse or per beat-to-beat interval):

  - RIIV: intensity (baseline) of each pulse, mean over trough-to-trough
  - RIAV: amplitude of each pulse, peak minus preceding trough
  - RIFV: instantaneous heart rate, 60 / inter-beat interval
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from ppgresp.errors import InvalidParameter


class Feature(str, Enum):
    """Respiratory-proxy extraction rule."""

    RIIV = "riiv"
    RIAV = "riav"
    RIFV = "rifv"


@dataclass
class RespiratorySeries:
    """Irregularly sampled series: ``values[i]`` observed at ``times[i]`` seconds."""

    times: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        self.times = np.asarray(self.times, dtype=np.float64)
        self.values = np.asarray(self.values, dtype=np.float64)
        if self.times.shape != self.values.shape:
            raise InvalidParameter(
                f"times and values differ in length "
                f"({self.times.size} vs {self.values.size})"
            )

    @classmethod
    def empty(cls) -> RespiratorySeries:
        return cls(np.zeros(0), np.zeros(0))

    def __len__(self) -> int:
        return int(self.times.size)

    @property
    def duration(self) -> float:
        if len(self) < 2:
            return 0.0
        return float(self.times[-1] - self.times[0])

    def __repr__(self) -> str:
        return f"RespiratorySeries(n={len(self)}, duration={self.duration:.1f}s)"


# ---------------------------------------------------------------------------
# Extraction rules
# ---------------------------------------------------------------------------


def extract_riiv(
    signal: np.ndarray,
    peaks: np.ndarray,
    troughs: np.ndarray,
    fs: float,
) -> RespiratorySeries:
    """Mean signal level over each trough-to-trough pulse window."""
    x = np.asarray(signal, dtype=np.float64)
    tr = np.asarray(troughs, dtype=np.int64)
    if tr.size < 2:
        return RespiratorySeries.empty()

    values = np.array([x[a:b].mean() for a, b in zip(tr[:-1], tr[1:])])
    times = (tr[:-1] + tr[1:]) / 2.0 / fs
    return RespiratorySeries(times, values)


def extract_riav(
    signal: np.ndarray,
    peaks: np.ndarray,
    troughs: np.ndarray,
    fs: float,
) -> RespiratorySeries:
    """Pulse amplitude: each peak (except the first) minus the trough before it.

    Raises:
        InvalidParameter: troughs do not interleave the peaks one-to-one.
    """
    x = np.asarray(signal, dtype=np.float64)
    pk = np.asarray(peaks, dtype=np.int64)
    tr = np.asarray(troughs, dtype=np.int64)
    if pk.size < 2:
        return RespiratorySeries.empty()
    if tr.size != pk.size - 1:
        raise InvalidParameter(
            f"expected {pk.size - 1} troughs for {pk.size} peaks, got {tr.size}"
        )
    if np.any(tr <= pk[:-1]) or np.any(tr >= pk[1:]):
        raise InvalidParameter("troughs must lie strictly between consecutive peaks")

    values = x[pk[1:]] - x[tr]
    times = pk[1:] / fs
    return RespiratorySeries(times, values)


def extract_rifv(
    signal: np.ndarray,
    peaks: np.ndarray,
    troughs: np.ndarray,
    fs: float,
) -> RespiratorySeries:
    """Instantaneous heart rate (beats/min) per consecutive peak pair."""
    pk = np.asarray(peaks, dtype=np.int64)
    if pk.size < 2:
        return RespiratorySeries.empty()

    ibi_sec = np.diff(pk) / fs
    values = 60.0 / ibi_sec
    times = (pk[:-1] + pk[1:]) / 2.0 / fs
    return RespiratorySeries(times, values)


EXTRACTORS = {
    Feature.RIIV: extract_riiv,
    Feature.RIAV: extract_riav,
    Feature.RIFV: extract_rifv,
}


def extract(
    feature: Feature | str,
    signal: np.ndarray,
    peaks: np.ndarray,
    troughs: np.ndarray,
    fs: float,
) -> RespiratorySeries:
    """Run the extraction rule named by *feature*."""
    try:
        rule = EXTRACTORS[Feature(feature)]
    except ValueError:
        raise InvalidParameter(f"unknown feature {feature!r}") from None
    return rule(signal, peaks, troughs, fs)
