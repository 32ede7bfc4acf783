"""Systolic peak and diastolic trough detection.

Peaks are chosen greedily by amplitude under a minimum-distance constraint,
so a weak secondary bump (e.g. the dicrotic notch) next to a strong true
peak can never push the true peak out.  Troughs are the minimum sample
between each pair of consecutive peaks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ppgresp.errors import InvalidParameter

logger = logging.getLogger(__name__)

# 0.25 s between beats is a 240 beats/min ceiling
MIN_PEAK_DISTANCE_S = 0.25


@dataclass
class PulseMarkers:
    """Peak and trough sample indices for one waveform."""

    peaks: np.ndarray  # int, sorted by position
    troughs: np.ndarray  # int, len(peaks) - 1 entries

    def __repr__(self) -> str:
        return f"PulseMarkers(peaks={len(self.peaks)}, troughs={len(self.troughs)})"


def min_peak_distance(fs: float, min_distance_s: float = MIN_PEAK_DISTANCE_S) -> int:
    """Minimum allowed distance between two peaks, in samples."""
    if fs <= 0:
        raise InvalidParameter(f"sampling rate must be positive, got {fs}")
    if min_distance_s < 0:
        raise InvalidParameter(f"min distance must be >= 0, got {min_distance_s}")
    return max(int(round(min_distance_s * fs)), 1)


def _local_maxima(x: np.ndarray) -> np.ndarray:
    """Indices strictly greater than both neighbours (boundaries excluded)."""
    if x.size < 3:
        return np.zeros(0, dtype=np.int64)
    mid = x[1:-1]
    mask = (mid > x[:-2]) & (mid > x[2:])
    return np.flatnonzero(mask) + 1


def detect_peaks(
    signal: np.ndarray,
    fs: float,
    min_distance_s: float = MIN_PEAK_DISTANCE_S,
) -> np.ndarray:
    """Detect systolic peaks in a filtered pulse waveform.

    Args:
        signal: Band-passed pulse waveform.
        fs: Sampling rate in Hz.
        min_distance_s: Minimum time between accepted peaks.

    Returns:
        Sorted array of peak indices.  No two are closer than
        ``min_peak_distance(fs, min_distance_s)`` samples.
    """
    x = np.asarray(signal, dtype=np.float64)
    distance = min_peak_distance(fs, min_distance_s)

    candidates = _local_maxima(x)
    candidates = candidates[x[candidates] > 0]
    if candidates.size == 0:
        return np.zeros(0, dtype=np.int64)

    # Highest first; stable sort keeps the earlier position on equal height
    order = np.argsort(-x[candidates], kind="stable")

    accepted: list[int] = []
    for idx in candidates[order]:
        if all(abs(int(idx) - a) >= distance for a in accepted):
            accepted.append(int(idx))

    peaks = np.asarray(sorted(accepted), dtype=np.int64)
    logger.debug(
        "%d local maxima, %d peaks kept (min distance %d samples)",
        candidates.size, peaks.size, distance,
    )
    return peaks


def detect_troughs(signal: np.ndarray, peaks: np.ndarray) -> np.ndarray:
    """Locate the minimum strictly between each pair of consecutive peaks.

    Ties go to the first occurrence.  Returns ``len(peaks) - 1`` indices
    (none for zero or one peak).
    """
    x = np.asarray(signal, dtype=np.float64)
    p = np.asarray(peaks, dtype=np.int64)
    if p.size < 2:
        return np.zeros(0, dtype=np.int64)

    troughs = np.empty(p.size - 1, dtype=np.int64)
    for i, (left, right) in enumerate(zip(p[:-1], p[1:])):
        if right - left < 2:
            raise InvalidParameter(
                f"peaks {left} and {right} leave no sample between them"
            )
        troughs[i] = left + 1 + int(np.argmin(x[left + 1:right]))
    return troughs


def find_pulses(
    signal: np.ndarray,
    fs: float,
    min_distance_s: float = MIN_PEAK_DISTANCE_S,
) -> PulseMarkers:
    """Detect peaks and the troughs between them."""
    peaks = detect_peaks(signal, fs, min_distance_s)
    return PulseMarkers(peaks=peaks, troughs=detect_troughs(signal, peaks))
