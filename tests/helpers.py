"""Signal and subject builders shared by the test modules."""

from __future__ import annotations

import math

import numpy as np

from ppgresp.evaluation import Subject
from ppgresp.synthetic import synthetic_ppg

FS = 125.0


def sine(freq_hz: float, fs: float, duration_s: float, amplitude: float = 1.0) -> np.ndarray:
    """Plain sinusoid sampled at *fs*."""
    t = np.arange(int(round(duration_s * fs))) / fs
    return amplitude * np.sin(2 * math.pi * freq_hz * t)


def make_subject(
    subject_id: str,
    resp_hz: float = 0.3,
    duration_s: float = 60.0,
    fs: float = FS,
    **kwargs,
) -> Subject:
    """Synthetic subject whose reference rate is exactly ``resp_hz * 60``."""
    ppg = synthetic_ppg(duration_s, fs, resp_hz=resp_hz, **kwargs)
    return Subject(subject_id=subject_id, ppg=ppg, fs=fs, true_rate=resp_hz * 60.0)
