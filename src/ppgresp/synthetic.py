"""Synthetic PPG waveforms with known respiratory modulation.

Used by the test-suite and the ``synth`` CLI command to produce recordings
whose breathing rate is known exactly.
"""

from __future__ import annotations

import math

import numpy as np

from ppgresp.errors import InvalidParameter

# Default baseline-wander frequency, below the 8 breaths/min band edge
BASELINE_HZ = 0.08


def synthetic_ppg(
    duration_s: float,
    fs: float,
    heart_hz: float = 1.2,
    resp_hz: float = 0.3,
    am_depth: float = 0.1,
    fm_depth: float = 0.0,
    baseline_depth: float = 0.0,
    baseline_hz: float = BASELINE_HZ,
    amplitude: float = 1.0,
    noise_std: float = 0.0,
    seed: int | None = None,
) -> np.ndarray:
    """Build ``amplitude * (1 + am * sin(2 pi f_r t)) * sin(phase(t))``.

    Args:
        duration_s: Length in seconds.
        fs: Sampling rate in Hz.
        heart_hz: Mean pulse frequency (1.2 Hz = 72 beats/min).
        resp_hz: Breathing frequency (0.3 Hz = 18 breaths/min).
        am_depth: Relative amplitude modulation by breathing (RIAV).
        fm_depth: Relative pulse-frequency modulation by breathing (RIFV);
            the instantaneous pulse frequency is
            ``heart_hz * (1 + fm_depth * sin(2 pi f_r t))``.
        baseline_depth: Additive baseline wander amplitude (RIIV / drift).
        baseline_hz: Baseline wander frequency.
        amplitude: Pulse amplitude.
        noise_std: Standard deviation of additive Gaussian noise.
        seed: Seed for the noise generator.
    """
    if duration_s <= 0 or fs <= 0:
        raise InvalidParameter("duration and sampling rate must be positive")
    if heart_hz <= 0 or resp_hz <= 0:
        raise InvalidParameter("heart and respiratory frequencies must be positive")

    t = np.arange(int(round(duration_s * fs))) / fs
    breath = np.sin(2 * math.pi * resp_hz * t)

    # Integral of the modulated instantaneous frequency
    phase = 2 * math.pi * heart_hz * t
    if fm_depth:
        phase -= (heart_hz * fm_depth / resp_hz) * (np.cos(2 * math.pi * resp_hz * t) - 1.0)

    ppg = amplitude * (1.0 + am_depth * breath) * np.sin(phase)
    if baseline_depth:
        ppg = ppg + baseline_depth * np.sin(2 * math.pi * baseline_hz * t)
    if noise_std > 0:
        rng = np.random.default_rng(seed)
        ppg = ppg + rng.normal(0.0, noise_std, size=t.size)
    return ppg
