"""Shared fixtures for the ppgresp test suite."""

from __future__ import annotations

import numpy as np
import pytest

from ppgresp.synthetic import synthetic_ppg
from tests.helpers import FS


@pytest.fixture
def am_ppg() -> np.ndarray:
    """60 s at 125 Hz: 72 beats/min pulse, 18 breaths/min amplitude modulation."""
    return synthetic_ppg(60.0, FS, heart_hz=1.2, resp_hz=0.3, am_depth=0.1)


@pytest.fixture
def fm_ppg() -> np.ndarray:
    """120 s at 125 Hz with 18 breaths/min pulse-rate modulation only."""
    return synthetic_ppg(120.0, FS, heart_hz=1.2, resp_hz=0.3, am_depth=0.0, fm_depth=0.05)
