"""Tests for ppgresp.filters -- Butterworth band-pass pre-filter."""

import math

import numpy as np
import pytest

from ppgresp.errors import InsufficientData, InvalidParameter
from ppgresp.filters import bandpass
from tests.helpers import FS, sine


def _bin_magnitude(x: np.ndarray, fs: float, freq_hz: float) -> float:
    mag = np.abs(np.fft.rfft(x))
    freqs = np.fft.rfftfreq(x.size, d=1.0 / fs)
    return float(mag[int(np.argmin(np.abs(freqs - freq_hz)))])


class TestBandpass:
    def test_same_length(self):
        x = sine(1.2, FS, 10.0)
        assert bandpass(x, FS, 0.5, 10.0).shape == x.shape

    def test_suppresses_out_of_band_by_20db(self):
        # 1.2 Hz and 30 Hz both complete whole cycles in 60 s -> exact bins
        in_band = sine(1.2, FS, 60.0)
        out_band = sine(30.0, FS, 60.0)
        filtered = bandpass(in_band + out_band, FS, 0.5, 10.0, order=4)

        ratio_db = 20 * math.log10(
            _bin_magnitude(filtered, FS, 30.0) / _bin_magnitude(filtered, FS, 1.2)
        )
        assert ratio_db < -20.0

    def test_preserves_in_band(self):
        x = sine(1.2, FS, 60.0)
        filtered = bandpass(x, FS, 0.5, 10.0)
        ratio = _bin_magnitude(filtered, FS, 1.2) / _bin_magnitude(x, FS, 1.2)
        assert 0.95 < ratio < 1.05

    def test_zero_phase(self):
        # Forward-backward filtering leaves the peak positions in place
        x = sine(1.2, FS, 20.0)
        filtered = bandpass(x, FS, 0.5, 10.0)
        mid = slice(500, 2000)
        assert np.corrcoef(x[mid], filtered[mid])[0, 1] > 0.99

    def test_too_short(self):
        with pytest.raises(InsufficientData):
            bandpass(np.zeros(10), FS, 0.5, 10.0)

    @pytest.mark.parametrize(
        "low, high",
        [
            (10.0, 0.5),   # inverted
            (2.0, 2.0),    # empty
            (0.0, 10.0),   # non-positive
            (-1.0, 10.0),
            (0.5, 62.5),   # at Nyquist
            (0.5, 70.0),   # above Nyquist
        ],
    )
    def test_invalid_cutoffs(self, low, high):
        with pytest.raises(InvalidParameter):
            bandpass(sine(1.2, FS, 10.0), FS, low, high)

    @pytest.mark.parametrize("order", [0, -2, 4.5])
    def test_invalid_order(self, order):
        with pytest.raises(InvalidParameter):
            bandpass(sine(1.2, FS, 10.0), FS, 0.5, 10.0, order=order)

    def test_integral_float_order(self):
        x = sine(1.2, FS, 10.0)
        assert np.allclose(bandpass(x, FS, 0.5, 10.0, order=4.0), bandpass(x, FS, 0.5, 10.0, order=4))

    def test_invalid_sampling_rate(self):
        with pytest.raises(InvalidParameter):
            bandpass(sine(1.2, FS, 10.0), 0.0, 0.5, 10.0)
