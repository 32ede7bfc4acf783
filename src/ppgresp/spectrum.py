"""One-sided magnitude spectra of uniformly sampled respiratory series."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np
from scipy import signal as sig

from ppgresp.errors import InsufficientData, InvalidParameter

WELCH_WINDOW_SEC = 32.0
WELCH_OVERLAP = 0.5
TAPER = "hann"


class SpectralMethod(str, Enum):
    FFT = "fft"
    WELCH = "welch"


@dataclass
class Spectrum:
    """``power[k]`` is the magnitude at ``freqs[k]`` Hz, up to Nyquist."""

    freqs: np.ndarray
    power: np.ndarray

    @property
    def resolution(self) -> float:
        """Bin spacing in Hz."""
        if self.freqs.size < 2:
            return 0.0
        return float(self.freqs[1] - self.freqs[0])

    def __len__(self) -> int:
        return int(self.freqs.size)

    def __repr__(self) -> str:
        return f"Spectrum(bins={len(self)}, resolution={self.resolution:.4f} Hz)"


def _check_input(x: np.ndarray, fs: float) -> None:
    if fs <= 0:
        raise InvalidParameter(f"sampling rate must be positive, got {fs}")
    if x.size < 2:
        raise InsufficientData(f"need at least 2 samples for a spectrum, got {x.size}")


def _magnitude(segment: np.ndarray, nfft: int, window: str) -> np.ndarray:
    seg = segment - segment.mean()
    try:
        taper = sig.get_window(window, seg.size)
    except ValueError as exc:
        raise InvalidParameter(f"unknown window {window!r}: {exc}") from None
    return np.abs(np.fft.rfft(seg * taper, n=nfft))


def fft_spectrum(
    signal: np.ndarray,
    fs: float,
    window: str = TAPER,
    nfft: int | None = None,
) -> Spectrum:
    """Single tapered FFT of the whole signal.

    Args:
        signal: Uniformly sampled series.
        fs: Its sampling rate in Hz.
        window: Any ``scipy.signal.get_window`` name (``"boxcar"`` for none).
        nfft: Transform length; the signal is zero-padded up to it.  Spectra
            computed with the same *nfft* and *fs* share a frequency grid.
    """
    x = np.asarray(signal, dtype=np.float64)
    _check_input(x, fs)
    n = x.size if nfft is None else int(nfft)
    if n < x.size:
        raise InvalidParameter(f"nfft ({n}) shorter than the signal ({x.size})")

    return Spectrum(
        freqs=np.fft.rfftfreq(n, d=1.0 / fs),
        power=_magnitude(x, n, window),
    )


def welch_spectrum(
    signal: np.ndarray,
    fs: float,
    window_sec: float = WELCH_WINDOW_SEC,
    overlap: float = WELCH_OVERLAP,
    window: str = TAPER,
) -> Spectrum:
    """Averaged magnitude spectrum over overlapping segments (Welch).

    Each segment is ``round(window_sec * fs)`` samples long and consecutive
    segments share an *overlap* fraction of their samples.  The per-segment
    magnitude spectra are averaged bin by bin.  A signal shorter than one
    segment is treated as a single zero-padded segment, so the frequency grid
    only depends on *window_sec* and *fs*.
    """
    x = np.asarray(signal, dtype=np.float64)
    _check_input(x, fs)
    if window_sec <= 0:
        raise InvalidParameter(f"window length must be positive, got {window_sec}")
    if not 0.0 <= overlap < 1.0:
        raise InvalidParameter(f"overlap must be in [0, 1), got {overlap}")

    nperseg = int(round(window_sec * fs))
    if nperseg < 2:
        raise InvalidParameter(
            f"window of {window_sec}s at {fs} Hz is shorter than 2 samples"
        )
    freqs = np.fft.rfftfreq(nperseg, d=1.0 / fs)

    if x.size <= nperseg:
        return Spectrum(freqs=freqs, power=_magnitude(x, nperseg, window))

    step = max(nperseg - int(nperseg * overlap), 1)
    segments = np.lib.stride_tricks.sliding_window_view(x, nperseg)[::step]
    power = np.mean([_magnitude(seg, nperseg, window) for seg in segments], axis=0)
    return Spectrum(freqs=freqs, power=power)


def compute_spectrum(
    method: SpectralMethod | str,
    signal: np.ndarray,
    fs: float,
    window_sec: float = WELCH_WINDOW_SEC,
    overlap: float = WELCH_OVERLAP,
    window: str = TAPER,
    nfft: int | None = None,
) -> Spectrum:
    """Dispatch to :func:`fft_spectrum` or :func:`welch_spectrum`.

    *nfft* only applies to the FFT method; *window_sec* and *overlap* only
    to Welch.
    """
    try:
        method = SpectralMethod(method)
    except ValueError:
        raise InvalidParameter(f"unknown spectral method {method!r}") from None
    if method is SpectralMethod.WELCH:
        return welch_spectrum(signal, fs, window_sec, overlap, window)
    return fft_spectrum(signal, fs, window, nfft)


def median_spectrum(spectra: Sequence[Spectrum]) -> Spectrum:
    """Element-wise median of spectra that share one frequency grid.

    Each spectrum is scaled to a unit peak first.  The derived series live on
    very different scales (beats/min vs. raw amplitude); unscaled, the median
    of every bin would simply be the middle-scaled spectrum.
    """
    if not spectra:
        raise InsufficientData("no spectra to combine")
    freqs = spectra[0].freqs
    for s in spectra[1:]:
        if s.freqs.shape != freqs.shape or not np.allclose(s.freqs, freqs):
            raise InvalidParameter("spectra must share the same frequency grid")

    scaled = []
    for s in spectra:
        peak = float(np.max(s.power)) if s.power.size else 0.0
        scaled.append(s.power / peak if peak > 0 else s.power)
    return Spectrum(freqs=freqs.copy(), power=np.median(np.vstack(scaled), axis=0))
