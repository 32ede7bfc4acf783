"""End-to-end respiratory rate pipelines.

Each pipeline chains the same stages and differs only in which derived
series feed the spectrum and how the spectrum is estimated:

1. Band-pass the raw PPG (0.5-10 Hz by default).
2. Detect systolic peaks and the troughs between them.
3. Extract one or more respiratory-induced variation series.
4. Resample each series onto a uniform grid (4 Hz by default).
5. Estimate its spectrum (single FFT or Welch average).
6. Take the strongest bin inside the respiratory band, Hz -> breaths/min.

The ``fusion`` pipeline runs all three extractors, takes the median of their
normalised spectra and searches that once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ppgresp.band import band_confidence, find_respiratory_peak
from ppgresp.config import PipelineConfig
from ppgresp.errors import InvalidParameter
from ppgresp.features import Feature, RespiratorySeries, extract
from ppgresp.filters import bandpass
from ppgresp.peaks import PulseMarkers, find_pulses
from ppgresp.resample import UniformSeries, resample_uniform
from ppgresp.spectrum import SpectralMethod, Spectrum, compute_spectrum, median_spectrum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineSpec:
    """A named combination of derived series and spectral method."""

    name: str
    features: tuple[Feature, ...]
    method: SpectralMethod

    @property
    def is_fusion(self) -> bool:
        return len(self.features) > 1


PIPELINES: dict[str, PipelineSpec] = {
    spec.name: spec
    for spec in (
        PipelineSpec("riav-fft", (Feature.RIAV,), SpectralMethod.FFT),
        PipelineSpec("riiv-welch", (Feature.RIIV,), SpectralMethod.WELCH),
        PipelineSpec("rifv-fft", (Feature.RIFV,), SpectralMethod.FFT),
        PipelineSpec(
            "fusion",
            (Feature.RIIV, Feature.RIAV, Feature.RIFV),
            SpectralMethod.FFT,
        ),
    )
}

DEFAULT_PIPELINE = "riav-fft"


def get_pipeline(pipeline: str | PipelineSpec) -> PipelineSpec:
    """Look up a pipeline by name (specs are passed through)."""
    if isinstance(pipeline, PipelineSpec):
        return pipeline
    try:
        return PIPELINES[pipeline]
    except KeyError:
        known = ", ".join(PIPELINES)
        raise InvalidParameter(f"unknown pipeline {pipeline!r} (known: {known})") from None


@dataclass
class PipelineResult:
    """Estimate plus the intermediate products that produced it."""

    pipeline: str
    rate_bpm: float  # breaths per minute
    confidence: float  # in-band peak share, 0-1
    spectrum: Spectrum
    n_peaks: int

    def __repr__(self) -> str:
        return (
            f"PipelineResult({self.pipeline}: {self.rate_bpm:.1f} breaths/min, "
            f"conf={self.confidence:.2f}, peaks={self.n_peaks})"
        )


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def detect_pulses(
    ppg: np.ndarray,
    fs: float,
    config: PipelineConfig,
) -> tuple[np.ndarray, PulseMarkers]:
    """Filter the raw waveform and locate peaks/troughs in it."""
    filtered = bandpass(
        ppg,
        fs,
        config.filter_low_hz,
        config.filter_high_hz,
        config.filter_order,
    )
    markers = find_pulses(filtered, fs, config.min_peak_distance_s)
    return filtered, markers


def respiratory_series(
    ppg: np.ndarray,
    fs: float,
    feature: Feature | str,
    config: PipelineConfig | None = None,
) -> RespiratorySeries:
    """Raw PPG -> irregular respiratory series for one extraction rule."""
    config = config or PipelineConfig()
    filtered, markers = detect_pulses(ppg, fs, config)
    return extract(feature, filtered, markers.peaks, markers.troughs, fs)


def _spectra(
    uniform: list[UniformSeries],
    method: SpectralMethod,
    config: PipelineConfig,
) -> list[Spectrum]:
    # Series from different extractors have slightly different lengths;
    # zero-pad FFTs to a common length so the bins line up.
    nfft = max(len(u) for u in uniform) if method is SpectralMethod.FFT else None
    return [
        compute_spectrum(
            method,
            u.values,
            u.rate,
            window_sec=config.welch_window_sec,
            overlap=config.welch_overlap,
            window=config.window,
            nfft=nfft,
        )
        for u in uniform
    ]


def run_pipeline(
    ppg: np.ndarray,
    fs: float,
    pipeline: str | PipelineSpec = DEFAULT_PIPELINE,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Run one pipeline on one PPG recording.

    Args:
        ppg: Raw pulse waveform.
        fs: Its sampling rate in Hz.
        pipeline: Pipeline name (see :data:`PIPELINES`) or spec.
        config: Parameters; defaults to :class:`PipelineConfig()`.

    Returns:
        PipelineResult with the rate in breaths/min.

    Raises:
        InvalidParameter, InsufficientData, EmptyBand: passed through from
        the stage that detected the problem.
    """
    spec = get_pipeline(pipeline)
    config = config or PipelineConfig()

    filtered, markers = detect_pulses(ppg, fs, config)
    logger.debug("%s: %d peaks, %d troughs", spec.name, len(markers.peaks), len(markers.troughs))

    uniform: list[UniformSeries] = []
    for feature in spec.features:
        series = extract(feature, filtered, markers.peaks, markers.troughs, fs)
        logger.debug("%s: %s %r", spec.name, feature.value, series)
        uniform.append(resample_uniform(series, config.resample_rate_hz))

    spectra = _spectra(uniform, spec.method, config)
    spectrum = median_spectrum(spectra) if spec.is_fusion else spectra[0]

    band = config.band
    rate = find_respiratory_peak(spectrum, band)
    confidence = band_confidence(spectrum, band)
    logger.debug(
        "%s: peak %.4f Hz -> %.2f breaths/min (conf %.2f)",
        spec.name, rate / 60.0, rate, confidence,
    )
    return PipelineResult(
        pipeline=spec.name,
        rate_bpm=rate,
        confidence=confidence,
        spectrum=spectrum,
        n_peaks=int(len(markers.peaks)),
    )


def estimate_respiratory_rate(
    ppg: np.ndarray,
    fs: float,
    pipeline: str | PipelineSpec = DEFAULT_PIPELINE,
    config: PipelineConfig | None = None,
) -> float:
    """Estimated respiratory rate in breaths per minute."""
    return run_pipeline(ppg, fs, pipeline, config).rate_bpm
