"""Respiratory rate estimation from photoplethysmogram (PPG) waveforms.

Modules:
    filters     -- Butterworth band-pass pre-filter
    peaks       -- Systolic peak / trough detection
    features    -- RIIV, RIAV, RIFV respiratory series
    resample    -- Irregular-to-uniform interpolation
    spectrum    -- FFT and Welch magnitude spectra, median fusion
    band        -- Respiratory band and band-limited peak search
    config      -- Pipeline parameters (defaults, TOML loading)
    pipeline    -- Named end-to-end pipelines
    evaluation  -- Per-subject scoring, MAE/RMSE/Bland-Altman, sweeps
    dataset     -- Signal and JSONL subject file loading
    synthetic   -- Synthetic PPG with known breathing rate
"""

from ppgresp.errors import RespRateError, InvalidParameter, InsufficientData, EmptyBand
from ppgresp.filters import bandpass
from ppgresp.peaks import detect_peaks, detect_troughs, find_pulses, PulseMarkers
from ppgresp.features import (
    Feature,
    RespiratorySeries,
    extract,
    extract_riiv,
    extract_riav,
    extract_rifv,
)
from ppgresp.resample import resample_uniform, UniformSeries
from ppgresp.spectrum import (
    SpectralMethod,
    Spectrum,
    fft_spectrum,
    welch_spectrum,
    median_spectrum,
)
from ppgresp.band import RespiratoryBand, DEFAULT_BAND, WIDE_BAND, find_respiratory_peak
from ppgresp.config import PipelineConfig
from ppgresp.pipeline import (
    PIPELINES,
    PipelineResult,
    estimate_respiratory_rate,
    run_pipeline,
)
from ppgresp.evaluation import (
    Subject,
    EvaluationRow,
    Metrics,
    compute_metrics,
    evaluate_pipeline,
    hyperparameter_sweep,
)

__all__ = [
    # errors
    "RespRateError",
    "InvalidParameter",
    "InsufficientData",
    "EmptyBand",
    # stages
    "bandpass",
    "detect_peaks",
    "detect_troughs",
    "find_pulses",
    "PulseMarkers",
    "Feature",
    "RespiratorySeries",
    "extract",
    "extract_riiv",
    "extract_riav",
    "extract_rifv",
    "resample_uniform",
    "UniformSeries",
    "SpectralMethod",
    "Spectrum",
    "fft_spectrum",
    "welch_spectrum",
    "median_spectrum",
    "RespiratoryBand",
    "DEFAULT_BAND",
    "WIDE_BAND",
    "find_respiratory_peak",
    # pipelines
    "PipelineConfig",
    "PIPELINES",
    "PipelineResult",
    "estimate_respiratory_rate",
    "run_pipeline",
    # evaluation
    "Subject",
    "EvaluationRow",
    "Metrics",
    "compute_metrics",
    "evaluate_pipeline",
    "hyperparameter_sweep",
]

__version__ = "0.1.0"
