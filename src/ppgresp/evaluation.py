"""Score pipelines against reference respiratory rates across subjects.

Subjects are independent, so results are keyed by subject id.  A subject
whose pipeline raises is recorded as failed with the error message; no
substitute estimate is ever filled in.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Hashable, Iterable, Sequence

import numpy as np

from ppgresp.config import PipelineConfig
from ppgresp.errors import InsufficientData, InvalidParameter, RespRateError
from ppgresp.pipeline import DEFAULT_PIPELINE, PipelineSpec, estimate_respiratory_rate, get_pipeline

logger = logging.getLogger(__name__)

# Bland-Altman 95% limits of agreement
LOA_Z = 1.96


@dataclass
class Subject:
    """One recording with its reference rate."""

    subject_id: Hashable
    ppg: np.ndarray
    fs: float
    true_rate: float  # breaths per minute

    def __repr__(self) -> str:
        return (
            f"Subject({self.subject_id!r}, {len(self.ppg)} samples @ {self.fs:g} Hz, "
            f"true={self.true_rate:.1f})"
        )


@dataclass
class EvaluationRow:
    subject_id: Hashable
    predicted_rate: float
    true_rate: float
    absolute_error: float


@dataclass
class Metrics:
    """Agreement between predicted and reference rates."""

    n: int
    mae: float
    rmse: float
    correlation: float | None  # Pearson r; None when undefined
    bias: float  # mean(predicted - true)
    loa_lower: float
    loa_upper: float

    def __repr__(self) -> str:
        r = "n/a" if self.correlation is None else f"{self.correlation:.2f}"
        return (
            f"Metrics(n={self.n}, MAE={self.mae:.2f}, RMSE={self.rmse:.2f}, "
            f"r={r}, bias={self.bias:+.2f} [{self.loa_lower:+.2f}, {self.loa_upper:+.2f}])"
        )


@dataclass
class EvaluationReport:
    pipeline: str
    rows: list[EvaluationRow] = field(default_factory=list)
    failures: dict[Hashable, str] = field(default_factory=dict)

    @property
    def metrics(self) -> Metrics | None:
        return compute_metrics(self.rows) if self.rows else None

    def to_dict(self) -> dict[str, Any]:
        metrics = self.metrics
        return {
            "pipeline": self.pipeline,
            "rows": [asdict(r) for r in self.rows],
            "failures": {str(k): v for k, v in self.failures.items()},
            "metrics": asdict(metrics) if metrics is not None else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def compute_metrics(rows: Sequence[EvaluationRow]) -> Metrics:
    """MAE, RMSE, Pearson r and Bland-Altman bias / limits of agreement.

    Raises:
        InsufficientData: *rows* is empty.
    """
    if not rows:
        raise InsufficientData("no evaluation rows to score")

    pred = np.asarray([r.predicted_rate for r in rows], dtype=np.float64)
    true = np.asarray([r.true_rate for r in rows], dtype=np.float64)
    diff = pred - true

    correlation: float | None = None
    if len(rows) >= 2 and np.std(pred) > 0 and np.std(true) > 0:
        correlation = float(np.corrcoef(pred, true)[0, 1])

    bias = float(np.mean(diff))
    sd = float(np.std(diff, ddof=1)) if len(rows) >= 2 else 0.0

    return Metrics(
        n=len(rows),
        mae=float(np.mean(np.abs(diff))),
        rmse=float(math.sqrt(np.mean(diff ** 2))),
        correlation=correlation,
        bias=bias,
        loa_lower=bias - LOA_Z * sd,
        loa_upper=bias + LOA_Z * sd,
    )


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _id_key(subject_id: Hashable) -> tuple:
    # Ids of different types (1 vs "1") still sort, grouped by type.
    return (type(subject_id).__name__, subject_id)


def evaluate_pipeline(
    subjects: Iterable[Subject],
    pipeline: str | PipelineSpec = DEFAULT_PIPELINE,
    config: PipelineConfig | None = None,
) -> EvaluationReport:
    """Run *pipeline* on every subject and compare with its reference rate.

    Rows and failures are ordered by subject id, whatever order the subjects
    arrive in.  Subject ids must be unique.
    """
    spec = get_pipeline(pipeline)
    config = config or PipelineConfig()
    report = EvaluationReport(pipeline=spec.name)
    seen: set[Hashable] = set()

    for subject in subjects:
        if subject.subject_id in seen:
            raise InvalidParameter(f"duplicate subject id {subject.subject_id!r}")
        seen.add(subject.subject_id)

        try:
            predicted = estimate_respiratory_rate(subject.ppg, subject.fs, spec, config)
        except RespRateError as exc:
            logger.debug("%s: subject %r failed: %s", spec.name, subject.subject_id, exc)
            report.failures[subject.subject_id] = f"{type(exc).__name__}: {exc}"
            continue

        report.rows.append(
            EvaluationRow(
                subject_id=subject.subject_id,
                predicted_rate=predicted,
                true_rate=subject.true_rate,
                absolute_error=abs(predicted - subject.true_rate),
            )
        )

    report.rows.sort(key=lambda row: _id_key(row.subject_id))
    report.failures = dict(sorted(report.failures.items(), key=lambda item: _id_key(item[0])))
    logger.debug(
        "%s: %d scored, %d failed", spec.name, len(report.rows), len(report.failures)
    )
    return report


@dataclass
class SweepPoint:
    value: Any
    metrics: Metrics | None  # None when every subject failed
    n_failed: int


def hyperparameter_sweep(
    subjects: Sequence[Subject],
    param: str,
    values: Iterable[Any],
    pipeline: str | PipelineSpec = DEFAULT_PIPELINE,
    config: PipelineConfig | None = None,
) -> list[SweepPoint]:
    """Evaluate *pipeline* once per value of config field *param*.

    Example: ``hyperparameter_sweep(subjects, "welch_window_sec",
    [16, 32, 64, 128], "riiv-welch")``.
    """
    base = config or PipelineConfig()
    points: list[SweepPoint] = []
    for value in values:
        cfg = base.with_overrides(**{param: value})
        report = evaluate_pipeline(subjects, pipeline, cfg)
        points.append(SweepPoint(value=value, metrics=report.metrics, n_failed=len(report.failures)))
    return points
