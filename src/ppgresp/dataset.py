"""Loading recordings from plain files.

Two formats:

- a signal file: one PPG sample per line (text), sampling rate given
  separately;
- a subjects file (JSONL), one recording per line::

    {"subject_id": "bidmc01", "fs": 125, "ppg": [...], "true_rate": 16.2}

  ``"rr": [...]`` (a reference respiratory-rate series, breaths/min) may be
  given instead of ``true_rate``; its mean is used.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from ppgresp.errors import InvalidParameter
from ppgresp.evaluation import Subject

logger = logging.getLogger(__name__)


def load_signal(path: str | Path) -> np.ndarray:
    """Read a one-sample-per-line text file into a float array."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Signal file not found: {path}")
    return np.loadtxt(path, dtype=np.float64, ndmin=1)


def save_signal(path: str | Path, signal: np.ndarray) -> Path:
    """Write *signal* one sample per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(path, np.asarray(signal, dtype=np.float64), fmt="%.8f")
    return path


def _subject_from_entry(entry: dict, line_no: int) -> Subject:
    try:
        subject_id = entry["subject_id"]
        fs = float(entry["fs"])
        ppg = np.asarray(entry["ppg"], dtype=np.float64)
        if "true_rate" in entry:
            true_rate = float(entry["true_rate"])
        elif entry.get("rr"):
            true_rate = float(np.mean(np.asarray(entry["rr"], dtype=np.float64)))
        else:
            true_rate = None
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidParameter(f"line {line_no}: malformed subject entry ({exc})") from exc
    if true_rate is None:
        raise InvalidParameter(f"line {line_no}: needs 'true_rate' or 'rr'")

    return Subject(subject_id=subject_id, ppg=ppg, fs=fs, true_rate=true_rate)


def load_subjects(path: str | Path) -> list[Subject]:
    """Read a JSONL subjects file.

    Raises:
        FileNotFoundError: *path* does not exist.
        InvalidParameter: a line is not valid JSON or misses a field.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Subjects file not found: {path}")

    subjects: list[Subject] = []
    with open(path) as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as exc:
                raise InvalidParameter(f"line {line_no}: invalid JSON ({exc})") from exc
            if not isinstance(entry, dict):
                raise InvalidParameter(f"line {line_no}: expected a JSON object")
            subjects.append(_subject_from_entry(entry, line_no))

    logger.debug("Loaded %d subjects from %s", len(subjects), path)
    return subjects


def save_subjects(path: str | Path, subjects: list[Subject]) -> Path:
    """Write subjects as JSONL (the format :func:`load_subjects` reads)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        for s in subjects:
            entry = {
                "subject_id": s.subject_id,
                "fs": s.fs,
                "ppg": np.asarray(s.ppg).tolist(),
                "true_rate": s.true_rate,
            }
            f.write(json.dumps(entry) + "\n")
    return path
