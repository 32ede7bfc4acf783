"""Tests for ppgresp.dataset -- signal and JSONL subject files."""

import json
from pathlib import Path

import numpy as np
import pytest

from ppgresp.dataset import load_signal, load_subjects, save_signal, save_subjects
from ppgresp.errors import InvalidParameter
from tests.helpers import make_subject


def write_jsonl(path: Path, entries: list) -> Path:
    with open(path, "w") as f:
        for entry in entries:
            f.write((entry if isinstance(entry, str) else json.dumps(entry)) + "\n")
    return path


class TestSignalFiles:
    def test_round_trip(self, tmp_path):
        x = np.sin(np.linspace(0, 10, 250))
        path = save_signal(tmp_path / "sub" / "ppg.txt", x)
        assert path.exists()
        assert np.allclose(load_signal(path), x, atol=1e-7)

    def test_single_sample(self, tmp_path):
        path = tmp_path / "one.txt"
        path.write_text("0.5\n")
        assert load_signal(path).tolist() == [0.5]

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_signal(tmp_path / "missing.txt")


class TestLoadSubjects:
    def test_true_rate(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [
            {"subject_id": "a", "fs": 125, "ppg": [0.0, 1.0, 0.0], "true_rate": 16.5},
        ])
        (s,) = load_subjects(path)
        assert s.subject_id == "a"
        assert s.fs == 125.0
        assert s.ppg.tolist() == [0.0, 1.0, 0.0]
        assert s.true_rate == 16.5

    def test_reference_series_mean(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [
            {"subject_id": 3, "fs": 125, "ppg": [0.0], "rr": [14.0, 16.0, 18.0]},
        ])
        assert load_subjects(path)[0].true_rate == pytest.approx(16.0)

    def test_blank_lines_skipped(self, tmp_path):
        entry = {"subject_id": "a", "fs": 125, "ppg": [0.0], "true_rate": 12}
        path = write_jsonl(tmp_path / "s.jsonl", [entry, "", dict(entry, subject_id="b")])
        assert [s.subject_id for s in load_subjects(path)] == ["a", "b"]

    def test_invalid_json_names_line(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [
            {"subject_id": "a", "fs": 125, "ppg": [0.0], "true_rate": 12},
            "{not json",
        ])
        with pytest.raises(InvalidParameter, match="line 2"):
            load_subjects(path)

    def test_missing_field(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [{"subject_id": "a", "ppg": [0.0], "true_rate": 12}])
        with pytest.raises(InvalidParameter, match="line 1"):
            load_subjects(path)

    def test_missing_reference(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [{"subject_id": "a", "fs": 125, "ppg": [0.0]}])
        with pytest.raises(InvalidParameter, match="true_rate"):
            load_subjects(path)

    def test_null_true_rate(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [
            {"subject_id": "a", "fs": 125, "ppg": [0.0, 1.0], "true_rate": None},
        ])
        with pytest.raises(InvalidParameter, match="line 1"):
            load_subjects(path)

    def test_non_numeric_reference_series(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", [
            {"subject_id": "a", "fs": 125, "ppg": [0.0, 1.0], "true_rate": 12},
            {"subject_id": "b", "fs": 125, "ppg": [0.0, 1.0], "rr": ["x"]},
        ])
        with pytest.raises(InvalidParameter, match="line 2"):
            load_subjects(path)

    def test_not_an_object(self, tmp_path):
        path = write_jsonl(tmp_path / "s.jsonl", ["[1, 2, 3]"])
        with pytest.raises(InvalidParameter):
            load_subjects(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_subjects(tmp_path / "missing.jsonl")

    def test_save_then_load(self, tmp_path):
        subjects = [make_subject("x", duration_s=2.0), make_subject("y", resp_hz=0.2, duration_s=2.0)]
        loaded = load_subjects(save_subjects(tmp_path / "subjects.jsonl", subjects))
        assert [s.subject_id for s in loaded] == ["x", "y"]
        assert loaded[1].true_rate == pytest.approx(12.0)
        assert np.allclose(loaded[0].ppg, subjects[0].ppg)
