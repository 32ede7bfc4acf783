"""Tests for ppgresp.config -- pipeline parameters and TOML loading."""

import dataclasses

import pytest

from ppgresp.band import DEFAULT_BAND, RespiratoryBand
from ppgresp.config import FILTER_HIGH_HZ, FILTER_LOW_HZ, FILTER_ORDER, PipelineConfig
from ppgresp.errors import InvalidParameter


class TestPipelineConfig:
    def test_defaults(self):
        cfg = PipelineConfig()
        assert cfg.filter_low_hz == FILTER_LOW_HZ == 0.5
        assert cfg.filter_high_hz == FILTER_HIGH_HZ == 10.0
        assert cfg.filter_order == FILTER_ORDER == 4
        assert cfg.min_peak_distance_s == 0.25
        assert cfg.resample_rate_hz == 4.0
        assert cfg.band == DEFAULT_BAND

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            PipelineConfig().filter_order = 2

    def test_invalid_band_rejected_at_construction(self):
        with pytest.raises(InvalidParameter):
            PipelineConfig(band_low_hz=0.7, band_high_hz=0.1)

    def test_with_overrides(self):
        cfg = PipelineConfig().with_overrides(band_low_hz=0.05, band_high_hz=0.7)
        assert cfg.band == RespiratoryBand(0.05, 0.7)
        assert cfg.filter_order == 4

    def test_with_overrides_ignores_none(self):
        cfg = PipelineConfig().with_overrides(band_low_hz=None, welch_window_sec=64.0)
        assert cfg.band_low_hz == DEFAULT_BAND.low_hz
        assert cfg.welch_window_sec == 64.0

    def test_unknown_field(self):
        with pytest.raises(InvalidParameter, match="bogus"):
            PipelineConfig().with_overrides(bogus=1)

    def test_dict_round_trip(self):
        cfg = PipelineConfig(welch_overlap=0.25)
        assert PipelineConfig.from_dict(cfg.to_dict()) == cfg


class TestFromToml:
    def test_pipeline_table(self, tmp_path):
        path = tmp_path / "ppgresp.toml"
        path.write_text("[pipeline]\nband_low_hz = 0.1\nfilter_order = 2\n")
        cfg = PipelineConfig.from_toml(path)
        assert cfg.band_low_hz == 0.1
        assert cfg.filter_order == 2

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / "ppgresp.toml"
        path.write_text("resample_rate_hz = 8.0\n")
        assert PipelineConfig.from_toml(path).resample_rate_hz == 8.0

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "ppgresp.toml"
        path.write_text("[pipeline]\nwindow_size = 3\n")
        with pytest.raises(InvalidParameter):
            PipelineConfig.from_toml(path)

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "ppgresp.toml"
        path.write_text("[pipeline\n")
        with pytest.raises(InvalidParameter):
            PipelineConfig.from_toml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PipelineConfig.from_toml(tmp_path / "missing.toml")
