"""Pipeline configuration.

Every tunable lives in :class:`PipelineConfig`; the module-level constants
are the defaults.  A config can be loaded from a TOML file, either at top
level or under a ``[pipeline]`` table::

    [pipeline]
    band_low_hz = 0.133
    band_high_hz = 0.667
    welch_window_sec = 64
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ppgresp.band import DEFAULT_BAND, RespiratoryBand
from ppgresp.errors import InvalidParameter
from ppgresp.peaks import MIN_PEAK_DISTANCE_S
from ppgresp.resample import RESAMPLE_RATE_HZ
from ppgresp.spectrum import TAPER, WELCH_OVERLAP, WELCH_WINDOW_SEC

logger = logging.getLogger(__name__)

# PPG pulse band: keeps the cardiac fundamental and a few harmonics
FILTER_LOW_HZ = 0.5
FILTER_HIGH_HZ = 10.0
FILTER_ORDER = 4


@dataclass(frozen=True)
class PipelineConfig:
    """All fixed parameters of one pipeline run."""

    filter_low_hz: float = FILTER_LOW_HZ
    filter_high_hz: float = FILTER_HIGH_HZ
    filter_order: int = FILTER_ORDER
    min_peak_distance_s: float = MIN_PEAK_DISTANCE_S
    resample_rate_hz: float = RESAMPLE_RATE_HZ
    welch_window_sec: float = WELCH_WINDOW_SEC
    welch_overlap: float = WELCH_OVERLAP
    window: str = TAPER
    band_low_hz: float = DEFAULT_BAND.low_hz
    band_high_hz: float = DEFAULT_BAND.high_hz

    def __post_init__(self) -> None:
        # Fail on a bad band at construction rather than mid-pipeline
        RespiratoryBand(self.band_low_hz, self.band_high_hz)

    @property
    def band(self) -> RespiratoryBand:
        return RespiratoryBand(self.band_low_hz, self.band_high_hz)

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Copy with some fields replaced; ``None`` values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - _field_names()
        if unknown:
            raise InvalidParameter(f"unknown config field(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PipelineConfig:
        return cls().with_overrides(**data)

    @classmethod
    def from_toml(cls, path: str | Path) -> PipelineConfig:
        """Load from a TOML file (``[pipeline]`` table or top-level keys)."""
        path = Path(path)
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise InvalidParameter(f"invalid TOML in {path}: {exc}") from exc
        section = data.get("pipeline", data)
        if not isinstance(section, dict):
            raise InvalidParameter(f"[pipeline] in {path} must be a table")
        logger.debug("Loaded config from %s: %s", path, section)
        return cls.from_dict(section)


def _field_names() -> set[str]:
    return {f.name for f in dataclasses.fields(PipelineConfig)}
