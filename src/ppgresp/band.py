"""Band-limited spectral peak search.

The band is not cosmetic: residual baseline drift sits around 0.05-0.13 Hz
and, with a band that reaches down there, routinely beats the true breathing
peak.  Restricting the search to 0.133-0.667 Hz (8-40 breaths/min) cut the
mean error on BIDMC from ~41% to ~10%.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ppgresp.errors import EmptyBand, InvalidParameter
from ppgresp.spectrum import Spectrum


@dataclass(frozen=True)
class RespiratoryBand:
    """Plausible breathing frequency range, in Hz."""

    low_hz: float
    high_hz: float

    def __post_init__(self) -> None:
        if self.low_hz <= 0 or self.high_hz <= 0:
            raise InvalidParameter(
                f"band limits must be positive, got {self.low_hz}-{self.high_hz} Hz"
            )
        if self.low_hz >= self.high_hz:
            raise InvalidParameter(
                f"band is inverted: {self.low_hz}-{self.high_hz} Hz"
            )

    @property
    def low_bpm(self) -> float:
        return self.low_hz * 60.0

    @property
    def high_bpm(self) -> float:
        return self.high_hz * 60.0

    def mask(self, freqs: np.ndarray) -> np.ndarray:
        f = np.asarray(freqs, dtype=np.float64)
        return (f >= self.low_hz) & (f <= self.high_hz)

    def __repr__(self) -> str:
        return (
            f"RespiratoryBand({self.low_hz:g}-{self.high_hz:g} Hz, "
            f"{self.low_bpm:.0f}-{self.high_bpm:.0f} breaths/min)"
        )


# 8-40 breaths/min
DEFAULT_BAND = RespiratoryBand(0.133, 0.667)
# 3-42 breaths/min; lets baseline drift through
WIDE_BAND = RespiratoryBand(0.05, 0.7)


def _in_band(spectrum: Spectrum, band: RespiratoryBand) -> tuple[np.ndarray, np.ndarray]:
    mask = band.mask(spectrum.freqs)
    if not np.any(mask):
        raise EmptyBand(
            f"no spectral bin inside {band!r} "
            f"(resolution {spectrum.resolution:.4f} Hz, {len(spectrum)} bins)"
        )
    return spectrum.freqs[mask], spectrum.power[mask]


def find_respiratory_peak(spectrum: Spectrum, band: RespiratoryBand = DEFAULT_BAND) -> float:
    """Frequency of maximum power inside *band*, in breaths per minute.

    Ties go to the lowest frequency.

    Raises:
        EmptyBand: no bin of *spectrum* lies inside *band*.
    """
    freqs, power = _in_band(spectrum, band)
    # argmax returns the first (lowest-frequency) maximum
    peak_freq = float(freqs[int(np.argmax(power))])
    return peak_freq * 60.0


def band_confidence(spectrum: Spectrum, band: RespiratoryBand = DEFAULT_BAND) -> float:
    """Ratio of the in-band peak power to total in-band power (0-1)."""
    _, power = _in_band(spectrum, band)
    total = float(np.sum(power))
    if total <= 0:
        return 0.0
    return round(min(float(np.max(power)) / total, 1.0), 3)
