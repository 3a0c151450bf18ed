"""
Frequency-domain band limiting for the derived LFE channel.

The decoded LFE is a full-band sum of the front and back spectra, so it
has to be restricted to subwoofer range before it is synthesised.  Two
interchangeable policies are provided:

* :class:`ExponentialRolloff` — unity gain up to the cutoff, then
  ``exp(-(f - cutoff) / tau)`` with ``tau = 0.7 * cutoff``.  Smooth, no
  ringing.  This is the default.
* :class:`RectangularCutoff` — zeroes every bin above the cutoff bin.
  Rings audibly in the time domain; kept for comparison with older
  decodes.

Both work in place on a half spectrum of ``N // 2 + 1`` bins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ..config import LFE_CUTOFF_HZ, LFE_ROLLOFF_TAU_RATIO, LfeFilterKind
from .transform import SpectralTransform


class LfeFilter(ABC):
    """Per-bin gain applied to an LFE spectrum."""

    kind: LfeFilterKind

    def __init__(self, cutoff_hz: float = LFE_CUTOFF_HZ) -> None:
        if cutoff_hz <= 0:
            raise ValueError(f"LFE cutoff must be positive, got {cutoff_hz}")
        self.cutoff_hz = float(cutoff_hz)

    @abstractmethod
    def gain(self, fft: SpectralTransform, sample_rate: float) -> np.ndarray:
        """Gain for each bin of *fft*'s half spectrum."""

    def apply(
        self, spectrum: np.ndarray, fft: SpectralTransform, sample_rate: float
    ) -> np.ndarray:
        """Scale *spectrum* in place and return it."""
        if spectrum.size == 0:
            return spectrum
        spectrum *= self.gain(fft, sample_rate)
        return spectrum

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, cutoff_hz={self.cutoff_hz:g})"


class ExponentialRolloff(LfeFilter):
    """Continuous exponential decay above the cutoff."""

    kind = LfeFilterKind.EXPONENTIAL

    def __init__(self, cutoff_hz: float = LFE_CUTOFF_HZ) -> None:
        super().__init__(cutoff_hz)
        self.tau = LFE_ROLLOFF_TAU_RATIO * self.cutoff_hz

    def response(self, freqs: np.ndarray) -> np.ndarray:
        """Gain at arbitrary frequencies (Hz)."""
        freqs = np.asarray(freqs, dtype=np.float64)
        excess = np.maximum(freqs - self.cutoff_hz, 0.0)
        return np.where(freqs > self.cutoff_hz, np.exp(-excess / self.tau), 1.0)

    def gain(self, fft: SpectralTransform, sample_rate: float) -> np.ndarray:
        return self.response(fft.frequencies(sample_rate))


class RectangularCutoff(LfeFilter):
    """Brick-wall cutoff: every bin past the cutoff bin is zeroed."""

    kind = LfeFilterKind.RECTANGULAR

    def cutoff_index(self, fft: SpectralTransform, sample_rate: float) -> int:
        """First zeroed bin: ``int(cutoff / (sample_rate / N)) + 1``."""
        return int(self.cutoff_hz / fft.resolution(sample_rate)) + 1

    def gain(self, fft: SpectralTransform, sample_rate: float) -> np.ndarray:
        g = np.ones(fft.bins, dtype=np.float64)
        if fft.bins:
            g[self.cutoff_index(fft, sample_rate):] = 0.0
        return g


LFE_FILTERS: dict[LfeFilterKind, type[LfeFilter]] = {
    LfeFilterKind.EXPONENTIAL: ExponentialRolloff,
    LfeFilterKind.RECTANGULAR: RectangularCutoff,
}


def make_lfe_filter(
    kind: LfeFilterKind = LfeFilterKind.EXPONENTIAL,
    cutoff_hz: float = LFE_CUTOFF_HZ,
) -> LfeFilter:
    """Create the LFE shaping filter selected by *kind*."""
    return LFE_FILTERS[LfeFilterKind(kind)](cutoff_hz)
