"""
Whole-signal real FFT used by the matrix decoder.

The block length is the full signal length *N*: no windowing and no
overlap.  A real signal of length ``N`` maps to ``N // 2 + 1`` complex
bins (DC up to and including Nyquist), and the inverse maps them back to
exactly ``N`` samples.  The pair uses scipy's default ("backward")
scaling, so ``inverse(forward(x))`` reproduces *x* to floating-point
precision with no extra 1/N factor needed by the caller.

Usage
-----
>>> fft = SpectralTransform(len(signal))
>>> spectrum = fft.forward(signal)
>>> np.allclose(fft.inverse(spectrum), signal)  # True
"""

from __future__ import annotations

import numpy as np
from scipy import fft as sp_fft


class SpectralTransform:
    """Forward / inverse real DFT of a fixed length."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"Transform size must be non-negative, got {size}")
        self.size = size
        self.bins = size // 2 + 1 if size > 0 else 0

    # ------------------------------------------------------------------
    def forward(self, x: np.ndarray) -> np.ndarray:
        """Real samples (length N) → complex spectrum (length N//2 + 1)."""
        if x.shape[0] != self.size:
            raise ValueError(
                f"Expected {self.size} samples, got {x.shape[0]}"
            )
        if self.size == 0:
            return np.zeros(0, dtype=np.complex128)
        return np.asarray(sp_fft.rfft(x.astype(np.float64, copy=False)))

    def inverse(self, spectrum: np.ndarray) -> np.ndarray:
        """Complex spectrum (length N//2 + 1) → real samples (length N)."""
        if spectrum.shape[0] != self.bins:
            raise ValueError(
                f"Expected {self.bins} bins, got {spectrum.shape[0]}"
            )
        if self.size == 0:
            return np.zeros(0, dtype=np.float64)
        return np.asarray(sp_fft.irfft(spectrum, n=self.size))

    # ------------------------------------------------------------------
    def frequencies(self, sample_rate: float) -> np.ndarray:
        """Center frequency of each bin: ``f(i) = i * sample_rate / N``."""
        if self.size == 0:
            return np.zeros(0, dtype=np.float64)
        return np.arange(self.bins, dtype=np.float64) * sample_rate / self.size

    def resolution(self, sample_rate: float) -> float:
        """Bin spacing in Hz (``sample_rate / N``)."""
        if self.size == 0:
            return 0.0
        return sample_rate / self.size
