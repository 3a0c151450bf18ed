"""
DSP utility functions: length checks, dB to gain, normalization.
"""

from __future__ import annotations

import numpy as np


class ChannelLengthError(ValueError):
    """Buffers that must be processed together have different lengths."""


# ---------------------------------------------------------------------------
# Length checks
# ---------------------------------------------------------------------------

def check_equal_lengths(*arrays: np.ndarray) -> int:
    """Return the common length of all 1-D *arrays*.

    Raises
    ------
    ChannelLengthError
        If any two arrays differ in length.
    """
    if not arrays:
        return 0
    lengths = [a.shape[0] for a in arrays]
    if any(n != lengths[0] for n in lengths):
        raise ChannelLengthError(
            f"Channel buffers must have the same length, got {lengths}"
        )
    return lengths[0]


# ---------------------------------------------------------------------------
# Gain
# ---------------------------------------------------------------------------

def db_to_linear(db: float) -> float:
    """Convert decibels to linear amplitude."""
    return 10.0 ** (db / 20.0)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def max_abs(*arrays: np.ndarray) -> float:
    """Peak absolute sample value across all *arrays* (0.0 if all empty)."""
    peak = 0.0
    for a in arrays:
        if a.size:
            peak = max(peak, float(np.max(np.abs(a))))
    return peak


def normalize_pair(left: np.ndarray, right: np.ndarray) -> float:
    """Scale a channel pair in place so its shared peak is at most 1.0.

    Both channels are divided by the *same* factor so their relative
    balance is preserved.  Pairs already within range are left untouched.

    Returns
    -------
    float
        The divisor applied (1.0 when nothing was changed).
    """
    check_equal_lengths(left, right)
    peak = max_abs(left, right)
    if peak <= 1.0:
        return 1.0
    left /= peak
    right /= peak
    return peak


def normalize_single(x: np.ndarray) -> float:
    """Scale one channel in place so its peak is at most 1.0.

    Returns the divisor applied (1.0 when nothing was changed).
    """
    peak = max_abs(x)
    if peak <= 1.0:
        return 1.0
    x /= peak
    return peak
