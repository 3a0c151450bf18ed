"""
Shared pytest fixtures for the matrix decoder tests.

Provides synthetic LT/RT signals, WAV fixture writers and hypothesis
strategies for sample buffers.
"""

import numpy as np
import pytest
import soundfile as sf
from hypothesis import strategies as st
from hypothesis.extra import numpy as hnp

SAMPLE_RATE = 44_100


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise_pair(rng):
    """A quarter second of independent uniform noise in [-0.5, 0.5]."""
    n = SAMPLE_RATE // 4
    lt = rng.uniform(-0.5, 0.5, n)
    rt = rng.uniform(-0.5, 0.5, n)
    return lt, rt


@pytest.fixture
def write_stereo(tmp_path):
    """Factory writing a 16-bit stereo WAV and returning its path."""

    def _write(name, lt, rt, sample_rate=SAMPLE_RATE, subtype="PCM_16"):
        path = tmp_path / name
        data = np.column_stack([lt, rt])
        sf.write(str(path), data, sample_rate, subtype=subtype)
        return path

    return _write


def tone(freq_hz, n, sample_rate=SAMPLE_RATE, amplitude=0.5):
    t = np.arange(n) / sample_rate
    return amplitude * np.sin(2.0 * np.pi * freq_hz * t)


@st.composite
def sample_buffers(draw, min_size=1, max_size=256, bound=8.0):
    """A single finite float64 buffer, possibly exceeding unit range."""
    size = draw(st.integers(min_value=min_size, max_value=max_size))
    return draw(
        hnp.arrays(
            np.float64,
            size,
            elements=st.floats(
                min_value=-bound, max_value=bound,
                allow_nan=False, allow_infinity=False,
            ),
        )
    )


@st.composite
def buffer_pairs(draw, min_size=1, max_size=256, bound=8.0):
    """Two equal-length finite float64 buffers."""
    size = draw(st.integers(min_value=min_size, max_value=max_size))
    elements = st.floats(
        min_value=-bound, max_value=bound, allow_nan=False, allow_infinity=False,
    )
    left = draw(hnp.arrays(np.float64, size, elements=elements))
    right = draw(hnp.arrays(np.float64, size, elements=elements))
    return left, right
