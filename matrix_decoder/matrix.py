"""
Matrix decode engine — recombines the LT/RT spectra into surround spectra.

Every decoded channel is a fixed complex linear combination of the two
input spectra, ``out = c_lt * LT + c_rt * RT``, so each format is fully
described by a table of ``(c_lt, c_rt)`` pairs.

SQ (alpha = 1/sqrt(2))
----------------------
====  ===========================  ==================
Ch    Formula                      (c_lt, c_rt)
====  ===========================  ==================
FL    LT                           (1, 0)
FR    RT                           (0, 1)
BL    -alpha * (RT - j*LT)         (j*alpha, -alpha)
BR    alpha * (LT - j*RT)          (alpha, -j*alpha)
====  ===========================  ==================

QS (alpha = 0.924, beta = 0.383)
--------------------------------
====  ===========================  ==================
Ch    Formula                      (c_lt, c_rt)
====  ===========================  ==================
FL    alpha*LT + beta*RT           (alpha, beta)
FR    beta*RT + alpha*RT           (0, alpha + beta)
BL    j * (beta*RT - alpha*LT)     (-j*alpha, j*beta)
BR    j * (beta*LT - alpha*RT)     (j*beta, -j*alpha)
====  ===========================  ==================

The QS front-right row takes both terms from RT.  That is how existing
QS decodes made with this tool sound, and it is kept until it can be
checked against a reference QS decoder.

5.1 adds, for both formats::

    FC  = 1/sqrt(2) * (LT + RT)
    LFE = 10**-0.5 * (LT + RT + BL + BR)
"""

from __future__ import annotations

import logging

import numpy as np

from .config import (
    CENTER_GAIN,
    CH_BL, CH_BR, CH_FC, CH_FL, CH_FR, CH_LFE,
    LFE_GAIN,
    QS_ALPHA, QS_BETA, SQ_ALPHA,
    DecodeFormat,
    OutputLayout,
)
from .dsp.utils import check_equal_lengths

LOG = logging.getLogger(__name__)

J = 1j

# (c_lt, c_rt) per channel, 4-channel set
COEFFICIENTS: dict[DecodeFormat, dict[str, tuple[complex, complex]]] = {
    DecodeFormat.SQ: {
        CH_FL: (1.0 + 0j, 0j),
        CH_FR: (0j, 1.0 + 0j),
        CH_BL: (J * SQ_ALPHA, complex(-SQ_ALPHA)),
        CH_BR: (complex(SQ_ALPHA), -J * SQ_ALPHA),
    },
    DecodeFormat.QS: {
        CH_FL: (complex(QS_ALPHA), complex(QS_BETA)),
        CH_FR: (0j, complex(QS_BETA + QS_ALPHA)),
        CH_BL: (-J * QS_ALPHA, J * QS_BETA),
        CH_BR: (J * QS_BETA, -J * QS_ALPHA),
    },
}

CENTER_COEFFICIENTS = (complex(CENTER_GAIN), complex(CENTER_GAIN))


def _combine(
    coeffs: tuple[complex, complex], lt: np.ndarray, rt: np.ndarray
) -> np.ndarray:
    c_lt, c_rt = coeffs
    return c_lt * lt + c_rt * rt


def decode_spectra(
    lt: np.ndarray,
    rt: np.ndarray,
    matrix_format: DecodeFormat = DecodeFormat.SQ,
    layout: OutputLayout = OutputLayout.QUAD,
    logger: logging.Logger | None = None,
) -> dict[str, np.ndarray]:
    """Decode two input spectra into the channel spectra of *layout*.

    Parameters
    ----------
    lt, rt : np.ndarray
        Complex half spectra of the left-total / right-total signals.
    matrix_format : DecodeFormat
        SQ or QS coefficient set.
    layout : OutputLayout
        ``QUAD`` → FL, FR, BL, BR.  ``SURROUND_51`` adds FC and an
        *unshaped* LFE; band limiting is the caller's job.
    logger : logging.Logger, optional
        Receives the input/output sizes at DEBUG level.

    Returns
    -------
    dict mapping channel name → complex spectrum, in layout order.

    Raises
    ------
    ChannelLengthError
        If *lt* and *rt* differ in length.  Nothing is decoded.
    """
    log = logger or LOG
    matrix_format = DecodeFormat(matrix_format)
    layout = OutputLayout(layout)
    m = check_equal_lengths(lt, rt)
    log.debug("Matrix decode %s → %s: %d bins in", matrix_format.value, layout.value, m)

    table = COEFFICIENTS[matrix_format]
    spectra = {name: _combine(table[name], lt, rt) for name in (CH_FL, CH_FR, CH_BL, CH_BR)}

    if layout is OutputLayout.SURROUND_51:
        spectra[CH_FC] = _combine(CENTER_COEFFICIENTS, lt, rt)
        spectra[CH_LFE] = LFE_GAIN * (lt + rt + spectra[CH_BL] + spectra[CH_BR])

    out = {name: spectra[name] for name in layout.channel_names}
    log.debug(
        "Matrix decode produced %d channels × %d bins", len(out), m,
    )
    return out


def recombination_matrix(
    matrix_format: DecodeFormat = DecodeFormat.SQ,
    layout: OutputLayout = OutputLayout.QUAD,
) -> np.ndarray:
    """Return the ``(C, 2)`` complex matrix mapping ``[LT, RT]`` to *layout*.

    Rows follow ``layout.channel_names``.  The LFE row is derived from
    the back-channel rows, matching :func:`decode_spectra`.
    """
    layout = OutputLayout(layout)
    table = dict(COEFFICIENTS[DecodeFormat(matrix_format)])
    if layout is OutputLayout.SURROUND_51:
        table[CH_FC] = CENTER_COEFFICIENTS
        bl, br = table[CH_BL], table[CH_BR]
        table[CH_LFE] = (
            LFE_GAIN * (1.0 + bl[0] + br[0]),
            LFE_GAIN * (1.0 + bl[1] + br[1]),
        )
    return np.array(
        [table[name] for name in layout.channel_names], dtype=np.complex128
    )
