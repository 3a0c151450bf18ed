"""
Configuration constants and decoder settings for the Matrix Quad Decoder.

Channel layouts
  Quadraphonic (4.0):
    Index 0: FL  — Front Left
    Index 1: FR  — Front Right
    Index 2: BL  — Back Left
    Index 3: BR  — Back Right

  Surround 5.1 (SMPTE order):
    Index 0: FL  — Front Left
    Index 1: FR  — Front Right
    Index 2: FC  — Front Center
    Index 3: LFE — Low Frequency Effects
    Index 4: BL  — Back Left  (Ls)
    Index 5: BR  — Back Right (Rs)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from .dsp.utils import db_to_linear

LOG = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Channel constants
# ---------------------------------------------------------------------------
CH_FL, CH_FR, CH_FC, CH_LFE, CH_BL, CH_BR = "FL", "FR", "FC", "LFE", "BL", "BR"

CHANNEL_NAMES_QUAD = [CH_FL, CH_FR, CH_BL, CH_BR]
CHANNEL_NAMES_51 = [CH_FL, CH_FR, CH_FC, CH_LFE, CH_BL, CH_BR]

# Normalization groups: pairs share one scale factor, singles are independent
NORMALIZE_PAIRS = [(CH_FL, CH_FR), (CH_BL, CH_BR)]
NORMALIZE_SINGLES = [CH_FC, CH_LFE]

# ---------------------------------------------------------------------------
# Audio format
# ---------------------------------------------------------------------------
PCM_FULL_SCALE = 32767.0    # int16 max; input samples are divided by this
INPUT_CHANNELS = 2
SUBTYPE_WAV = "PCM_16"      # soundfile subtype string, input and output

# ---------------------------------------------------------------------------
# Matrix coefficients
# ---------------------------------------------------------------------------
SQ_ALPHA = 1.0 / math.sqrt(2.0)
QS_ALPHA = 0.924
QS_BETA = 0.383

CENTER_GAIN = 1.0 / math.sqrt(2.0)      # same for SQ and QS
LFE_GAIN = db_to_linear(-10.0)

# ---------------------------------------------------------------------------
# LFE shaping
# ---------------------------------------------------------------------------
LFE_CUTOFF_HZ = 150.0
LFE_ROLLOFF_TAU_RATIO = 0.7     # tau = ratio * cutoff for the exponential roll-off

# ---------------------------------------------------------------------------
# Output files
# ---------------------------------------------------------------------------
OUTPUT_PREFIX_FRONT = "output_front_"
OUTPUT_PREFIX_BACK = "output_back_"
OUTPUT_PREFIX_QUAD = "output_quad_"
OUTPUT_PREFIX_51 = "output_51_"


class DecodeFormat(str, Enum):
    """Matrix encoding convention of the input."""
    SQ = "SQ"
    QS = "QS"


class OutputLayout(str, Enum):
    """Decoded channel set."""
    QUAD = "4.0"
    SURROUND_51 = "5.1"

    @property
    def channel_names(self) -> list[str]:
        if self is OutputLayout.SURROUND_51:
            return list(CHANNEL_NAMES_51)
        return list(CHANNEL_NAMES_QUAD)


class OutputMode(str, Enum):
    """How decoded channels are persisted."""
    PAIRS = "pairs"         # two stereo files, front and back
    QUAD = "4.0"            # one 4-channel file
    SURROUND_51 = "5.1"     # one 6-channel file

    @property
    def layout(self) -> OutputLayout:
        if self is OutputMode.SURROUND_51:
            return OutputLayout.SURROUND_51
        return OutputLayout.QUAD


class LfeFilterKind(str, Enum):
    """Shaping policy for the derived LFE spectrum."""
    EXPONENTIAL = "exponential"
    RECTANGULAR = "rectangular"


@dataclass
class DecoderConfig:
    """Decode parameters for one run."""
    matrix_format: DecodeFormat = DecodeFormat.SQ
    layout: OutputLayout = OutputLayout.QUAD
    lfe_filter: LfeFilterKind = LfeFilterKind.EXPONENTIAL
    lfe_cutoff_hz: float = LFE_CUTOFF_HZ
    workers: int = 1        # > 1 runs the transforms on a thread pool


# ---------------------------------------------------------------------------
# Permissive parsing: unknown values fall back to the defaults
# ---------------------------------------------------------------------------

def parse_matrix_format(value: str | None) -> DecodeFormat:
    """Map a user string to a :class:`DecodeFormat`, defaulting to SQ."""
    if value:
        normalized = value.strip().upper()
        for fmt in DecodeFormat:
            if fmt.value == normalized:
                return fmt
        LOG.warning("Unknown matrix format '%s', using SQ.", value)
    return DecodeFormat.SQ


def parse_output_mode(value: str | None) -> OutputMode:
    """Map ``-audioformat`` to an :class:`OutputMode`.

    Only ``4.0`` and ``5.1`` are recognised; anything else (including no
    value) keeps the legacy front/back stereo file pair.
    """
    if value:
        normalized = value.strip()
        if normalized == OutputMode.QUAD.value:
            return OutputMode.QUAD
        if normalized == OutputMode.SURROUND_51.value:
            return OutputMode.SURROUND_51
        LOG.warning("Unknown audio format '%s', writing front/back stereo pairs.", value)
    return OutputMode.PAIRS


def parse_lfe_filter(value: str | None) -> LfeFilterKind:
    """Map a user string to an :class:`LfeFilterKind`, defaulting to exponential."""
    if value:
        normalized = value.strip().lower()
        for kind in LfeFilterKind:
            if kind.value == normalized:
                return kind
        LOG.warning("Unknown LFE filter '%s', using exponential roll-off.", value)
    return LfeFilterKind.EXPONENTIAL
