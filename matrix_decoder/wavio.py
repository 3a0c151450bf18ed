"""
WAV input / output for the matrix decoder.

Input must be interleaved 16-bit PCM with exactly two channels (the
LT/RT matrix pair).  Output is always 16-bit PCM, written as:

  1. two stereo files, ``output_front_<name>.wav`` (FL, FR) and
     ``output_back_<name>.wav`` (BL, BR) — the default
  2. one 4-channel file, ``output_quad_<name>.wav`` (FL, FR, BL, BR)
  3. one 6-channel file, ``output_51_<name>.wav`` (FL, FR, FC, LFE, BL, BR)

RIFF / fmt / data header fields are computed by libsndfile from the
frame and channel count.
"""

from __future__ import annotations

import logging
import os
from typing import NamedTuple

import numpy as np
import soundfile as sf

from .config import (
    CH_BL, CH_BR, CH_FL, CH_FR,
    INPUT_CHANNELS,
    OUTPUT_PREFIX_51,
    OUTPUT_PREFIX_BACK,
    OUTPUT_PREFIX_FRONT,
    OUTPUT_PREFIX_QUAD,
    PCM_FULL_SCALE,
    SUBTYPE_WAV,
    OutputLayout,
    OutputMode,
)
from .decoder import DecodedChannels
from .dsp.utils import check_equal_lengths

LOG = logging.getLogger(__name__)


class WavFormatError(ValueError):
    """The input file is not 2-channel 16-bit PCM."""


class StereoInput(NamedTuple):
    """LT/RT sample buffers read from a WAV file."""
    lt: np.ndarray    # (N,) float64
    rt: np.ndarray    # (N,) float64
    sample_rate: int


def base_name(path: str) -> str:
    """File name of *path* without directory and extension."""
    return os.path.splitext(os.path.basename(path))[0]


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_stereo_wav(path: str) -> StereoInput:
    """Read a 2-channel 16-bit PCM WAV into two float buffers.

    Samples are scaled by ``1 / 32767``.

    Raises
    ------
    WavFormatError
        If the file is not 2-channel ``PCM_16``.
    OSError, soundfile.LibsndfileError
        If the file cannot be opened or read.
    """
    info = sf.info(path)
    if info.channels != INPUT_CHANNELS:
        raise WavFormatError(
            f"{path}: expected {INPUT_CHANNELS} channels, got {info.channels}"
        )
    if info.subtype != SUBTYPE_WAV:
        raise WavFormatError(
            f"{path}: expected {SUBTYPE_WAV} samples, got {info.subtype}"
        )

    data, sr = sf.read(path, dtype="int16", always_2d=True)
    lt = data[:, 0].astype(np.float64) / PCM_FULL_SCALE
    rt = data[:, 1].astype(np.float64) / PCM_FULL_SCALE

    LOG.info(
        "Read %s: %d bytes of sample data, %d frames per channel @ %d Hz",
        path, data.nbytes, lt.shape[0], sr,
    )
    return StereoInput(lt, rt, int(sr))


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def to_pcm16(x: np.ndarray) -> np.ndarray:
    """Float samples in [-1, 1] → int16, truncating toward zero."""
    scaled = np.clip(x, -1.0, 1.0) * PCM_FULL_SCALE
    return scaled.astype(np.int16)


def write_wav(path: str, channels: list[np.ndarray], sample_rate: int) -> str:
    """Interleave equal-length *channels* and write a 16-bit PCM WAV.

    Raises
    ------
    ChannelLengthError
        If the channels differ in length; no file is created.
    """
    check_equal_lengths(*channels)
    pcm = np.column_stack([to_pcm16(c) for c in channels])
    sf.write(path, pcm, sample_rate, subtype=SUBTYPE_WAV, format="WAV")
    LOG.info("Wrote %s (%d ch, %d frames)", path, pcm.shape[1], pcm.shape[0])
    return path


def output_paths(
    mode: OutputMode, name: str, output_dir: str = "."
) -> dict[str, str]:
    """File paths written for *mode*, keyed by ``"front"/"back"/"quad"/"51"``."""
    if mode is OutputMode.SURROUND_51:
        files = {"51": OUTPUT_PREFIX_51 + name + ".wav"}
    elif mode is OutputMode.QUAD:
        files = {"quad": OUTPUT_PREFIX_QUAD + name + ".wav"}
    else:
        files = {
            "back": OUTPUT_PREFIX_BACK + name + ".wav",
            "front": OUTPUT_PREFIX_FRONT + name + ".wav",
        }
    return {key: os.path.join(output_dir, f) for key, f in files.items()}


def write_decoded(
    decoded: DecodedChannels,
    mode: OutputMode,
    name: str,
    output_dir: str = ".",
) -> list[str]:
    """Persist decoder output in the file arrangement selected by *mode*.

    Returns
    -------
    list of written file paths.
    """
    mode = OutputMode(mode)
    if mode is OutputMode.SURROUND_51 and decoded.layout is not OutputLayout.SURROUND_51:
        raise ValueError("5.1 output needs a 5.1 decode")

    ch = decoded.channels
    check_equal_lengths(*ch.values())

    os.makedirs(output_dir, exist_ok=True)
    paths = output_paths(mode, name, output_dir)
    written = []

    if mode is OutputMode.PAIRS:
        written.append(write_wav(paths["back"], [ch[CH_BL], ch[CH_BR]], decoded.sample_rate))
        written.append(write_wav(paths["front"], [ch[CH_FL], ch[CH_FR]], decoded.sample_rate))
    elif mode is OutputMode.QUAD:
        quad = [ch[c] for c in OutputLayout.QUAD.channel_names]
        written.append(write_wav(paths["quad"], quad, decoded.sample_rate))
    else:
        surround = [ch[c] for c in OutputLayout.SURROUND_51.channel_names]
        written.append(write_wav(paths["51"], surround, decoded.sample_rate))

    return written
