"""
Matrix decoder pipeline — the core engine.

Takes the two channels of an SQ or QS encoded stereo signal and rebuilds
a quadraphonic or 5.1 set of channels.

Stages
------
1. **Transform** — whole-signal real FFT of LT and RT.
2. **Recombine** — fixed complex matrix per format (:mod:`.matrix`).
3. **Shape** (5.1 only) — band-limit the derived LFE spectrum.
4. **Synthesize** — inverse FFT of every output spectrum.
5. **Normalize** — front and back pairs share one scale factor each;
   center and LFE are scaled on their own.

The transforms are independent of each other, so with ``workers > 1``
they run on a thread pool.  Every task owns exactly one output buffer
and normalization only starts once all of them are done.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, NamedTuple

import numpy as np

from .config import (
    NORMALIZE_PAIRS,
    NORMALIZE_SINGLES,
    CH_LFE,
    DecoderConfig,
    DecodeFormat,
    OutputLayout,
)
from .dsp.lfe import make_lfe_filter
from .dsp.transform import SpectralTransform
from .dsp.utils import check_equal_lengths, normalize_pair, normalize_single
from .matrix import decode_spectra

LOG = logging.getLogger(__name__)


class DecodedChannels(NamedTuple):
    """Time-domain decoder output."""
    channels: dict[str, np.ndarray]   # name → (N,) float64, layout order
    sample_rate: int
    layout: OutputLayout

    @property
    def num_samples(self) -> int:
        first = next(iter(self.channels.values()), None)
        return 0 if first is None else first.shape[0]

    def as_array(self) -> np.ndarray:
        """Stack the channels into shape ``(N, C)`` in layout order."""
        return np.column_stack(
            [self.channels[name] for name in self.layout.channel_names]
        )


class MatrixDecoder:
    """Frequency-domain SQ / QS matrix decoder.

    Parameters
    ----------
    config : DecoderConfig, optional
        Format, layout, LFE filter and worker settings.
    logger : logging.Logger, optional
        Collaborator for diagnostics.  Defaults to this module's logger.
    """

    def __init__(
        self,
        config: DecoderConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or DecoderConfig()
        self.log = logger or LOG
        self.matrix_format = DecodeFormat(self.config.matrix_format)
        self.layout = OutputLayout(self.config.layout)
        self.lfe_filter = make_lfe_filter(
            self.config.lfe_filter, self.config.lfe_cutoff_hz
        )
        self.workers = max(1, int(self.config.workers))

    # ------------------------------------------------------------------
    def decode(
        self, lt: np.ndarray, rt: np.ndarray, sample_rate: int
    ) -> DecodedChannels:
        """Decode one LT/RT pair.

        Parameters
        ----------
        lt, rt : np.ndarray
            Shape ``(N,)`` float sample buffers, nominally in [-1, 1].
        sample_rate : int
            Used only to place the LFE cutoff.

        Returns
        -------
        DecodedChannels
            Normalized time-domain buffers in layout order.

        Raises
        ------
        ChannelLengthError
            If *lt* and *rt* differ in length.  Nothing is returned.
        """
        lt = np.asarray(lt, dtype=np.float64)
        rt = np.asarray(rt, dtype=np.float64)
        n = check_equal_lengths(lt, rt)

        self.log.info(
            "Decoding %s → %s: %d samples @ %d Hz",
            self.matrix_format.value, self.layout.value, n, sample_rate,
        )

        fft = SpectralTransform(n)

        # --- Transform ---
        freq_lt, freq_rt = self._run_all([
            lambda: fft.forward(lt),
            lambda: fft.forward(rt),
        ])
        self.log.debug(
            "Expected FFT output size %d, actual %d", n // 2 + 1 if n else 0, freq_lt.shape[0],
        )

        # --- Recombine ---
        spectra = decode_spectra(
            freq_lt, freq_rt, self.matrix_format, self.layout, logger=self.log,
        )

        # --- Shape (5.1 only) ---
        if CH_LFE in spectra:
            self.log.debug("Shaping LFE with %r", self.lfe_filter)
            self.lfe_filter.apply(spectra[CH_LFE], fft, sample_rate)

        # --- Synthesize ---
        names = list(spectra)
        buffers = self._run_all([
            (lambda s=spectra[name]: fft.inverse(s)) for name in names
        ])
        channels = dict(zip(names, buffers))

        # --- Normalize (after every buffer is ready) ---
        self._normalize(channels)

        self.log.info("Decode done: %d channels × %d samples", len(channels), n)
        return DecodedChannels(channels, int(sample_rate), self.layout)

    # ------------------------------------------------------------------
    def _run_all(self, tasks: list[Callable[[], np.ndarray]]) -> list[np.ndarray]:
        """Run independent transform tasks, keeping their order."""
        if self.workers <= 1 or len(tasks) <= 1:
            return [task() for task in tasks]
        with ThreadPoolExecutor(max_workers=min(self.workers, len(tasks))) as executor:
            futures = [executor.submit(task) for task in tasks]
            return [f.result() for f in futures]

    def _normalize(self, channels: dict[str, np.ndarray]) -> None:
        for left, right in NORMALIZE_PAIRS:
            if left in channels and right in channels:
                factor = normalize_pair(channels[left], channels[right])
                if factor != 1.0:
                    self.log.debug("Normalized %s/%s by 1/%.4f", left, right, factor)
        for name in NORMALIZE_SINGLES:
            if name in channels:
                factor = normalize_single(channels[name])
                if factor != 1.0:
                    self.log.debug("Normalized %s by 1/%.4f", name, factor)


def decode(
    lt: np.ndarray,
    rt: np.ndarray,
    sample_rate: int,
    config: DecoderConfig | None = None,
    logger: logging.Logger | None = None,
) -> DecodedChannels:
    """Decode *lt*/*rt* with a one-off :class:`MatrixDecoder`."""
    return MatrixDecoder(config, logger=logger).decode(lt, rt, sample_rate)
