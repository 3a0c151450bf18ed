"""
Command line interface: decode an SQ or QS matrix-encoded stereo WAV into
quadraphonic or 5.1.

Usage:
    matrix-decoder -input record.wav
    matrix-decoder -input record.wav -audioformat 4.0 -matrixformat QS
    matrix-decoder -input record.wav -audioformat 5.1 -lfefilter rectangular
"""

from __future__ import annotations

import argparse
import logging
import time

import soundfile as sf

from . import __version__
from .config import (
    LFE_CUTOFF_HZ,
    DecoderConfig,
    OutputMode,
    parse_lfe_filter,
    parse_matrix_format,
    parse_output_mode,
)
from .decoder import MatrixDecoder
from .wavio import WavFormatError, base_name, read_stereo_wav, write_decoded

LOG = logging.getLogger("matrix_decoder")


def process_file(
    input_path: str,
    output_dir: str,
    output_mode: OutputMode,
    config: DecoderConfig,
    logger: logging.Logger = LOG,
) -> list[str]:
    """Read, decode and write one file.  Returns the written paths."""
    start_time = time.time()

    stereo = read_stereo_wav(input_path)
    decoder = MatrixDecoder(config, logger=logger)
    decoded = decoder.decode(stereo.lt, stereo.rt, stereo.sample_rate)

    outputs = write_decoded(decoded, output_mode, base_name(input_path), output_dir)

    logger.info("Done in %.1fs", time.time() - start_time)
    return outputs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matrix-decoder",
        description="Decode SQ / QS matrix-encoded stereo to quadraphonic or 5.1",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
Examples:
  matrix-decoder -input record.wav                     # SQ, front/back stereo pair
  matrix-decoder -input record.wav -audioformat 4.0    # one 4-channel file
  matrix-decoder -input record.wav -audioformat 5.1    # one 6-channel file (L R C LFE Ls Rs)
  matrix-decoder -input record.wav -matrixformat QS    # QS matrix
        """,
    )
    parser.add_argument(
        "-input",
        default="",
        help="Read audio Wave File (2-channel, 16-bit PCM)",
    )
    parser.add_argument(
        "-audioformat",
        default=None,
        help="Output format: 4.0 (one 4-channel file) or 5.1 (one 6-channel file). "
             "Default: front and back stereo files",
    )
    parser.add_argument(
        "-matrixformat",
        default="SQ",
        help="Matrix format: SQ or QS (default: SQ)",
    )
    parser.add_argument(
        "-lfefilter",
        default="exponential",
        help="LFE shaping for 5.1: exponential or rectangular (default: exponential)",
    )
    parser.add_argument(
        "-lfecutoff",
        type=float,
        default=LFE_CUTOFF_HZ,
        help=f"LFE cutoff frequency in Hz (default: {LFE_CUTOFF_HZ:g})",
    )
    parser.add_argument(
        "-outdir",
        default=".",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "-workers",
        type=int,
        default=1,
        help="Threads used for the FFTs (default: 1)",
    )
    parser.add_argument(
        "-verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-version",
        action="version",
        version=__version__,
    )
    parser.add_argument(
        "-h", "-help", "--help",
        action="help",
        help="Show help message",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.lfecutoff <= 0:
        parser.error("-lfecutoff must be positive.")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.input:
        print("you must provide an input audio wave file name.")
        parser.print_help()
        return

    output_mode = parse_output_mode(args.audioformat)
    config = DecoderConfig(
        matrix_format=parse_matrix_format(args.matrixformat),
        layout=output_mode.layout,
        lfe_filter=parse_lfe_filter(args.lfefilter),
        lfe_cutoff_hz=args.lfecutoff,
        workers=args.workers,
    )

    try:
        outputs = process_file(args.input, args.outdir, output_mode, config, LOG)
    except (OSError, sf.LibsndfileError, WavFormatError) as exc:
        LOG.error("Failed to decode %s: %s", args.input, exc)
        return

    for path in outputs:
        LOG.info("Output: %s", path)


if __name__ == "__main__":
    main()
