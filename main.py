"""
Matrix Quad Decoder — run the CLI from a source checkout.

Usage:
    python main.py -input record.wav
    python main.py -input record.wav -audioformat 4.0 -matrixformat QS
"""

from matrix_decoder.cli import main

if __name__ == "__main__":
    main()
