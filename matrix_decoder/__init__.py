"""
Matrix Quad Decoder — rebuild quadraphonic / 5.1 audio from SQ or QS
matrix-encoded stereo.

Decoding happens in the frequency domain over the whole recording:
the two input spectra are recombined with fixed complex coefficients,
the derived LFE is band-limited, and every channel is normalized to
the playable range.
"""

__version__ = "1.0.0"
