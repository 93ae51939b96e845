"""
Error types raised by the analysis core
"""


class AnalysisError(Exception):
    """Base class for errors raised by analysis operations"""


class InvalidFrameError(AnalysisError, ValueError):
    """
    Raised when a frame is absent or has no pixels.

    Degenerate but valid frames (uniform colour, no interior pixels) are
    never reported through this error; they produce low-information results.
    """
