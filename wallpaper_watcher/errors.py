"""Per-image failures raised by the decision engine.

None of these are fatal to the process: the candidate chooser catches them,
drops the offending file and moves on to the next candidate.
"""


class WallpaperError(Exception):
    """Base class for errors scoped to a single image."""


class UnsupportedPixelFormat(WallpaperError):
    """Raised when pixel data is neither 24 nor 32 bits per pixel."""


class InvalidDimensions(WallpaperError, ValueError):
    """Raised for zero or negative image/screen dimensions."""
