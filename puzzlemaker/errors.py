"""Exceptions raised by puzzle generation."""


class PuzzleError(Exception):
    """Base class for puzzle generation errors."""


class InvalidConfiguration(PuzzleError, ValueError):
    """Grid size or missing percentage outside the supported range."""


class UnsupportedSourceFormat(PuzzleError, ValueError):
    """Source image could not be decoded."""


class RenderTargetUnavailable(PuzzleError, RuntimeError):
    """Output raster could not be allocated or drawn."""
