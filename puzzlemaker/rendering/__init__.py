"""Raster compositing."""

from .renderer import PuzzleRenderer, compute_target_size

__all__ = [
    "PuzzleRenderer",
    "compute_target_size",
]
