"""Piece geometry: random source, edge grid, outlines and missing-piece selection."""

from .grid import EdgeFlags, EdgeGrid, build_edge_grid
from .missing import missing_piece_count, select_missing_pieces
from .paths import (
    LineSegment,
    PiecePath,
    QuadSegment,
    Segment,
    abstract_piece_path,
    classic_piece_path,
)
from .puzzle import PuzzleLayout, PuzzlePiece
from .random_source import new_shape_seed, piece_seed, seeded_random

__all__ = [
    # Random source
    "seeded_random",
    "piece_seed",
    "new_shape_seed",
    # Edge grid
    "EdgeFlags",
    "EdgeGrid",
    "build_edge_grid",
    # Paths
    "Segment",
    "LineSegment",
    "QuadSegment",
    "PiecePath",
    "classic_piece_path",
    "abstract_piece_path",
    # Layout
    "PuzzleLayout",
    "PuzzlePiece",
    # Missing pieces
    "missing_piece_count",
    "select_missing_pieces",
]
