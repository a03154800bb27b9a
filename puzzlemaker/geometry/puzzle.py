"""Puzzle grid layout and per-piece outline generation."""
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import PieceStyle
from .grid import EdgeFlags, EdgeGrid, build_edge_grid
from .paths import PiecePath, abstract_piece_path, classic_piece_path
from .random_source import piece_seed


@dataclass(frozen=True)
class PuzzlePiece:
    """A single piece: its grid position, cell rectangle and outline."""
    row: int
    col: int
    index: int  # Row-major index
    rect: Tuple[float, float, float, float]  # (x, y, w, h)
    path: PiecePath

    def get_original_center(self) -> Tuple[float, float]:
        """Center of the piece's cell."""
        x, y, w, h = self.rect
        return (x + w / 2, y + h / 2)


class PuzzleLayout:
    """Splits a raster into a rows x columns grid and outlines every piece."""

    def __init__(
        self,
        width_px: float,
        height_px: float,
        rows: int,
        cols: int,
        piece_style: PieceStyle = PieceStyle.CLASSIC,
        shape_seed: int = 0
    ):
        """
        Initialize the layout.

        Args:
            width_px: Raster width in pixels
            height_px: Raster height in pixels
            rows: Number of rows in grid
            cols: Number of columns in grid
            piece_style: Classic tabs or abstract polygons
            shape_seed: Base seed for abstract shapes
        """
        self.width_px = width_px
        self.height_px = height_px
        self.rows = rows
        self.cols = cols
        self.piece_style = piece_style
        self.shape_seed = shape_seed

        self.piece_width = width_px / cols
        self.piece_height = height_px / rows

    def cell_rect(self, row: int, col: int) -> Tuple[float, float, float, float]:
        """(x, y, w, h) of a grid cell."""
        return (
            col * self.piece_width,
            row * self.piece_height,
            self.piece_width,
            self.piece_height,
        )

    def border_flags(self, row: int, col: int) -> EdgeFlags:
        """Sides of a cell that lie on the outer image boundary."""
        return EdgeFlags(
            top=row == 0,
            right=col == self.cols - 1,
            bottom=row == self.rows - 1,
            left=col == 0,
        )

    def _create_piece(self, row: int, col: int, edge_grid: Optional[EdgeGrid]) -> PuzzlePiece:
        x, y, w, h = self.cell_rect(row, col)

        if self.piece_style is PieceStyle.ABSTRACT:
            seed = piece_seed(self.shape_seed, row, col, self.cols)
            path = abstract_piece_path(x, y, w, h, seed)
        else:
            path = classic_piece_path(x, y, w, h, edge_grid[row, col], self.border_flags(row, col))

        return PuzzlePiece(
            row=row,
            col=col,
            index=row * self.cols + col,
            rect=(x, y, w, h),
            path=path,
        )

    def generate(
        self,
        rng: Optional[random.Random] = None
    ) -> Tuple[List[PuzzlePiece], Optional[EdgeGrid]]:
        """
        Build every piece in row-major order.

        Args:
            rng: Random source for classic tab/blank flips (unused for abstract)

        Returns:
            Tuple of (pieces, edge_grid); edge_grid is None for abstract style
        """
        edge_grid = None
        if self.piece_style is PieceStyle.CLASSIC:
            edge_grid = build_edge_grid(self.rows, self.cols, rng)

        pieces = [
            self._create_piece(row, col, edge_grid)
            for row in range(self.rows)
            for col in range(self.cols)
        ]
        return pieces, edge_grid
