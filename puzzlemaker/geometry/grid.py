"""Tab/blank assignment for classic pieces."""
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


SIDES = ('top', 'right', 'bottom', 'left')


@dataclass(frozen=True)
class EdgeFlags:
    """Tab (True) or blank/flat (False) for each side of a piece."""
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False


@dataclass(frozen=True)
class EdgeGrid:
    """Immutable rows x columns grid of EdgeFlags, row-major."""
    rows: int
    columns: int
    cells: Tuple[Tuple[EdgeFlags, ...], ...]

    def __getitem__(self, position: Tuple[int, int]) -> EdgeFlags:
        row, col = position
        return self.cells[row][col]

    def is_consistent(self) -> bool:
        """
        Check that neighbors interlock and the outer frame is flat.

        Returns:
            True if every shared edge has a tab on exactly one side and
            every edge on the grid boundary is False
        """
        for row in range(self.rows):
            for col in range(self.columns):
                flags = self[row, col]
                if row == 0 and flags.top:
                    return False
                if row == self.rows - 1 and flags.bottom:
                    return False
                if col == 0 and flags.left:
                    return False
                if col == self.columns - 1 and flags.right:
                    return False
                if col < self.columns - 1 and self[row, col + 1].left == flags.right:
                    return False
                if row < self.rows - 1 and self[row + 1, col].top == flags.bottom:
                    return False
        return True


def build_edge_grid(rows: int, columns: int, rng: Optional[random.Random] = None) -> EdgeGrid:
    """
    Assign tabs and blanks to every piece so that neighbors interlock.

    Each piece first draws a fair coin per side (outer sides are forced
    flat). A second row-major pass then overwrites every piece's left and
    top with the negation of its left/upper neighbor's right and bottom.

    Args:
        rows: Number of rows (>= 1)
        columns: Number of columns (>= 1)
        rng: Random source for the coin flips, fresh one if None

    Returns:
        EdgeGrid satisfying the interlocking constraint
    """
    if rows < 1 or columns < 1:
        raise ValueError(f"Grid must be at least 1x1, got {rows}x{columns}")

    rng = rng if rng is not None else random.Random()

    def coin() -> bool:
        return rng.random() > 0.5

    # Random pass
    pattern: List[List[Dict[str, bool]]] = []
    for row in range(rows):
        pattern_row = []
        for col in range(columns):
            pattern_row.append({
                'top': False if row == 0 else coin(),
                'right': False if col == columns - 1 else coin(),
                'bottom': False if row == rows - 1 else coin(),
                'left': False if col == 0 else coin(),
            })
        pattern.append(pattern_row)

    # Propagation pass
    for row in range(rows):
        for col in range(columns):
            piece = pattern[row][col]
            if col < columns - 1:
                pattern[row][col + 1]['left'] = not piece['right']
            if row < rows - 1:
                pattern[row + 1][col]['top'] = not piece['bottom']

    cells = tuple(
        tuple(EdgeFlags(**piece) for piece in pattern_row)
        for pattern_row in pattern
    )
    return EdgeGrid(rows=rows, columns=columns, cells=cells)
