"""Tests for the classic tab/blank edge grid."""
import random

import pytest

from puzzlemaker.geometry.grid import EdgeFlags, EdgeGrid, build_edge_grid


@pytest.mark.parametrize("rows,columns", [(3, 3), (3, 4), (4, 6), (10, 12), (7, 3)])
def test_neighbors_interlock(rows, columns):
    """Shared edges are a tab on one side and a blank on the other."""
    for seed in range(5):
        grid = build_edge_grid(rows, columns, random.Random(seed))

        for row in range(rows):
            for col in range(columns):
                flags = grid[row, col]
                if col < columns - 1:
                    assert grid[row, col + 1].left == (not flags.right)
                if row < rows - 1:
                    assert grid[row + 1, col].top == (not flags.bottom)

        assert grid.is_consistent()


@pytest.mark.parametrize("rows,columns", [(3, 3), (5, 8)])
def test_outer_frame_is_flat(rows, columns):
    """Sides on the grid boundary are always False."""
    grid = build_edge_grid(rows, columns, random.Random(99))

    for col in range(columns):
        assert grid[0, col].top is False
        assert grid[rows - 1, col].bottom is False
    for row in range(rows):
        assert grid[row, 0].left is False
        assert grid[row, columns - 1].right is False


def test_shape_of_grid():
    grid = build_edge_grid(4, 6, random.Random(0))
    assert grid.rows == 4
    assert grid.columns == 6
    assert len(grid.cells) == 4
    assert all(len(row) == 6 for row in grid.cells)
    assert all(isinstance(flags, EdgeFlags) for row in grid.cells for flags in row)


def test_injected_rng_is_reproducible():
    """Same injected random source, same grid."""
    a = build_edge_grid(5, 5, random.Random(31))
    b = build_edge_grid(5, 5, random.Random(31))
    assert a == b


def test_both_orientations_occur():
    """Interior edges are not all tabs or all blanks."""
    grid = build_edge_grid(6, 6, random.Random(5))
    rights = [grid[row, col].right for row in range(6) for col in range(5)]
    assert any(rights)
    assert not all(rights)


def test_does_not_touch_global_random():
    """The module-level random state is left alone."""
    random.seed(77)
    expected = random.random()

    random.seed(77)
    build_edge_grid(4, 4, random.Random(3))
    assert random.random() == expected


def test_is_consistent_detects_conflict():
    """A grid with two tabs facing each other is rejected."""
    tab_right = EdgeFlags(right=True)
    tab_left = EdgeFlags(left=True)
    grid = EdgeGrid(rows=1, columns=2, cells=((tab_right, tab_left),))
    assert not grid.is_consistent()


def test_is_consistent_detects_border_tab():
    grid = EdgeGrid(rows=1, columns=1, cells=((EdgeFlags(top=True),),))
    assert not grid.is_consistent()


def test_rejects_empty_grid():
    with pytest.raises(ValueError):
        build_edge_grid(0, 3)
