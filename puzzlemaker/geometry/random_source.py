"""Deterministic pseudo-random numbers keyed by (seed, index)."""
import math
import time

# Fractional sine hash constants
_SEED_FACTOR = 9.898
_INDEX_FACTOR = 78.233
_SCALE = 43758.5453


def seeded_random(seed: int, index: int) -> float:
    """
    Hash (seed, index) to a float in [0, 1).

    The same arguments always produce the same value, so a shape built from
    a seed can be rebuilt exactly.

    Args:
        seed: Shape seed of the piece
        index: Draw index within the piece

    Returns:
        Pseudo-random float in [0, 1)
    """
    a = math.sin(seed * _SEED_FACTOR + index * _INDEX_FACTOR) * _SCALE
    value = a - math.floor(a)
    # a slightly below an integer can round up to exactly 1.0
    if value >= 1.0:
        return 0.0
    return value


def piece_seed(base_seed: int, row: int, col: int, columns: int) -> int:
    """Seed for a single piece, distinct for every cell of the grid."""
    return base_seed + row * columns + col + 1


def new_shape_seed() -> int:
    """Mint a fresh shape seed from the current time in milliseconds."""
    return time.time_ns() // 1_000_000
