"""Selection of the pieces cut out of the missing raster."""
import random
from typing import FrozenSet, Optional


def missing_piece_count(total: int, percentage: int) -> int:
    """floor(total * percentage / 100)."""
    return total * percentage // 100


def select_missing_pieces(
    total: int,
    percentage: int,
    rng: Optional[random.Random] = None
) -> FrozenSet[int]:
    """
    Draw distinct piece indices uniformly from [0, total).

    Uses rejection sampling, which stays cheap while the share of missing
    pieces is well below 100%.

    Args:
        total: Number of pieces
        percentage: Share of pieces to select (0-100)
        rng: Random source, fresh one if None

    Returns:
        Frozen set of missing_piece_count(total, percentage) indices
    """
    if total < 0 or not 0 <= percentage <= 100:
        raise ValueError(f"Invalid selection: total={total}, percentage={percentage}")

    rng = rng if rng is not None else random.Random()
    count = missing_piece_count(total, percentage)

    indices = set()
    while len(indices) < count:
        indices.add(rng.randrange(total))
    return frozenset(indices)
