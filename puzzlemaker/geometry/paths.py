"""Piece outline paths: segment types and the classic/abstract generators."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

from .grid import EdgeFlags
from .random_source import seeded_random

Point = Tuple[float, float]


class Segment(ABC):
    """One piece of a path, drawn from the previous end point."""

    end: Point

    @abstractmethod
    def flatten(self, start: Point, steps: int) -> List[Point]:
        """
        Approximate the segment by points.

        Args:
            start: End point of the previous segment
            steps: Resolution for curved segments

        Returns:
            Points after start, the last one equal to self.end
        """
        pass


@dataclass(frozen=True)
class LineSegment(Segment):
    """Straight line to end."""
    end: Point

    def flatten(self, start: Point, steps: int) -> List[Point]:
        return [self.end]


@dataclass(frozen=True)
class QuadSegment(Segment):
    """Quadratic Bezier curve through control to end."""
    control: Point
    end: Point

    def flatten(self, start: Point, steps: int) -> List[Point]:
        """Sample the curve at steps evenly spaced parameters."""
        steps = max(1, steps)
        points = []
        for i in range(1, steps + 1):
            t = i / steps
            mt = 1 - t
            x = mt * mt * start[0] + 2 * mt * t * self.control[0] + t * t * self.end[0]
            y = mt * mt * start[1] + 2 * mt * t * self.control[1] + t * t * self.end[1]
            points.append((x, y))
        # Exact end point regardless of rounding
        points[-1] = self.end
        return points


@dataclass(frozen=True)
class PiecePath:
    """Closed outline of one piece: a start point and the segments after it."""
    start: Point
    segments: Tuple[Segment, ...]

    def points(self, curve_steps: int = 16) -> List[Point]:
        """
        Flatten the path into a polygon.

        Args:
            curve_steps: Points generated per curved segment

        Returns:
            List of (x, y) vertices; the closing edge back to the start is implicit
        """
        points = [self.start]
        current = self.start
        for segment in self.segments:
            points.extend(segment.flatten(current, curve_steps))
            current = segment.end

        # Drop a final vertex that repeats the start
        if len(points) > 1 and points[-1] == points[0]:
            points.pop()
        return points

    def bounding_box(self, curve_steps: int = 16) -> Tuple[float, float, float, float]:
        """Axis-aligned (min_x, min_y, max_x, max_y) of the flattened outline."""
        points = self.points(curve_steps)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return (min(xs), min(ys), max(xs), max(ys))


# ========== Classic pieces ==========

TAB_SIZE_RATIO = 0.2  # Tab width relative to the shorter cell side
TAB_BULGE_RATIO = 0.8  # Tab depth relative to tab width


def _side_segments(
    corner_start: Point,
    corner_end: Point,
    outward: Point,
    is_border: bool,
    is_tab: bool,
    tab_size: float,
    tab_bulge: float
) -> List[Segment]:
    """
    Segments for one side, walking from corner_start to corner_end.

    Args:
        corner_start: Corner the side starts at
        corner_end: Corner the side ends at
        outward: Unit normal pointing away from the piece
        is_border: Side lies on the outer image boundary (drawn straight)
        is_tab: Bump bulges outward (tab) instead of inward (blank)
        tab_size: Bump width parameter
        tab_bulge: Bump depth parameter

    Returns:
        Segments ending at corner_end
    """
    if is_border:
        return [LineSegment(corner_end)]

    # Unit vector along the direction of travel
    length = abs(corner_end[0] - corner_start[0]) + abs(corner_end[1] - corner_start[1])
    ux = (corner_end[0] - corner_start[0]) / length
    uy = (corner_end[1] - corner_start[1]) / length

    sign = 1.0 if is_tab else -1.0
    nx = outward[0] * sign
    ny = outward[1] * sign

    mid_x = (corner_start[0] + corner_end[0]) / 2
    mid_y = (corner_start[1] + corner_end[1]) / 2

    def at(along: float, across: float) -> Point:
        return (
            mid_x + along * tab_size * ux + across * tab_bulge * nx,
            mid_y + along * tab_size * uy + across * tab_bulge * ny,
        )

    return [
        LineSegment(at(-0.6, 0.0)),
        QuadSegment(at(-0.4, 0.3), at(-0.3, 1.0)),
        QuadSegment(at(0.0, 1.2), at(0.3, 1.0)),
        QuadSegment(at(0.4, 0.3), at(0.6, 0.0)),
        LineSegment(corner_end),
    ]


def classic_piece_path(
    x: float,
    y: float,
    w: float,
    h: float,
    flags: EdgeFlags,
    border: EdgeFlags = EdgeFlags()
) -> PiecePath:
    """
    Build a classic jigsaw outline with a tab or blank on each inner side.

    The outline runs clockwise from the top-left corner. A tab on the
    right side of one piece traces the same curve as the blank on the
    left side of its neighbor, so adjacent outlines coincide.

    Args:
        x, y, w, h: Cell rectangle
        flags: Tab (True) or blank (False) per side
        border: Sides lying on the outer image boundary

    Returns:
        Closed PiecePath
    """
    tab_size = min(w, h) * TAB_SIZE_RATIO
    tab_bulge = tab_size * TAB_BULGE_RATIO

    top_left = (x, y)
    top_right = (x + w, y)
    bottom_right = (x + w, y + h)
    bottom_left = (x, y + h)

    sides = [
        (top_left, top_right, (0.0, -1.0), border.top, flags.top),
        (top_right, bottom_right, (1.0, 0.0), border.right, flags.right),
        (bottom_right, bottom_left, (0.0, 1.0), border.bottom, flags.bottom),
        (bottom_left, top_left, (-1.0, 0.0), border.left, flags.left),
    ]

    segments: List[Segment] = []
    for start, end, outward, is_border, is_tab in sides:
        segments.extend(_side_segments(start, end, outward, is_border, is_tab, tab_size, tab_bulge))

    return PiecePath(start=top_left, segments=tuple(segments))


# ========== Abstract pieces ==========

MIN_SEGMENTS = 12
SEGMENT_VARIATION = 8  # Up to 19 vertices per piece
PADDING_RATIO = 0.1
SIDE_DISPLACEMENT = 0.3
JITTER_RATIO = 0.15
OVERFLOW_RATIO = 0.1  # Vertices may leave the cell by 10% of its size
KINK_THRESHOLD = 0.7  # Hash values above this add a kink (30% of edges)
KINK_JITTER_RATIO = 0.1


def abstract_piece_path(x: float, y: float, w: float, h: float, seed: int) -> PiecePath:
    """
    Build an irregular polygon roughly following the cell outline.

    Vertices walk clockwise around the cell inset by a padding, pushed
    off their side and jittered by hashes of the seed, then clamped to a
    halo 10% larger than the cell. Some edges get an extra kink at their
    midpoint. The same seed and rectangle always give the same outline.

    Args:
        x, y, w, h: Cell rectangle
        seed: Per-piece shape seed

    Returns:
        Closed PiecePath made of straight segments
    """
    def rand(index: int) -> float:
        return seeded_random(seed, index)

    segments = MIN_SEGMENTS + int(rand(0) * SEGMENT_VARIATION)
    padding = min(w, h) * PADDING_RATIO
    jitter = min(w, h) * JITTER_RATIO

    points: List[Point] = []
    for i in range(segments):
        t = i / segments
        offset = rand(i * 2) - 0.5

        if t < 0.25:
            # Top side, left to right
            local_t = t * 4
            px = x + padding + local_t * (w - 2 * padding)
            py = y + padding + offset * h * SIDE_DISPLACEMENT
        elif t < 0.5:
            # Right side, top to bottom
            local_t = (t - 0.25) * 4
            px = x + w - padding + offset * w * SIDE_DISPLACEMENT
            py = y + padding + local_t * (h - 2 * padding)
        elif t < 0.75:
            # Bottom side, right to left
            local_t = (t - 0.5) * 4
            px = x + w - padding - local_t * (w - 2 * padding)
            py = y + h - padding + offset * h * SIDE_DISPLACEMENT
        else:
            # Left side, bottom to top
            local_t = (t - 0.75) * 4
            px = x + padding + offset * w * SIDE_DISPLACEMENT
            py = y + h - padding - local_t * (h - 2 * padding)

        px += (rand(i * 3 + 10) - 0.5) * jitter
        py += (rand(i * 3 + 11) - 0.5) * jitter

        px = max(x - w * OVERFLOW_RATIO, min(x + w * (1 + OVERFLOW_RATIO), px))
        py = max(y - h * OVERFLOW_RATIO, min(y + h * (1 + OVERFLOW_RATIO), py))

        points.append((px, py))

    kink_jitter = min(w, h) * KINK_JITTER_RATIO
    path_segments: List[Segment] = []
    for i in range(1, len(points)):
        prev_x, prev_y = points[i - 1]
        cur_x, cur_y = points[i]

        if rand(i * 5 + 20) > KINK_THRESHOLD:
            mid_x = (cur_x + prev_x) / 2 + (rand(i * 4 + 15) - 0.5) * kink_jitter
            mid_y = (cur_y + prev_y) / 2 + (rand(i * 4 + 16) - 0.5) * kink_jitter
            path_segments.append(LineSegment((mid_x, mid_y)))

        path_segments.append(LineSegment(points[i]))

    # Close the outline
    path_segments.append(LineSegment(points[0]))

    return PiecePath(start=points[0], segments=tuple(path_segments))
