"""Configuration dataclasses for puzzle generation."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from PIL import ImageColor

from .errors import InvalidConfiguration


MIN_COLUMNS = 3
MIN_ROWS = 3
MIN_MISSING_PERCENTAGE = 10
MAX_MISSING_PERCENTAGE = 60

# Quick-pick border colors
BORDER_COLOR_PRESETS = [
    '#000000',
    '#FFFFFF',
    '#FF0000',
    '#00FF00',
    '#0000FF',
    '#FFFF00',
    '#FF00FF',
    '#00FFFF',
]


class PieceStyle(Enum):
    """Piece outline styles."""
    CLASSIC = "classic"  # Interlocking tabs and blanks
    ABSTRACT = "abstract"  # Jagged polygons driven by the shape seed


class OutputQuality(Enum):
    """Output quality tiers, each capping the raster size."""
    FAST = "fast"
    STANDARD = "standard"
    HIGH = "high"
    ORIGINAL = "original"

    @property
    def max_size(self) -> Optional[Tuple[int, int]]:
        """Maximum (width, height) for this tier, None if unbounded."""
        return _QUALITY_LIMITS[self]


_QUALITY_LIMITS = {
    OutputQuality.FAST: (800, 600),
    OutputQuality.STANDARD: (1280, 720),
    OutputQuality.HIGH: (1920, 1080),
    OutputQuality.ORIGINAL: None,
}


ColorSpec = Union[str, Tuple[int, int, int]]


def parse_color(color: ColorSpec) -> Tuple[int, int, int]:
    """
    Normalise a color to an RGB tuple.

    Args:
        color: RGB tuple or any Pillow color string ('#FF0000', 'red', ...)

    Returns:
        (r, g, b) tuple with components in 0-255
    """
    if isinstance(color, str):
        try:
            rgb = ImageColor.getrgb(color)
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown border color: {color!r}") from e
        return tuple(rgb[:3])

    rgb = tuple(color)
    if len(rgb) != 3 or not all(isinstance(c, int) and 0 <= c <= 255 for c in rgb):
        raise InvalidConfiguration(f"Border color must be three ints in 0-255, got {color!r}")
    return rgb


@dataclass(frozen=True)
class PuzzleConfig:
    """Puzzle grid, missing pieces and output settings for one generation."""
    columns: int = 6
    rows: int = 4
    missing_percentage: int = 30  # Share of pieces cut out (10-60)
    piece_style: PieceStyle = PieceStyle.CLASSIC
    border_color: ColorSpec = (0, 0, 0)
    output_quality: OutputQuality = OutputQuality.HIGH

    def __post_init__(self):
        # Frozen dataclass: normalise through object.__setattr__
        try:
            object.__setattr__(self, 'piece_style', PieceStyle(self.piece_style))
            object.__setattr__(self, 'output_quality', OutputQuality(self.output_quality))
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        object.__setattr__(self, 'border_color', parse_color(self.border_color))
        self.validate()

    def validate(self):
        """Raise InvalidConfiguration if the grid or percentage is out of range."""
        for name, value, minimum in (
            ('columns', self.columns, MIN_COLUMNS),
            ('rows', self.rows, MIN_ROWS),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an int, got {value!r}")
            if value < minimum:
                raise InvalidConfiguration(f"{name} must be >= {minimum}, got {value}")

        pct = self.missing_percentage
        if isinstance(pct, bool) or not isinstance(pct, int):
            raise InvalidConfiguration(f"missing_percentage must be an int, got {pct!r}")
        if not MIN_MISSING_PERCENTAGE <= pct <= MAX_MISSING_PERCENTAGE:
            raise InvalidConfiguration(
                f"missing_percentage must be in [{MIN_MISSING_PERCENTAGE}, "
                f"{MAX_MISSING_PERCENTAGE}], got {pct}"
            )

    @property
    def total_pieces(self) -> int:
        """Number of pieces in the grid."""
        return self.rows * self.columns

    @property
    def missing_count(self) -> int:
        """Number of pieces cut out of the missing raster."""
        return self.total_pieces * self.missing_percentage // 100


@dataclass
class RenderConfig:
    """Configuration for raster compositing."""
    stroke_width: int = 2  # Piece border width in pixels
    curve_steps: int = 16  # Line segments per quadratic curve when flattening
    resample: str = "LANCZOS"  # Pillow resampling filter used for downscaling


@dataclass
class GeneratorConfig:
    """Complete configuration for puzzle generation."""
    puzzle: PuzzleConfig = field(default_factory=PuzzleConfig)
    render: RenderConfig = field(default_factory=RenderConfig)


# Performance monitoring global flag (outside dataclass to make it a true class variable)
GeneratorConfig.enable_performance_logging = False
