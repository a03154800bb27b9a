"""
Jigsaw puzzle generator.

Turns a photo into two rasters: the photo with every piece outlined, and
the same picture with a share of the pieces cut out.

Main API:
    generate(image, config, seed) -> PuzzleGenerationResult
"""

from .api import (
    PieceStatistics,
    PuzzleGenerationResult,
    PuzzleRaster,
    generate,
    load_source_image,
)
from .config import (
    BORDER_COLOR_PRESETS,
    GeneratorConfig,
    OutputQuality,
    PieceStyle,
    PuzzleConfig,
    RenderConfig,
)
from .errors import (
    InvalidConfiguration,
    PuzzleError,
    RenderTargetUnavailable,
    UnsupportedSourceFormat,
)
from .geometry.random_source import new_shape_seed


__all__ = [
    # Main API
    "generate",
    "load_source_image",
    "new_shape_seed",
    # Results
    "PuzzleGenerationResult",
    "PuzzleRaster",
    "PieceStatistics",
    # Config
    "PuzzleConfig",
    "RenderConfig",
    "GeneratorConfig",
    "PieceStyle",
    "OutputQuality",
    "BORDER_COLOR_PRESETS",
    # Errors
    "PuzzleError",
    "InvalidConfiguration",
    "UnsupportedSourceFormat",
    "RenderTargetUnavailable",
]
