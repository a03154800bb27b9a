"""Puzzle generation API - turns a source image into complete and missing rasters."""
import io
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, FrozenSet, List, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import PuzzleConfig, RenderConfig
from .errors import InvalidConfiguration, RenderTargetUnavailable, UnsupportedSourceFormat
from .geometry.missing import select_missing_pieces
from .geometry.puzzle import PuzzleLayout, PuzzlePiece
from .geometry.random_source import new_shape_seed
from .performance import print_performance_report, take_report, time_block, timed
from .rendering.renderer import PuzzleRenderer, compute_target_size


COMPLETE_FILENAME = "puzzle-complete.png"
MISSING_FILENAME = "puzzle-missing.png"

SourceImage = Union[Image.Image, np.ndarray]


@dataclass(frozen=True)
class PuzzleRaster:
    """RGBA pixel buffer of one output image."""
    pixels: np.ndarray  # (H, W, 4) uint8
    width: int
    height: int

    @classmethod
    def from_image(cls, img: Image.Image) -> 'PuzzleRaster':
        pixels = np.array(img.convert('RGBA'))
        return cls(pixels=pixels, width=img.width, height=img.height)

    def to_image(self) -> Image.Image:
        """Pillow RGBA image of the raster."""
        return Image.fromarray(self.pixels)


@dataclass(frozen=True)
class PieceStatistics:
    """Piece counts of a generated puzzle."""
    total: int
    missing: int


@dataclass
class PuzzleGenerationResult:
    """Result of puzzle generation: both rasters plus metadata."""

    complete: PuzzleRaster
    missing: PuzzleRaster
    stats: PieceStatistics

    # Metadata
    seed: int
    config: PuzzleConfig
    missing_indices: FrozenSet[int] = frozenset()
    pieces: List[PuzzlePiece] = field(default_factory=list, repr=False)
    timings: List[str] = field(default_factory=list, repr=False)  # Stage report when performance logging is on

    def save_all(self, output_dir: Union[Path, str]) -> dict:
        """
        Save both rasters as PNG.

        Args:
            output_dir: Directory to save images to

        Returns:
            Dictionary mapping 'complete'/'missing' to the saved file path
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        saved_files = {}
        for key, raster, filename in (
            ('complete', self.complete, COMPLETE_FILENAME),
            ('missing', self.missing, MISSING_FILENAME),
        ):
            filepath = output_dir / filename
            raster.to_image().save(filepath, 'PNG', optimize=True)
            saved_files[key] = filepath

        return saved_files


def load_source_image(source: Union[str, Path, bytes, BinaryIO]) -> Image.Image:
    """
    Decode an image file for use as a puzzle source.

    Args:
        source: File path, encoded bytes or a binary file object

    Returns:
        Decoded RGBA image
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with Image.open(source) as img:
            img.load()
            return img.convert('RGBA')
    except FileNotFoundError:
        raise
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedSourceFormat(f"Cannot decode source image: {e}") from e


def _as_image(image: SourceImage) -> Image.Image:
    if isinstance(image, Image.Image):
        return image

    pixels = np.asarray(image)
    if pixels.dtype != np.uint8:
        raise UnsupportedSourceFormat(f"Expected uint8 pixels, got dtype {pixels.dtype}")

    if pixels.ndim == 3 and pixels.shape[2] == 1:
        pixels = pixels[:, :, 0]
    if pixels.ndim == 2:
        return Image.fromarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise UnsupportedSourceFormat(
            f"Expected an (H, W), (H, W, 1), (H, W, 3) or (H, W, 4) pixel array, got shape {pixels.shape}"
        )
    return Image.fromarray(pixels)


@timed
def build_pieces(
    width: int,
    height: int,
    config: PuzzleConfig,
    seed: int,
    rng: Optional[random.Random] = None
) -> List[PuzzlePiece]:
    """
    Outline every piece for an output raster of the given size.

    Args:
        width: Output raster width
        height: Output raster height
        config: Puzzle configuration
        seed: Shape seed for abstract pieces
        rng: Random source for classic tab/blank flips

    Returns:
        Pieces in row-major order
    """
    layout = PuzzleLayout(
        width_px=width,
        height_px=height,
        rows=config.rows,
        cols=config.columns,
        piece_style=config.piece_style,
        shape_seed=seed
    )
    pieces, _ = layout.generate(rng)
    return pieces


def generate(
    image: SourceImage,
    config: PuzzleConfig,
    seed: Optional[int] = None,
    layout_rng: Optional[random.Random] = None,
    missing_rng: Optional[random.Random] = None,
    render_config: Optional[RenderConfig] = None
) -> PuzzleGenerationResult:
    """
    Generate the complete and missing puzzle rasters for a source image.

    This is the main API function that orchestrates grid building, piece
    outlines, missing-piece selection and compositing. Nothing is returned
    unless both rasters were produced.

    Args:
        image: Decoded source image (Pillow image or pixel array)
        config: Puzzle configuration
        seed: Shape seed for abstract pieces, freshly minted if None
        layout_rng: Random source for classic tab/blank flips
        missing_rng: Random source for the missing-piece draw
        render_config: Stroke and resampling settings

    Returns:
        PuzzleGenerationResult with both rasters and piece statistics
    """
    if not isinstance(config, PuzzleConfig):
        raise InvalidConfiguration(f"Expected PuzzleConfig, got {type(config).__name__}")
    config.validate()

    render_config = render_config or RenderConfig()
    seed = seed if seed is not None else new_shape_seed()
    source = _as_image(image)

    width, height = compute_target_size(source.width, source.height, config.output_quality)
    if width < 1 or height < 1:
        raise RenderTargetUnavailable(f"Source image of size {source.size} has no area")

    try:
        with time_block("Puzzle generation"):
            pieces = build_pieces(width, height, config, seed, layout_rng)

            with time_block("Missing piece selection"):
                missing_indices = select_missing_pieces(
                    config.total_pieces, config.missing_percentage, missing_rng
                )

            renderer = PuzzleRenderer(
                width=width,
                height=height,
                border_color=config.border_color,
                stroke_width=render_config.stroke_width,
                curve_steps=render_config.curve_steps,
                resample=render_config.resample
            )
            complete_img, missing_img = renderer.render(source, pieces, missing_indices)
    finally:
        # Each call owns its timing record
        timings = take_report()
    print_performance_report(timings)

    return PuzzleGenerationResult(
        complete=PuzzleRaster.from_image(complete_img),
        missing=PuzzleRaster.from_image(missing_img),
        stats=PieceStatistics(total=config.total_pieces, missing=len(missing_indices)),
        seed=seed,
        config=config,
        missing_indices=missing_indices,
        pieces=pieces,
        timings=timings
    )
