"""Raster compositing using Pillow."""
from typing import Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw
import numpy as np

from ..config import OutputQuality
from ..errors import RenderTargetUnavailable
from ..geometry.puzzle import PuzzlePiece
from ..performance import timed


TRANSPARENT = (0, 0, 0, 0)


def compute_target_size(width: int, height: int, quality: OutputQuality) -> Tuple[int, int]:
    """
    Size of the output rasters for a source image and quality tier.

    Images larger than the tier's cap are scaled down uniformly to fit;
    smaller images and the ORIGINAL tier keep their size.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        quality: Output quality tier

    Returns:
        (width, height) of the output rasters
    """
    max_size = quality.max_size
    if max_size is None:
        return (width, height)

    max_width, max_height = max_size
    if width <= max_width and height <= max_height:
        return (width, height)

    scale = min(max_width / width, max_height / height)
    # Truncate like a canvas size assignment; never exceed the cap
    return (min(int(width * scale), max_width), min(int(height * scale), max_height))


def nonzero_fill(
    outline: List[Tuple[float, float]],
    width: int,
    height: int
) -> Optional[np.ndarray]:
    """
    Pixels whose centers have a nonzero winding number around outline.

    Args:
        outline: Closed polygon vertices
        width: Raster width
        height: Raster height

    Returns:
        (height, width) bool array, or None if the outline misses the raster
    """
    xs = [x for x, _ in outline]
    ys = [y for _, y in outline]
    left, right = max(int(np.floor(min(xs))), 0), min(int(np.ceil(max(xs))), width)
    top, bottom = max(int(np.floor(min(ys))), 0), min(int(np.ceil(max(ys))), height)
    if left >= right or top >= bottom:
        return None

    px, py = np.meshgrid(np.arange(left, right) + 0.5, np.arange(top, bottom) + 0.5)
    winding = np.zeros(px.shape, dtype=np.int32)

    for (x0, y0), (x1, y1) in zip(outline, outline[1:] + outline[:1]):
        is_left = (x1 - x0) * (py - y0) - (px - x0) * (y1 - y0)
        winding += ((y0 <= py) & (py < y1) & (is_left > 0)).astype(np.int32)
        winding -= ((y1 <= py) & (py < y0) & (is_left < 0)).astype(np.int32)

    inside = np.zeros((height, width), dtype=bool)
    inside[top:bottom, left:right] = winding != 0
    return inside


class PuzzleRenderer:
    """Composites the complete and missing puzzle rasters."""

    def __init__(
        self,
        width: int,
        height: int,
        border_color: Tuple[int, int, int] = (0, 0, 0),
        stroke_width: int = 2,
        curve_steps: int = 16,
        resample: str = "LANCZOS"
    ):
        """
        Initialize renderer.

        Args:
            width: Output raster width
            height: Output raster height
            border_color: RGB color of the piece outlines
            stroke_width: Outline width in pixels
            curve_steps: Points per curved path segment
            resample: Name of the Pillow resampling filter for scaling
        """
        if width < 1 or height < 1:
            raise RenderTargetUnavailable(f"Cannot render a {width}x{height} raster")

        self.width = width
        self.height = height
        self.border_color = tuple(border_color)
        self.stroke_width = stroke_width
        self.curve_steps = curve_steps
        self.resample = getattr(Image.Resampling, resample)

    def _new_surface(self, mode: str, color) -> Image.Image:
        try:
            return Image.new(mode, (self.width, self.height), color)
        except (MemoryError, ValueError) as e:
            raise RenderTargetUnavailable(
                f"Could not allocate {self.width}x{self.height} {mode} surface"
            ) from e

    @timed
    def prepare_source(self, source: Image.Image) -> Image.Image:
        """
        Convert the source to RGBA and resample it to the output size.

        Args:
            source: Decoded source image

        Returns:
            New RGBA image of the output size
        """
        image = source.convert('RGBA')
        if image.size == (self.width, self.height):
            # convert() may hand back the same object for RGBA input
            return image.copy()
        try:
            return image.resize((self.width, self.height), self.resample)
        except (MemoryError, ValueError) as e:
            raise RenderTargetUnavailable(
                f"Could not resample source to {self.width}x{self.height}"
            ) from e

    def _outline(self, piece: PuzzlePiece) -> List[Tuple[float, float]]:
        return piece.path.points(self.curve_steps)

    def stroke_pieces(self, img: Image.Image, pieces: Iterable[PuzzlePiece]) -> Image.Image:
        """
        Draw every piece outline on img in the given order.

        Args:
            img: RGBA image, modified in place
            pieces: Pieces to outline

        Returns:
            The same image
        """
        draw = ImageDraw.Draw(img)
        color = self.border_color + (255,)
        radius = self.stroke_width / 2

        for piece in pieces:
            outline = self._outline(piece)
            # Repeat the first vertex to close the stroke
            draw.line(outline + [outline[0]], fill=color, width=self.stroke_width)

            # Round joins: ImageDraw.line leaves a notch outside each corner
            if radius >= 1:
                for x, y in outline:
                    draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=color)

        return img

    def hole_mask(self, pieces: Iterable[PuzzlePiece]) -> Image.Image:
        """
        Union of the given piece shapes as an 'L' mask (255 inside).

        Shapes are filled with the nonzero winding rule, so a kinked outline
        that crosses itself has no unfilled pockets.

        Args:
            pieces: Pieces to cut

        Returns:
            Mask image of the output size
        """
        mask = self._new_surface('L', 0)
        draw = ImageDraw.Draw(mask)
        pixels = None

        for piece in pieces:
            outline = self._outline(piece)
            draw.polygon(outline, fill=255)

            inside = nonzero_fill(outline, self.width, self.height)
            if inside is not None:
                if pixels is None:
                    pixels = np.zeros((self.height, self.width), dtype=bool)
                pixels |= inside

        if pixels is None:
            return mask
        filled = np.array(mask)
        filled[pixels] = 255
        return Image.fromarray(filled)

    def cut_holes(self, img: Image.Image, pieces: Iterable[PuzzlePiece]) -> Image.Image:
        """
        Make every pixel under the given pieces fully transparent.

        Args:
            img: RGBA image
            pieces: Pieces to remove

        Returns:
            New RGBA image with the holes cut
        """
        mask = np.array(self.hole_mask(pieces)) > 0
        if not mask.any():
            return img

        pixels = np.array(img)
        pixels[mask] = TRANSPARENT
        return Image.fromarray(pixels)

    @timed
    def render_complete(self, base: Image.Image, pieces: List[PuzzlePiece]) -> Image.Image:
        """Source image with every piece outlined."""
        return self.stroke_pieces(base.copy(), pieces)

    @timed
    def render_missing(
        self,
        base: Image.Image,
        pieces: List[PuzzlePiece],
        missing: Iterable[int]
    ) -> Image.Image:
        """
        Source image with the missing pieces cut out and every piece outlined.

        Args:
            base: Resampled RGBA source
            pieces: All pieces, row-major
            missing: Row-major indices of the pieces to cut out

        Returns:
            RGBA image
        """
        missing = set(missing)
        holes = [piece for piece in pieces if piece.index in missing]
        img = self.cut_holes(base.copy(), holes)
        return self.stroke_pieces(img, pieces)

    def render(
        self,
        source: Image.Image,
        pieces: List[PuzzlePiece],
        missing: Optional[Iterable[int]] = None
    ) -> Tuple[Image.Image, Image.Image]:
        """
        Render both puzzle rasters.

        Args:
            source: Decoded source image (any size, any mode)
            pieces: All pieces, row-major, in output coordinates
            missing: Indices of the pieces to cut out of the second raster

        Returns:
            Tuple of (complete, missing) RGBA images
        """
        base = self.prepare_source(source)
        complete = self.render_complete(base, pieces)
        missing_img = self.render_missing(base, pieces, missing or ())
        return complete, missing_img
