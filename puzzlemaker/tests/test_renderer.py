"""Tests for quality scaling and raster compositing."""
import math
import random

import numpy as np
import pytest
from PIL import Image

from puzzlemaker.config import OutputQuality, PieceStyle
from puzzlemaker.errors import RenderTargetUnavailable
from puzzlemaker.geometry.paths import LineSegment, PiecePath
from puzzlemaker.geometry.puzzle import PuzzleLayout, PuzzlePiece
from puzzlemaker.rendering.renderer import PuzzleRenderer, compute_target_size, nonzero_fill

RED = (255, 0, 0)
SOURCE_COLOR = (128, 128, 128)


def solid_image(width, height):
    return Image.new('RGB', (width, height), SOURCE_COLOR)


def _classic_pieces(width, height, rows=3, cols=3, seed=0):
    layout = PuzzleLayout(width, height, rows, cols, PieceStyle.CLASSIC)
    pieces, _ = layout.generate(random.Random(seed))
    return pieces


def _cell_center(piece):
    cx, cy = piece.get_original_center()
    return int(cx), int(cy)


# ========== Quality-tier scaling ==========

def test_scale_down_fast():
    assert compute_target_size(1600, 1200, OutputQuality.FAST) == (800, 600)


def test_small_image_not_upscaled():
    assert compute_target_size(400, 300, OutputQuality.HIGH) == (400, 300)


def test_original_unbounded():
    assert compute_target_size(6000, 4000, OutputQuality.ORIGINAL) == (6000, 4000)


def test_limited_by_width():
    assert compute_target_size(4000, 1000, OutputQuality.HIGH) == (1920, 480)


@pytest.mark.parametrize("quality", [OutputQuality.FAST, OutputQuality.STANDARD, OutputQuality.HIGH])
@pytest.mark.parametrize("size", [(1280, 1000), (3000, 200), (801, 601), (5000, 5000), (640, 480)])
def test_never_exceeds_cap_or_source(quality, size):
    width, height = size
    max_w, max_h = quality.max_size
    out_w, out_h = compute_target_size(width, height, quality)

    assert out_w <= max_w and out_h <= max_h
    assert out_w <= width and out_h <= height


def test_aspect_ratio_preserved():
    out_w, out_h = compute_target_size(3000, 2000, OutputQuality.STANDARD)
    assert out_w / out_h == pytest.approx(3000 / 2000, rel=0.01)


# ========== Compositing ==========

def test_render_target_unavailable_for_empty_surface():
    with pytest.raises(RenderTargetUnavailable):
        PuzzleRenderer(0, 100)


def test_prepare_source_resamples_to_target():
    renderer = PuzzleRenderer(80, 60)
    base = renderer.prepare_source(solid_image(160, 120))
    assert base.size == (80, 60)
    assert base.mode == 'RGBA'


def test_prepare_source_does_not_alias_input():
    source = solid_image(90, 90).convert('RGBA')
    renderer = PuzzleRenderer(90, 90)
    base = renderer.prepare_source(source)
    assert base is not source


def test_complete_has_strokes_on_grid_lines():
    """Border color appears on the vertical grid line away from the bumps."""
    renderer = PuzzleRenderer(300, 300, border_color=RED)
    pieces = _classic_pieces(300, 300)
    complete, _ = renderer.render(solid_image(300, 300), pieces, set())

    pixels = np.array(complete)
    # Line x=100 near the top, clear of the bump at y=50
    window = pixels[10, 97:104, :3]
    assert any(tuple(px) == RED for px in window)
    # Cell interior keeps the source color and is opaque
    assert tuple(pixels[150, 150]) == SOURCE_COLOR + (255,)


def test_missing_pieces_become_transparent():
    renderer = PuzzleRenderer(300, 300, border_color=RED)
    pieces = _classic_pieces(300, 300)
    missing = {0, 4, 8}
    complete, missing_img = renderer.render(solid_image(300, 300), pieces, missing)

    complete_px = np.array(complete)
    missing_px = np.array(missing_img)
    for piece in pieces:
        cx, cy = _cell_center(piece)
        assert complete_px[cy, cx, 3] == 255
        if piece.index in missing:
            assert tuple(missing_px[cy, cx]) == (0, 0, 0, 0)
        else:
            assert missing_px[cy, cx, 3] == 255


def test_strokes_identical_in_both_rasters():
    """Every outline pixel of the complete raster is also drawn on the missing one."""
    renderer = PuzzleRenderer(240, 180, border_color=RED)
    pieces = _classic_pieces(240, 180, rows=3, cols=4, seed=11)
    complete, missing_img = renderer.render(solid_image(240, 180), pieces, {1, 6})

    complete_px = np.array(complete)
    missing_px = np.array(missing_img)
    stroke = np.all(complete_px == np.array(RED + (255,), dtype=np.uint8), axis=-1)

    assert stroke.any()
    assert np.array_equal(complete_px[stroke], missing_px[stroke])


def test_no_missing_pieces_gives_identical_rasters():
    renderer = PuzzleRenderer(120, 90)
    pieces = _classic_pieces(120, 90)
    complete, missing_img = renderer.render(solid_image(120, 90), pieces, set())
    assert np.array_equal(np.array(complete), np.array(missing_img))


def test_hole_mask_is_union_of_shapes():
    renderer = PuzzleRenderer(300, 300)
    pieces = _classic_pieces(300, 300)
    mask_a = np.array(renderer.hole_mask([pieces[0]])) > 0
    mask_b = np.array(renderer.hole_mask([pieces[1]])) > 0
    mask_ab = np.array(renderer.hole_mask([pieces[0], pieces[1]])) > 0

    assert np.array_equal(mask_ab, mask_a | mask_b)


# ========== Fill rule ==========

def _star_piece():
    """Five-pointed star drawn as one self-crossing outline around (50, 50)."""
    corners = [
        (50 + 40 * math.sin(math.radians(144 * k)), 50 - 40 * math.cos(math.radians(144 * k)))
        for k in range(5)
    ]
    path = PiecePath(start=corners[0], segments=tuple(LineSegment(c) for c in corners[1:] + corners[:1]))
    return PuzzlePiece(row=0, col=0, index=0, rect=(0, 0, 100, 100), path=path)


def test_self_crossing_outline_filled_nonzero():
    """The pocket where a crossing outline overlaps itself is cut too."""
    renderer = PuzzleRenderer(100, 100)
    mask = np.array(renderer.hole_mask([_star_piece()])) > 0

    assert mask[50, 50]
    assert mask[20, 50]  # Upper point
    assert not mask[5, 5]


def test_nonzero_fill_square():
    inside = nonzero_fill([(10, 10), (30, 10), (30, 20), (10, 20)], 40, 40)

    assert inside.shape == (40, 40)
    assert inside[10:20, 10:30].all()
    assert inside.sum() == 200


def test_nonzero_fill_outside_raster():
    assert nonzero_fill([(-30, -30), (-10, -30), (-10, -10)], 40, 40) is None


def test_stroke_follows_crossing_outline():
    renderer = PuzzleRenderer(100, 100, border_color=RED, stroke_width=2)
    img = renderer.stroke_pieces(solid_image(100, 100).convert('RGBA'), [_star_piece()])
    pixels = np.array(img)

    stroke = np.all(pixels == np.array(RED + (255,), dtype=np.uint8), axis=-1)
    assert stroke[45:48, 60:64].any()  # Middle of the first star edge
    assert tuple(pixels[5, 5]) == SOURCE_COLOR + (255,)


def test_corners_get_round_joins():
    """Wide strokes fill the outer corner instead of leaving a notch."""
    square = PiecePath(
        start=(20, 20),
        segments=(LineSegment((80, 20)), LineSegment((80, 80)), LineSegment((20, 80)), LineSegment((20, 20)))
    )
    piece = PuzzlePiece(row=0, col=0, index=0, rect=(20, 20, 60, 60), path=square)
    renderer = PuzzleRenderer(100, 100, border_color=RED, stroke_width=6)
    pixels = np.array(renderer.stroke_pieces(solid_image(100, 100).convert('RGBA'), [piece]))

    assert tuple(pixels[19, 19]) == RED + (255,)
    assert tuple(pixels[5, 5]) == SOURCE_COLOR + (255,)
