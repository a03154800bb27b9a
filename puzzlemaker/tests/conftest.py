"""Shared fixtures for puzzle generation tests."""
import random

import numpy as np
import pytest
from PIL import Image

from puzzlemaker.config import OutputQuality, PieceStyle, PuzzleConfig


def _gradient_image(width: int, height: int) -> Image.Image:
    """RGB source image with a horizontal/vertical gradient."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[..., 0] = xs[np.newaxis, :].astype(np.uint8)
    pixels[..., 1] = ys[:, np.newaxis].astype(np.uint8)
    pixels[..., 2] = 64
    return Image.fromarray(pixels)


@pytest.fixture
def small_image():
    return _gradient_image(240, 180)


@pytest.fixture
def classic_config():
    return PuzzleConfig(
        columns=4,
        rows=3,
        missing_percentage=25,
        piece_style=PieceStyle.CLASSIC,
        border_color=(255, 0, 0),
        output_quality=OutputQuality.FAST
    )


@pytest.fixture
def abstract_config():
    return PuzzleConfig(
        columns=5,
        rows=4,
        missing_percentage=30,
        piece_style=PieceStyle.ABSTRACT,
        border_color='#0000FF',
        output_quality=OutputQuality.FAST
    )


@pytest.fixture
def rng():
    return random.Random(1234)
