import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

# Make the package importable without installation
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from imglens.core import Image  # noqa: E402


def _gradient_pixels(width, height):
    return [
        ((x * 37 + y * 11) % 256, (x * 5 + y * 53) % 256, (x * y * 7 + 13) % 256, 255 - (x + y) % 7)
        for y in range(height)
        for x in range(width)
    ]


@pytest.fixture
def gradient_image() -> Image:
    """A 9x7 image with varied, deterministic channel values."""
    return Image.from_pixels(9, 7, _gradient_pixels(9, 7))


@pytest.fixture
def grid_4x4() -> Image:
    """4x4 image where pixel (x, y) is (x, y, x + 4y, 255)."""
    return Image.from_pixels(4, 4, [(x, y, x + 4 * y, 255) for y in range(4) for x in range(4)])


@pytest.fixture
def checkerboard_2x2() -> Image:
    black = (0, 0, 0, 255)
    white = (255, 255, 255, 255)
    return Image.from_pixels(2, 2, [black, white, white, black])


@pytest.fixture
def single_pixel() -> Image:
    return Image.from_pixels(1, 1, [(10, 20, 30, 40)])


@pytest.fixture
def step_edge() -> Image:
    """16x16 image, black on the left half and white on the right half."""
    return Image.from_pixels(
        16, 16,
        [(0, 0, 0, 255) if x < 8 else (255, 255, 255, 255) for y in range(16) for x in range(16)],
    )
