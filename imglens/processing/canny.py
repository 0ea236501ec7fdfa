"""
Canny edge detection.

Five stages, each fully materialized before the next one starts:

1. grayscale
2. gaussian smoothing
3. Sobel gradient (magnitude + quantized direction)
4. non-maximum suppression along the gradient direction
5. double threshold and hysteresis (8-connected flood fill from strong pixels)

Stages 3 and 4 carry non-pixel values, so they are collected into
MaterializedLens grids instead of Images.
"""

import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional

from ..core import (
    ChannelFlags,
    Image,
    InvalidParameterError,
    Kernel,
    SOBEL_X,
    SOBEL_Y,
)
from ..lens import FunctionLens, Materializer, MaterializedLens, Window
from ..utils.logging import get_logger
from .blur import convolve_lens
from .color import grayscale_lens

logger = get_logger(__name__)

DEFAULT_CANNY_RADIUS = 2
DEFAULT_CANNY_SIGMA = 2.0
DEFAULT_LOW_THRESHOLD = 10.0
DEFAULT_HIGH_THRESHOLD = 20.0

MAX_MAGNITUDE = 255.0

EDGE_PIXEL = (255, 255, 255, 255)
BACKGROUND_PIXEL = (0, 0, 0, 255)


class Direction(Enum):
    """Quantized gradient direction; value is the (dx, dy) step along it."""
    HORIZONTAL = (1, 0)
    DIAGONAL = (1, 1)        # down-right in image coordinates
    VERTICAL = (0, 1)
    ANTI_DIAGONAL = (-1, 1)  # down-left in image coordinates

    @classmethod
    def from_gradient(cls, gx: float, gy: float) -> "Direction":
        """Quantize atan2(gy, gx), folded into [0, 180) degrees."""
        angle = math.degrees(math.atan2(gy, gx)) % 180.0
        if angle < 22.5 or angle >= 157.5:
            return cls.HORIZONTAL
        if angle < 67.5:
            return cls.DIAGONAL
        if angle < 112.5:
            return cls.VERTICAL
        return cls.ANTI_DIAGONAL


class Gradient(NamedTuple):
    magnitude: float
    direction: Direction


class EdgeClass(Enum):
    NONE = 0
    WEAK = 1
    STRONG = 2


@dataclass
class CannyStages:
    """Every intermediate result of a Canny run."""
    grayscale: Image
    smoothed: Image
    gradients: MaterializedLens
    suppressed: MaterializedLens
    edges: MaterializedLens
    result: Image


def validate_thresholds(low_threshold: float, high_threshold: float) -> None:
    for name, value in (("low_threshold", low_threshold), ("high_threshold", high_threshold)):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if low_threshold < 0:
        raise InvalidParameterError(f"low_threshold must not be negative, got {low_threshold}")
    if low_threshold > high_threshold:
        raise InvalidParameterError(
            f"low_threshold ({low_threshold}) must not exceed high_threshold ({high_threshold})"
        )


def _sobel(window: Window) -> Gradient:
    gx = gy = 0.0
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            value = window.at(dx, dy)[0]
            gx += SOBEL_X.weight(dx, dy) * value
            gy += SOBEL_Y.weight(dx, dy) * value
    magnitude = min(math.hypot(gx, gy), MAX_MAGNITUDE)
    return Gradient(magnitude, Direction.from_gradient(gx, gy))


def _suppress(window: Window) -> float:
    gradient = window.center
    dx, dy = gradient.direction.value
    forward = window.at(dx, dy).magnitude
    backward = window.at(-dx, -dy).magnitude
    if gradient.magnitude >= forward and gradient.magnitude >= backward:
        return gradient.magnitude
    return 0.0


def hysteresis(
    magnitudes: MaterializedLens,
    low_threshold: float,
    high_threshold: float,
) -> List[List[bool]]:
    """
    Double threshold followed by 8-connected flood fill from strong pixels.

    Pixels zeroed by non-maximum suppression are never edges, whatever the
    thresholds. Returns a grid of booleans, True on edge pixels.
    """
    width, height = magnitudes.dimensions()
    classes = [
        [
            EdgeClass.NONE if m <= 0.0
            else EdgeClass.STRONG if m >= high_threshold
            else EdgeClass.WEAK if m >= low_threshold
            else EdgeClass.NONE
            for m in row
        ]
        for row in magnitudes.rows
    ]

    edges = [[False] * width for _ in range(height)]
    queue = deque()
    for y in range(height):
        for x in range(width):
            if classes[y][x] is EdgeClass.STRONG:
                edges[y][x] = True
                queue.append((x, y))

    while queue:
        x, y = queue.popleft()
        for ny in range(max(y - 1, 0), min(y + 2, height)):
            for nx in range(max(x - 1, 0), min(x + 2, width)):
                if not edges[ny][nx] and classes[ny][nx] is EdgeClass.WEAK:
                    edges[ny][nx] = True
                    queue.append((nx, ny))

    return edges


def canny_stages(
    image: Image,
    radius: int = DEFAULT_CANNY_RADIUS,
    sigma: float = DEFAULT_CANNY_SIGMA,
    low_threshold: float = DEFAULT_LOW_THRESHOLD,
    high_threshold: float = DEFAULT_HIGH_THRESHOLD,
    materializer: Optional[Materializer] = None,
) -> CannyStages:
    """Run every Canny stage and keep the intermediates."""
    # All parameters are checked before the first stage runs
    kernel = Kernel.gaussian(radius, sigma)
    validate_thresholds(low_threshold, high_threshold)

    width, height = image.dimensions()
    logger.debug("Canny %dx%d: grayscale", width, height)
    gray = grayscale_lens(image.lens(), ChannelFlags.RGB).materialize(materializer)

    logger.debug("Canny %dx%d: gaussian smoothing (radius=%d, sigma=%s)", width, height, radius, sigma)
    smoothed = convolve_lens(gray.lens(), kernel, ChannelFlags.RGB).materialize(materializer)

    logger.debug("Canny %dx%d: gradient", width, height)
    gradients = smoothed.lens().windowed(1, _sobel).collect(materializer)

    logger.debug("Canny %dx%d: non-maximum suppression", width, height)
    suppressed = gradients.windowed(1, _suppress).collect(materializer)

    logger.debug(
        "Canny %dx%d: hysteresis (low=%s, high=%s)", width, height, low_threshold, high_threshold
    )
    edges = MaterializedLens(hysteresis(suppressed, low_threshold, high_threshold))

    result = FunctionLens(
        lambda x, y: EDGE_PIXEL if edges.look_at(x, y) else BACKGROUND_PIXEL,
        width,
        height,
    ).materialize(materializer)

    return CannyStages(
        grayscale=gray,
        smoothed=smoothed,
        gradients=gradients,
        suppressed=suppressed,
        edges=edges,
        result=result,
    )


def canny(
    image: Image,
    radius: int = DEFAULT_CANNY_RADIUS,
    sigma: float = DEFAULT_CANNY_SIGMA,
    low_threshold: float = DEFAULT_LOW_THRESHOLD,
    high_threshold: float = DEFAULT_HIGH_THRESHOLD,
    materializer: Optional[Materializer] = None,
) -> Image:
    """
    Detect edges.

    Returns an image that is white on edge pixels and opaque black elsewhere.
    """
    stages = canny_stages(image, radius, sigma, low_threshold, high_threshold, materializer)
    return stages.result
