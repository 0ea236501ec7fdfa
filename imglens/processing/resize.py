"""Nearest-neighbor resize and target size calculation."""

import math
from typing import Optional, Tuple

from ..core import Image, InvalidParameterError
from ..lens import Lens, Materializer

MIN_SCALE = 1e-4
MAX_SCALE = 1.0 / MIN_SCALE


def scale_size(
    size: Tuple[int, int],
    scale_x: float,
    scale_y: float,
) -> Tuple[int, int]:
    """
    Calculate target resize dimensions from scale factors.

    Args:
        size: (width, height) of the source
        scale_x: Horizontal factor in [MIN_SCALE, MAX_SCALE]
        scale_y: Vertical factor in [MIN_SCALE, MAX_SCALE]

    Returns:
        (width, height) tuple, each rounded to the nearest integer
    """
    for name, value in (("scale_x", scale_x), ("scale_y", scale_y)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidParameterError(f"{name} must be a number, got {value!r}")
        if not (MIN_SCALE <= value <= MAX_SCALE):
            raise InvalidParameterError(
                f"{name} value {value} is outside valid range [{MIN_SCALE}, {MAX_SCALE}]"
            )

    width, height = size
    target = (int(math.floor(width * scale_x + 0.5)), int(math.floor(height * scale_y + 0.5)))
    if target[0] <= 0 or target[1] <= 0:
        raise InvalidParameterError(
            f"scaling {width}x{height} by ({scale_x}, {scale_y}) gives an empty image"
        )
    return target


def validate_target_size(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(f"resize {name} must be an integer, got {value!r}")
    if width <= 0 or height <= 0:
        raise InvalidParameterError(f"resize target must be positive, got {width}x{height}")


def source_coordinate(target: int, source_size: int, target_size: int) -> int:
    """
    Map an output coordinate to its nearest source coordinate.

    round(target * source_size / target_size) with exact ties rounding down,
    clamped into [0, source_size). Ties going down makes an integer upscale
    repeat every source pixel the same number of times.
    """
    numerator = 2 * target * source_size - target_size
    denominator = 2 * target_size
    value = -((-numerator) // denominator)  # ceil(target * ratio - 0.5)
    if value < 0:
        return 0
    if value >= source_size:
        return source_size - 1
    return value


def resize_lens(source: Lens, width: int, height: int) -> Lens:
    validate_target_size(width, height)
    source_width, source_height = source.dimensions()

    columns = [source_coordinate(x, source_width, width) for x in range(width)]
    rows = [source_coordinate(y, source_height, height) for y in range(height)]

    return source.remap(
        lambda lens, x, y: lens.look_at(columns[x], rows[y]),
        (width, height),
    )


def resize(
    image: Image,
    width: int,
    height: int,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Nearest-neighbor resize to an explicit width x height."""
    return resize_lens(image.lens(), width, height).materialize(materializer)


def scale(
    image: Image,
    scale_x: float,
    scale_y: float,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Nearest-neighbor resize by scale factors."""
    width, height = scale_size(image.dimensions(), scale_x, scale_y)
    return resize(image, width, height, materializer)
