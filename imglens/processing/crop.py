"""Crop: copy a rectangular subregion of the source."""

from typing import Optional, Tuple

from ..core import Image, InvalidParameterError
from ..lens import Lens, Materializer


def validate_crop(
    source_size: Tuple[int, int],
    width: int,
    height: int,
    offset_x: int = 0,
    offset_y: int = 0,
) -> None:
    """
    Check crop geometry against the source size.

    Raises:
        InvalidParameterError: on non-positive size, negative offset, or a
            region that does not fit inside the source
    """
    for name, value in (("width", width), ("height", height),
                        ("offset_x", offset_x), ("offset_y", offset_y)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(f"crop {name} must be an integer, got {value!r}")

    if width <= 0 or height <= 0:
        raise InvalidParameterError(f"crop size must be positive, got {width}x{height}")
    if offset_x < 0 or offset_y < 0:
        raise InvalidParameterError(
            f"crop offset must not be negative, got ({offset_x}, {offset_y})"
        )

    source_width, source_height = source_size
    if offset_x + width > source_width or offset_y + height > source_height:
        raise InvalidParameterError(
            f"crop region {width}x{height}+{offset_x}+{offset_y} exceeds "
            f"source {source_width}x{source_height}"
        )


def crop_lens(
    source: Lens,
    width: int,
    height: int,
    offset_x: int = 0,
    offset_y: int = 0,
) -> Lens:
    validate_crop(source.dimensions(), width, height, offset_x, offset_y)
    return source.remap(
        lambda lens, x, y: lens.look_at(x + offset_x, y + offset_y),
        (width, height),
    )


def crop(
    image: Image,
    width: int,
    height: int,
    offset_x: int = 0,
    offset_y: int = 0,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Return the width x height region whose top-left corner is (offset_x, offset_y)."""
    lens = crop_lens(image.lens(), width, height, offset_x, offset_y)
    return lens.materialize(materializer)
