"""
Image container.

An Image owns a flat RGBA8 buffer of exactly width * height pixels. The
buffer is copied on construction and marked read-only, so two Image
instances never alias each other's pixels.
"""

from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np

from .errors import InvalidParameterError, OutOfBoundsError
from .types import CHANNEL_COUNT, Pixel

if TYPE_CHECKING:
    from ..lens import ImageLens


class Image:
    """Immutable RGBA8 image."""

    __slots__ = ("_width", "_height", "_pixels")

    def __init__(self, width: int, height: int, buffer: bytes):
        """
        Create an image from a flat RGBA8 buffer.

        Args:
            width: Image width, > 0
            height: Image height, > 0
            buffer: Bytes-like object holding width * height * 4 channel values

        Raises:
            InvalidParameterError: on non-positive dimensions, channel values
                outside [0, 255], or a buffer whose length does not match the
                dimensions
        """
        _validate_dimensions(width, height)
        try:
            data = np.frombuffer(bytes(buffer), dtype=np.uint8)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"buffer must hold 8-bit channel values: {e}") from e
        if data.size != width * height * CHANNEL_COUNT:
            raise InvalidParameterError(
                f"buffer holds {data.size // CHANNEL_COUNT} pixels "
                f"({data.size} bytes), expected {width * height} for {width}x{height}"
            )
        self._init(width, height, data.reshape((height, width, CHANNEL_COUNT)))

    def _init(self, width: int, height: int, pixels: np.ndarray) -> None:
        pixels = np.array(pixels, dtype=np.uint8, copy=True)
        pixels.flags.writeable = False
        self._width = width
        self._height = height
        self._pixels = pixels

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Image":
        """Create an image from a (height, width, 4) uint8 array (copied)."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != CHANNEL_COUNT:
            raise InvalidParameterError(
                f"expected an array of shape (height, width, 4), got {array.shape}"
            )
        height, width = array.shape[0], array.shape[1]
        _validate_dimensions(width, height)
        image = cls.__new__(cls)
        image._init(width, height, array)
        return image

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Sequence[Pixel]) -> "Image":
        """Create an image from a row-major sequence of RGBA tuples."""
        _validate_dimensions(width, height)
        if len(pixels) != width * height:
            raise InvalidParameterError(
                f"got {len(pixels)} pixels, expected {width * height} for {width}x{height}"
            )
        array = np.array(pixels, dtype=np.uint8).reshape((height, width, CHANNEL_COUNT))
        return cls.from_array(array)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Pixel]]) -> "Image":
        """Create an image from a list of rows of RGBA tuples."""
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise InvalidParameterError("image must have at least one row and column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidParameterError("all rows must have the same width")
        return cls.from_array(np.array(rows, dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, pixel: Pixel) -> "Image":
        """Create an image where every pixel has the same value."""
        _validate_dimensions(width, height)
        array = np.empty((height, width, CHANNEL_COUNT), dtype=np.uint8)
        array[:, :] = pixel
        return cls.from_array(array)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def dimensions(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (height, width, 4) view of the pixel data."""
        return self._pixels

    def buffer(self) -> bytes:
        """Flat RGBA8 buffer, row-major."""
        return self._pixels.tobytes()

    def pixel(self, x: int, y: int) -> Pixel:
        """Get the pixel at (x, y)."""
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfBoundsError((x, y), self.dimensions())
        r, g, b, a = self._pixels[y, x].tolist()
        return r, g, b, a

    def rows(self) -> list[list[Pixel]]:
        """All pixels as nested lists of tuples, row-major."""
        return [[tuple(px) for px in row] for row in self._pixels.tolist()]

    def lens(self) -> "ImageLens":
        """Wrap the image in a source lens."""
        from ..lens import ImageLens
        return ImageLens(self)

    def copy(self) -> "Image":
        return Image.from_array(self._pixels)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self.dimensions() == other.dimensions()
            and np.array_equal(self._pixels, other._pixels)
        )

    def __hash__(self) -> int:
        return hash((self._width, self._height, self.buffer()))

    def __repr__(self) -> str:
        return f"Image({self._width}x{self._height})"


def _validate_dimensions(width: int, height: int) -> None:
    if not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
        raise InvalidParameterError("image width and height must be integers")
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            f"image dimensions must be positive, got {width}x{height}"
        )
