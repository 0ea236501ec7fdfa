"""
Error taxonomy for img-lens.

Construction problems are reported eagerly as InvalidParameterError, before
any materialization work begins. OutOfBoundsError only surfaces when a lens
is evaluated directly outside its declared domain.
"""

from typing import Optional, Tuple


class ImageLensError(Exception):
    """Base class for all img-lens errors."""


class InvalidParameterError(ImageLensError, ValueError):
    """A filter, image or geometry parameter is invalid."""

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = issues or []


class OutOfBoundsError(ImageLensError, IndexError):
    """A lens was asked for a coordinate outside of its domain."""

    def __init__(self, point: Tuple[int, int], dimensions: Tuple[int, int]):
        x, y = point
        width, height = dimensions
        super().__init__(f"point ({x}, {y}) is out of bounds for {width}x{height}")
        self.point = point
        self.dimensions = dimensions


class CodecError(ImageLensError):
    """An image file could not be decoded or encoded."""
