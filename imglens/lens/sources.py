"""
Source lenses: lenses that do not wrap another lens.
"""

import threading
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..core import Image, InvalidParameterError, Pixel
from .base import Lens


class ImageLens(Lens):
    """
    Lens over the pixels of an Image.

    Pixel tuples are cached on the first read, so building a lens graph
    allocates nothing; the cache is shared by every worker.
    """

    def __init__(self, image: Image):
        self.image = image
        self._rows: Optional[List[List[Pixel]]] = None
        self._lock = threading.Lock()

    def dimensions(self) -> Tuple[int, int]:
        return self.image.width, self.image.height

    def _look(self, x: int, y: int):
        rows = self._rows
        if rows is None:
            rows = self._load()
        return rows[y][x]

    def _load(self) -> List[List[Pixel]]:
        with self._lock:
            if self._rows is None:
                self._rows = self.image.rows()
            return self._rows

    @property
    def loaded(self) -> bool:
        return self._rows is not None


class ValueLens(Lens):
    """Lens that has the same value everywhere."""

    def __init__(self, value: Any, width: int, height: int):
        _validate_domain(width, height)
        self.value = value
        self._dimensions = (width, height)

    def dimensions(self) -> Tuple[int, int]:
        return self._dimensions

    def _look(self, x: int, y: int):
        return self.value


class FunctionLens(Lens):
    """Synthetic lens whose value is f(x, y)."""

    def __init__(self, f: Callable[[int, int], Any], width: int, height: int):
        _validate_domain(width, height)
        self.f = f
        self._dimensions = (width, height)

    def dimensions(self) -> Tuple[int, int]:
        return self._dimensions

    def _look(self, x: int, y: int):
        return self.f(x, y)


class MaterializedLens(Lens):
    """
    Concrete grid of already evaluated values.

    Produced by Lens.collect(); acts as a stage barrier for values that are
    not pixels (gradients, edge classes, ...).
    """

    def __init__(self, rows: Sequence[Sequence[Any]]):
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise InvalidParameterError("materialized lens must not be empty")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidParameterError("all rows must have the same width")
        self._rows: List[List[Any]] = rows
        self._dimensions = (width, len(rows))

    def dimensions(self) -> Tuple[int, int]:
        return self._dimensions

    def _look(self, x: int, y: int):
        return self._rows[y][x]

    @property
    def rows(self) -> List[List[Any]]:
        return self._rows

    def values(self) -> List[Any]:
        """All values in row-major order."""
        return [value for row in self._rows for value in row]

    def to_image(self) -> Image:
        """Build an Image from a grid of RGBA pixels."""
        return Image.from_rows(self._rows)


def _validate_domain(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            f"lens dimensions must be positive, got {width}x{height}"
        )
