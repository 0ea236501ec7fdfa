"""
Lens combinators.

Each combinator holds references to its inputs and evaluates them on
demand. Inputs are read through the unchecked _look; border handling for
windowed reads happens here before any input is touched.
"""

from typing import Any, Callable, List, Tuple

from ..core import BorderPolicy, InvalidParameterError
from .base import Lens


class Window:
    """
    Neighborhood gathered by a WindowedLens.

    values holds the (2 * radius + 1)^2 samples in row-major order, the first
    entry being offset (-radius, -radius).
    """

    __slots__ = ("radius", "size", "values")

    def __init__(self, radius: int, values: List[Any]):
        self.radius = radius
        self.size = 2 * radius + 1
        self.values = values

    def at(self, dx: int, dy: int) -> Any:
        """Sample at offset (dx, dy) from the center."""
        r = self.radius
        return self.values[(dy + r) * self.size + dx + r]

    @property
    def center(self) -> Any:
        return self.values[len(self.values) // 2]

    def rows(self) -> List[List[Any]]:
        size = self.size
        return [self.values[i:i + size] for i in range(0, len(self.values), size)]

    def __len__(self) -> int:
        return len(self.values)


class MapLens(Lens):
    """value = f(source value)."""

    def __init__(self, source: Lens, f: Callable[[Any], Any]):
        self.source = source
        self.f = f

    def dimensions(self) -> Tuple[int, int]:
        return self.source.dimensions()

    def _look(self, x: int, y: int):
        return self.f(self.source._look(x, y))


class WindowedLens(Lens):
    """value = reducer(Window around (x, y))."""

    def __init__(
        self,
        source: Lens,
        radius: int,
        reducer: Callable[[Window], Any],
        border: BorderPolicy = BorderPolicy.CLAMP,
    ):
        if isinstance(radius, bool) or not isinstance(radius, int):
            raise InvalidParameterError(f"radius must be an integer, got {radius!r}")
        if radius < 0:
            raise InvalidParameterError(f"radius must not be negative, got {radius}")
        self.source = source
        self.radius = radius
        self.reducer = reducer
        self.border = border

    def dimensions(self) -> Tuple[int, int]:
        return self.source.dimensions()

    def _look(self, x: int, y: int):
        width, height = self.source.dimensions()
        r = self.radius
        resolve = self.border.resolve
        look = self.source._look

        values = []
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                sx, sy = resolve(x + dx, y + dy, width, height)
                values.append(look(sx, sy))
        return self.reducer(Window(r, values))


class RemapLens(Lens):
    """
    value = f(source, x, y) over new dimensions.

    f reads the source through look_at, so a bad mapping surfaces as
    OutOfBoundsError instead of a wrong pixel.
    """

    def __init__(
        self,
        source: Lens,
        f: Callable[[Lens, int, int], Any],
        dimensions: Tuple[int, int],
    ):
        width, height = dimensions
        if width <= 0 or height <= 0:
            raise InvalidParameterError(
                f"remap dimensions must be positive, got {width}x{height}"
            )
        self.source = source
        self.f = f
        self._dimensions = (width, height)

    def dimensions(self) -> Tuple[int, int]:
        return self._dimensions

    def _look(self, x: int, y: int):
        return self.f(self.source, x, y)


class ZipLens(Lens):
    """value = tuple of every input value at (x, y)."""

    def __init__(self, *sources: Lens):
        if not sources:
            raise InvalidParameterError("zip needs at least one lens")
        self.sources = sources
        self._dimensions = (
            min(s.dimensions()[0] for s in sources),
            min(s.dimensions()[1] for s in sources),
        )

    def dimensions(self) -> Tuple[int, int]:
        return self._dimensions

    def _look(self, x: int, y: int):
        return tuple(s._look(x, y) for s in self.sources)
