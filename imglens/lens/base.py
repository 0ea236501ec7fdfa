"""
Lens abstraction.

A lens is a pure, total function over the coordinate domain
[0, width) x [0, height). Combinators build new lenses from existing ones
without copying data; nothing is allocated until a Materializer walks the
output domain.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple, TYPE_CHECKING

from ..core import BorderPolicy, Image, OutOfBoundsError

if TYPE_CHECKING:
    from .combinators import MapLens, RemapLens, WindowedLens, ZipLens
    from .materialize import Materializer
    from .sources import MaterializedLens


class Lens(ABC):
    """Base class for every lens."""

    @abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """Return (width, height) of the lens domain."""

    @abstractmethod
    def _look(self, x: int, y: int) -> Any:
        """Evaluate at (x, y). Callers guarantee the point is in bounds."""

    @property
    def width(self) -> int:
        return self.dimensions()[0]

    @property
    def height(self) -> int:
        return self.dimensions()[1]

    def look_at(self, x: int, y: int) -> Any:
        """
        Evaluate the lens at (x, y).

        Raises:
            OutOfBoundsError: if (x, y) lies outside the lens domain
        """
        width, height = self.dimensions()
        if not (0 <= x < width and 0 <= y < height):
            raise OutOfBoundsError((x, y), (width, height))
        return self._look(x, y)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def map(self, f: Callable[[Any], Any]) -> "MapLens":
        """Lens whose value is f(value of this lens) at the same point."""
        from .combinators import MapLens
        return MapLens(self, f)

    def windowed(
        self,
        radius: int,
        reducer: Callable,
        border: BorderPolicy = BorderPolicy.CLAMP,
    ) -> "WindowedLens":
        """
        Lens whose value reduces the (2 * radius + 1)^2 neighborhood.

        Args:
            radius: Non-negative window radius
            reducer: Called with a Window for every output point
            border: Policy applied to samples outside the domain
        """
        from .combinators import WindowedLens
        return WindowedLens(self, radius, reducer, border)

    def remap(
        self,
        f: Callable[["Lens", int, int], Any],
        dimensions: Tuple[int, int],
    ) -> "RemapLens":
        """Lens of new dimensions whose value is f(self, x, y)."""
        from .combinators import RemapLens
        return RemapLens(self, f, dimensions)

    def zip(self, *others: "Lens") -> "ZipLens":
        """Lens of tuples combining this lens with others point-wise."""
        from .combinators import ZipLens
        return ZipLens(self, *others)

    # ------------------------------------------------------------------
    # Realization
    # ------------------------------------------------------------------

    def materialize(self, materializer: Optional["Materializer"] = None) -> Image:
        """Evaluate every point into a new Image. Values must be RGBA pixels."""
        if materializer is None:
            from .materialize import SequentialMaterializer
            materializer = SequentialMaterializer()
        return materializer.materialize(self)

    def collect(self, materializer: Optional["Materializer"] = None) -> "MaterializedLens":
        """Evaluate every point into a concrete grid that is itself a lens."""
        if materializer is None:
            from .materialize import SequentialMaterializer
            materializer = SequentialMaterializer()
        return materializer.collect(self)

    def __repr__(self) -> str:
        width, height = self.dimensions()
        return f"{type(self).__name__}({width}x{height})"
