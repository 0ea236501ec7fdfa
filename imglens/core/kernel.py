"""
Convolution kernels.

A Kernel is an immutable odd-sized square matrix of float weights. Mean and
gaussian kernels are normalized so their weights sum to 1.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from .errors import InvalidParameterError


class Kernel:
    """Immutable (2 * radius + 1)^2 weight matrix."""

    __slots__ = ("_weights", "_rows")

    def __init__(self, weights):
        array = np.array(weights, dtype=np.float64, copy=True)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise InvalidParameterError(
                f"kernel must be a square matrix, got shape {array.shape}"
            )
        if array.shape[0] % 2 != 1:
            raise InvalidParameterError(
                f"kernel size must be odd, got {array.shape[0]}"
            )
        array.flags.writeable = False
        self._weights = array
        # Plain floats for the per-pixel hot loop
        self._rows: Tuple[Tuple[float, ...], ...] = tuple(
            tuple(row) for row in array.tolist()
        )

    @classmethod
    def mean(cls, radius: int) -> "Kernel":
        """Uniform kernel with weights 1 / (2 * radius + 1)^2."""
        _validate_radius(radius)
        size = 2 * radius + 1
        return cls(np.full((size, size), 1.0 / (size * size)))

    @classmethod
    def gaussian(cls, radius: int, sigma: float) -> "Kernel":
        """
        Normalized gaussian kernel.

        Weight at offset (i, j) from the center is exp(-(i^2 + j^2) / (2 sigma^2)),
        divided by the sum of all weights.

        Raises:
            InvalidParameterError: if radius < 0 or sigma <= 0
        """
        _validate_radius(radius)
        if not isinstance(sigma, (int, float)) or not math.isfinite(sigma) or sigma <= 0:
            raise InvalidParameterError(f"sigma must be positive, got {sigma}")

        offsets = np.arange(-radius, radius + 1, dtype=np.float64)
        ii, jj = np.meshgrid(offsets, offsets, indexing="ij")
        weights = np.exp(-(ii ** 2 + jj ** 2) / (2.0 * sigma * sigma))
        return cls(weights / weights.sum())

    @property
    def radius(self) -> int:
        return self._weights.shape[0] // 2

    @property
    def size(self) -> int:
        return self._weights.shape[0]

    @property
    def weights(self) -> np.ndarray:
        """Read-only weight matrix, indexed [row][column]."""
        return self._weights

    @property
    def rows(self) -> Tuple[Tuple[float, ...], ...]:
        return self._rows

    def weight(self, dx: int, dy: int) -> float:
        """Weight at offset (dx, dy) from the center."""
        r = self.radius
        return self._rows[dy + r][dx + r]

    def total(self) -> float:
        return float(self._weights.sum())

    def is_normalized(self, tolerance: float = 1e-6) -> bool:
        return abs(self.total() - 1.0) <= tolerance

    def flat(self) -> Sequence[float]:
        """Weights in row-major order, matching Window.values."""
        return [w for row in self._rows for w in row]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self._weights, other._weights)

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Kernel(radius={self.radius})"


# 3x3 Sobel operators, indexed [row][column]
SOBEL_X = Kernel([
    [-1.0, 0.0, 1.0],
    [-2.0, 0.0, 2.0],
    [-1.0, 0.0, 1.0],
])

SOBEL_Y = Kernel([
    [-1.0, -2.0, -1.0],
    [0.0, 0.0, 0.0],
    [1.0, 2.0, 1.0],
])


def _validate_radius(radius: int) -> None:
    if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)):
        raise InvalidParameterError(f"radius must be an integer, got {radius!r}")
    if radius < 0:
        raise InvalidParameterError(f"radius must not be negative, got {radius}")
