"""
Border policies for neighborhood sampling.
"""

from enum import Enum
from typing import Tuple


class BorderPolicy(Enum):
    """How out-of-range samples are resolved."""
    CLAMP = "clamp"  # nearest valid coordinate

    def resolve(self, x: int, y: int, width: int, height: int) -> Tuple[int, int]:
        """Map a possibly out-of-range coordinate into [0, width) x [0, height)."""
        if x < 0:
            x = 0
        elif x >= width:
            x = width - 1
        if y < 0:
            y = 0
        elif y >= height:
            y = height - 1
        return x, y
