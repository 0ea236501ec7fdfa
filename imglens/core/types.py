"""
Core data types for img-lens.

All types use @dataclass and Enum for structured representations.
No loose dicts at the internal API boundary.
"""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Tuple

from .errors import InvalidParameterError

# A single RGBA8 pixel: four ints in [0, 255]
Pixel = Tuple[int, int, int, int]

CHANNEL_COUNT = 4
CHANNEL_MAX = 255


class ChannelFlags(Flag):
    """Selection of channels a filter is allowed to write."""
    RED = auto()
    GREEN = auto()
    BLUE = auto()
    ALPHA = auto()

    RGB = RED | GREEN | BLUE
    RGBA = RGB | ALPHA

    @classmethod
    def parse(cls, text: str) -> "ChannelFlags":
        """Parse a selection such as "RGB" or "RA". Letters may appear once."""
        letters = {"R": cls.RED, "G": cls.GREEN, "B": cls.BLUE, "A": cls.ALPHA}
        text = text.strip().upper()
        if not text:
            raise InvalidParameterError("channel selection must not be empty")

        flags = None
        for letter in text:
            flag = letters.get(letter)
            if flag is None:
                raise InvalidParameterError(
                    "available channels are R(Red), G(Green), B(Blue) and A(Alpha)"
                )
            if flags is not None and flag in flags:
                raise InvalidParameterError(f"channel {letter} set multiple times")
            flags = flag if flags is None else flags | flag
        return flags

    def mask(self) -> Tuple[bool, bool, bool, bool]:
        """Per-channel booleans in R, G, B, A order."""
        return (
            ChannelFlags.RED in self,
            ChannelFlags.GREEN in self,
            ChannelFlags.BLUE in self,
            ChannelFlags.ALPHA in self,
        )

    def apply(self, original: Pixel, computed: Pixel) -> Pixel:
        """Take computed values for selected channels, original for the rest."""
        r, g, b, a = self.mask()
        return (
            computed[0] if r else original[0],
            computed[1] if g else original[1],
            computed[2] if b else original[2],
            computed[3] if a else original[3],
        )

    def letters(self) -> str:
        return "".join(
            letter for letter, selected in zip("RGBA", self.mask()) if selected
        )


class ValidationSeverity(Enum):
    """Validation issue severity."""
    ERROR = auto()
    WARNING = auto()


@dataclass
class ValidationIssue:
    """A validation problem."""
    severity: ValidationSeverity
    code: str
    message: str
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.code}: {self.message}"


@dataclass
class ImageSpecSnapshot:
    """Snapshot of the on-disk image fields we care about."""
    width: int
    height: int
    nchannels: int
    channelnames: list[str]
    format: str = "unknown"  # pixel format as reported by the codec


def clamp_channel(value: float) -> int:
    """Round half up and clamp to the 8-bit channel range."""
    rounded = int(value + 0.5) if value >= 0 else 0
    if rounded > CHANNEL_MAX:
        return CHANNEL_MAX
    return rounded
