"""Core image model and shared types."""

from .errors import (
    ImageLensError,
    InvalidParameterError,
    OutOfBoundsError,
    CodecError,
)
from .types import (
    Pixel,
    CHANNEL_COUNT,
    CHANNEL_MAX,
    ChannelFlags,
    ValidationSeverity,
    ValidationIssue,
    ImageSpecSnapshot,
    clamp_channel,
)
from .image import Image
from .kernel import Kernel, SOBEL_X, SOBEL_Y
from .border import BorderPolicy
from .validation import ValidationEngine

__all__ = [
    "ImageLensError",
    "InvalidParameterError",
    "OutOfBoundsError",
    "CodecError",
    "Pixel",
    "CHANNEL_COUNT",
    "CHANNEL_MAX",
    "ChannelFlags",
    "ValidationSeverity",
    "ValidationIssue",
    "ImageSpecSnapshot",
    "clamp_channel",
    "Image",
    "Kernel",
    "SOBEL_X",
    "SOBEL_Y",
    "BorderPolicy",
    "ValidationEngine",
]
