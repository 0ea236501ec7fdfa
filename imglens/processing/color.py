"""
Per-pixel color filters.

Every filter here is a pure map lens with fixed coefficients. Only the
channels selected by ChannelFlags receive the computed value; the default
selection is RGB, so alpha passes through.
"""

import math
from typing import Optional

from ..core import ChannelFlags, Image, InvalidParameterError, Pixel, clamp_channel
from ..lens import Lens, Materializer

# ITU-R BT.601 luma weights
LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114

SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)


def luma(pixel: Pixel) -> float:
    """Luminance of a pixel, unrounded."""
    return LUMA_RED * pixel[0] + LUMA_GREEN * pixel[1] + LUMA_BLUE * pixel[2]


def grayscale_lens(source: Lens, channels: ChannelFlags = ChannelFlags.RGB) -> Lens:
    def apply(pixel: Pixel) -> Pixel:
        value = clamp_channel(luma(pixel))
        return channels.apply(pixel, (value, value, value, pixel[3]))

    return source.map(apply)


def sepia_lens(source: Lens, channels: ChannelFlags = ChannelFlags.RGB) -> Lens:
    (rr, rg, rb), (gr, gg, gb), (br, bg, bb) = SEPIA_MATRIX

    def apply(pixel: Pixel) -> Pixel:
        r, g, b, a = pixel
        computed = (
            clamp_channel(rr * r + rg * g + rb * b),
            clamp_channel(gr * r + gg * g + gb * b),
            clamp_channel(br * r + bg * g + bb * b),
            a,
        )
        return channels.apply(pixel, computed)

    return source.map(apply)


def negative_lens(source: Lens, channels: ChannelFlags = ChannelFlags.RGB) -> Lens:
    def apply(pixel: Pixel) -> Pixel:
        r, g, b, a = pixel
        return channels.apply(pixel, (255 - r, 255 - g, 255 - b, 255 - a))

    return source.map(apply)


def gamma_table(gamma: float) -> tuple:
    """
    Lookup table for gamma correction.

    out = clamp(round(255 * (in / 255) ^ (1 / gamma)), 0, 255)

    Raises:
        InvalidParameterError: if gamma is not a positive finite number
    """
    if isinstance(gamma, bool) or not isinstance(gamma, (int, float)):
        raise InvalidParameterError(f"gamma must be a number, got {gamma!r}")
    if not math.isfinite(gamma) or gamma <= 0:
        raise InvalidParameterError(f"gamma must be positive, got {gamma}")

    exponent = 1.0 / gamma
    return tuple(
        clamp_channel(255.0 * (value / 255.0) ** exponent) for value in range(256)
    )


def gamma_lens(
    source: Lens,
    gamma: float,
    channels: ChannelFlags = ChannelFlags.RGB,
) -> Lens:
    table = gamma_table(gamma)

    def apply(pixel: Pixel) -> Pixel:
        r, g, b, a = pixel
        return channels.apply(pixel, (table[r], table[g], table[b], table[a]))

    return source.map(apply)


def grayscale(
    image: Image,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Luma-weighted grayscale broadcast to the selected channels."""
    return grayscale_lens(image.lens(), channels).materialize(materializer)


def sepia(
    image: Image,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Classic sepia tone; each output channel is clamped to [0, 255]."""
    return sepia_lens(image.lens(), channels).materialize(materializer)


def negative(
    image: Image,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Invert the selected channels (255 - value)."""
    return negative_lens(image.lens(), channels).materialize(materializer)


def gamma_correction(
    image: Image,
    gamma: float,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Apply gamma correction; fails before any work if gamma <= 0."""
    lens = gamma_lens(image.lens(), gamma, channels)
    return lens.materialize(materializer)
