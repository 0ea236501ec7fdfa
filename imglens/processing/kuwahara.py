"""
Kuwahara filter.

The (2r + 1)^2 window is split into four overlapping (r + 1)^2 quadrants
that share the center row and column. The output is the per-channel mean of
the quadrant whose luminance variance is lowest, which smooths flat regions
while keeping edges sharp.
"""

from typing import List, Optional, Tuple

from ..core import ChannelFlags, Image, InvalidParameterError, Pixel, clamp_channel
from ..lens import Lens, Materializer, Window
from .color import luma

DEFAULT_KUWAHARA_RADIUS = 5


def quadrant_offsets(radius: int) -> List[List[Tuple[int, int]]]:
    """
    (dx, dy) offsets of every quadrant.

    Order is top-left, top-right, bottom-left, bottom-right; variance ties
    resolve to the earliest quadrant in this order.
    """
    before = range(-radius, 1)
    after = range(0, radius + 1)
    return [
        [(dx, dy) for dy in ys for dx in xs]
        for ys, xs in ((before, before), (before, after), (after, before), (after, after))
    ]


def _quadrant_stats(pixels: List[Pixel]) -> Tuple[float, Tuple[float, float, float, float]]:
    """Luminance population variance and per-channel mean of a quadrant."""
    n = len(pixels)
    lumas = [luma(p) for p in pixels]
    mean_luma = sum(lumas) / n
    variance = sum((l - mean_luma) ** 2 for l in lumas) / n

    sums = [0, 0, 0, 0]
    for r, g, b, a in pixels:
        sums[0] += r
        sums[1] += g
        sums[2] += b
        sums[3] += a
    return variance, (sums[0] / n, sums[1] / n, sums[2] / n, sums[3] / n)


def kuwahara_lens(
    source: Lens,
    radius: int = DEFAULT_KUWAHARA_RADIUS,
    channels: ChannelFlags = ChannelFlags.RGB,
) -> Lens:
    if isinstance(radius, bool) or not isinstance(radius, int):
        raise InvalidParameterError(f"radius must be an integer, got {radius!r}")
    if radius < 0:
        raise InvalidParameterError(f"radius must not be negative, got {radius}")

    quadrants = quadrant_offsets(radius)

    def reduce(window: Window) -> Pixel:
        best_variance = None
        best_mean = None
        for offsets in quadrants:
            variance, mean = _quadrant_stats([window.at(dx, dy) for dx, dy in offsets])
            if best_variance is None or variance < best_variance:
                best_variance = variance
                best_mean = mean
        computed = tuple(clamp_channel(v) for v in best_mean)
        return channels.apply(window.center, computed)

    return source.windowed(radius, reduce)


def kuwahara(
    image: Image,
    radius: int = DEFAULT_KUWAHARA_RADIUS,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Edge-preserving smoothing; alpha keeps the center value by default."""
    return kuwahara_lens(image.lens(), radius, channels).materialize(materializer)
