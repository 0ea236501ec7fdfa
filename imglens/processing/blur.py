"""
Convolution blurs.

A kernel is applied through a windowed lens with edge clamping. Every
channel is convolved, then the ChannelFlags selection decides which
convolved values are written; with the default RGB selection alpha keeps
the value of the center pixel.
"""

from typing import Optional

from ..core import BorderPolicy, ChannelFlags, Image, Kernel, clamp_channel
from ..lens import Lens, Materializer, Window

DEFAULT_BLUR_RADIUS = 2
DEFAULT_GAUSSIAN_SIGMA = 3.0


def convolve_lens(
    source: Lens,
    kernel: Kernel,
    channels: ChannelFlags = ChannelFlags.RGB,
    border: BorderPolicy = BorderPolicy.CLAMP,
) -> Lens:
    """Weighted sum of the kernel-sized neighborhood, clamped per channel."""
    weights = kernel.flat()

    def reduce(window: Window):
        r = g = b = a = 0.0
        for weight, (pr, pg, pb, pa) in zip(weights, window.values):
            r += weight * pr
            g += weight * pg
            b += weight * pb
            a += weight * pa
        computed = (clamp_channel(r), clamp_channel(g), clamp_channel(b), clamp_channel(a))
        return channels.apply(window.center, computed)

    return source.windowed(kernel.radius, reduce, border)


def mean_blur_lens(
    source: Lens,
    radius: int = DEFAULT_BLUR_RADIUS,
    channels: ChannelFlags = ChannelFlags.RGB,
) -> Lens:
    return convolve_lens(source, Kernel.mean(radius), channels)


def gaussian_blur_lens(
    source: Lens,
    radius: int = DEFAULT_BLUR_RADIUS,
    sigma: float = DEFAULT_GAUSSIAN_SIGMA,
    channels: ChannelFlags = ChannelFlags.RGB,
) -> Lens:
    return convolve_lens(source, Kernel.gaussian(radius, sigma), channels)


def mean_blur(
    image: Image,
    radius: int = DEFAULT_BLUR_RADIUS,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Box blur; radius 0 is the identity."""
    return mean_blur_lens(image.lens(), radius, channels).materialize(materializer)


def gaussian_blur(
    image: Image,
    radius: int = DEFAULT_BLUR_RADIUS,
    sigma: float = DEFAULT_GAUSSIAN_SIGMA,
    channels: ChannelFlags = ChannelFlags.RGB,
    materializer: Optional[Materializer] = None,
) -> Image:
    """Gaussian blur with a normalized kernel; radius 0 is the identity."""
    lens = gaussian_blur_lens(image.lens(), radius, sigma, channels)
    return lens.materialize(materializer)
