"""
OpenImageIO codec adapter.

Decodes 8-bit gray, gray+alpha, RGB and RGBA files into the RGBA8 Image
used by the core, and always encodes results back out as RGBA8.
"""

import threading
from pathlib import Path
from typing import Union

import numpy as np
import OpenImageIO as oiio

from ..core import CHANNEL_COUNT, CodecError, Image, ImageSpecSnapshot
from ..utils.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

RGBA_CHANNEL_NAMES = ["R", "G", "B", "A"]

# Pixels are kept with straight (unassociated) alpha on both read and write
UNASSOCIATED_ALPHA = "oiio:UnassociatedAlpha"


def expand_to_rgba(pixels: np.ndarray) -> np.ndarray:
    """
    Expand a decoded (height, width, channels) uint8 array to RGBA.

    1 channel: gray copied to R, G and B, alpha 255.
    2 channels: gray + alpha.
    3 channels: RGB, alpha 255.
    4 channels: unchanged.

    Raises:
        CodecError: for any other channel count
    """
    pixels = np.asarray(pixels)
    if pixels.ndim == 2:
        pixels = pixels[:, :, np.newaxis]
    if pixels.ndim != 3:
        raise CodecError(f"expected a 2D image, got array of shape {pixels.shape}")

    height, width, channels = pixels.shape
    pixels = pixels.astype(np.uint8, copy=False)

    rgba = np.empty((height, width, CHANNEL_COUNT), dtype=np.uint8)
    if channels == 1:
        rgba[:, :, 0:3] = pixels[:, :, 0:1]
        rgba[:, :, 3] = 255
    elif channels == 2:
        rgba[:, :, 0:3] = pixels[:, :, 0:1]
        rgba[:, :, 3] = pixels[:, :, 1]
    elif channels == 3:
        rgba[:, :, 0:3] = pixels
        rgba[:, :, 3] = 255
    elif channels == 4:
        rgba[:, :, :] = pixels
    else:
        raise CodecError(
            f"unsupported channel count {channels}; expected 1 (gray), "
            f"2 (gray+alpha), 3 (RGB) or 4 (RGBA)"
        )
    return rgba


class OiioAdapter:
    """Thin wrapper for the OIIO bindings."""

    # OIIO output plugins are not assumed to be thread-safe
    _oiio_lock = threading.Lock()

    @staticmethod
    def probe(path: PathLike) -> ImageSpecSnapshot:
        """
        Read the header of an image file.

        Raises:
            CodecError: if the file cannot be opened
        """
        inp = OiioAdapter._open_input(path)
        try:
            return OiioAdapter._snapshot_spec(inp.spec())
        finally:
            inp.close()

    @staticmethod
    def read_image(path: PathLike) -> Image:
        """
        Decode an image file into an RGBA8 Image.

        Raises:
            CodecError: if the file cannot be read or has an unsupported
                channel layout
        """
        inp = OiioAdapter._open_input(path)
        try:
            spec = inp.spec()
            if spec.nchannels not in (1, 2, 3, 4):
                raise CodecError(
                    f"{path}: unsupported channel count {spec.nchannels}"
                )
            if str(spec.format) != "uint8":
                logger.debug("%s: converting %s pixels to uint8", path, spec.format)

            pixels = inp.read_image("uint8")
            if pixels is None:
                raise CodecError(f"{path}: read_image failed: {oiio.geterror()}")
        finally:
            inp.close()

        pixels = np.asarray(pixels).reshape((spec.height, spec.width, spec.nchannels))
        image = Image.from_array(expand_to_rgba(pixels))
        logger.info(
            "Read %s (%dx%d, %d channel(s))", path, image.width, image.height, spec.nchannels
        )
        return image

    @staticmethod
    def write_image(image: Image, path: PathLike) -> None:
        """
        Encode an Image as RGBA8; the format follows the file extension.

        Raises:
            CodecError: if the file cannot be written
        """
        path_str = str(Path(path)).replace("\\", "/")

        out_spec = oiio.ImageSpec(image.width, image.height, CHANNEL_COUNT, "uint8")
        out_spec.channelnames = RGBA_CHANNEL_NAMES
        out_spec.alpha_channel = 3
        out_spec.attribute(UNASSOCIATED_ALPHA, 1)

        with OiioAdapter._oiio_lock:
            out = oiio.ImageOutput.create(path_str)
            if not out:
                raise CodecError(f"{path}: no writer for this file type: {oiio.geterror()}")
            try:
                if not out.open(path_str, out_spec):
                    raise CodecError(f"{path}: open for writing failed: {out.geterror()}")
                if not out.write_image(np.ascontiguousarray(image.pixels)):
                    raise CodecError(f"{path}: write_image failed: {out.geterror()}")
            finally:
                out.close()

        logger.info("Wrote %s (%dx%d RGBA8)", path, image.width, image.height)

    @staticmethod
    def _open_input(path: PathLike):
        path_str = str(path)
        if not Path(path_str).is_file():
            raise CodecError(f"{path}: no such file")
        config = oiio.ImageSpec()
        config.attribute(UNASSOCIATED_ALPHA, 1)
        inp = oiio.ImageInput.open(path_str, config)
        if not inp:
            raise CodecError(f"{path}: cannot open: {oiio.geterror()}")
        return inp

    @staticmethod
    def _snapshot_spec(spec) -> ImageSpecSnapshot:
        """Create an immutable snapshot of critical spec fields."""
        nchannels = spec.nchannels
        channel_names = list(spec.channelnames) if hasattr(spec, "channelnames") else []
        if not channel_names:
            channel_names = [f"channel{i}" for i in range(nchannels)]

        return ImageSpecSnapshot(
            width=spec.width,
            height=spec.height,
            nchannels=nchannels,
            channelnames=channel_names,
            format=str(spec.format) if hasattr(spec, "format") else "unknown",
        )
