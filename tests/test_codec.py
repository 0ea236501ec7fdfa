import numpy as np
import pytest

pytest.importorskip("OpenImageIO")

from imglens.core import CodecError, Image  # noqa: E402
from imglens.oiio import OiioAdapter, expand_to_rgba  # noqa: E402
from imglens.processing import create_filter, grayscale  # noqa: E402
from imglens.services.runner import FilterRunner  # noqa: E402


def _opaque(width, height):
    return Image.from_pixels(
        width, height,
        [((x * 40) % 256, (y * 60) % 256, (x + y) * 9 % 256, 255) for y in range(height) for x in range(width)],
    )


class TestExpandToRgba:
    def test_gray(self):
        gray = np.array([[[7], [200]]], dtype=np.uint8)
        rgba = expand_to_rgba(gray)
        assert rgba.shape == (1, 2, 4)
        assert rgba[0, 0].tolist() == [7, 7, 7, 255]
        assert rgba[0, 1].tolist() == [200, 200, 200, 255]

    def test_gray_without_channel_axis(self):
        rgba = expand_to_rgba(np.array([[9]], dtype=np.uint8))
        assert rgba[0, 0].tolist() == [9, 9, 9, 255]

    def test_gray_alpha(self):
        rgba = expand_to_rgba(np.array([[[30, 128]]], dtype=np.uint8))
        assert rgba[0, 0].tolist() == [30, 30, 30, 128]

    def test_rgb(self):
        rgba = expand_to_rgba(np.array([[[1, 2, 3]]], dtype=np.uint8))
        assert rgba[0, 0].tolist() == [1, 2, 3, 255]

    def test_rgba_unchanged(self):
        rgba = expand_to_rgba(np.array([[[1, 2, 3, 4]]], dtype=np.uint8))
        assert rgba[0, 0].tolist() == [1, 2, 3, 4]

    def test_unsupported_channel_count(self):
        with pytest.raises(CodecError):
            expand_to_rgba(np.zeros((2, 2, 5), dtype=np.uint8))


def test_png_round_trip(tmp_path):
    image = _opaque(5, 3)
    path = tmp_path / "out.png"

    OiioAdapter.write_image(image, path)
    spec = OiioAdapter.probe(path)
    loaded = OiioAdapter.read_image(path)

    assert (spec.width, spec.height, spec.nchannels) == (5, 3, 4)
    assert loaded == image


def test_read_missing_file(tmp_path):
    with pytest.raises(CodecError):
        OiioAdapter.read_image(tmp_path / "missing.png")


def test_runner_operation_writes_output(tmp_path):
    source = _opaque(6, 4)
    input_path = tmp_path / "in.png"
    output_path = tmp_path / "nested" / "out.png"
    OiioAdapter.write_image(source, input_path)

    result = FilterRunner(threads=2).run_operation(
        input_path, output_path, lambda img, m: grayscale(img, materializer=m), "grayscale"
    )

    assert result == grayscale(source)
    assert OiioAdapter.read_image(output_path) == result


def test_runner_filter(tmp_path):
    source = _opaque(6, 4)
    input_path = tmp_path / "in.png"
    output_path = tmp_path / "out.png"
    OiioAdapter.write_image(source, input_path)

    crop_filter = create_filter("crop")
    crop_filter.set_parameter("width", 3)
    crop_filter.set_parameter("height", 2)
    crop_filter.set_parameter("offset_x", 1)
    crop_filter.set_parameter("offset_y", 1)
    result = FilterRunner().run_filter(input_path, output_path, crop_filter)

    assert result.dimensions() == (3, 2)
    assert result.pixel(0, 0) == source.pixel(1, 1)
