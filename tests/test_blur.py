import pytest

from imglens.core import ChannelFlags, Image, InvalidParameterError
from imglens.processing import gaussian_blur, mean_blur


def test_radius_zero_is_identity(gradient_image):
    assert mean_blur(gradient_image, 0) == gradient_image
    assert gaussian_blur(gradient_image, 0, 1.0) == gradient_image
    assert gaussian_blur(gradient_image, 0, 1.0, ChannelFlags.RGBA) == gradient_image


@pytest.mark.parametrize("radius", [1, 2, 4])
def test_constant_image_is_unchanged(radius):
    image = Image.filled(6, 5, (17, 128, 240, 99))
    assert mean_blur(image, radius) == image
    assert gaussian_blur(image, radius, 1.7) == image


def test_mean_blur_values_with_clamped_border():
    image = Image.from_pixels(3, 1, [(0, 0, 0, 255), (90, 90, 90, 255), (0, 0, 0, 255)])
    result = mean_blur(image, 1)

    assert result.rows() == [[(30, 30, 30, 255)] * 3]


def test_alpha_passes_through_by_default(gradient_image):
    result = mean_blur(gradient_image, 2)
    assert (result.pixels[:, :, 3] == gradient_image.pixels[:, :, 3]).all()


def test_alpha_is_blurred_when_selected():
    image = Image.from_pixels(3, 1, [(0, 0, 0, 0), (0, 0, 0, 90), (0, 0, 0, 0)])
    assert mean_blur(image, 1, ChannelFlags.RGBA).pixel(1, 0) == (0, 0, 0, 30)
    assert mean_blur(image, 1).pixel(1, 0) == (0, 0, 0, 90)


def test_gaussian_weights_center_more_than_mean():
    image = Image.from_pixels(5, 1, [(0, 0, 0, 255)] * 2 + [(250, 250, 250, 255)] + [(0, 0, 0, 255)] * 2)
    gaussian = gaussian_blur(image, 2, 1.0).pixel(2, 0)[0]
    mean = mean_blur(image, 2).pixel(2, 0)[0]

    assert mean == 50
    assert gaussian > mean


def test_channels_not_selected_are_untouched():
    image = Image.from_pixels(3, 1, [(0, 0, 0, 255), (90, 60, 30, 255), (0, 0, 0, 255)])
    result = mean_blur(image, 1, ChannelFlags.parse("G"))
    assert result.pixel(1, 0) == (90, 20, 30, 255)


def test_invalid_parameters(gradient_image):
    with pytest.raises(InvalidParameterError):
        mean_blur(gradient_image, -1)
    with pytest.raises(InvalidParameterError):
        gaussian_blur(gradient_image, 2, 0.0)
    with pytest.raises(InvalidParameterError):
        gaussian_blur(gradient_image, -2, 1.0)
