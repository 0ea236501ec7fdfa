import pytest

from imglens.core import Image, InvalidParameterError
from imglens.processing import crop, resize, scale, scale_size
from imglens.processing.resize import source_coordinate


def test_crop_selects_subregion(grid_4x4):
    result = crop(grid_4x4, 2, 2, 1, 1)

    assert result.dimensions() == (2, 2)
    assert result.rows() == [
        [grid_4x4.pixel(1, 1), grid_4x4.pixel(2, 1)],
        [grid_4x4.pixel(1, 2), grid_4x4.pixel(2, 2)],
    ]


def test_crop_whole_image_is_identity(grid_4x4):
    assert crop(grid_4x4, 4, 4) == grid_4x4


def test_crop_touching_the_edge_is_allowed(grid_4x4):
    result = crop(grid_4x4, 1, 1, 3, 3)
    assert result.pixel(0, 0) == grid_4x4.pixel(3, 3)


@pytest.mark.parametrize(
    "geometry",
    [
        (3, 3, 2, 2),
        (5, 1, 0, 0),
        (1, 5, 0, 0),
        (2, 2, 3, 0),
        (0, 2, 0, 0),
        (2, 2, -1, 0),
    ],
)
def test_crop_out_of_bounds_is_invalid(grid_4x4, geometry):
    with pytest.raises(InvalidParameterError):
        crop(grid_4x4, *geometry)


def test_resize_checkerboard_duplicates_blocks(checkerboard_2x2):
    result = resize(checkerboard_2x2, 4, 4)

    for y in range(4):
        for x in range(4):
            assert result.pixel(x, y) == checkerboard_2x2.pixel(x // 2, y // 2)


def test_resize_same_size_is_identity(gradient_image):
    assert resize(gradient_image, gradient_image.width, gradient_image.height) == gradient_image


def test_resize_down_samples_nearest(grid_4x4):
    result = resize(grid_4x4, 2, 2)
    assert result.rows() == [
        [grid_4x4.pixel(0, 0), grid_4x4.pixel(2, 0)],
        [grid_4x4.pixel(0, 2), grid_4x4.pixel(2, 2)],
    ]


def test_resize_non_uniform(grid_4x4):
    result = resize(grid_4x4, 8, 1)
    assert result.dimensions() == (8, 1)
    assert [p[0] for p in result.rows()[0]] == [0, 0, 1, 1, 2, 2, 3, 3]


@pytest.mark.parametrize("size", [(0, 2), (2, 0), (-1, 3)])
def test_resize_invalid_target(grid_4x4, size):
    with pytest.raises(InvalidParameterError):
        resize(grid_4x4, *size)


@pytest.mark.parametrize("target,source,out,expected", [
    (0, 10, 5, 0),
    (4, 10, 5, 8),
    (3, 3, 7, 1),
    (6, 3, 7, 2),
    (9, 10, 10, 9),
])
def test_source_coordinate(target, source, out, expected):
    assert source_coordinate(target, source, out) == expected


def test_scale_size():
    assert scale_size((10, 20), 0.5, 0.5) == (5, 10)
    assert scale_size((10, 20), 2.0, 2.0) == (20, 40)
    assert scale_size((10, 20), 0.5, 2.0) == (5, 40)
    assert scale_size((3, 3), 0.5, 0.5) == (2, 2)


@pytest.mark.parametrize("factors", [(0.0, 1.0), (1.0, 1e5), (0.01, 1.0)])
def test_scale_size_invalid(factors):
    with pytest.raises(InvalidParameterError):
        scale_size((10, 10), *factors)


def test_scale(checkerboard_2x2):
    assert scale(checkerboard_2x2, 2.0, 2.0) == resize(checkerboard_2x2, 4, 4)
