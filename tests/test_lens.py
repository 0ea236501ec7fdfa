import pytest

from imglens.core import BorderPolicy, Image, InvalidParameterError, OutOfBoundsError
from imglens.lens import (
    FunctionLens,
    ImageLens,
    MaterializedLens,
    SequentialMaterializer,
    ValueLens,
)


def test_image_lens_reads_pixels(grid_4x4):
    lens = grid_4x4.lens()

    assert isinstance(lens, ImageLens)
    assert lens.dimensions() == (4, 4)
    assert lens.look_at(3, 1) == (3, 1, 7, 255)


def test_image_lens_reads_nothing_until_evaluated(grid_4x4):
    source = grid_4x4.lens()
    graph = source.map(lambda p: p).windowed(1, lambda w: w.center)

    assert not source.loaded
    assert graph.materialize() == grid_4x4
    assert source.loaded


@pytest.mark.parametrize("point", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_look_at_outside_domain_raises(grid_4x4, point):
    with pytest.raises(OutOfBoundsError):
        grid_4x4.lens().look_at(*point)


def test_map_is_lazy_until_materialized(grid_4x4):
    calls = []

    def invert(pixel):
        calls.append(pixel)
        r, g, b, a = pixel
        return (255 - r, 255 - g, 255 - b, a)

    lens = grid_4x4.lens().map(invert)
    assert calls == []

    assert lens.look_at(1, 2) == (254, 253, 246, 255)
    assert len(calls) == 1

    image = lens.materialize()
    assert image.pixel(0, 0) == (255, 255, 255, 255)
    assert len(calls) == 1 + 16


def test_windowed_gathers_row_major_neighborhood(grid_4x4):
    lens = grid_4x4.lens().windowed(1, lambda w: [v[2] for v in w.values])

    # Interior: 3x3 block around (1, 1)
    assert lens.look_at(1, 1) == [0, 1, 2, 4, 5, 6, 8, 9, 10]
    # Corner samples resolve by clamping
    assert lens.look_at(0, 0) == [0, 0, 1, 0, 0, 1, 4, 4, 5]


def test_window_accessors(grid_4x4):
    lens = grid_4x4.lens().windowed(1, lambda w: (w.center, w.at(1, -1), w.at(-1, 1), len(w)))

    center, top_right, bottom_left, count = lens.look_at(2, 2)
    assert center == (2, 2, 10, 255)
    assert top_right == (3, 1, 7, 255)
    assert bottom_left == (1, 3, 13, 255)
    assert count == 9


@pytest.mark.parametrize("radius", [0, 1, 3, 10])
def test_windowed_over_single_pixel_is_defined(single_pixel, radius):
    lens = single_pixel.lens().windowed(radius, lambda w: w.values)
    values = lens.look_at(0, 0)

    assert len(values) == (2 * radius + 1) ** 2
    assert set(values) == {(10, 20, 30, 40)}


def test_windowed_rejects_negative_radius(grid_4x4):
    with pytest.raises(InvalidParameterError):
        grid_4x4.lens().windowed(-1, lambda w: w.center)


def test_border_clamp():
    assert BorderPolicy.CLAMP.resolve(-3, 7, 5, 5) == (0, 4)
    assert BorderPolicy.CLAMP.resolve(2, 3, 5, 5) == (2, 3)


def test_remap_changes_dimensions(grid_4x4):
    transposed = grid_4x4.lens().remap(lambda s, x, y: s.look_at(y, x), (4, 4))
    assert transposed.look_at(3, 0) == grid_4x4.pixel(0, 3)

    shrunk = grid_4x4.lens().remap(lambda s, x, y: s.look_at(x * 2, y * 2), (2, 2))
    assert shrunk.materialize().rows() == [
        [grid_4x4.pixel(0, 0), grid_4x4.pixel(2, 0)],
        [grid_4x4.pixel(0, 2), grid_4x4.pixel(2, 2)],
    ]


def test_remap_with_bad_mapping_raises_out_of_bounds(grid_4x4):
    lens = grid_4x4.lens().remap(lambda s, x, y: s.look_at(x + 4, y), (2, 2))
    with pytest.raises(OutOfBoundsError):
        lens.look_at(0, 0)


def test_zip_uses_smallest_domain(grid_4x4):
    numbers = FunctionLens(lambda x, y: x * 10 + y, 3, 5)
    zipped = grid_4x4.lens().zip(numbers)

    assert zipped.dimensions() == (3, 4)
    assert zipped.look_at(2, 3) == (grid_4x4.pixel(2, 3), 23)


def test_value_and_function_lenses():
    value = ValueLens((1, 2, 3, 4), 3, 2)
    assert value.materialize() == Image.filled(3, 2, (1, 2, 3, 4))

    checker = FunctionLens(lambda x, y: (255, 255, 255, 255) if (x + y) % 2 else (0, 0, 0, 255), 2, 2)
    assert checker.materialize().pixel(1, 0) == (255, 255, 255, 255)

    with pytest.raises(InvalidParameterError):
        ValueLens(0, 0, 3)


def test_collect_keeps_arbitrary_values():
    lens = FunctionLens(lambda x, y: (x, y), 3, 2)
    grid = lens.collect()

    assert isinstance(grid, MaterializedLens)
    assert grid.dimensions() == (3, 2)
    assert grid.look_at(2, 1) == (2, 1)
    assert grid.values() == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]


def test_materialize_rejects_non_pixel_values():
    lens = FunctionLens(lambda x, y: x, 2, 2)
    with pytest.raises(InvalidParameterError):
        SequentialMaterializer().materialize(lens)


def test_materialized_lens_to_image(grid_4x4):
    grid = grid_4x4.lens().collect()
    assert grid.to_image() == grid_4x4
