import pytest

from imglens.core import Kernel, InvalidParameterError, SOBEL_X, SOBEL_Y


@pytest.mark.parametrize("radius", [0, 1, 2, 3, 7])
def test_mean_kernel_is_normalized(radius):
    kernel = Kernel.mean(radius)
    assert kernel.size == 2 * radius + 1
    assert abs(kernel.total() - 1.0) < 1e-6


@pytest.mark.parametrize("radius,sigma", [(0, 1.0), (1, 0.5), (2, 3.0), (5, 1.2), (4, 100.0)])
def test_gaussian_kernel_is_normalized(radius, sigma):
    kernel = Kernel.gaussian(radius, sigma)
    assert kernel.radius == radius
    assert kernel.is_normalized()


def test_gaussian_kernel_peaks_at_center_and_is_symmetric():
    kernel = Kernel.gaussian(2, 1.0)
    center = kernel.weight(0, 0)
    assert all(w <= center for w in kernel.flat())
    assert kernel.weight(1, 2) == pytest.approx(kernel.weight(-2, -1))
    assert kernel.weight(1, 0) > kernel.weight(2, 0)


def test_radius_zero_is_identity_weight():
    assert Kernel.mean(0).flat() == [1.0]
    assert Kernel.gaussian(0, 2.0).flat() == [1.0]


def test_invalid_parameters():
    with pytest.raises(InvalidParameterError):
        Kernel.mean(-1)
    with pytest.raises(InvalidParameterError):
        Kernel.gaussian(-1, 1.0)
    with pytest.raises(InvalidParameterError):
        Kernel.gaussian(1, 0.0)
    with pytest.raises(InvalidParameterError):
        Kernel.gaussian(1, -2.0)


def test_kernel_shape_validation():
    with pytest.raises(InvalidParameterError):
        Kernel([[1.0, 0.0]])
    with pytest.raises(InvalidParameterError):
        Kernel([[0.25, 0.25], [0.25, 0.25]])


def test_sobel_operators():
    assert SOBEL_X.weight(1, 0) == 2.0
    assert SOBEL_X.weight(-1, -1) == -1.0
    assert SOBEL_Y.weight(0, 1) == 2.0
    assert SOBEL_Y.weight(0, -1) == -2.0
    assert SOBEL_X.total() == 0.0
