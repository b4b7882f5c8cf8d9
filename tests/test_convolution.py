import math

import numpy as np
import pytest

from lptics.convolution import BaseConvolver, NaiveConvolver, wavenumbers

N = 8
L = 2.0
Q = 2.0 * math.pi / L


@pytest.fixture
def grid():
    x = np.arange(N) * L / N
    return np.meshgrid(x, x, x, indexing="ij")


@pytest.fixture
def conv():
    return NaiveConvolver((N, N, N), (L, L, L))


def _real(result):
    return np.fft.irfftn(result, s=(N, N, N))


def test_wavenumbers_layout():
    kx, ky, kz = wavenumbers((N, N, N), (L, L, L))
    assert kx.shape == (N, 1, 1)
    assert ky.shape == (1, N, 1)
    assert kz.shape == (1, 1, N // 2 + 1)
    assert kx[1, 0, 0] == pytest.approx(Q)
    assert kx[N - 1, 0, 0] == pytest.approx(-Q)
    assert kz[0, 0, -1] == pytest.approx(Q * N / 2)


def test_wavenumbers_rejects_bad_shape():
    with pytest.raises(ValueError):
        wavenumbers((N, N), (L, L))


def test_base_convolver_is_abstract():
    with pytest.raises(TypeError):
        BaseConvolver((N, N, N), (L, L, L))


def test_multiply_fields_matches_pointwise_product(conv, grid):
    x, y, z = grid
    a = np.sin(Q * x) + 0.5
    b = np.cos(Q * y) * np.cos(Q * z)
    np.testing.assert_allclose(_real(conv.multiply_fields(a, b)), a * b, atol=1e-12)


def test_fourier_input_equals_real_input(conv, grid):
    x, y, _ = grid
    a = np.sin(Q * x)
    b = np.cos(Q * y)
    np.testing.assert_allclose(
        conv.multiply_fields(np.fft.rfftn(a), np.fft.rfftn(b)),
        conv.multiply_fields(a, b),
        atol=1e-12,
    )


def test_convolve_gradients(conv, grid):
    x, y, _ = grid
    a = np.sin(Q * x)
    b = np.sin(Q * y)
    expected = (Q * np.cos(Q * x)) * (Q * np.cos(Q * y))
    np.testing.assert_allclose(_real(conv.convolve_gradients(a, 0, b, 1)), expected, atol=1e-10)


def test_convolve_hessians(conv, grid):
    x, y, _ = grid
    a = np.cos(Q * x)
    b = np.cos(Q * y)
    expected = (-Q**2 * np.cos(Q * x)) * (-Q**2 * np.cos(Q * y))
    result = _real(conv.convolve_hessians(a, (0, 0), b, (1, 1)))
    np.testing.assert_allclose(result, expected, atol=1e-9)


def test_mixed_hessian_is_symmetric(conv, grid):
    x, y, z = grid
    a = np.sin(Q * x) * np.sin(Q * y)
    b = np.cos(Q * z)
    np.testing.assert_allclose(
        conv.convolve_hessians(a, (0, 1), b, (2, 2)),
        conv.convolve_hessians(a, (1, 0), b, (2, 2)),
        atol=1e-9,
    )


def test_convolve_gradient_and_hessian_sign_convention(conv, grid):
    x, y, _ = grid
    a = np.sin(Q * x)
    b = np.cos(Q * y)
    expected = -(Q * np.cos(Q * x)) * (-Q**2 * np.cos(Q * y))
    result = _real(conv.convolve_gradient_and_hessian(a, 0, b, (1, 1)))
    np.testing.assert_allclose(result, expected, atol=1e-9)


def test_sum_and_difference_of_hessians(conv, grid):
    x, y, z = grid
    a = np.cos(Q * z)
    b = np.cos(Q * x) + np.cos(Q * y)
    hess_a = -Q**2 * np.cos(Q * z)
    bxx = -Q**2 * np.cos(Q * x)
    byy = -Q**2 * np.cos(Q * y)
    summed = _real(conv.convolve_sum_of_hessians(a, (2, 2), b, (0, 0), (1, 1)))
    diff = _real(conv.convolve_difference_of_hessians(a, (2, 2), b, (0, 0), (1, 1)))
    np.testing.assert_allclose(summed, hess_a * (bxx + byy), atol=1e-8)
    np.testing.assert_allclose(diff, hess_a * (bxx - byy), atol=1e-8)


def test_three_hessians(conv, grid):
    x, y, z = grid
    a, b, c = np.cos(Q * x), np.cos(Q * y), np.cos(Q * z)
    expected = -(Q**6) * a * b * c
    result = _real(conv.convolve_three_hessians(a, (0, 0), b, (1, 1), c, (2, 2)))
    np.testing.assert_allclose(result, expected, atol=1e-7)


def test_convolve3_matches_triple_product(conv, grid):
    x, y, z = grid
    a, b, c = np.sin(Q * x), np.cos(Q * y), np.sin(Q * z) + 1.0
    result = conv.convolve3(np.fft.rfftn(a), np.fft.rfftn(b), np.fft.rfftn(c))
    np.testing.assert_allclose(_real(result), a * b * c, atol=1e-12)


def test_invalid_direction_raises(conv, grid):
    x, _, _ = grid
    with pytest.raises(ValueError):
        conv.convolve_gradients(x, 3, x, 0)


def test_wrong_field_shape_raises(conv):
    with pytest.raises(ValueError):
        conv.multiply_fields(np.zeros((4, 4, 4)), np.zeros((N, N, N)))