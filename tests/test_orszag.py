import numpy as np
import pytest

from lptics.convolution import NaiveConvolver
from lptics.orszag import OrszagConvolver

N = 16
SHAPE = (N, N, N)
LENGTHS = (100.0, 100.0, 100.0)


def band_limited(seed, kmax=2):
    rng = np.random.default_rng(seed)
    kshape = (N, N, N // 2 + 1)
    spec = rng.normal(size=kshape) + 1j * rng.normal(size=kshape)
    freq = np.abs(np.fft.fftfreq(N, d=1.0 / N))
    rfreq = np.fft.rfftfreq(N, d=1.0 / N)
    mask = (
        (freq[:, None, None] <= kmax)
        & (freq[None, :, None] <= kmax)
        & (rfreq[None, None, :] <= kmax)
    )
    return np.fft.irfftn(spec * mask, s=SHAPE)


def test_padded_shape():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    assert conv.padded_shape == (24, 24, 24)


def test_odd_size_rejected():
    with pytest.raises(ValueError):
        OrszagConvolver((15, 16, 16), LENGTHS)


def test_wrong_field_shape_rejected():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    with pytest.raises(ValueError):
        conv.multiply_fields(np.zeros((8, 8, 8)), np.zeros(SHAPE))


def test_band_limited_product_is_exact():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    a = band_limited(1)
    b = band_limited(2)
    result = conv.multiply_fields(a, b)
    expected = np.fft.rfftn(a * b)
    np.testing.assert_allclose(result, expected, atol=1e-9 * np.abs(expected).max())


def test_band_limited_triple_product_is_exact():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    a, b, c = band_limited(3), band_limited(4), band_limited(5)
    result = conv.convolve3(np.fft.rfftn(a), np.fft.rfftn(b), np.fft.rfftn(c))
    expected = np.fft.rfftn(a * b * c)
    np.testing.assert_allclose(result, expected, atol=1e-9 * np.abs(expected).max())


def test_gradients_agree_with_naive_for_band_limited_fields():
    orszag = OrszagConvolver(SHAPE, LENGTHS)
    naive = NaiveConvolver(SHAPE, LENGTHS)
    a, b = band_limited(6), band_limited(7)
    result = orszag.convolve_gradients(a, 0, b, 1)
    expected = naive.convolve_gradients(a, 0, b, 1)
    np.testing.assert_allclose(result, expected, atol=1e-9 * np.abs(expected).max())


def test_hessians_agree_with_naive_for_band_limited_fields():
    orszag = OrszagConvolver(SHAPE, LENGTHS)
    naive = NaiveConvolver(SHAPE, LENGTHS)
    a, b = band_limited(8), band_limited(9)
    result = orszag.convolve_hessians(a, (0, 2), b, (1, 1))
    expected = naive.convolve_hessians(a, (0, 2), b, (1, 1))
    np.testing.assert_allclose(result, expected, atol=1e-9 * np.abs(expected).max())


def test_aliased_mode_is_removed():
    orszag = OrszagConvolver(SHAPE, LENGTHS)
    naive = NaiveConvolver(SHAPE, LENGTHS)
    x = np.arange(N)
    wave = np.cos(2.0 * np.pi * 5 * x / N)[:, None, None] * np.ones(SHAPE)
    dealiased = orszag.multiply_fields(wave, wave)
    aliased = naive.multiply_fields(wave, wave)
    # frequency 10 folds onto -6, which is stored at index 10 of the first axis
    assert abs(aliased[10, 0, 0]) > 1.0
    assert abs(dealiased[10, 0, 0]) < 1e-8 * N**3
    expected_mean = np.fft.rfftn(np.full(SHAPE, 0.5))
    np.testing.assert_allclose(dealiased, expected_mean, atol=1e-8 * N**3)


def test_nyquist_modes_are_zero():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    rng = np.random.default_rng(10)
    a = rng.normal(size=SHAPE)
    b = rng.normal(size=SHAPE)
    result = conv.multiply_fields(a, b)
    assert np.all(result[N // 2, :, :] == 0)
    assert np.all(result[:, N // 2, :] == 0)
    assert np.all(result[:, :, N // 2] == 0)
    assert abs(result[0, 0, 0]) > 0


def test_product_is_symmetric():
    conv = OrszagConvolver(SHAPE, LENGTHS)
    rng = np.random.default_rng(11)
    a = rng.normal(size=SHAPE)
    b = rng.normal(size=SHAPE)
    np.testing.assert_allclose(conv.multiply_fields(a, b), conv.multiply_fields(b, a), atol=1e-9)