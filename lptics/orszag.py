"""Dealiased products of fields using Orszag's 3/2 padding rule."""

from __future__ import annotations

import math

import numpy as np

from lptics.convolution import BaseConvolver


class OrszagConvolver(BaseConvolver):
    """Convolution that pads Fourier space by a factor 3/2 to remove aliasing.

    Every field is transferred to a grid of ``3 * N / 2`` points per dimension.
    There it is multiplied in real space, and the product is cut back to the
    original ``N`` points. Nyquist modes of the result are set to zero, because
    after a convolution they are not unique. Grid sizes must be even.
    """

    def __init__(self, shape, lengths):
        super().__init__(shape, lengths)
        if any(n % 2 for n in self.shape):
            raise ValueError("grid sizes must be even for padded convolution")
        self.padded_shape = tuple(3 * n // 2 for n in self.shape)
        self._scale = math.prod(self.padded_shape) / math.prod(self.shape)

        half = tuple(n // 2 for n in self.shape)
        full_axes = []
        for n, nh in zip(self.shape[:2], half[:2]):
            index = np.arange(n)
            full_axes.append(np.where(index > nh, index + nh, index))
        last = np.arange(half[2] + 1)
        self._index = np.ix_(full_axes[0], full_axes[1], last)

        nyquist = np.zeros(self.kshape, dtype=bool)
        nyquist[half[0], :, :] = True
        nyquist[:, half[1], :] = True
        nyquist[:, :, half[2]] = True
        self._nyquist = nyquist

    def _pad(self, field) -> np.ndarray:
        fk = self._to_fourier(field)
        pkshape = (self.padded_shape[0], self.padded_shape[1], self.padded_shape[2] // 2 + 1)
        padded = np.zeros(pkshape, dtype=complex)
        padded[self._index] = fk * self._scale
        return np.fft.irfftn(padded, s=self.padded_shape)

    def _unpad(self, product) -> np.ndarray:
        spectrum = np.fft.rfftn(product)
        result = spectrum[self._index] / self._scale
        result[self._nyquist] = 0.0
        return result

    def convolve2(self, f1, f2):
        return self._unpad(self._pad(f1) * self._pad(f2))

    def convolve3(self, f1, f2, f3):
        intermediate = self.convolve2(f1, f2)
        return self.convolve2(intermediate, f3)