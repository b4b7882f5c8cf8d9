"""Products of fields and of their derivatives, evaluated through Fourier space.

Fourier-space fields use the layout of :func:`numpy.fft.rfftn` on a
three-dimensional grid. Inputs may be given either as real-space arrays
(real dtype, full grid shape) or as Fourier-space arrays (complex dtype);
results are always returned in Fourier space.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np


def wavenumbers(shape: Sequence[int], lengths: Sequence[float]) -> tuple[np.ndarray, ...]:
    """Return broadcastable wave-number arrays ``(kx, ky, kz)`` for an rfftn grid."""
    shape = tuple(int(n) for n in shape)
    lengths = tuple(float(x) for x in lengths)
    if len(shape) != 3 or len(lengths) != 3:
        raise ValueError("shape and lengths must have three entries")
    if any(n <= 0 for n in shape) or any(x <= 0 for x in lengths):
        raise ValueError("grid sizes and box lengths must be positive")
    kx = 2.0 * math.pi / lengths[0] * np.fft.fftfreq(shape[0], d=1.0 / shape[0])
    ky = 2.0 * math.pi / lengths[1] * np.fft.fftfreq(shape[1], d=1.0 / shape[1])
    kz = 2.0 * math.pi / lengths[2] * np.fft.rfftfreq(shape[2], d=1.0 / shape[2])
    return kx[:, None, None], ky[None, :, None], kz[None, None, :]


class BaseConvolver(ABC):
    """Common interface for convolving two or three fields in Fourier space."""

    def __init__(self, shape, lengths):
        self.shape = tuple(int(n) for n in shape)
        self.lengths = tuple(float(x) for x in lengths)
        self.k = wavenumbers(self.shape, self.lengths)
        self.kshape = (self.shape[0], self.shape[1], self.shape[2] // 2 + 1)
        self._gradients = tuple(self._make_gradient(dim) for dim in range(3))

    def _make_gradient(self, dim: int) -> np.ndarray:
        k = self.k[dim].copy()
        n = self.shape[dim]
        if n % 2 == 0:
            # the Nyquist mode has no unique derivative
            index = [0, 0, 0]
            index[dim] = n // 2
            k[tuple(slice(None) if i != dim else index[dim] for i in range(3))] = 0.0
        return 1j * k

    def _check_direction(self, direction) -> int:
        direction = int(direction)
        if not 0 <= direction < 3:
            raise ValueError(f"direction must be 0, 1 or 2, not {direction}")
        return direction

    def _to_fourier(self, field) -> np.ndarray:
        field = np.asarray(field)
        if np.iscomplexobj(field):
            if field.shape != self.kshape:
                raise ValueError(f"Fourier-space field must have shape {self.kshape}")
            return field
        if field.shape != self.shape:
            raise ValueError(f"real-space field must have shape {self.shape}")
        return np.fft.rfftn(field)

    def _gradient(self, field, direction) -> np.ndarray:
        return self._gradients[self._check_direction(direction)] * field

    def _hessian(self, field, directions) -> np.ndarray:
        first, second = directions
        return self._gradients[self._check_direction(first)] * (
            self._gradients[self._check_direction(second)] * field
        )

    @abstractmethod
    def convolve2(self, f1, f2) -> np.ndarray:
        """Return the Fourier transform of the real-space product of two fields."""

    @abstractmethod
    def convolve3(self, f1, f2, f3) -> np.ndarray:
        """Return the Fourier transform of the real-space product of three fields."""

    def convolve_gradients(self, left, dl, right, dr) -> np.ndarray:
        """Product of gradients ``a_{,i} * b_{,j}``."""
        a = self._to_fourier(left)
        b = self._to_fourier(right)
        return self.convolve2(self._gradient(a, dl), self._gradient(b, dr))

    def convolve_gradient_and_hessian(self, left, dl, right, dr) -> np.ndarray:
        """Product of ``-i k_i a`` and ``-k_j k_l b``, i.e. a gradient and a Hessian."""
        a = self._to_fourier(left)
        b = self._to_fourier(right)
        dl = self._check_direction(dl)
        d0, d1 = (self._check_direction(d) for d in dr)
        first = -1j * self.k[dl] * a
        second = -self.k[d0] * self.k[d1] * b
        return self.convolve2(first, second)

    def convolve_hessians(self, left, dl, right, dr) -> np.ndarray:
        """Product of Hessians ``a_{,ij} * b_{,kl}``."""
        a = self._to_fourier(left)
        b = self._to_fourier(right)
        return self.convolve2(self._hessian(a, dl), self._hessian(b, dr))

    def convolve_three_hessians(self, left, dl, middle, dm, right, dr) -> np.ndarray:
        """Product of three Hessians ``a_{,ij} * b_{,kl} * c_{,mn}``."""
        a = self._to_fourier(left)
        b = self._to_fourier(middle)
        c = self._to_fourier(right)
        return self.convolve3(self._hessian(a, dl), self._hessian(b, dm), self._hessian(c, dr))

    def convolve_sum_of_hessians(self, left, dl, right, dr1, dr2) -> np.ndarray:
        """Product ``a_{,ij} * (b_{,kl} + b_{,mn})``."""
        a = self._to_fourier(left)
        b = self._to_fourier(right)
        return self.convolve2(self._hessian(a, dl), self._hessian(b, dr1) + self._hessian(b, dr2))

    def convolve_difference_of_hessians(self, left, dl, right, dr1, dr2) -> np.ndarray:
        """Product ``a_{,ij} * (b_{,kl} - b_{,mn})``."""
        a = self._to_fourier(left)
        b = self._to_fourier(right)
        return self.convolve2(self._hessian(a, dl), self._hessian(b, dr1) - self._hessian(b, dr2))

    def multiply_fields(self, left, right) -> np.ndarray:
        """Product of two fields ``a * b``."""
        return self.convolve2(self._to_fourier(left), self._to_fourier(right))


class NaiveConvolver(BaseConvolver):
    """Convolution without padding; products alias onto the grid."""

    def _real(self, field) -> np.ndarray:
        return np.fft.irfftn(self._to_fourier(field), s=self.shape)

    def convolve2(self, f1, f2):
        return np.fft.rfftn(self._real(f1) * self._real(f2))

    def convolve3(self, f1, f2, f3):
        return np.fft.rfftn(self._real(f1) * self._real(f2) * self._real(f3))