"""Small fixed-length vectors with element-wise arithmetic."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator


class Vec:
    """A fixed-length numeric vector supporting element-wise arithmetic.

    ``Vec(1.0, 2.0, 3.0)`` and ``Vec([1.0, 2.0, 3.0])`` build the same vector.
    """

    __slots__ = ("_data",)

    def __init__(self, *args):
        if len(args) == 1 and isinstance(args[0], Iterable) and not isinstance(args[0], str):
            self._data = list(args[0])
        else:
            self._data = list(args)

    def _coerce(self, other) -> Vec:
        if not isinstance(other, Vec):
            other = Vec(other)
        if len(other) != len(self):
            raise ValueError(
                f"vector length mismatch: {len(self)} and {len(other)}"
            )
        return other

    def __getitem__(self, index):
        return self._data[index]

    def __setitem__(self, index, value):
        self._data[index] = value

    def __len__(self):
        return len(self._data)

    def __iter__(self) -> Iterator:
        return iter(self._data)

    def __eq__(self, other):
        if isinstance(other, Vec):
            return self._data == other._data
        if isinstance(other, (list, tuple)):
            return self._data == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"Vec({', '.join(repr(x) for x in self._data)})"

    def __add__(self, other):
        other = self._coerce(other)
        return Vec(a + b for a, b in zip(self._data, other._data))

    def __sub__(self, other):
        other = self._coerce(other)
        return Vec(a - b for a, b in zip(self._data, other._data))

    def __neg__(self):
        return Vec(-a for a in self._data)

    def __mul__(self, scalar):
        if isinstance(scalar, Vec):
            return NotImplemented
        return Vec(a * scalar for a in self._data)

    def __rmul__(self, scalar):
        if isinstance(scalar, Vec):
            return NotImplemented
        return Vec(a * scalar for a in self._data)

    def __truediv__(self, scalar):
        if isinstance(scalar, Vec):
            return NotImplemented
        return Vec(a / scalar for a in self._data)

    def __iadd__(self, other):
        other = self._coerce(other)
        self._data = [a + b for a, b in zip(self._data, other._data)]
        return self

    def __isub__(self, other):
        other = self._coerce(other)
        self._data = [a - b for a, b in zip(self._data, other._data)]
        return self

    def __imul__(self, scalar):
        if isinstance(scalar, Vec):
            return NotImplemented
        self._data = [a * scalar for a in self._data]
        return self

    def __itruediv__(self, scalar):
        if isinstance(scalar, Vec):
            return NotImplemented
        self._data = [a / scalar for a in self._data]
        return self

    def abs(self) -> Vec:
        """Return a vector of the absolute values of the components."""
        return Vec(math.fabs(a) for a in self._data)