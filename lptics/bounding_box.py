"""Axis-aligned bounding boxes in three dimensions."""

from __future__ import annotations

from lptics.vec import Vec


class BoundingBox:
    """An axis-aligned box spanned by a lower corner ``x1`` and an upper corner ``x2``."""

    __slots__ = ("x1", "x2")

    def __init__(self, x1, x2):
        self.x1 = Vec(x1)
        self.x2 = Vec(x2)
        if len(self.x1) != len(self.x2):
            raise ValueError("bounding box corners must have the same dimension")

    def intersect(self, other: BoundingBox) -> BoundingBox:
        """Return the overlap of this box with another."""
        if len(other.x1) != len(self.x1):
            raise ValueError("bounding boxes must have the same dimension")
        lower = (max(a, b) for a, b in zip(self.x1, other.x1))
        upper = (min(a, b) for a, b in zip(self.x2, other.x2))
        return BoundingBox(lower, upper)

    def __itruediv__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        overlap = self.intersect(other)
        self.x1 = overlap.x1
        self.x2 = overlap.x2
        return self

    def __eq__(self, other):
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.x1 == other.x1 and self.x2 == other.x2

    __hash__ = None

    def __repr__(self):
        return f"BoundingBox({self.x1!r}, {self.x2!r})"