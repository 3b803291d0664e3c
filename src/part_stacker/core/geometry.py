"""
Geometry value types shared by the engine and its collaborators.

Classes:
    Dimensions — (width, height, depth) extent along X, Y, Z
    Position   — (x, y, z) minimum corner; Y is the vertical axis
    Region     — axis-aligned box built from a Position and Dimensions

Boundary convention: boxes are closed on the minimum side and open on
the maximum side, so two boxes that share a face, edge or corner do not
overlap. Every bounds check in the package goes through this module and
uses slack from ``tolerance``: EPS relative to the largest coordinate
involved, so the convention holds for a 1e-9 box as well as a 1e9 one.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional

from part_stacker.core.errors import InvalidDimensionsError

# Relative slack; absorbs float error from grid coordinates such as 3 * 0.1.
EPS = 1e-9


def tolerance(*values: float) -> float:
    """Comparison slack for coordinates of the magnitude of ``values``."""
    return EPS * max(abs(v) for v in values)


@dataclass(frozen=True)
class Dimensions:
    """
    Physical extent of a container or a part.

    Any real number is accepted (numpy scalars, Fractions) and stored as
    a float.

    Attributes:
        width:  X-axis extent.
        height: Y-axis extent (vertical).
        depth:  Z-axis extent.
    """
    width: float
    height: float
    depth: float

    def __post_init__(self) -> None:
        for axis in ("width", "height", "depth"):
            value = getattr(self, axis)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidDimensionsError(
                    f"{axis} must be a real number, got {value!r}"
                )
            value = float(value)
            if not math.isfinite(value) or value <= 0:
                raise InvalidDimensionsError(
                    f"{axis} must be positive and finite, got {value!r}"
                )
            object.__setattr__(self, axis, value)

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)


@dataclass(frozen=True)
class Position:
    """Minimum corner of a part inside the container frame."""
    x: float
    y: float
    z: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Region:
    """
    Axis-aligned box occupied by a positioned part.

    Attributes:
        origin: Minimum corner.
        size:   Extent along each axis.
    """
    origin: Position
    size: Dimensions

    @property
    def max_x(self) -> float:
        return self.origin.x + self.size.width

    @property
    def max_y(self) -> float:
        return self.origin.y + self.size.height

    @property
    def max_z(self) -> float:
        return self.origin.z + self.size.depth

    @property
    def min_corner(self) -> tuple[float, float, float]:
        return self.origin.as_tuple()

    @property
    def max_corner(self) -> tuple[float, float, float]:
        return (self.max_x, self.max_y, self.max_z)

    def _tolerance(self, other: Region) -> float:
        return tolerance(
            *self.min_corner, *self.max_corner, *other.min_corner, *other.max_corner
        )

    def overlaps(self, other: Region, tol: Optional[float] = None) -> bool:
        """
        True when the two boxes share a positive-volume intersection.

        ``tol`` defaults to slack scaled to the two boxes' coordinates.
        """
        if tol is None:
            tol = self._tolerance(other)
        return (
            self.origin.x < other.max_x - tol and other.origin.x < self.max_x - tol
            and self.origin.y < other.max_y - tol and other.origin.y < self.max_y - tol
            and self.origin.z < other.max_z - tol and other.origin.z < self.max_z - tol
        )

    def contains(self, other: Region, tol: Optional[float] = None) -> bool:
        """True when ``other`` lies entirely inside this box."""
        if tol is None:
            tol = self._tolerance(other)
        return (
            other.origin.x >= self.origin.x - tol and other.max_x <= self.max_x + tol
            and other.origin.y >= self.origin.y - tol and other.max_y <= self.max_y + tol
            and other.origin.z >= self.origin.z - tol and other.max_z <= self.max_z + tol
        )
