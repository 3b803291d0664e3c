"""Core data models for part stacking."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from part_stacker.core.geometry import Dimensions, Position, Region, tolerance


class PlacementStatus(str, Enum):
    """Outcome of a placement run for one part."""

    PLACED = "placed"
    UNPLACED = "unplaced"


def _new_part_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Container:
    """Box with its minimum corner at the origin."""

    dimensions: Dimensions

    @classmethod
    def of(cls, width: float, height: float, depth: float) -> Container:
        return cls(Dimensions(width, height, depth))

    @property
    def width(self) -> float:
        return self.dimensions.width

    @property
    def height(self) -> float:
        return self.dimensions.height

    @property
    def depth(self) -> float:
        return self.dimensions.depth

    @property
    def volume(self) -> float:
        return self.dimensions.volume

    @property
    def region(self) -> Region:
        return Region(Position(0.0, 0.0, 0.0), self.dimensions)

    @property
    def tolerance(self) -> float:
        """Bounds-check slack for everything placed in this container."""
        return tolerance(*self.dimensions.as_tuple())

    def __repr__(self) -> str:
        return f"Container({self.width}×{self.height}×{self.depth})"


@dataclass(frozen=True)
class Part:
    """
    A cuboid to be placed in a container.

    ``position`` and ``status`` stay None until the part has been through
    the engine. An UNPLACED part still carries a position: the sentinel
    spot above the container.

    Attributes:
        dimensions: Fixed extent, never rotated.
        name:       Display name.
        color:      Display color as ``#rrggbb``.
        id:         Opaque identity, unique per instance.
        position:   Minimum corner once processed.
        status:     PLACED or UNPLACED once processed.
    """

    dimensions: Dimensions
    name: str = ""
    color: Optional[str] = None
    id: str = field(default_factory=_new_part_id)
    position: Optional[Position] = None
    status: Optional[PlacementStatus] = None

    @classmethod
    def of(
        cls,
        width: float,
        height: float,
        depth: float,
        name: str = "",
        color: Optional[str] = None,
    ) -> Part:
        return cls(Dimensions(width, height, depth), name=name, color=color)

    @property
    def width(self) -> float:
        return self.dimensions.width

    @property
    def height(self) -> float:
        return self.dimensions.height

    @property
    def depth(self) -> float:
        return self.dimensions.depth

    @property
    def volume(self) -> float:
        return self.dimensions.volume

    @property
    def region(self) -> Optional[Region]:
        """Occupied box, or None if the part has no position yet."""
        if self.position is None:
            return None
        return Region(self.position, self.dimensions)

    @property
    def is_placed(self) -> bool:
        return self.status is PlacementStatus.PLACED

    def fits_in(self, container: Container) -> bool:
        """Strict in-bounds check for display and export consumers."""
        region = self.region
        return region is not None and container.region.contains(region, container.tolerance)

    def __repr__(self) -> str:
        where = "" if self.position is None else f" @ {self.position.as_tuple()}"
        label = self.name or self.id[:8]
        return f"Part({label}, {self.width}×{self.height}×{self.depth}{where})"
