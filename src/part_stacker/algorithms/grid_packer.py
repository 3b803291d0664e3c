"""Greedy first-fit grid packer."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from part_stacker.config import DEFAULT_GRID_STEP, DEFAULT_SENTINEL_MARGIN, PackingConfig
from part_stacker.core.geometry import EPS, Position, Region, tolerance
from part_stacker.core.models import Container, Part, PlacementStatus
from part_stacker.core.occupancy import OccupancyIndex

logger = logging.getLogger(__name__)

# Grid coordinates are rounded this many decimals past the step's leading
# digit, so 3 * 0.1 reads 0.3 and a 1e-10 step keeps its precision.
_COORD_DIGITS = 12


def volume_descending(parts: Sequence[Part]) -> list[Part]:
    """
    Sort parts by volume, largest first.

    Equal volumes keep their input order (``sorted`` is stable under
    ``reverse=True``).
    """
    return sorted(parts, key=lambda p: p.volume, reverse=True)


def axis_candidates(container_extent: float, part_extent: float, step: float) -> np.ndarray:
    """
    Grid coordinates at which a part's minimum corner may sit on one axis.

    Coordinates are ``i * step`` for ``i = 0..floor(limit / step)`` where
    ``limit = container_extent - part_extent``. Empty when the part is
    longer than the container on this axis.
    """
    limit = container_extent - part_extent
    if limit < -tolerance(container_extent):
        return np.empty(0, dtype=np.float64)
    count = max(0, math.floor(limit / step + EPS)) + 1
    decimals = _COORD_DIGITS - math.floor(math.log10(step))
    return np.round(np.arange(count, dtype=np.float64) * step, decimals)


class GridPacker:
    """
    Greedy first-fit placement by grid scan.

    Parts are processed largest-volume first. For each part, candidate
    minimum corners are scanned Y-outer, Z-middle, X-inner, so the
    floor fills layer by layer before anything is stacked. The first
    candidate that lies inside the container and clears every region
    already placed in this run wins. A part with no such candidate is
    parked above the container and marked UNPLACED.

    The packer holds only immutable configuration; every ``place`` call
    builds its own OccupancyIndex, so a single instance can be shared
    between threads.
    """

    def __init__(self, config: Optional[PackingConfig] = None) -> None:
        self.config = config or PackingConfig()

    def place(self, parts: Sequence[Part], container: Container) -> list[Part]:
        """
        Assign a position to every part.

        Args:
            parts:     Parts to place; may be empty.
            container: Target container.

        Returns:
            New Part values in processing order (volume descending), each
            with ``position`` and ``status`` set. Input parts are not
            modified.

        Raises:
            TypeError: ``container`` is not a Container or an entry of
                       ``parts`` is not a Part.
        """
        if not isinstance(container, Container):
            raise TypeError(f"container must be a Container, got {type(container).__name__}")
        parts = list(parts)
        for part in parts:
            if not isinstance(part, Part):
                raise TypeError(f"parts must contain Part values, got {type(part).__name__}")

        occupancy = OccupancyIndex()
        sentinel = self.sentinel_position(container)
        result: list[Part] = []

        for part in volume_descending(parts):
            position = self._find_position(part, container, occupancy)
            if position is None:
                logger.debug("no room for %r, parking at %s", part, sentinel.as_tuple())
                result.append(replace(part, position=sentinel, status=PlacementStatus.UNPLACED))
                continue
            occupancy.record(Region(position, part.dimensions))
            logger.debug("placed %r at %s", part, position.as_tuple())
            result.append(replace(part, position=position, status=PlacementStatus.PLACED))

        placed = len(occupancy)
        logger.info(
            "placed %d/%d parts in %r (grid step %s)",
            placed, len(result), container, self.config.grid_step,
        )
        return result

    def sentinel_position(self, container: Container) -> Position:
        """Parking spot for parts that do not fit."""
        return Position(0.0, container.height + self.config.sentinel_margin, 0.0)

    def _find_position(
        self,
        part: Part,
        container: Container,
        occupancy: OccupancyIndex,
    ) -> Optional[Position]:
        step = self.config.grid_step
        xs = axis_candidates(container.width, part.width, step)
        ys = axis_candidates(container.height, part.height, step)
        zs = axis_candidates(container.depth, part.depth, step)
        if not (len(xs) and len(ys) and len(zs)):
            return None

        tol = container.tolerance
        in_x = xs + part.width <= container.width + tol
        for y in ys:
            if y + part.height > container.height + tol:
                continue
            for z in zs:
                if z + part.depth > container.depth + tol:
                    continue
                row = np.column_stack((xs, np.full_like(xs, y), np.full_like(xs, z)))
                free = in_x & ~occupancy.overlaps_many(row, part.dimensions)
                if free.any():
                    i = int(np.argmax(free))
                    return Position(float(xs[i]), float(y), float(z))
        return None


def place(
    parts: Sequence[Part],
    container: Container,
    grid_step: float = DEFAULT_GRID_STEP,
    sentinel_margin: float = DEFAULT_SENTINEL_MARGIN,
) -> list[Part]:
    """Place ``parts`` in ``container`` with a one-off GridPacker."""
    config = PackingConfig(grid_step=grid_step, sentinel_margin=sentinel_margin)
    return GridPacker(config).place(parts, container)
