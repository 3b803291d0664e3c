"""
Occupancy index: the regions already claimed during one placement run.

Corners are kept in two (n, 3) numpy arrays so a whole row of candidate
positions can be tested in a single broadcast instead of one Python loop
per recorded region. The index is run-scoped: the engine builds a fresh
one for every call and drops it afterwards.
"""

from __future__ import annotations

import numpy as np

from part_stacker.core.geometry import EPS, Dimensions, Region

_INITIAL_CAPACITY = 16


class OccupancyIndex:
    """
    Flat, growable store of occupied regions with exact box tests.

    Overlap slack is EPS relative to the largest coordinate seen by a
    query (recorded or candidate), the same relative rule as
    ``Region.overlaps``.
    """

    __slots__ = ("_mins", "_maxs", "_count", "_regions", "_scale")

    def __init__(self) -> None:
        self._mins: np.ndarray = np.empty((_INITIAL_CAPACITY, 3), dtype=np.float64)
        self._maxs: np.ndarray = np.empty((_INITIAL_CAPACITY, 3), dtype=np.float64)
        self._count: int = 0
        self._regions: list[Region] = []
        # largest absolute coordinate recorded so far
        self._scale: float = 0.0

    def __len__(self) -> int:
        return self._count

    @property
    def regions(self) -> tuple[Region, ...]:
        return tuple(self._regions)

    def record(self, region: Region) -> None:
        """Add ``region`` to the set consulted by later overlap queries."""
        if self._count == len(self._mins):
            self._grow()
        self._mins[self._count] = region.min_corner
        self._maxs[self._count] = region.max_corner
        self._count += 1
        self._regions.append(region)
        self._scale = max(
            self._scale, *(abs(v) for v in region.min_corner + region.max_corner)
        )

    def overlaps(self, region: Region) -> bool:
        """True if ``region`` intersects any recorded region on positive volume."""
        if self._count == 0:
            return False
        origin = np.asarray(region.min_corner, dtype=np.float64)
        return bool(self.overlaps_many(origin, region.size)[0])

    def overlaps_many(self, origins: np.ndarray, size: Dimensions) -> np.ndarray:
        """
        Vectorised ``overlaps`` for many candidates of the same size.

        Args:
            origins: (k, 3) array of candidate minimum corners.
            size:    Extent shared by every candidate.

        Returns:
            Boolean array of length k; element i matches
            ``overlaps(Region(origins[i], size))``.
        """
        origins = np.asarray(origins, dtype=np.float64).reshape(-1, 3)
        if self._count == 0:
            return np.zeros(len(origins), dtype=bool)
        mins = self._mins[: self._count]
        maxs = self._maxs[: self._count]
        tops = origins + np.asarray(size.as_tuple())
        reach = np.maximum(np.abs(origins).max(axis=1), np.abs(tops).max(axis=1))
        tol = (EPS * np.maximum(reach, self._scale))[:, None, None]
        # (k, 1, 3) against (1, n, 3)
        hit = (origins[:, None, :] < maxs[None, :, :] - tol) & (
            mins[None, :, :] < tops[:, None, :] - tol
        )
        return hit.all(axis=2).any(axis=1)

    def _grow(self) -> None:
        capacity = len(self._mins) * 2
        mins = np.empty((capacity, 3), dtype=np.float64)
        maxs = np.empty((capacity, 3), dtype=np.float64)
        mins[: self._count] = self._mins[: self._count]
        maxs[: self._count] = self._maxs[: self._count]
        self._mins, self._maxs = mins, maxs

    def __repr__(self) -> str:
        return f"OccupancyIndex(regions={self._count})"
