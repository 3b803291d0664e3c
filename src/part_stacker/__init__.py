"""part-stacker: greedy 3D placement of rectangular parts in a container."""

from part_stacker.algorithms.grid_packer import GridPacker, place, volume_descending
from part_stacker.config import PackingConfig
from part_stacker.core import (
    Container,
    Dimensions,
    InvalidDimensionsError,
    OccupancyIndex,
    Part,
    PlacementStatus,
    Position,
    Region,
    StackerError,
)

__version__ = "0.1.0"

__all__ = [
    "Container",
    "Dimensions",
    "GridPacker",
    "InvalidDimensionsError",
    "OccupancyIndex",
    "PackingConfig",
    "Part",
    "PlacementStatus",
    "Position",
    "Region",
    "StackerError",
    "place",
    "volume_descending",
]
