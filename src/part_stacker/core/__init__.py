"""Core value types, models and the occupancy index."""

from .errors import InvalidDimensionsError, ManifestError, StackerError
from .geometry import EPS, Dimensions, Position, Region, tolerance
from .models import Container, Part, PlacementStatus
from .occupancy import OccupancyIndex

__all__ = [
    # Geometry
    "EPS",
    "Dimensions",
    "Position",
    "Region",
    "tolerance",
    # Models
    "Container",
    "Part",
    "PlacementStatus",
    "OccupancyIndex",
    # Errors
    "StackerError",
    "InvalidDimensionsError",
    "ManifestError",
]
