"""Placement algorithms."""

from .grid_packer import GridPacker, axis_candidates, place, volume_descending

__all__ = ["GridPacker", "axis_candidates", "place", "volume_descending"]
