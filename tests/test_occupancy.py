"""Tests for the run-scoped occupancy index."""

import numpy as np
import pytest

from part_stacker.core.geometry import Dimensions, Position, Region
from part_stacker.core.occupancy import OccupancyIndex


def box(x, y, z, w, h, d):
    return Region(Position(x, y, z), Dimensions(w, h, d))


@pytest.fixture
def index():
    occupancy = OccupancyIndex()
    occupancy.record(box(0, 0, 0, 4, 4, 4))
    return occupancy


class TestOccupancyIndex:
    def test_empty_index_never_overlaps(self):
        assert not OccupancyIndex().overlaps(box(0, 0, 0, 1, 1, 1))
        assert len(OccupancyIndex()) == 0

    def test_detects_overlap(self, index):
        assert index.overlaps(box(3, 3, 3, 2, 2, 2))

    def test_touching_faces_do_not_overlap(self, index):
        assert not index.overlaps(box(4, 0, 0, 4, 4, 4))
        assert not index.overlaps(box(0, 4, 0, 4, 4, 4))
        assert not index.overlaps(box(0, 0, 4, 4, 4, 4))

    def test_contained_region_overlaps(self, index):
        assert index.overlaps(box(1, 1, 1, 1, 1, 1))

    def test_query_has_no_side_effects(self, index):
        index.overlaps(box(10, 10, 10, 1, 1, 1))
        assert len(index) == 1

    def test_records_are_kept_in_order(self, index):
        second = box(4, 0, 0, 1, 1, 1)
        index.record(second)
        assert index.regions == (box(0, 0, 0, 4, 4, 4), second)

    def test_grows_past_initial_capacity(self):
        occupancy = OccupancyIndex()
        for i in range(50):
            occupancy.record(box(float(i), 0, 0, 1, 1, 1))
        assert len(occupancy) == 50
        assert occupancy.overlaps(box(49.5, 0, 0, 1, 1, 1))
        assert not occupancy.overlaps(box(50, 0, 0, 1, 1, 1))

    def test_overlaps_many_matches_overlaps(self, index):
        index.record(box(6, 0, 0, 2, 2, 2))
        size = Dimensions(2, 2, 2)
        origins = np.array([[x, 0.0, 0.0] for x in np.arange(0, 9, 0.5)])
        batch = index.overlaps_many(origins, size)
        single = [index.overlaps(Region(Position(*o), size)) for o in origins]
        assert batch.tolist() == single

    def test_overlaps_many_on_empty_index(self):
        result = OccupancyIndex().overlaps_many(np.zeros((3, 3)), Dimensions(1, 1, 1))
        assert result.tolist() == [False, False, False]

    def test_sub_nanometre_regions_overlap(self):
        occupancy = OccupancyIndex()
        occupancy.record(box(0, 0, 0, 6e-10, 6e-10, 6e-10))
        assert occupancy.overlaps(box(4e-10, 0, 0, 6e-10, 6e-10, 6e-10))
        assert not occupancy.overlaps(box(6e-10, 0, 0, 6e-10, 6e-10, 6e-10))

    def test_overlaps_many_at_sub_nanometre_scale(self):
        occupancy = OccupancyIndex()
        occupancy.record(box(0, 0, 0, 6e-10, 6e-10, 6e-10))
        origins = np.array([[x * 1e-10, 0.0, 0.0] for x in range(8)])
        hits = occupancy.overlaps_many(origins, Dimensions(4e-10, 4e-10, 4e-10))
        assert hits.tolist() == [True] * 6 + [False] * 2
