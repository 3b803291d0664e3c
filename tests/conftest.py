"""Shared fixtures for the part-stacker test suite."""

import os
import sys

import pytest

# Ensure the src/ tree is importable without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from part_stacker.core.models import Container, Part


@pytest.fixture
def cube_container():
    """10 × 10 × 10 container used by most scenarios."""
    return Container.of(10.0, 10.0, 10.0)


@pytest.fixture
def small_part():
    return Part.of(4.0, 4.0, 4.0, name="small")
