"""Random part sets for benchmark runs."""

import random
from typing import Optional

from part_stacker.core.models import Part
from part_stacker.runner.manifest import PALETTE


def _snap(value: float, step: Optional[float]) -> float:
    if not step:
        return round(value, 3)
    return max(step, round(value / step) * step)


def generate_parts(
    count: int = 40,
    seed: Optional[int] = None,
    min_dim: float = 1.0,
    max_dim: float = 5.0,
    step: Optional[float] = None,
) -> list[Part]:
    """
    Generate random parts for experimentation.

    Args:
        count:   Number of parts to generate.
        seed:    Random seed for reproducibility (default: None).
        min_dim: Smallest value for any dimension.
        max_dim: Largest value for any dimension.
        step:    Snap dimensions to multiples of this grid step, so parts
                 can tile exactly on the packer's grid.

    Returns:
        List of Part objects named ``part-000``, ``part-001``, ...
    """
    rng = random.Random(seed)

    parts = []
    for i in range(count):
        width = _snap(rng.uniform(min_dim, max_dim), step)
        height = _snap(rng.uniform(min_dim, max_dim), step)
        depth = _snap(rng.uniform(min_dim, max_dim), step)
        parts.append(
            Part.of(width, height, depth, name=f"part-{i:03d}", color=rng.choice(PALETTE))
        )

    return parts
