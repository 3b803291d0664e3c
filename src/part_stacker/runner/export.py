"""Layout export for placed parts (JSON and CSV)."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Sequence

from part_stacker.core.models import Container, Part

LAYOUT_FIELDS = [
    "id", "name", "color", "width", "height", "depth",
    "x", "y", "z", "status", "fits",
]


def layout_rows(parts: Sequence[Part], container: Container) -> list[dict[str, Any]]:
    """
    Flatten placed parts into one dict per part.

    ``fits`` is re-derived from the part's box and the container bounds,
    independently of ``status``.
    """
    rows = []
    for part in parts:
        pos = part.position
        rows.append({
            "id": part.id,
            "name": part.name,
            "color": part.color,
            "width": part.width,
            "height": part.height,
            "depth": part.depth,
            "x": pos.x if pos else None,
            "y": pos.y if pos else None,
            "z": pos.z if pos else None,
            "status": part.status.value if part.status else None,
            "fits": part.fits_in(container),
        })
    return rows


def export_layout_json(parts: Sequence[Part], container: Container, output_path: Path | str) -> None:
    """Write the container and every placed part to a JSON file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "container": {
            "width": container.width,
            "height": container.height,
            "depth": container.depth,
        },
        "parts": layout_rows(parts, container),
    }
    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_layout_csv(parts: Sequence[Part], container: Container, output_path: Path | str) -> None:
    """Write one CSV row per placed part."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=LAYOUT_FIELDS)
        writer.writeheader()
        for row in layout_rows(parts, container):
            writer.writerow(row)
