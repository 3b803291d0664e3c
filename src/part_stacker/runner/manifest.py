"""
Part manifests: turning text, CSV and YAML descriptions into Parts.

Text and CSV files hold one part per line in any of these forms:

    Bracket, 10, 20, 30
    Bracket: 10 x 20 x 30
    Bracket 10x20x30
    Bracket<TAB>10<TAB>20<TAB>30

YAML manifests carry a ``parts`` list (one mapping per PartSpec) and may
also describe the ``container``:

    container: {width: 10, height: 10, depth: 10}
    parts:
      - {name: Bracket, width: 2, height: 1, depth: 2, quantity: 4}
"""

from __future__ import annotations

import logging
import math
import random
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from part_stacker.config import ContainerConfig
from part_stacker.core.errors import ManifestError
from part_stacker.core.geometry import Dimensions
from part_stacker.core.models import Container, Part

logger = logging.getLogger(__name__)

PALETTE: tuple[str, ...] = (
    "#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6",
    "#ec4899", "#06b6d4", "#84cc16", "#f97316", "#6366f1",
)

_NUMBER = r"(\d+(?:\.\d*)?)"
_COMMA_LINE = re.compile(rf"^([^,]+),\s*{_NUMBER},\s*{_NUMBER},\s*{_NUMBER}$")
_CROSS_LINE = re.compile(
    rf"^([^:]+?)[:|\s]+{_NUMBER}\s*x\s*{_NUMBER}\s*x\s*{_NUMBER}", re.IGNORECASE
)

TEXT_SUFFIXES = {".csv", ".txt"}
YAML_SUFFIXES = {".yaml", ".yml"}


class PartSpec(BaseModel):
    """One manifest entry: a part shape and how many copies of it."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    depth: float = Field(gt=0)
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    quantity: int = Field(default=1, ge=1)


class Manifest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    container: Optional[ContainerConfig] = None
    parts: list[PartSpec] = Field(default_factory=list)


def random_color(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(PALETTE)


def scale_channel(value: int, factor: float) -> int:
    """Scale one 0-255 channel, rounding halves up and clamping."""
    return min(255, max(0, math.floor(value * factor + 0.5)))


def shade(base_color: str, index: int, total: int) -> str:
    """
    Brightness variant of ``base_color`` for copy ``index`` of ``total``.

    Copies spread linearly from 85% to 115% of the base brightness so
    identical parts stay distinguishable when rendered side by side.
    """
    r = int(base_color[1:3], 16)
    g = int(base_color[3:5], 16)
    b = int(base_color[5:7], 16)
    factor = 0.85 + (index / (total - 1)) * 0.3 if total > 1 else 1.0
    return "#" + "".join(f"{scale_channel(c, factor):02x}" for c in (r, g, b))


def expand(spec: PartSpec, rng: Optional[random.Random] = None) -> list[Part]:
    """One Part per unit of ``spec.quantity``, each with its own id."""
    base = spec.color or random_color(rng)
    dims = Dimensions(spec.width, spec.height, spec.depth)
    if spec.quantity == 1:
        return [Part(dims, name=spec.name, color=base)]
    return [
        Part(dims, name=f"{spec.name} #{i + 1}", color=shade(base, i, spec.quantity))
        for i in range(spec.quantity)
    ]


def parse_line(line: str) -> Optional[PartSpec]:
    """Parse one text line, or return None if it matches no known form."""
    line = line.strip()
    if not line:
        return None

    match = _COMMA_LINE.match(line) or _CROSS_LINE.match(line)
    if match:
        name, width, height, depth = match.groups()
    else:
        cells = [cell.strip() for cell in line.split("\t") if cell.strip()]
        if len(cells) < 4:
            return None
        name, width, height, depth = cells[:4]

    try:
        return PartSpec(
            name=name.strip(), width=float(width), height=float(height), depth=float(depth)
        )
    except (ValueError, ValidationError):
        return None


def parse_text(content: str) -> list[PartSpec]:
    """Parse every recognisable line of a text or CSV manifest."""
    specs: list[PartSpec] = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        spec = parse_line(line)
        if spec is None:
            if line.strip():
                logger.debug("skipping unrecognised manifest line %d: %r", lineno, line)
            continue
        specs.append(spec)
    return specs


def read_manifest(path: Path | str) -> Manifest:
    """
    Load a manifest file without expanding quantities.

    Raises:
        ManifestError: unreadable file, unsupported suffix, or invalid entries.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"cannot read manifest {path}: {exc}") from exc

    if suffix in TEXT_SUFFIXES:
        return Manifest(parts=parse_text(content))
    if suffix not in YAML_SUFFIXES:
        raise ManifestError(
            f"unsupported manifest type {suffix!r}; "
            f"use one of {sorted(TEXT_SUFFIXES | YAML_SUFFIXES)}"
        )

    try:
        data: Any = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ManifestError(f"{path}: invalid YAML: {exc}") from exc
    if isinstance(data, list):
        data = {"parts": data}
    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"{path}: {exc}") from exc


def load_manifest(path: Path | str, rng: Optional[random.Random] = None) -> list[Part]:
    """Load a manifest and expand it into individual Parts."""
    manifest = read_manifest(path)
    parts: list[Part] = []
    for spec in manifest.parts:
        parts.extend(expand(spec, rng))
    logger.info("loaded %d parts from %s", len(parts), path)
    return parts


def load_container(path: Path | str) -> Optional[Container]:
    """Container described by a YAML manifest, if any."""
    manifest = read_manifest(path)
    return manifest.container.build() if manifest.container else None
