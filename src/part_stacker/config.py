"""
Central configuration for part-stacker.

Classes:
    PackingConfig    — engine tuning (grid step, sentinel margin)
    ContainerConfig  — container dimensions as read from a config file
    ExperimentConfig — all tuneable parameters for a benchmark run

Configs are pydantic models so a YAML file is validated on load; a bad
value raises ``pydantic.ValidationError`` naming the offending field.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from part_stacker.core.models import Container

DEFAULT_GRID_STEP = 0.5
DEFAULT_SENTINEL_MARGIN = 2.0

ModelT = TypeVar("ModelT", bound=BaseModel)


class PackingConfig(BaseModel):
    """
    Engine tuning.

    Attributes:
        grid_step:       Spacing of candidate positions along each axis.
                         Smaller finds tighter fits but scans more cells.
        sentinel_margin: Gap between the container top and the spot where
                         unplaced parts are parked.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    grid_step: float = Field(default=DEFAULT_GRID_STEP, gt=0)
    sentinel_margin: float = Field(default=DEFAULT_SENTINEL_MARGIN, gt=0)


class ContainerConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    width: float = Field(default=10.0, gt=0)
    height: float = Field(default=10.0, gt=0)
    depth: float = Field(default=10.0, gt=0)

    def build(self) -> Container:
        return Container.of(self.width, self.height, self.depth)


class ExperimentConfig(BaseModel):
    """
    Parameters for a batch benchmark.

    Attributes:
        num_datasets:          Number of random part sets to generate.
        parts_per_dataset:     Parts per set.
        min_dim / max_dim:     Bounds for each generated part dimension.
        seed:                  Base seed; dataset i uses ``seed + i``.
        results_dir:           Where JSON/CSV results are written.
        send_telegram_updates: Post progress to Telegram when credentials exist.
    """

    model_config = ConfigDict(extra="forbid")

    num_datasets: int = Field(default=10, ge=1)
    parts_per_dataset: int = Field(default=40, ge=0)
    container: ContainerConfig = Field(default_factory=ContainerConfig)
    packing: PackingConfig = Field(default_factory=PackingConfig)
    min_dim: float = Field(default=1.0, gt=0)
    max_dim: float = Field(default=5.0, gt=0)
    seed: int = 0
    results_dir: Path = Path("results")
    send_telegram_updates: bool = False

    @model_validator(mode="after")
    def _check_dim_range(self) -> ExperimentConfig:
        if self.min_dim > self.max_dim:
            raise ValueError(
                f"min_dim ({self.min_dim}) must not exceed max_dim ({self.max_dim})"
            )
        return self


def load_config(path: Path | str, model: type[ModelT] = PackingConfig) -> ModelT:  # type: ignore[assignment]
    """
    Read a YAML file and validate it against ``model``.

    An empty file yields the model defaults.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        pydantic.ValidationError: a value is out of range or unknown.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data: Any = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return model.model_validate(data)
