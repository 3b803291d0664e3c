"""Metrics tracking and export for placement runs.

Provides dataclasses for tracking per-run and per-experiment metrics and
utilities for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from part_stacker.core.models import Container, Part

RUN_FIELDS = [
    "run_id", "parts_total", "parts_placed", "parts_unplaced",
    "utilization_pct", "volume_used", "volume_total", "grid_step",
    "runtime_seconds", "finished_at",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunMetrics:
    """Metrics for a single placement run.

    Attributes:
        run_id: Identifier of the run (dataset name, manifest path, ...).
        parts_total: Number of parts handed to the engine.
        parts_placed: Parts placed inside the container.
        parts_unplaced: Parts parked at the sentinel position.
        utilization_pct: Placed volume as a percentage of container volume.
        volume_used: Total volume of placed parts.
        volume_total: Container volume.
        grid_step: Grid step the engine scanned with.
        runtime_seconds: Wall time of the ``place`` call.
        finished_at: Timestamp when the run finished.
    """

    run_id: str
    parts_total: int
    parts_placed: int
    parts_unplaced: int
    utilization_pct: float
    volume_used: float
    volume_total: float
    grid_step: float
    runtime_seconds: float = 0.0
    finished_at: datetime = field(default_factory=_now)

    @classmethod
    def from_parts(
        cls,
        run_id: str,
        parts: Sequence[Part],
        container: Container,
        grid_step: float,
        runtime_seconds: float = 0.0,
    ) -> RunMetrics:
        """Summarise the output of one ``place`` call.

        Example:
            >>> from part_stacker.algorithms.grid_packer import place
            >>> c = Container.of(10, 10, 10)
            >>> rm = RunMetrics.from_parts("demo", place([Part.of(5, 5, 5)], c), c, 0.5)
            >>> rm.parts_placed, rm.utilization_pct
            (1, 12.5)
        """
        placed = [p for p in parts if p.is_placed]
        volume_used = sum(p.volume for p in placed)
        return cls(
            run_id=run_id,
            parts_total=len(parts),
            parts_placed=len(placed),
            parts_unplaced=len(parts) - len(placed),
            utilization_pct=(volume_used / container.volume) * 100,
            volume_used=volume_used,
            volume_total=container.volume,
            grid_step=grid_step,
            runtime_seconds=runtime_seconds,
        )

    @property
    def all_placed(self) -> bool:
        return self.parts_unplaced == 0

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["finished_at"] = self.finished_at.isoformat()
        return d


@dataclass
class ExperimentMetrics:
    """Aggregate metrics for a batch of placement runs.

    Attributes:
        experiment_id: Unique identifier for the experiment.
        algorithm: Algorithm name used.
        total_datasets: Number of datasets planned.
        total_runs: Number of runs recorded so far.
        total_parts: Parts handed to the engine across all runs.
        total_placed: Parts placed inside a container across all runs.
        avg_utilization_pct: Average utilization across runs.
        median_utilization_pct: Median utilization across runs.
        min_utilization_pct: Minimum utilization across runs.
        max_utilization_pct: Maximum utilization across runs.
        runtime_seconds: Total runtime in seconds.
        errors_count: Number of errors encountered.
        started_at: Experiment start timestamp.
        completed_at: Experiment completion timestamp (None if running).
        run_metrics: List of per-run metrics.
    """

    experiment_id: str
    algorithm: str
    total_datasets: int = 0
    total_runs: int = 0
    total_parts: int = 0
    total_placed: int = 0
    avg_utilization_pct: float = 0.0
    median_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    runtime_seconds: float = 0.0
    errors_count: int = 0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    run_metrics: list[RunMetrics] = field(default_factory=list)

    @property
    def placement_rate_pct(self) -> float:
        if not self.total_parts:
            return 0.0
        return (self.total_placed / self.total_parts) * 100

    def add_run(self, run: RunMetrics) -> None:
        """Add one run's metrics to the experiment."""
        self.run_metrics.append(run)
        self.total_runs += 1
        self.total_parts += run.parts_total
        self.total_placed += run.parts_placed
        self._recalculate_stats()

    def record_error(self) -> None:
        self.errors_count += 1

    def mark_complete(self) -> None:
        """Mark experiment as complete and calculate final runtime."""
        self.completed_at = _now()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def _recalculate_stats(self) -> None:
        """Recalculate aggregate statistics from run metrics."""
        if not self.run_metrics:
            return

        utilizations = [r.utilization_pct for r in self.run_metrics]
        self.avg_utilization_pct = sum(utilizations) / len(utilizations)
        self.min_utilization_pct = min(utilizations)
        self.max_utilization_pct = max(utilizations)

        sorted_utils = sorted(utilizations)
        n = len(sorted_utils)
        if n % 2 == 0:
            self.median_utilization_pct = (sorted_utils[n // 2 - 1] + sorted_utils[n // 2]) / 2
        else:
            self.median_utilization_pct = sorted_utils[n // 2]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["placement_rate_pct"] = self.placement_rate_pct
        d["run_metrics"] = [r.to_dict() for r in self.run_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Aggregate metrics only, without the per-run list."""
        d = self.to_dict()
        del d["run_metrics"]
        return d


def export_to_json(metrics: ExperimentMetrics, output_path: Path | str, include_runs: bool = True) -> None:
    """Export experiment metrics to a JSON file.

    Args:
        metrics: ExperimentMetrics instance to export.
        output_path: Path to output JSON file.
        include_runs: If True, include per-run metrics. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_runs else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: ExperimentMetrics, output_path: Path | str) -> None:
    """Export per-run metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RUN_FIELDS)
        writer.writeheader()
        for run in metrics.run_metrics:
            writer.writerow(run.to_dict())


def format_run(run: RunMetrics) -> str:
    """One-paragraph summary of a single run."""
    lines = [
        f"Run: {run.run_id}",
        f"  Placed:      {run.parts_placed}/{run.parts_total}",
        f"  Unplaced:    {run.parts_unplaced}",
        f"  Utilization: {run.utilization_pct:.2f}%",
        f"  Grid step:   {run.grid_step}",
        f"  Runtime:     {run.runtime_seconds:.3f} seconds",
    ]
    return "\n".join(lines)


def print_summary(metrics: ExperimentMetrics) -> str:
    """Generate human-readable summary of experiment metrics.

    Example:
        >>> em = ExperimentMetrics("exp_001", "GridPacker", total_datasets=1)
        >>> "Experiment: exp_001" in print_summary(em)
        True
    """
    lines = [
        "=" * 60,
        f"Experiment: {metrics.experiment_id}",
        f"Algorithm: {metrics.algorithm}",
        "=" * 60,
        f"Datasets Processed: {metrics.total_runs}/{metrics.total_datasets}",
        f"Parts Placed: {metrics.total_placed}/{metrics.total_parts} ({metrics.placement_rate_pct:.1f}%)",
        "",
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Median:  {metrics.median_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} seconds ({metrics.runtime_seconds / 60:.1f} minutes)",
        f"Errors: {metrics.errors_count}",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
