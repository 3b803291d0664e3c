"""Batch experiment runner for the grid packer."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from part_stacker.algorithms.grid_packer import GridPacker
from part_stacker.config import ExperimentConfig
from part_stacker.core.errors import StackerError
from part_stacker.core.models import Container, Part
from part_stacker.monitoring.metrics import (
    ExperimentMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from part_stacker.monitoring.telegram_notifier import (
    format_dataset_milestone,
    format_error,
    format_experiment_start,
    format_final_summary,
    send_telegram,
)
from part_stacker.runner.dataset import generate_parts

logger = logging.getLogger(__name__)


def run_once(
    run_id: str,
    parts: Sequence[Part],
    container: Container,
    packer: GridPacker,
) -> tuple[list[Part], RunMetrics]:
    """Place one part set and measure it."""
    started = time.perf_counter()
    placed = packer.place(parts, container)
    elapsed = time.perf_counter() - started
    metrics = RunMetrics.from_parts(
        run_id, placed, container, packer.config.grid_step, runtime_seconds=elapsed,
    )
    return placed, metrics


class ExperimentRunner:
    """
    Runs the grid packer over many random part sets.

    Each dataset is generated from ``config.seed + index``, placed into the
    configured container, and measured. Interim and final results are
    written to ``config.results_dir``; progress goes to Telegram when
    enabled and credentials are present.
    """

    algorithm = "GridPacker"

    def __init__(self, config: Optional[ExperimentConfig] = None):
        self.config = config or ExperimentConfig()
        self.results_dir = self.config.results_dir
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.container = self.config.container.build()
        self.packer = GridPacker(self.config.packing)

    async def run_experiment(self) -> ExperimentMetrics:
        """
        Run every dataset and return aggregated metrics.

        Flow:
            1. Create metrics and send start notification
            2. For each dataset: generate parts, place, record, save interim;
               a dataset that raises StackerError is counted as an error and skipped
            3. Mark complete, save final results, send summary
        """
        cfg = self.config
        experiment_id = f"exp_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = ExperimentMetrics(
            experiment_id=experiment_id,
            algorithm=self.algorithm,
            total_datasets=cfg.num_datasets,
        )

        if cfg.send_telegram_updates:
            await send_telegram(format_experiment_start(
                total_datasets=cfg.num_datasets,
                parts_per_dataset=cfg.parts_per_dataset,
                algorithm=self.algorithm,
                container_dims=self.container.dimensions.as_tuple(),
                grid_step=cfg.packing.grid_step,
            ))

        for dataset_idx in range(cfg.num_datasets):
            dataset_id = f"dataset_{dataset_idx:03d}"
            try:
                parts = generate_parts(
                    count=cfg.parts_per_dataset,
                    seed=cfg.seed + dataset_idx,
                    min_dim=cfg.min_dim,
                    max_dim=cfg.max_dim,
                    step=cfg.packing.grid_step,
                )
                _, run = run_once(dataset_id, parts, self.container, self.packer)
            except StackerError as exc:
                metrics.record_error()
                logger.warning("%s failed: %s", dataset_id, exc)
                if cfg.send_telegram_updates:
                    await send_telegram(format_error(
                        type(exc).__name__, str(exc), {"dataset": dataset_id},
                    ))
                continue

            metrics.add_run(run)
            logger.info(
                "%s: placed %d/%d, utilization %.1f%%",
                dataset_id, run.parts_placed, run.parts_total, run.utilization_pct,
            )

            self._save_results(metrics, suffix=f"_interim_{metrics.total_runs}")

            if cfg.send_telegram_updates and dataset_idx % 2 == 0:
                await send_telegram(format_dataset_milestone(
                    datasets_completed=metrics.total_runs,
                    total_datasets=metrics.total_datasets,
                    avg_utilization=metrics.avg_utilization_pct,
                    placement_rate=metrics.placement_rate_pct,
                ))

        metrics.mark_complete()
        self._save_results(metrics, suffix="_final")

        if cfg.send_telegram_updates:
            await send_telegram(format_final_summary(
                total_runs=metrics.total_runs,
                total_parts=metrics.total_parts,
                total_placed=metrics.total_placed,
                avg_utilization=metrics.avg_utilization_pct,
                runtime_seconds=metrics.runtime_seconds,
                errors=metrics.errors_count,
            ))

        print(print_summary(metrics))
        return metrics

    def _save_results(self, metrics: ExperimentMetrics, suffix: str = "") -> None:
        """
        Save metrics to JSON and CSV files.

        Interim files carry the summary only; the final JSON includes
        every run.
        """
        base_filename = f"{metrics.experiment_id}{suffix}"

        json_path = self.results_dir / f"{base_filename}.json"
        export_to_json(metrics, json_path, include_runs=suffix.endswith("_final"))

        csv_path = self.results_dir / f"{base_filename}_runs.csv"
        export_to_csv(metrics, csv_path)

        logger.debug("saved results to %s and %s", json_path, csv_path)
