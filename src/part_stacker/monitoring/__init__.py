"""Monitoring module for part-stacker.

Provides metrics tracking and Telegram notifications for placement runs.
"""

from .metrics import (
    ExperimentMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    format_run,
    print_summary,
)
from .telegram_notifier import (
    format_dataset_milestone,
    format_error,
    format_experiment_start,
    format_final_summary,
    send_telegram,
)

__all__ = [
    # Metrics
    "ExperimentMetrics",
    "RunMetrics",
    "export_to_csv",
    "export_to_json",
    "format_run",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_experiment_start",
    "format_dataset_milestone",
    "format_error",
    "format_final_summary",
]
