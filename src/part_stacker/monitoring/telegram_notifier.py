"""Lightweight Telegram notification for placement experiment progress.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Experiment start notifications
- Dataset completion milestones
- Errors
- Final results summary

Progress updates are non-critical: without credentials nothing is sent,
and transport failures are logged and reported as ``False``.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: Optional[str] = None,
    token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.
        transport: Optional httpx transport (used by tests).

    Returns:
        True if Telegram acknowledged the message, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not token or not chat_id:
        logger.debug("telegram credentials missing, message not sent")
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("telegram notification failed: %s", exc)
        return False
    return bool(data.get("ok", False))


def format_experiment_start(
    total_datasets: int,
    parts_per_dataset: int,
    algorithm: str,
    container_dims: tuple[float, float, float],
    grid_step: float,
) -> str:
    """Format experiment start notification message.

    Example:
        >>> print(format_experiment_start(10, 40, "GridPacker", (10, 10, 10), 0.5))
        Experiment Started
        Algorithm: GridPacker (grid step 0.5)
        Datasets: 10 (40 parts each)
        Container: 10 x 10 x 10
    """
    return (
        f"Experiment Started\n"
        f"Algorithm: {algorithm} (grid step {grid_step})\n"
        f"Datasets: {total_datasets} ({parts_per_dataset} parts each)\n"
        f"Container: {container_dims[0]} x {container_dims[1]} x {container_dims[2]}"
    )


def format_dataset_milestone(
    datasets_completed: int,
    total_datasets: int,
    avg_utilization: float,
    placement_rate: float,
) -> str:
    """Format dataset completion milestone notification.

    Example:
        >>> print(format_dataset_milestone(3, 10, 41.5, 92.0))
        Progress Update
        Completed: 3/10 datasets (30%)
        Avg Utilization: 41.5%
        Parts Placed: 92.0%
    """
    progress_pct = (datasets_completed / total_datasets) * 100
    return (
        f"Progress Update\n"
        f"Completed: {datasets_completed}/{total_datasets} datasets ({progress_pct:.0f}%)\n"
        f"Avg Utilization: {avg_utilization:.1f}%\n"
        f"Parts Placed: {placement_rate:.1f}%"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message."""
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    total_runs: int,
    total_parts: int,
    total_placed: int,
    avg_utilization: float,
    runtime_seconds: float,
    errors: int,
) -> str:
    """Format final experiment results summary."""
    runtime_minutes = runtime_seconds / 60
    return (
        f"Experiment Complete\n"
        f"Runs: {total_runs}\n"
        f"Parts Placed: {total_placed}/{total_parts}\n"
        f"Avg Utilization: {avg_utilization:.1f}%\n"
        f"Runtime: {runtime_minutes:.1f} minutes\n"
        f"Errors: {errors}"
    )
