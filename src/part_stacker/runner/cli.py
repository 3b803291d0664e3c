"""Command-line entry point: ``part-stacker stack`` and ``part-stacker benchmark``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from part_stacker.algorithms.grid_packer import GridPacker
from part_stacker.config import ExperimentConfig, PackingConfig, load_config
from part_stacker.core.errors import StackerError
from part_stacker.core.models import Container
from part_stacker.monitoring.metrics import RunMetrics, format_run
from part_stacker.runner.experiment import ExperimentRunner
from part_stacker.runner.export import export_layout_csv, export_layout_json
from part_stacker.runner.manifest import load_container, load_manifest

logger = logging.getLogger("part_stacker")

EXIT_OK = 0
EXIT_UNPLACED = 1
EXIT_INPUT_ERROR = 2


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_stack(args: argparse.Namespace) -> int:
    packing = load_config(args.config, PackingConfig) if args.config else PackingConfig()
    if args.grid_step is not None:
        packing = PackingConfig(grid_step=args.grid_step, sentinel_margin=packing.sentinel_margin)

    if args.container:
        container = Container.of(*args.container)
    else:
        container = load_container(args.manifest)
    if container is None:
        print("error: no container given; pass --container W H D "
              "or add a container section to the manifest", file=sys.stderr)
        return EXIT_INPUT_ERROR

    parts = load_manifest(args.manifest)
    packer = GridPacker(packing)
    started = time.perf_counter()
    placed = packer.place(parts, container)
    run = RunMetrics.from_parts(
        str(args.manifest), placed, container, packing.grid_step,
        runtime_seconds=time.perf_counter() - started,
    )

    print(format_run(run))
    for part in placed:
        if not part.is_placed:
            print(f"  does not fit: {part.name or part.id} "
                  f"({part.width} x {part.height} x {part.depth})")

    if args.output:
        fmt = args.format or ("csv" if args.output.suffix.lower() == ".csv" else "json")
        if fmt == "csv":
            export_layout_csv(placed, container, args.output)
        else:
            export_layout_json(placed, container, args.output)
        print(f"Saved layout to {args.output}")

    return EXIT_OK if run.all_placed else EXIT_UNPLACED


def _cmd_benchmark(args: argparse.Namespace) -> int:
    config = load_config(args.config, ExperimentConfig) if args.config else ExperimentConfig()
    overrides = {
        "num_datasets": args.datasets,
        "parts_per_dataset": args.parts,
        "results_dir": args.results_dir,
        "send_telegram_updates": True if args.telegram else None,
    }
    data = config.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    config = ExperimentConfig.model_validate(data)

    runner = ExperimentRunner(config)
    asyncio.run(runner.run_experiment())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="part-stacker",
        description="Place rectangular parts in a container without overlap",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    stack = sub.add_parser("stack", help="Place the parts of a manifest")
    stack.add_argument("manifest", type=Path,
                       help="Part manifest (.yaml, .yml, .csv or .txt)")
    stack.add_argument("--container", type=float, nargs=3, metavar=("W", "H", "D"),
                       help="Container width, height and depth")
    stack.add_argument("--config", type=Path, help="YAML file with packing settings")
    stack.add_argument("--grid-step", type=float, default=None,
                       help="Candidate grid spacing (default: 0.5)")
    stack.add_argument("--output", "-o", type=Path, help="Write the layout to this file")
    stack.add_argument("--format", choices=("json", "csv"),
                       help="Layout format (default: from the output suffix)")
    stack.set_defaults(func=_cmd_stack)

    bench = sub.add_parser("benchmark", help="Run the packer over random datasets")
    bench.add_argument("--config", type=Path, help="YAML file with experiment settings")
    bench.add_argument("--datasets", type=int, default=None,
                       help="Number of datasets to generate")
    bench.add_argument("--parts", type=int, default=None,
                       help="Number of parts per dataset")
    bench.add_argument("--results-dir", type=Path, default=None,
                       help="Directory to save results")
    bench.add_argument("--telegram", action="store_true",
                       help="Send progress to Telegram (needs TELEGRAM_BOT_TOKEN/TELEGRAM_CHAT_ID)")
    bench.set_defaults(func=_cmd_benchmark)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return args.func(args)
    except (StackerError, ValidationError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
