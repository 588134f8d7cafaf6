from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import DEFAULT_QUANTUM, run_all
from .gantt import build_rich_gantt
from .models import ScheduleResult
from .workload_io import WorkloadError, load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-scheduler",
        description="Batch CPU scheduling simulator (FCFS, SJF, SJF-Priority, Round-robin).",
    )
    parser.add_argument(
        "workload",
        help="Process table: rows of 'id,burst,arrival[,priority]' (or a .json list).",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=None,
        help="Stop round-robin after this many passes over the table (default: run to completion).",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a comparison table of all algorithms after the reports.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scheduling decisions to stderr.",
    )
    return parser


def _configure_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_title(title: str, console: Console) -> None:
    rule = "-" * (len(title) * 2)
    console.print(rule, highlight=False)
    console.print(" " * (len(title) // 2), title, highlight=False)
    console.print(rule, highlight=False)


def _print_result(result: ScheduleResult, console: Console) -> None:
    _print_title(result.title, console)

    console.print(build_rich_gantt(result.timeline))
    console.print()

    system = result.system
    proc_table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True)
    proc_table.add_column("ID", justify="center")
    proc_table.add_column("Priority", justify="center")
    proc_table.add_column("Burst", justify="right")
    proc_table.add_column("Arrival", justify="right")
    proc_table.add_column("Wait", justify="right", footer=f"Average\n{system.avg_waiting:.2f}")
    proc_table.add_column("Turnaround", justify="right", footer=f"Average\n{system.avg_turnaround:.2f}")
    proc_table.add_column("Exit", justify="right", footer=f"Throughput\n{system.throughput:.2f}/t")

    for p in result.processes:
        proc_table.add_row(
            str(p.pid),
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )

    console.print(proc_table)
    console.print()


def _print_summary(results: List[ScheduleResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("CPU busy", justify="right")

    for result in results:
        system = result.system
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{system.avg_waiting:.2f}",
            f"{system.avg_turnaround:.2f}",
            f"{system.throughput:.2f}/t",
            str(system.cpu_busy_time),
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)
    _configure_logging(args.verbose, err_console)

    if args.quantum <= 0:
        parser.error("--quantum must be positive")
    if args.max_passes is not None and args.max_passes <= 0:
        parser.error("--max-passes must be positive")

    workload_path = Path(args.workload)
    try:
        processes = load_workload(workload_path)
    except WorkloadError as exc:
        err_console.print(f"[red]Invalid workload:[/red] {escape(str(exc))}", highlight=False)
        return 1
    except OSError as exc:
        err_console.print(f"[red]Error opening scheduling file:[/red] {escape(str(exc))}", highlight=False)
        return 1

    logger.debug("Scheduling %d process(es) with quantum %d", len(processes), args.quantum)
    results = run_all(processes, quantum=args.quantum, max_passes=args.max_passes)
    for result in results:
        _print_result(result, console)

    if args.summary:
        _print_summary(results, console)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
