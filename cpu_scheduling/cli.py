from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import simulate
from .errors import SchedulingError
from .gantt import build_rich_gantt
from .models import Process, ScheduleResult, SchedulingPolicy
from .workload_io import load_workload, prepare_processes, sample_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
ALGORITHM_NAMES = [policy.value for policy in SchedulingPolicy]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-scheduling",
        description="CPU scheduling simulator (FCFS, SJF, SRT, Priority, RR).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srt, priority, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in sample).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by other algorithms, default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of tables.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in sample).",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_NAMES,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_NAMES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(workload: Optional[str]) -> List[Process]:
    if workload is None:
        logger.info("No workload given, using the built-in sample")
        return sample_workload()
    return load_workload(Path(workload))


def _fmt(value: Optional[float], spec: str = ".2f", suffix: str = "") -> str:
    return "-" if value is None else f"{value:{spec}}{suffix}"


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    if summary:
        sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", _fmt(summary.avg_waiting))
        sys_table.add_row("Avg turnaround", _fmt(summary.avg_turnaround))
        sys_table.add_row("Avg response", _fmt(summary.avg_response))
        sys_table.add_row("Total execution time", _fmt(summary.total_execution_time, "d"))
        sys_table.add_row("CPU utilization", _fmt(summary.cpu_utilization, ".1f", "%"))
        sys_table.add_row("Throughput (proc/time)", _fmt(summary.throughput, ".3f"))

        console.print(sys_table)


def _run(args: argparse.Namespace, console: Console) -> None:
    policy = SchedulingPolicy.parse(args.algorithm)
    processes = prepare_processes(_load(args.workload), policy)
    result = simulate(processes, policy, quantum=args.quantum)

    if args.json:
        console.print_json(data=result.to_dict())
    else:
        _print_result(result, console)


def _compare(args: argparse.Namespace, console: Console) -> None:
    processes = _load(args.workload)

    title = "Algorithm comparison" if args.workload is None else f"Algorithm comparison: {args.workload}"
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util.", justify="right")

    for name in args.algorithms:
        policy = SchedulingPolicy.parse(name)
        result = simulate(prepare_processes(processes, policy), policy, quantum=args.quantum)
        summary = result.summary
        summary_table.add_row(
            policy.label,
            "" if result.quantum is None else str(result.quantum),
            _fmt(summary.avg_waiting),
            _fmt(summary.avg_turnaround),
            _fmt(summary.avg_response),
            _fmt(summary.cpu_utilization, ".1f", "%"),
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    console = Console()

    try:
        if args.command == "run":
            _run(args, console)
        elif args.command == "compare":
            _compare(args, console)
        else:
            parser.error(f"Unknown command: {args.command}")
    except (SchedulingError, OSError) as exc:
        logger.debug("Run aborted", exc_info=True)
        console.print(f"Error: {exc}", style="red", markup=False)
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
