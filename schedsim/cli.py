from __future__ import annotations

import argparse
import logging
from decimal import Decimal
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, compare_algorithms, run_algorithm
from .errors import InvalidQuantum, SchedulingError
from .gantt import build_rich_gantt, render_gantt
from .models import parse_time
from .report import Report, build_report
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def _time_arg(text: str) -> Decimal:
    try:
        return parse_time(text, "quantum", error=InvalidQuantum)
    except SchedulingError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR, SRTF, preemptive Priority).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for engine diagnostics (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=_time_arg,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain text instead of a colored panel.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=_time_arg,
        default=Decimal(2),
        help="Time quantum used for RR when included (default: 2).",
    )
    compare_parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Number of worker threads for the comparison (default: one per algorithm).",
    )

    return parser


def _print_report(report: Report, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {report.algorithm}")
    if report.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {report.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(report), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(report.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Wait", "Turnaround", "Finish"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "PID" else "right"
        proc_table.add_column(h, justify=justify)

    for row in report.rows:
        proc_table.add_row(
            str(row.pid),
            str(row.arrival_time),
            str(row.burst_time),
            str(row.waiting_time),
            str(row.turnaround_time),
            str(row.finish_time),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{report.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{report.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{report.average_response_time:.2f}")
    if report.system:
        sys = report.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Context switches", str(sys.context_switches))

    console.print(sys_table)


def _print_comparison(reports: List[Report], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Switches", justify="right")

    for report in reports:
        summary_table.add_row(
            report.algorithm,
            "" if report.quantum is None else str(report.quantum),
            f"{report.average_waiting_time:.2f}",
            f"{report.average_turnaround_time:.2f}",
            str(report.system.context_switches) if report.system else "",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )

    console = Console()

    try:
        workload_path = Path(args.workload)
        processes = load_workload(workload_path)
        logger.info("Loaded %d processes from %s", len(processes), workload_path)

        if args.command == "run":
            if args.algorithm.lower() in QUANTUM_ALGORITHMS and args.quantum is None:
                parser.error(f"--quantum is required for {args.algorithm}")
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_report(build_report(result), console, plain=args.plain)
            return 0

        if args.command == "compare":
            results = compare_algorithms(processes, args.algorithms, quantum=args.quantum, max_workers=args.jobs)
            reports = [build_report(r) for r in results]
            _print_comparison(reports, f"Algorithm comparison: {workload_path}", console)
            return 0
    except (ValueError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
