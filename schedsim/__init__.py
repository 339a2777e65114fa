"""
CPU scheduling simulator.

Runs FCFS, SJF, Priority, Round Robin, SRTF and preemptive Priority over a
fixed workload and reports per-process timing metrics and a Gantt timeline.
"""

from .algorithms import ALGORITHMS, compare_algorithms, run_algorithm
from .errors import (
    EmptyWorkload,
    InvalidProcessParameters,
    InvalidQuantum,
    ScheduleInvariantError,
    SchedulingError,
    UnknownAlgorithm,
)
from .models import Process, ScheduleResult, Segment
from .report import Report, build_report

__all__ = [
    "ALGORITHMS",
    "EmptyWorkload",
    "InvalidProcessParameters",
    "InvalidQuantum",
    "Process",
    "Report",
    "ScheduleInvariantError",
    "ScheduleResult",
    "SchedulingError",
    "Segment",
    "UnknownAlgorithm",
    "build_report",
    "compare_algorithms",
    "run_algorithm",
]
