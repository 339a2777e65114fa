"""
Turn a finished schedule into the data a report needs: one row per process,
average waiting, turnaround and response time, and the Gantt timeline with
idle gaps made explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from .metrics import compute_system_metrics, summarize_process_metrics
from .models import ZERO, Pid, Process, ScheduleResult, Segment, SystemMetrics

Breakpoint = Tuple[Decimal, Optional[str]]


@dataclass(frozen=True)
class ProcessRow:
    pid: Pid
    arrival_time: Decimal
    burst_time: Decimal
    waiting_time: Decimal
    turnaround_time: Decimal
    finish_time: Decimal

    @classmethod
    def from_process(cls, p: Process) -> "ProcessRow":
        return cls(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
            finish_time=p.finish_time,
        )


@dataclass
class Report:
    algorithm: str
    quantum: Optional[Decimal]
    rows: List[ProcessRow] = field(default_factory=list)
    average_waiting_time: float = 0.0
    average_turnaround_time: float = 0.0
    average_response_time: float = 0.0
    timeline: List[Segment] = field(default_factory=list)
    breakpoints: List[Breakpoint] = field(default_factory=list)
    system: Optional[SystemMetrics] = None


def timeline_with_idle(segments: List[Segment]) -> List[Segment]:
    """
    Order segments by start time and fill every gap, including one before
    the first dispatch, with an idle segment.
    """
    timeline: List[Segment] = []
    last_time = ZERO
    for seg in sorted(segments, key=lambda s: (s.start_time, s.end_time)):
        if seg.start_time > last_time:
            timeline.append(Segment(pid=None, start_time=last_time, end_time=seg.start_time))
        timeline.append(seg)
        last_time = seg.end_time
    return timeline


def gantt_breakpoints(timeline: List[Segment]) -> List[Breakpoint]:
    # Adjacent segments of one process stay separate so preemptions show.
    if not timeline:
        return []
    points: List[Breakpoint] = [(seg.start_time, seg.label) for seg in timeline]
    points.append((timeline[-1].end_time, None))
    return points


def build_report(result: ScheduleResult) -> Report:
    system = result.system or compute_system_metrics(result)
    summary = summarize_process_metrics(result.processes)
    timeline = timeline_with_idle(result.timeline)

    return Report(
        algorithm=result.algorithm,
        quantum=result.quantum,
        rows=[ProcessRow.from_process(p) for p in result.processes],
        average_waiting_time=summary["avg_waiting"],
        average_turnaround_time=summary["avg_turnaround"],
        average_response_time=summary["avg_response"],
        timeline=timeline,
        breakpoints=gantt_breakpoints(timeline),
        system=system,
    )
