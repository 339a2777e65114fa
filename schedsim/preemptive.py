"""
Preemptive scheduling: a process may be dispatched several times and so
contributes several segments to the timeline.

Round Robin slices time by a fixed quantum over a FIFO ready queue.
SRTF and preemptive Priority are event-driven: the running process keeps the
CPU until it completes or an arrival brings in a process with a strictly
smaller key.
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from decimal import Decimal
from typing import Callable, Deque, Iterable, List, Optional, Tuple

from .errors import InvalidQuantum, ScheduleInvariantError
from .metrics import compute_system_metrics
from .models import ZERO, Process, ScheduleResult, Segment, parse_time, pid_key, prepare_workload

logger = logging.getLogger(__name__)

PolicyKey = Callable[[Process], tuple]


def validate_quantum(quantum) -> Decimal:
    if quantum is None:
        raise InvalidQuantum("Round Robin requires a positive quantum (use --quantum)")
    q = parse_time(quantum, "quantum", error=InvalidQuantum)
    if q <= 0:
        raise InvalidQuantum(f"quantum must be > 0, got {q}")
    return q


def _admit(pending: Deque[Process], time: Decimal) -> List[Process]:
    arrived = []
    while pending and pending[0].arrival_time <= time:
        arrived.append(pending.popleft())
    return arrived


def _dispatch(p: Process, time: Decimal) -> None:
    """Credit the wait since ``p`` last left the CPU."""
    if p.remaining_time == p.burst_time:
        p.start_time = time
    p.waiting_time += time - p.section_finish_time


def _complete(p: Process, time: Decimal, algorithm: str) -> None:
    accumulated = p.waiting_time
    p.finish(time)
    if accumulated != p.waiting_time:
        raise ScheduleInvariantError(
            f"{algorithm}: {p.pid!r} accumulated waiting {accumulated}, "
            f"expected {p.waiting_time}"
        )


def schedule_rr(processes: List[Process], quantum=None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice runs join the queue ahead of the
    process whose slice just expired.
    """
    q = validate_quantum(quantum)
    pending = deque(prepare_workload(processes))

    time = pending[0].arrival_time
    ready: Deque[Process] = deque(_admit(pending, time))
    timeline: List[Segment] = []
    finished: List[Process] = []

    while ready or pending:
        if not ready:
            logger.debug("Round Robin: idle from %s to %s", time, pending[0].arrival_time)
            time = pending[0].arrival_time
            ready.extend(_admit(pending, time))
            continue

        p = ready.popleft()
        run_time = min(p.remaining_time, q)

        _dispatch(p, time)
        timeline.append(Segment(pid=p.pid, start_time=time, end_time=time + run_time))
        p.remaining_time -= run_time
        time += run_time
        p.section_finish_time = time

        # Arrivals during the slice go first.
        ready.extend(_admit(pending, time))

        if p.remaining_time > 0:
            ready.append(p)
        else:
            _complete(p, time, "Round Robin")
            finished.append(p)
            logger.debug("Round Robin: %s finished at %s", p.pid, time)

    result = ScheduleResult(algorithm="Round Robin", quantum=q, processes=finished, timeline=timeline)
    compute_system_metrics(result)
    return result


def _preemptive_shortest_key_first(
    processes: Iterable[Process],
    policy_key: PolicyKey,
    algorithm: str,
) -> ScheduleResult:
    """
    Run the process with the smallest key until it completes or is preempted.

    The simulation only stops at arrivals and projected completions; between
    two such events nothing can change the choice.
    """
    pending = deque(prepare_workload(processes))

    def entry(p: Process) -> Tuple[tuple, Decimal, Tuple[int, int, str], Process]:
        return (policy_key(p), p.arrival_time, pid_key(p.pid), p)

    ready: List[Tuple[tuple, Decimal, Tuple[int, int, str], Process]] = []
    timeline: List[Segment] = []
    finished: List[Process] = []

    time = pending[0].arrival_time
    running: Optional[Process] = None
    segment_start = ZERO

    def admit() -> None:
        for arrived in _admit(pending, time):
            heapq.heappush(ready, entry(arrived))

    admit()
    while running is not None or ready or pending:
        if running is None:
            if not ready:
                logger.debug("%s: idle from %s to %s", algorithm, time, pending[0].arrival_time)
                time = pending[0].arrival_time
                admit()
                continue
            running = heapq.heappop(ready)[-1]
            segment_start = time
            _dispatch(running, time)

        completion = time + running.remaining_time
        if not pending or completion <= pending[0].arrival_time:
            running.remaining_time = ZERO
            time = completion
            timeline.append(Segment(pid=running.pid, start_time=segment_start, end_time=time))
            running.section_finish_time = time
            _complete(running, time, algorithm)
            finished.append(running)
            logger.debug("%s: %s finished at %s", algorithm, running.pid, time)
            running = None
            admit()
            continue

        next_arrival = pending[0].arrival_time
        running.remaining_time -= next_arrival - time
        time = next_arrival
        admit()

        if ready and ready[0][:3] < entry(running)[:3]:
            timeline.append(Segment(pid=running.pid, start_time=segment_start, end_time=time))
            running.section_finish_time = time
            logger.debug("%s: %s preempted at %s by %s", algorithm, running.pid, time, ready[0][-1].pid)
            heapq.heappush(ready, entry(running))
            running = None

    result = ScheduleResult(algorithm=algorithm, quantum=None, processes=finished, timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_srtf(processes: List[Process], quantum=None) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return _preemptive_shortest_key_first(processes, lambda p: (p.remaining_time,), "SRTF")


def schedule_priority_preemptive(processes: List[Process], quantum=None) -> ScheduleResult:
    """
    Preemptive Priority scheduling: an arrival with a strictly better
    priority takes the CPU from the running process.
    """
    return _preemptive_shortest_key_first(processes, lambda p: p.priority_key, "Priority (preemptive)")
