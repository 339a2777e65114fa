"""
Non-preemptive scheduling: every dispatched process runs to completion.

FCFS, SJF and static Priority are the same greedy loop with different
selection keys. The ready set is a binary heap keyed by
``(policy_key, arrival_time, pid)`` so ties always resolve by earliest
arrival, then by pid.
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import ScheduleInvariantError
from .metrics import compute_system_metrics
from .models import Process, ScheduleResult, Segment, pid_key, prepare_workload

logger = logging.getLogger(__name__)

PolicyKey = Callable[[Process], tuple]


def _run_to_completion(
    processes: Iterable[Process],
    policy_key: PolicyKey,
    algorithm: str,
) -> ScheduleResult:
    pending = deque(prepare_workload(processes))
    ready: List[Tuple[tuple, Decimal, Tuple[int, int, str], Process]] = []

    timeline: List[Segment] = []
    finished: List[Process] = []
    time = pending[0].arrival_time

    while pending or ready:
        while pending and pending[0].arrival_time <= time:
            p = pending.popleft()
            heapq.heappush(ready, (policy_key(p), p.arrival_time, pid_key(p.pid), p))

        if not ready:
            # Nothing has arrived yet: jump straight to the next arrival.
            logger.debug("%s: idle from %s to %s", algorithm, time, pending[0].arrival_time)
            time = pending[0].arrival_time
            continue

        p = heapq.heappop(ready)[-1]
        if p.arrival_time > time:
            raise ScheduleInvariantError(f"{algorithm}: dispatched {p.pid!r} before its arrival")

        p.start_time = time
        p.finish(time + p.burst_time)
        timeline.append(Segment(pid=p.pid, start_time=p.start_time, end_time=p.finish_time))
        logger.debug("%s: ran %s over [%s, %s)", algorithm, p.pid, p.start_time, p.finish_time)

        finished.append(p)
        time = p.finish_time

    result = ScheduleResult(algorithm=algorithm, quantum=None, processes=finished, timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[object] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).
    """
    return _run_to_completion(processes, lambda p: (), "FCFS")


def schedule_sjf(processes: List[Process], quantum: Optional[object] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time.
    """
    return _run_to_completion(processes, lambda p: (p.burst_time,), "SJF (non-preemptive)")


def schedule_priority(processes: List[Process], quantum: Optional[object] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Processes without a
    priority run after all prioritised ones.
    """
    return _run_to_completion(processes, lambda p: p.priority_key, "Priority (static)")
