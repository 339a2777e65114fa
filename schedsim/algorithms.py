from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from .errors import UnknownAlgorithm
from .models import Process, ScheduleResult
from .nonpreemptive import schedule_fcfs, schedule_priority, schedule_sjf
from .preemptive import schedule_priority_preemptive, schedule_rr, schedule_srtf

ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
    "srtf": schedule_srtf,
    "priority-preemptive": schedule_priority_preemptive,
}

QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(name: str, processes: List[Process], quantum=None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise UnknownAlgorithm(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum if name in QUANTUM_ALGORITHMS else None)


def compare_algorithms(
    processes: List[Process],
    names: Sequence[str],
    quantum=None,
    max_workers: Optional[int] = None,
) -> List[ScheduleResult]:
    """
    Run several algorithms on the same workload, one thread per run.

    Every engine works on its own copies of the processes, so the shared
    input list is never mutated. Results come back in the order of ``names``.
    """
    for name in names:
        if name.lower() not in ALGORITHMS:
            raise UnknownAlgorithm(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    if not names:
        return []

    with ThreadPoolExecutor(max_workers=max_workers or len(names)) as pool:
        futures = [pool.submit(run_algorithm, name, processes, quantum) for name in names]
        return [f.result() for f in futures]
