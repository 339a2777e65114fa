from __future__ import annotations

from typing import List

from .models import ZERO, Process, ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given finished processes and
    timeline segments.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=ZERO, makespan=ZERO, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.finish_time for p in result.processes)
    cpu_busy_time = sum((seg.duration for seg in result.timeline), ZERO)

    throughput = float(len(result.processes) / makespan) if makespan > 0 else 0.0
    cpu_utilization = float(cpu_busy_time / makespan) if makespan > 0 else 0.0

    context_switches = sum(
        1 for prev, cur in zip(result.timeline, result.timeline[1:]) if prev.pid != cur.pid
    )

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=context_switches,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": float(sum((p.waiting_time for p in processes), ZERO) / n),
        "avg_turnaround": float(sum((p.turnaround_time for p in processes), ZERO) / n),
        "avg_response": float(sum((p.response_time for p in processes), ZERO) / n),
    }
