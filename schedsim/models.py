from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Tuple, Type, Union

from .errors import EmptyWorkload, InvalidProcessParameters, SchedulingError

Pid = Union[int, str]

ZERO = Decimal(0)
HUNDREDTH = Decimal("0.01")
# Keeps every sum of times well inside the default 28-digit context.
MAX_TIME = Decimal(10) ** 12

IDLE_LABEL = "IDLE"


def parse_time(value, name: str, error: Type[SchedulingError] = InvalidProcessParameters) -> Decimal:
    """
    Convert a user-supplied time value into an exact Decimal.

    Accepts ints, floats, Decimals and numeric strings with at most two
    decimal places. Floats go through their repr so 0.1 stays 0.1.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise error(f"{name} must be a number, got {value!r}")

    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise error(f"{name} must be a number, got {value!r}") from exc

    if not result.is_finite():
        raise error(f"{name} must be finite, got {value!r}")
    if abs(result) > MAX_TIME:
        raise error(f"{name} must not exceed {MAX_TIME:,}, got {value!r}")
    try:
        exact = result.quantize(HUNDREDTH) == result
    except InvalidOperation as exc:
        raise error(f"{name} is not a representable time, got {value!r}") from exc
    if not exact:
        raise error(f"{name} allows at most two decimal places, got {value!r}")
    return result


def pid_key(pid: Pid) -> Tuple[int, int, str]:
    # ints sort before strings; each only compared with its own kind
    if isinstance(pid, int):
        return (0, pid, "")
    return (1, 0, pid)


def pid_label(pid: Pid) -> str:
    if isinstance(pid, int):
        return f"P{pid}"
    return pid


@dataclass
class Process:
    pid: Pid
    arrival_time: Decimal
    burst_time: Decimal
    priority: Optional[int] = None

    # Scheduling state, owned by whichever engine run holds this record.
    remaining_time: Decimal = field(init=False)
    start_time: Decimal = field(init=False, default=ZERO)
    finish_time: Decimal = field(init=False, default=ZERO)
    waiting_time: Decimal = field(init=False, default=ZERO)
    turnaround_time: Decimal = field(init=False, default=ZERO)
    section_finish_time: Decimal = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.pid, bool) or not isinstance(self.pid, (int, str)):
            raise InvalidProcessParameters(f"pid must be an int or str, got {self.pid!r}")
        if self.pid == IDLE_LABEL:
            raise InvalidProcessParameters(f"pid {IDLE_LABEL!r} is reserved for idle time")

        self.arrival_time = parse_time(self.arrival_time, "arrival_time")
        self.burst_time = parse_time(self.burst_time, "burst_time")
        if self.arrival_time < 0:
            raise InvalidProcessParameters(
                f"Process {self.pid}: arrival_time must be >= 0, got {self.arrival_time}"
            )
        if self.burst_time <= 0:
            raise InvalidProcessParameters(
                f"Process {self.pid}: burst_time must be > 0, got {self.burst_time}"
            )

        self.remaining_time = self.burst_time
        self.section_finish_time = self.arrival_time

    @property
    def response_time(self) -> Decimal:
        return self.start_time - self.arrival_time

    @property
    def sort_key(self) -> Tuple[Decimal, Tuple[int, int, str]]:
        return (self.arrival_time, pid_key(self.pid))

    @property
    def priority_key(self) -> Tuple[bool, int]:
        # Missing priority ranks after every explicit one.
        return (self.priority is None, self.priority or 0)

    def fresh_copy(self) -> "Process":
        return Process(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
        )

    def finish(self, time: Decimal) -> None:
        self.remaining_time = ZERO
        self.finish_time = time
        self.turnaround_time = time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass(frozen=True)
class Segment:
    """
    One contiguous slice of execution for a process in the Gantt chart.

    ``pid`` is None for an idle interval.
    """

    pid: Optional[Pid]
    start_time: Decimal
    end_time: Decimal

    @property
    def duration(self) -> Decimal:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def label(self) -> str:
        if self.pid is None:
            return IDLE_LABEL
        return pid_label(self.pid)


@dataclass
class SystemMetrics:
    cpu_busy_time: Decimal
    makespan: Decimal
    throughput: float
    cpu_utilization: float
    context_switches: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[Decimal]
    processes: List[Process] = field(default_factory=list)
    timeline: List[Segment] = field(default_factory=list)
    system: Optional[SystemMetrics] = None


def prepare_workload(processes: Iterable[Process]) -> List[Process]:
    """
    Validate a workload and return private copies sorted by arrival, then pid.

    Engines only ever touch the returned copies, so the same input list can
    be fed to several runs at once.
    """
    copies = [p.fresh_copy() for p in processes]
    if not copies:
        raise EmptyWorkload("Workload contains no processes")

    seen = set()
    for p in copies:
        # 1 and "P1" would share a chart label
        label = pid_label(p.pid)
        if label in seen:
            raise InvalidProcessParameters(f"Duplicate process id {p.pid!r}")
        seen.add(label)

    copies.sort(key=lambda p: p.sort_key)
    return copies
