from decimal import Decimal

import pytest

from schedsim.errors import InvalidProcessParameters, InvalidQuantum
from schedsim.models import Process, Segment, parse_time, prepare_workload


def test_process_initial_state():
    p = Process("A", arrival_time=1.5, burst_time=3)
    assert p.arrival_time == Decimal("1.5")
    assert p.remaining_time == p.burst_time == 3
    assert p.section_finish_time == p.arrival_time
    assert p.waiting_time == p.turnaround_time == p.finish_time == p.start_time == 0


@pytest.mark.parametrize(
    "arrival, burst",
    [(-1, 3), (0, 0), (0, -2), (0.001, 1), (0, 1.555), (True, 1), ("soon", 1), (None, 1)],
)
def test_process_rejects_bad_times(arrival, burst):
    with pytest.raises(InvalidProcessParameters):
        Process("A", arrival_time=arrival, burst_time=burst)


def test_process_rejects_bad_pid():
    with pytest.raises(InvalidProcessParameters):
        Process(1.5, 0, 1)


def test_parse_time_accepts_strings_and_trailing_zeros():
    assert parse_time("2.50", "t") == Decimal("2.5")
    assert parse_time(0.1, "t") == Decimal("0.1")
    with pytest.raises(InvalidQuantum):
        parse_time("0.125", "quantum", error=InvalidQuantum)


def test_fresh_copy_resets_state():
    p = Process("A", 0, 4, priority=1)
    p.remaining_time = Decimal(1)
    p.finish(Decimal(9))
    copy = p.fresh_copy()
    assert copy is not p
    assert copy.priority == 1
    assert copy.remaining_time == 4
    assert copy.finish_time == 0


def test_finish_sets_derived_times():
    p = Process("A", 2, 3)
    p.finish(Decimal(10))
    assert p.turnaround_time == 8
    assert p.waiting_time == 5
    assert p.remaining_time == 0


def test_prepare_workload_sorts_by_arrival_then_pid():
    procs = [Process("b", 1, 1), Process("a", 1, 1), Process(7, 1, 1), Process("z", 0, 1)]
    assert [p.pid for p in prepare_workload(procs)] == ["z", 7, "a", "b"]


def test_segment_labels():
    assert Segment(3, Decimal(0), Decimal(1)).label == "P3"
    assert Segment("init", Decimal(0), Decimal(1)).label == "init"
    idle = Segment(None, Decimal(1), Decimal(2.5))
    assert idle.is_idle
    assert idle.label == "IDLE"
    assert idle.duration == Decimal("1.5")


@pytest.mark.parametrize("burst", [10**26, Decimal("1E+30"), "1" + "0" * 40, 10**12 + 1])
def test_process_rejects_huge_times(burst):
    with pytest.raises(InvalidProcessParameters):
        Process("A", arrival_time=0, burst_time=burst)


def test_parse_time_accepts_upper_bound():
    assert parse_time(10**12, "t") == Decimal(10) ** 12
    with pytest.raises(InvalidQuantum):
        parse_time(10**30, "quantum", error=InvalidQuantum)


def test_idle_label_is_reserved():
    with pytest.raises(InvalidProcessParameters):
        Process("IDLE", 0, 1)


def test_prepare_workload_rejects_clashing_labels():
    with pytest.raises(InvalidProcessParameters):
        prepare_workload([Process(1, 0, 1), Process("P1", 0, 1)])
