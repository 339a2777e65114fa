from decimal import Decimal

import pytest
from rich.panel import Panel

from schedsim.gantt import build_rich_gantt, render_gantt
from schedsim.models import Process
from schedsim.nonpreemptive import schedule_fcfs, schedule_sjf
from schedsim.preemptive import schedule_rr
from schedsim.report import build_report, gantt_breakpoints, timeline_with_idle
from schedsim.workload_io import load_workload


def test_report_rows_and_averages():
    procs = [Process("P1", 0, 5), Process("P2", 1, 3), Process("P3", 2, 8)]
    report = build_report(schedule_fcfs(procs))

    assert [r.pid for r in report.rows] == ["P1", "P2", "P3"]
    assert [r.finish_time for r in report.rows] == [5, 8, 16]
    assert report.average_waiting_time == pytest.approx(10 / 3)
    assert report.average_turnaround_time == pytest.approx(26 / 3)
    assert isinstance(report.average_waiting_time, float)


def test_breakpoints_keep_consecutive_segments_of_one_process():
    report = build_report(schedule_rr([Process("A", 0, 4)], quantum=2))
    assert report.breakpoints == [(0, "A"), (2, "A"), (4, None)]


def test_rr_breakpoints():
    report = build_report(schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2))
    assert report.breakpoints == [
        (0, "P1"),
        (2, "P2"),
        (4, "P1"),
        (6, "P2"),
        (7, "P1"),
        (8, None),
    ]


def test_idle_gaps_are_explicit():
    report = build_report(schedule_sjf([Process(1, 1, 2), Process(2, 5, 1)]))
    assert [(s.label, s.start_time, s.end_time) for s in report.timeline] == [
        ("IDLE", 0, 1),
        ("P1", 1, 3),
        ("IDLE", 3, 5),
        ("P2", 5, 6),
    ]
    assert report.system.cpu_busy_time == 3
    assert report.system.makespan == 6
    assert report.system.cpu_utilization == 0.5


def test_context_switches_counted():
    result = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2)
    assert result.system.context_switches == 4

    single = schedule_rr([Process("A", 0, 4)], quantum=2)
    assert single.system.context_switches == 0


def test_empty_timeline_helpers():
    assert timeline_with_idle([]) == []
    assert gantt_breakpoints([]) == []


def test_render_gantt_plain_text():
    report = build_report(schedule_fcfs([Process(1, 0, 2.5), Process(2, 1, 1)]))
    assert render_gantt(report).splitlines() == [
        "Gantt Chart:",
        "0",
        "|    P1",
        "2.5",
        "|    P2",
        "3.5",
    ]


def test_build_rich_gantt():
    report = build_report(schedule_rr([Process("P1", 0, 5), Process("P2", 3, 3)], quantum=2))
    panel, marks = build_rich_gantt(report.timeline)
    assert isinstance(panel, Panel)
    assert marks.split() == ["0", "2", "4", "6", "7", "8"]


def test_build_rich_gantt_scales_long_timelines():
    report = build_report(schedule_fcfs([Process("long", 0, 1000), Process("short", 1000, Decimal("0.5"))]))
    panel, marks = build_rich_gantt(report.timeline, max_width=40)
    assert isinstance(panel, Panel)
    assert marks.split() == ["0", "1000", "1000.5"]


def test_build_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert marks == ""


def test_report_average_response_time():
    report = build_report(schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2))
    # P1 first runs at 0, P2 at 2 after arriving at 1
    assert report.average_response_time == pytest.approx(0.5)


def test_csv_pids_sort_numerically_on_ties(tmp_path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n10,0,1\n2,0,1\n")
    report = build_report(schedule_fcfs(load_workload(p)))
    assert [label for _, label in report.breakpoints] == ["P2", "P10", None]
