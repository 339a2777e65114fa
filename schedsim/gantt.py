from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Segment
from .report import Report


def render_gantt(report: Report) -> str:
    """
    Plain-text Gantt chart, one line per breakpoint time and one per segment:

        0
        |    P1
        5
        |    P2
        8
    """
    if not report.breakpoints:
        return "Gantt Chart:\n(no execution)"

    lines = ["Gantt Chart:"]
    for timestamp, label in report.breakpoints:
        lines.append(str(timestamp))
        if label is not None:
            lines.append(f"|    {label}")
    return "\n".join(lines)


def _column_scale(timeline: List[Segment], max_width: int) -> Decimal:
    makespan = timeline[-1].end_time
    if makespan <= max_width:
        return Decimal(1)
    return Decimal(max_width) / makespan


def build_rich_gantt(timeline: List[Segment], max_width: int = 72) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    ``timeline`` is expected in time order with idle gaps already filled in,
    as produced by ``report.timeline_with_idle``.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[str, str] = {}

    def pid_color(label: str) -> str:
        if label not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[label] = colors[idx]
        return pid_to_color[label]

    scale = _column_scale(timeline, max_width)

    bars = Text()
    labels = Text()
    time_marks = str(timeline[0].start_time)

    for seg in timeline:
        width = max(1, int((seg.duration * scale).to_integral_value()))
        if seg.is_idle:
            bars.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            bars.append(" " * width, style=f"on {pid_color(seg.label)}")
            labels.append(seg.label[:width].ljust(width), style="bold")
        time_marks += f" {str(seg.end_time):>{max(2, width - 1)}}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
