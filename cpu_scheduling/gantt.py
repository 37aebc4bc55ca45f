from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

IDLE_LABEL = "idle"


def _label(sl: ScheduledSlice, width: int) -> str:
    name = IDLE_LABEL if sl.is_idle else sl.pid
    return name[:width].ljust(width)


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one column per time unit, ``=`` for busy and
    ``.`` for idle slices.
    """
    if not slices:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = str(slices[0].start_time)

    for sl in slices:
        width = max(1, sl.duration)
        line += ("." if sl.is_idle else "=") * width
        labels += _label(sl, width)
        time_marks += f"{sl.end_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            " " + labels,
            time_marks,
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = str(slices[0].start_time)

    for sl in slices:
        width = max(1, sl.duration)

        if sl.is_idle:
            timeline.append("." * width, style="dim")
            labels.append(_label(sl, width), style="dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
            labels.append(_label(sl, width), style="bold")

        time_marks += f"{sl.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
