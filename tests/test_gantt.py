from rich.panel import Panel

from cpu_scheduling.algorithms import schedule_fcfs
from cpu_scheduling.gantt import build_rich_gantt, render_gantt
from cpu_scheduling.models import Process


def _gapped():
    return schedule_fcfs([Process("P1", 2, 3), Process("P2", 10, 2)]).timeline


def test_render_gantt_marks_idle_time():
    lines = render_gantt(_gapped()).splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|..===.....==|"
    assert "P1" in lines[2]
    assert "idle" in lines[2]


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_build_rich_gantt():
    panel, time_marks = build_rich_gantt(_gapped())
    assert isinstance(panel, Panel)
    assert time_marks.split() == ["0", "2", "5", "10", "12"]

    panel, time_marks = build_rich_gantt([])
    assert time_marks == ""
