import pytest

from cpu_scheduling.algorithms import schedule_fcfs, schedule_sjf
from cpu_scheduling.metrics import compute_summary, summarize_process_metrics
from cpu_scheduling.models import Process, ScheduleResult, SchedulingPolicy


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5),
        Process("P2", arrival_time=1, burst_time=3),
        Process("P3", arrival_time=2, burst_time=8),
    ]


def test_fcfs_summary():
    summary = schedule_fcfs(_procs()).summary
    assert summary.avg_waiting == pytest.approx(10 / 3)
    assert summary.avg_turnaround == pytest.approx(26 / 3)
    assert summary.avg_response == pytest.approx(10 / 3)
    assert summary.cpu_busy_time == 16
    assert summary.total_execution_time == 16
    assert summary.cpu_utilization == pytest.approx(100.0)
    assert summary.throughput == pytest.approx(3 / 16)


def test_utilization_counts_leading_idle_time():
    summary = schedule_sjf([Process("P1", arrival_time=4, burst_time=4)]).summary
    assert summary.total_execution_time == 8
    assert summary.cpu_utilization == pytest.approx(50.0)


def test_empty_timeline_leaves_span_unset():
    result = schedule_fcfs(_procs())
    bare = ScheduleResult(algorithm=SchedulingPolicy.FCFS, quantum=None, processes=result.processes)
    summary = compute_summary(bare, total_burst=16)
    assert bare.summary is summary
    assert summary.total_execution_time is None
    assert summary.cpu_utilization is None
    assert summary.avg_waiting == pytest.approx(10 / 3)


def test_summarize_process_metrics():
    averages = summarize_process_metrics(schedule_fcfs(_procs()).processes)
    assert averages == pytest.approx({"avg_waiting": 10 / 3, "avg_turnaround": 26 / 3, "avg_response": 10 / 3})
