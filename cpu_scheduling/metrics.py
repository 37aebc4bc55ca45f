from __future__ import annotations

from typing import List

from .models import ProcessRecord, ScheduleResult, SummaryMetrics


def compute_summary(result: ScheduleResult, total_burst: int) -> SummaryMetrics:
    """
    Fill in the aggregate metrics for a finished run.

    ``result.processes`` must not be empty; the dispatcher rejects empty
    workloads before any simulator runs. Utilization is measured over the
    whole span of the timeline, leading idle time included.
    """
    averages = summarize_process_metrics(result.processes)

    summary = SummaryMetrics(
        avg_waiting=averages["avg_waiting"],
        avg_turnaround=averages["avg_turnaround"],
        avg_response=averages["avg_response"],
        cpu_busy_time=total_burst,
    )

    if result.timeline:
        makespan = result.timeline[-1].end_time
        summary.total_execution_time = makespan
        if makespan > 0:
            summary.cpu_utilization = total_burst / makespan * 100
            summary.throughput = len(result.processes) / makespan

    result.summary = summary
    return summary


def summarize_process_metrics(processes: List[ProcessRecord]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
