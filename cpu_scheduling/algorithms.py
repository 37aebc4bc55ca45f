from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .errors import EmptyWorkloadError, InvalidQuantumError
from .metrics import compute_summary
from .models import (
    IDLE_PID,
    Process,
    ProcessRecord,
    ScheduleResult,
    ScheduledSlice,
    SchedulingPolicy,
)

logger = logging.getLogger(__name__)

# Records in output order together with the timeline.
Outcome = Tuple[List[ProcessRecord], List[ScheduledSlice]]

# A simulator receives the cloned records and the quantum.
Simulator = Callable[[List[ProcessRecord], Optional[int]], Outcome]


def merge_slices(slices: List[ScheduledSlice]) -> List[ScheduledSlice]:
    """
    Drop zero-length slices and join touching slices with the same occupant.
    """
    merged: List[ScheduledSlice] = []
    for sl in slices:
        if sl.start_time == sl.end_time:
            continue
        last = merged[-1] if merged else None
        if last is not None and last.pid == sl.pid and last.end_time == sl.start_time:
            merged[-1] = ScheduledSlice(pid=last.pid, start_time=last.start_time, end_time=sl.end_time)
        else:
            merged.append(sl)
    return merged


def _idle(start: int, end: int) -> ScheduledSlice:
    logger.debug(f"CPU idle from t={start} to t={end}")
    return ScheduledSlice(pid=IDLE_PID, start_time=start, end_time=end)


def _run_fcfs(records: List[ProcessRecord], quantum: Optional[int]) -> Outcome:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Records run in arrival order; the sort is stable, so simultaneous
    arrivals keep their input order.
    """
    order = sorted(range(len(records)), key=lambda i: records[i].arrival_time)

    time = 0
    timeline: List[ScheduledSlice] = []

    for i in order:
        p = records[i]
        if time < p.arrival_time:
            timeline.append(_idle(time, p.arrival_time))
            time = p.arrival_time

        p.mark_dispatched(time)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + p.burst_time))

        time += p.burst_time
        p.finish(time)

    return [records[i] for i in order], timeline


def _run_non_preemptive(records: List[ProcessRecord], key: Callable[[ProcessRecord], int]) -> Outcome:
    """
    Shared event loop of SJF and Priority scheduling.

    At each decision point, among records that have arrived and not yet run,
    choose the one with the smallest ``key`` and run it to completion. Ties
    go to the record that comes first in the pool (input order), since
    ``min`` keeps the first of equal candidates. Output is completion order.
    """
    pool: List[int] = list(range(len(records)))

    time = 0
    timeline: List[ScheduledSlice] = []
    finished: List[ProcessRecord] = []

    while pool:
        ready = [i for i in pool if records[i].arrival_time <= time]

        if not ready:
            next_arrival = min(records[i].arrival_time for i in pool)
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            continue

        i = min(ready, key=lambda j: key(records[j]))
        p = records[i]

        p.mark_dispatched(time)
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + p.burst_time))

        time += p.burst_time
        p.finish(time)

        pool.remove(i)
        finished.append(p)

    return finished, timeline


def _run_sjf(records: List[ProcessRecord], quantum: Optional[int]) -> Outcome:
    """
    Shortest Job First (non-preemptive), by total burst time.
    """
    return _run_non_preemptive(records, key=lambda p: p.burst_time)


def _run_priority(records: List[ProcessRecord], quantum: Optional[int]) -> Outcome:
    """
    Static Priority scheduling (non-preemptive). Lower numeric priority value
    means higher priority.
    """
    return _run_non_preemptive(records, key=lambda p: p.priority)


def _run_srt(records: List[ProcessRecord], quantum: Optional[int]) -> Outcome:
    """
    Shortest Remaining Time (preemptive SJF).

    Time advances from event to event: the selected record runs until it
    finishes or the next arrival, whichever comes first, and the selection
    is revisited there. A slice stays open while the same record keeps
    winning and is closed on preemption or completion.
    """
    time = 0
    timeline: List[ScheduledSlice] = []

    running: Optional[int] = None
    slice_start = 0

    def next_arrival_after(t: int) -> Optional[int]:
        future = [r.arrival_time for r in records if r.arrival_time > t and r.remaining_time > 0]
        return min(future) if future else None

    while any(r.remaining_time > 0 for r in records):
        ready = [i for i, r in enumerate(records) if r.arrival_time <= time and r.remaining_time > 0]

        if not ready:
            if running is not None:
                timeline.append(ScheduledSlice(pid=records[running].pid, start_time=slice_start, end_time=time))
                running = None
            next_arrival = min(r.arrival_time for r in records if r.remaining_time > 0)
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            continue

        # Smallest remaining time; ties go to the earlier record in input order.
        selected = min(ready, key=lambda i: records[i].remaining_time)

        if selected != running:
            if running is not None:
                logger.debug(f"{records[selected].pid} preempts {records[running].pid} at t={time}")
                timeline.append(ScheduledSlice(pid=records[running].pid, start_time=slice_start, end_time=time))
            running = selected
            slice_start = time
            records[selected].mark_dispatched(time)

        current = records[selected]

        run_time = current.remaining_time
        nxt_arrival = next_arrival_after(time)
        if nxt_arrival is not None:
            run_time = min(run_time, nxt_arrival - time)

        time += run_time
        current.remaining_time -= run_time

        if current.remaining_time == 0:
            timeline.append(ScheduledSlice(pid=current.pid, start_time=slice_start, end_time=time))
            current.finish(time)
            running = None

    return list(records), merge_slices(timeline)


def _run_rr(records: List[ProcessRecord], quantum: Optional[int]) -> Outcome:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue holds record indices. Records that arrive while a slice
    is running join the queue before the preempted record is put back.
    """
    by_arrival = sorted(range(len(records)), key=lambda i: records[i].arrival_time)
    ready: Deque[int] = deque()
    queued = [False] * len(records)

    time = 0
    timeline: List[ScheduledSlice] = []

    def enqueue_arrivals(now: int, after: Optional[int] = None) -> None:
        for i in by_arrival:
            r = records[i]
            if queued[i] or r.remaining_time == 0 or r.arrival_time > now:
                continue
            if after is not None and r.arrival_time <= after:
                continue
            ready.append(i)
            queued[i] = True

    while any(r.remaining_time > 0 for r in records) or ready:
        enqueue_arrivals(time)

        if not ready:
            future_arrivals = [r.arrival_time for r in records if r.remaining_time > 0]
            if not future_arrivals:
                break
            next_arrival = min(future_arrivals)
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            continue

        i = ready.popleft()
        queued[i] = False
        current = records[i]
        current.mark_dispatched(time)

        run_time = min(quantum, current.remaining_time)
        slice_start = time
        timeline.append(ScheduledSlice(pid=current.pid, start_time=slice_start, end_time=slice_start + run_time))

        time += run_time
        current.remaining_time -= run_time

        enqueue_arrivals(time, after=slice_start)

        if current.remaining_time > 0:
            ready.append(i)
            queued[i] = True
        else:
            current.finish(time)

    return list(records), merge_slices(timeline)


ALGORITHMS: Dict[SchedulingPolicy, Simulator] = {
    SchedulingPolicy.FCFS: _run_fcfs,
    SchedulingPolicy.SJF: _run_sjf,
    SchedulingPolicy.SRT: _run_srt,
    SchedulingPolicy.PRIORITY: _run_priority,
    SchedulingPolicy.RR: _run_rr,
}


def simulate(
    processes: Sequence[Process],
    policy: "SchedulingPolicy | str",
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Run one scheduling policy over ``processes`` and return the timeline
    with per-process and aggregate metrics.

    The caller's descriptors are cloned and never modified. The quantum is
    only used (and only validated) for Round Robin.
    """
    policy = SchedulingPolicy.parse(policy)

    if not processes:
        raise EmptyWorkloadError("At least one process is required to run a simulation")

    if policy is SchedulingPolicy.RR:
        if quantum is None or quantum <= 0:
            raise InvalidQuantumError("Round Robin requires a positive quantum (use --quantum)")
    else:
        quantum = None

    records = [ProcessRecord.from_process(p) for p in processes]

    logger.debug(f"Simulating {policy.label} over {len(records)} processes (quantum={quantum})")
    finished, timeline = ALGORITHMS[policy](records, quantum)

    result = ScheduleResult(algorithm=policy, quantum=quantum, processes=finished, timeline=timeline)
    summary = compute_summary(result, total_burst=sum(p.burst_time for p in processes))

    logger.info(
        f"{policy.label}: span={summary.total_execution_time} "
        f"avg_wait={summary.avg_waiting:.2f} avg_turnaround={summary.avg_turnaround:.2f}"
    )
    return result


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by name (``fcfs``, ``sjf``, ``srt``,
    ``priority``, ``rr`` or an accepted alias).
    """
    return simulate(processes, SchedulingPolicy.parse(name), quantum=quantum)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive). ``quantum`` is ignored.
    """
    return simulate(processes, SchedulingPolicy.FCFS, quantum)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive). ``quantum`` is ignored.
    """
    return simulate(processes, SchedulingPolicy.SJF, quantum)


def schedule_srt(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive SJF). ``quantum`` is ignored.
    """
    return simulate(processes, SchedulingPolicy.SRT, quantum)


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority (non-preemptive); lower value runs first. ``quantum`` is ignored.
    """
    return simulate(processes, SchedulingPolicy.PRIORITY, quantum)


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin with a fixed time quantum, which must be a positive integer.
    """
    return simulate(processes, SchedulingPolicy.RR, quantum)
