from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import InvalidProcessError, WorkloadError
from .models import DEFAULT_PRIORITY, Process, SchedulingPolicy

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.debug(f"Loaded {len(processes)} processes from {path}")
    return processes


def sample_workload() -> List[Process]:
    """
    The three-process workload used when no file is given.
    """
    return [
        Process("P1", arrival_time=0, burst_time=5),
        Process("P2", arrival_time=1, burst_time=3),
        Process("P3", arrival_time=2, burst_time=8),
    ]


def prepare_processes(processes: Sequence[Process], policy: SchedulingPolicy) -> List[Process]:
    """
    Apply the caller-side conventions before a run: blank ids become
    ``P<position>``, and priorities are reset to the neutral value unless the
    Priority policy is selected. Returns new descriptors.
    """
    keep_priority = policy is SchedulingPolicy.PRIORITY
    prepared: List[Process] = []
    for idx, p in enumerate(processes, start=1):
        prepared.append(
            Process(
                pid=p.pid.strip() or f"P{idx}",
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority if keep_priority else DEFAULT_PRIORITY,
            )
        )
    return prepared


def _load_json(path: Path) -> List[Process]:
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise WorkloadError(f"{path}: invalid JSON ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"{path}: not UTF-8 encoded ({exc})") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return _processes_from_rows(raw)


def _load_csv(path: Path) -> List[Process]:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"{path}: not UTF-8 encoded ({exc})") from exc
    except csv.Error as exc:
        raise WorkloadError(f"{path}: invalid CSV ({exc})") from exc

    return _processes_from_rows(rows)


def _processes_from_rows(rows: Iterable) -> List[Process]:
    return [_process_from_mapping(row) for row in rows]


def _as_int(value) -> int:
    # Whole-valued floats (3.0) are accepted, fractional ones are not truncated.
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(value)


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(mapping.get("pid") or "")
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = _as_int(priority_val) if priority_val not in (None, "") else DEFAULT_PRIORITY
    except (TypeError, ValueError, OverflowError) as exc:
        raise WorkloadError(f"Invalid priority in entry: {mapping!r}") from exc

    try:
        return Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority)
    except InvalidProcessError as exc:
        raise WorkloadError(f"Invalid process entry {mapping!r}: {exc}") from exc
