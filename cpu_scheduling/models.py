from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from .errors import InvalidProcessError, UnknownPolicyError

DEFAULT_PRIORITY = 1

# Response time before a record is first dispatched.
NOT_STARTED = -1

# Occupant of an idle timeline slice; never a valid process id.
IDLE_PID = None


class SchedulingPolicy(str, enum.Enum):
    FCFS = "fcfs"          # First Come First Served
    SJF = "sjf"            # Shortest Job First, non-preemptive
    SRT = "srt"            # Shortest Remaining Time, preemptive SJF
    PRIORITY = "priority"  # static priority, non-preemptive
    RR = "rr"              # Round Robin with a fixed quantum

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, name: "str | SchedulingPolicy") -> "SchedulingPolicy":
        """
        Resolve a policy from its value, member name or a common alias
        (``srtf``, ``round_robin``), case-insensitively.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "_")
        key = _ALIASES.get(key, key)
        for policy in cls:
            if key in (policy.value, policy.name.lower()):
                return policy
        raise UnknownPolicyError(f"Unknown scheduling algorithm '{name}'")


_LABELS = {
    SchedulingPolicy.FCFS: "FCFS",
    SchedulingPolicy.SJF: "SJF (non-preemptive)",
    SchedulingPolicy.SRT: "SRT (preemptive)",
    SchedulingPolicy.PRIORITY: "Priority (non-preemptive)",
    SchedulingPolicy.RR: "Round Robin",
}

_ALIASES = {
    "srtf": "srt",
    "round_robin": "rr",
    "roundrobin": "rr",
}


@dataclass
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = DEFAULT_PRIORITY

    def __post_init__(self) -> None:
        if self.arrival_time < 0:
            raise InvalidProcessError(f"{self.pid}: arrival_time cannot be negative")
        if self.burst_time <= 0:
            raise InvalidProcessError(f"{self.pid}: burst_time must be strictly positive")


@dataclass
class ProcessRecord:
    """
    Working copy of a process for one simulation run.

    The simulators own a list of these and refer to them by index only;
    derived fields are filled in as the run progresses.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    remaining_time: int
    start_time: Optional[int] = None
    completion_time: int = 0
    turnaround_time: int = 0
    waiting_time: int = 0
    response_time: int = NOT_STARTED

    @classmethod
    def from_process(cls, process: Process) -> "ProcessRecord":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            priority=process.priority,
            remaining_time=process.burst_time,
        )

    @property
    def started(self) -> bool:
        return self.response_time != NOT_STARTED

    def mark_dispatched(self, now: int) -> None:
        # Only the first dispatch counts towards response time.
        if not self.started:
            self.start_time = now
            self.response_time = now - self.arrival_time

    def finish(self, now: int) -> None:
        self.remaining_time = 0
        self.completion_time = now
        self.turnaround_time = now - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of the timeline: a process owns the CPU, or the
    CPU is idle when ``pid`` is ``IDLE_PID``.
    """

    pid: Optional[str]
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is IDLE_PID

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class SummaryMetrics:
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    cpu_busy_time: int
    total_execution_time: Optional[int] = None
    cpu_utilization: Optional[float] = None  # percent
    throughput: Optional[float] = None


@dataclass
class ScheduleResult:
    algorithm: SchedulingPolicy
    quantum: Optional[int]
    processes: List[ProcessRecord] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    summary: Optional[SummaryMetrics] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["algorithm"] = self.algorithm.value
        return data
