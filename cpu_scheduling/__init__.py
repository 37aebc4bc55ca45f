"""
CPU scheduling simulator package.

Computes execution timelines and performance metrics for FCFS, SJF, SRT,
Priority and Round Robin scheduling, with a small command-line front end.
"""

from .algorithms import ALGORITHMS, run_algorithm, simulate
from .models import Process, ScheduleResult, SchedulingPolicy

__all__ = [
    "ALGORITHMS",
    "Process",
    "ScheduleResult",
    "SchedulingPolicy",
    "run_algorithm",
    "simulate",
    "cli",
]
