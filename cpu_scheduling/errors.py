from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for everything the simulator rejects."""


class InvalidQuantumError(SchedulingError):
    pass


class EmptyWorkloadError(SchedulingError):
    pass


class UnknownPolicyError(SchedulingError):
    pass


class InvalidProcessError(SchedulingError):
    pass


class WorkloadError(SchedulingError):
    """Raised when a workload file cannot be read or contains a bad entry."""
