from __future__ import annotations


class SchedulingError(ValueError):
    """
    Base class for every input error a scheduling run can reject.
    """


class InvalidProcessParameters(SchedulingError):
    pass


class InvalidQuantum(SchedulingError):
    pass


class EmptyWorkload(SchedulingError):
    pass


class UnknownAlgorithm(SchedulingError):
    pass


class ScheduleInvariantError(RuntimeError):
    """
    Raised when an engine's own bookkeeping disagrees with itself.

    This is a defect in the engine, never a problem with the caller's input.
    """
