"""
Errors raised by the simulator.

Broken internal invariants (stale membership handles, population counts that
disagree between locations and the model) are not represented here: they are
`assert` statements and abort the run.
"""


class EpideuxError(Exception):
    pass


class UsageError(EpideuxError, ValueError):
    """
    Invalid arguments given to the model, e.g. an itinerary entry ending before
    it starts, an unknown person id or a negative infection rate.
    """
    pass


class OrderingError(EpideuxError):
    """
    A callback was scheduled at a time earlier than the simulation clock.
    """
    pass


class SchedulerClosedError(UsageError):
    pass
