"""
Time-ordered schedule of callbacks driving a simulation.

The schedule is the event queue of a `simpy.Environment`: entries are ordered
by time, and entries sharing a time are executed in the order they were pushed.
Callbacks may push new entries while the schedule is being drained.
"""
import logging

from epideux.exceptions import OrderingError, SchedulerClosedError


class Scheduler(object):
    """
    Wraps the event queue of an `Env` into a push / run-until interface.
    """

    def __init__(self, env):
        """
        Args:
            env (epideux.utils.env.Env): environment keeping the clock and the event queue
        """
        self.env = env
        self.running = False
        self.closed = False

    @property
    def now(self):
        return self.env.now

    @property
    def is_empty(self):
        return self.env.peek() == float("inf")

    def peek(self):
        """
        Returns:
            float: time of the next entry, `inf` if the schedule is empty
        """
        return self.env.peek()

    def push(self, scheduled_time, callback, *args):
        """
        Enqueues `callback(*args)` to be called at `scheduled_time`.

        Args:
            scheduled_time (float): absolute time on the environment's clock
            callback (callable): function to call
            *args: positional arguments of `callback`

        Returns:
            simpy.events.Timeout: the event carrying the callback

        Raises:
            SchedulerClosedError: if the schedule has been closed
            OrderingError: if `scheduled_time` lies before the current time
        """
        if self.closed:
            raise SchedulerClosedError("cannot schedule on a closed model")

        delay = scheduled_time - self.env.now
        if delay < 0:
            raise OrderingError(
                f"cannot schedule at {self.env.to_timestamp(scheduled_time)}, "
                f"the clock is already at {self.env.timestamp}"
            )

        event = self.env.timeout(delay)
        event.callbacks.append(lambda _: callback(*args))
        return event

    def run_until(self, stop_time):
        """
        Pops and executes entries in time order until the schedule is empty,
        the next entry lies after `stop_time`, or `stop()` is called.

        Args:
            stop_time (float): last instant for which entries are executed
        """
        self.running = True
        try:
            while self.running and self.env.peek() <= stop_time:
                self.env.step()
        finally:
            self.running = False

    def stop(self):
        self.running = False
        logging.debug(f"{self.env.timestamp} - schedule stopped")

    def close(self):
        self.closed = True
