"""
This module implements the `Model` class, the central object of a simulation.

The model owns all persons and locations; use `create_location` and
`create_person` to make them. It also owns the schedule, which is drained
lazily: instead of updating everybody at a fixed rate, infections at a location
are only computed when its population changes or when a report is taken.
"""
import datetime
import logging
import math
import typing

import numpy as np

from epideux.epidemiology.infection_state import SeirReport
from epideux.exceptions import UsageError
from epideux.locations.location import Location
from epideux.log.track import Tracker
from epideux.person import Person
from epideux.scheduler import Scheduler
from epideux.utils.constants import DEFAULT_REPORT_INTERVAL_HOURS
from epideux.utils.env import Env


class Model(object):
    """
    Root of a simulation: persons, locations, schedule, clock, random number
    generator and SEIR reports.
    """

    def __init__(
            self,
            seed: int = 0,
            start_date: typing.Optional[datetime.date] = None,
            report_interval: datetime.timedelta = datetime.timedelta(hours=DEFAULT_REPORT_INTERVAL_HOURS),
    ):
        """
        Args:
            seed (int): seed of the random number generator used for every draw of the simulation
            start_date (datetime.date): origin of the clock, can also be given later with `set_start_date`
            report_interval (datetime.timedelta): time between two SEIR snapshots
        """
        if report_interval <= datetime.timedelta(0):
            raise UsageError(f"report interval must be positive, got {report_interval}")

        self.seed = seed
        self.rng = np.random.RandomState(seed)
        self.report_interval = report_interval

        self.persons: typing.List[Person] = []
        self.locations: typing.List[Location] = []
        self.tracker = Tracker()

        self.env: typing.Optional[Env] = None
        self.scheduler: typing.Optional[Scheduler] = None
        self.closed = False
        self._last_report_time = None
        # id of the latest call to simulate; report and stop events of earlier
        # calls that ended with an exception are ignored
        self._run_id = 0

        if start_date is not None:
            self.set_start_date(start_date.year, start_date.month, start_date.day)

    def __repr__(self):
        return f"Model(persons={len(self.persons)}, locations={len(self.locations)}, time={self.env and self.env.timestamp})"

    ########### CLOCK ###########

    def set_start_date(self, year, month, day):
        """
        Sets the origin of the clock to midnight, local time, of the given day.

        Raises:
            UsageError: if the date is invalid, or persons, reports or scheduled callbacks already exist
        """
        if self.persons or len(self.tracker.timeline) > 0:
            raise UsageError("the start date must be set before creating persons or simulating")
        if self.scheduler is not None and not self.scheduler.is_empty:
            raise UsageError("the start date must be set before scheduling callbacks")
        try:
            start_date = datetime.date(year, month, day)
        except ValueError as e:
            raise UsageError(f"invalid start date: {e}") from e

        self.env = Env(start_date)
        self.scheduler = Scheduler(self.env)
        if self.closed:
            self.scheduler.close()
        for location in self.locations:
            location.last_update = self.env.now

    def _check_clock(self):
        if self.env is None:
            raise UsageError("the model has no start date, call set_start_date() first")

    @property
    def now(self):
        """
        Returns:
            float: current time in seconds on the environment's clock
        """
        self._check_clock()
        return self.env.now

    def current_time(self):
        """
        Returns:
            datetime.datetime: current simulation time
        """
        self._check_clock()
        return self.env.timestamp

    ########### POPULATION ###########

    def create_location(self, beta, name=""):
        """
        Args:
            beta (float): infection rate in infections per day
            name (str): name of the location

        Returns:
            Location: the new location, registered with the model
        """
        location = Location(self, len(self.locations), beta, name)
        self.locations.append(location)
        return location

    def create_person(self, home, incubation_time, disease_time):
        """
        Creates a person who immediately enters `home`.

        Args:
            home (Location): home of the person, created by this model
            incubation_time (datetime.timedelta): time spent Exposed
            disease_time (datetime.timedelta): time spent Infectious

        Returns:
            Person: the new person, registered with the model
        """
        self._check_clock()
        if home.model is not self:
            raise UsageError(f"{home} belongs to another model")

        person = Person(self, self._get_next_id(), home, incubation_time, disease_time)
        self.persons.append(person)
        return person

    def _get_next_id(self):
        return len(self.persons)

    def get_person(self, person_id):
        """
        Raises:
            UsageError: if no person has id `person_id`
        """
        if not 0 <= person_id < len(self.persons):
            raise UsageError(f"person {person_id} not found")
        return self.persons[person_id]

    def random_generator(self):
        """
        Use this generator for all randomness, then a single seed controls an
        entire simulation run.

        Returns:
            np.random.RandomState: the model's random number generator
        """
        return self.rng

    ########### SCHEDULE ###########

    def add_to_schedule(self, scheduled_time, callback):
        """
        Schedules `callback()` at `scheduled_time`. Allowed during a simulation
        as long as `scheduled_time` is not in the past.

        Args:
            scheduled_time (datetime.datetime): when to call `callback`
            callback (callable): function without arguments
        """
        self._check_clock()
        return self.scheduler.push(self.env.to_seconds(scheduled_time), callback)

    def simulate(self, simulation_duration):
        """
        Runs the model forward by `simulation_duration`.

        SEIR reports are scheduled at every multiple of the report interval
        (counted from the start date) between now and the end of the run, both
        included, unless that instant was already reported. A stop event at the
        end of the run closes the loop, which leaves the clock exactly at
        `current_time() + simulation_duration`. The model can be simulated
        again afterwards, also after a callback raised: the clock then stays
        where the exception happened and the remaining reports of the failed
        run are dropped.

        Args:
            simulation_duration (datetime.timedelta): the period to simulate forward
        """
        self._check_clock()
        if simulation_duration < datetime.timedelta(0):
            raise UsageError(f"cannot simulate a negative duration: {simulation_duration}")
        if self.scheduler.running:
            raise UsageError("the simulation is already running")

        self._run_id += 1
        stop_time = self.env.now + simulation_duration.total_seconds()
        for report_time in self._report_times(self.env.now, stop_time):
            self.scheduler.push(report_time, self._collect_seir, self._run_id)
        self.scheduler.push(stop_time, self._stop, self._run_id)

        logging.debug(f"Starting simulation [simtime: {self.env.time_of_day()}]")
        try:
            self.scheduler.run_until(stop_time)
        except Exception:
            logging.debug(f"Simulation aborted [simtime: {self.env.time_of_day()}]")
            self._run_id += 1
            raise
        assert self.env.now == stop_time, f"simulation stopped at {self.env.now} instead of {stop_time}"
        logging.debug(f"Stopping simulation [simtime: {self.env.time_of_day()}]")

    def _stop(self, run_id):
        if run_id == self._run_id:
            self.scheduler.stop()

    def _report_times(self, start_time, stop_time):
        interval = self.report_interval.total_seconds()
        k = math.ceil((start_time - self.env.ts_initial) / interval)
        report_time = self.env.ts_initial + k * interval
        if report_time == self._last_report_time:
            k += 1
            report_time = self.env.ts_initial + k * interval
        while report_time <= stop_time:
            yield report_time
            k += 1
            report_time = self.env.ts_initial + k * interval

    def close(self):
        """
        Closes the schedule; scheduling afterwards raises SchedulerClosedError.
        """
        self.closed = True
        if self.scheduler is not None:
            self.scheduler.close()

    ########### REPORTS ###########

    def _collect_seir(self, run_id):
        """
        Updates the infections at every location and counts everybody's state.

        Args:
            run_id (int): id of the call to `simulate` that scheduled this report
        """
        if run_id != self._run_id:
            return
        report = SeirReport(timestamp=self.env.timestamp)
        for location in self.locations:
            report += location.collect_seir()
        self._last_report_time = self.env.now
        self.tracker.track_seir(report)

    def get_report(self):
        """
        Returns:
            SeirReport: the latest snapshot
        """
        return self.tracker.latest_report

    def get_daily_reports(self):
        """
        Returns:
            SeirTimeline: all snapshots taken so far
        """
        return self.tracker.timeline

    def check_invariants(self):
        """
        Asserts that every person is inside exactly one location and that the
        locations hold everybody.
        """
        assert sum(len(location) for location in self.locations) == len(self.persons), \
            "population of the locations differs from the population of the model"
        for person in self.persons:
            assert person.location.holds(person.membership, person), \
                f"{person} is not a member of {person.location}"
