"""
Contains the `Person` class: an agent living at a home location, following an
itinerary of visits and progressing through the SEIR states.
"""
import datetime
import functools
import logging
import typing

from epideux.epidemiology.infection_state import InfectionState
from epideux.exceptions import UsageError
from epideux.itinerary import ItineraryEntry

if typing.TYPE_CHECKING:
    from epideux.locations.location import Location, MembershipHandle
    from epideux.model import Model


class Person(object):
    """
    A person is always inside exactly one location. Without an active
    itinerary entry that location is their home.

    Itinerary entries are executed through the model's schedule: adding an
    entry schedules its beginning and its end. Beginning an entry moves the
    person there, even if another entry is active (the later one preempts).
    Ending the active entry sends the person home; ending an entry that was
    preempted does nothing.
    """

    def __init__(self, model, person_id, home, incubation_time, disease_time):
        """
        Persons are created with model.create_person(), not instantiated directly

        Args:
            model (epideux.model.Model): model the person belongs to
            person_id (int): unique id
            home (epideux.locations.location.Location): location the person lives at
            incubation_time (datetime.timedelta): time spent Exposed before turning Infectious
            disease_time (datetime.timedelta): time spent Infectious before recovering
        """
        if incubation_time < datetime.timedelta(0) or disease_time < datetime.timedelta(0):
            raise UsageError(f"incubation and disease times must be non-negative, "
                             f"got {incubation_time} and {disease_time}")

        self.model: "Model" = model
        self.id = person_id
        self.home: "Location" = home
        self.incubation_time = incubation_time
        self.disease_time = disease_time
        self._incubation_seconds = incubation_time.total_seconds()
        self._disease_seconds = disease_time.total_seconds()

        self.state = InfectionState.SUSCEPTIBLE
        self._infection_time = None

        # pending entries by index; an index is never reused so scheduled
        # callbacks keep pointing at the right entry
        self._itinerary: typing.Dict[int, ItineraryEntry] = {}
        self._next_entry_index = 0
        self._active_entry_index = None

        self.location: "Location" = home
        self._membership: "MembershipHandle" = home.enter(self)

    def __repr__(self):
        return f"person-{self.id}"

    ########### EPI ###########

    @property
    def infection_timestamp(self):
        """
        Returns:
            datetime.datetime: when the person got infected, None if still susceptible
        """
        if self._infection_time is None:
            return None
        return self.model.env.to_timestamp(self._infection_time)

    def infect(self):
        """
        Makes a susceptible person Exposed as of now. No-op for anybody else.
        """
        if self.state == InfectionState.SUSCEPTIBLE:
            self.state = InfectionState.EXPOSED
            self._infection_time = self.model.now
            logging.debug(f"{self.model.current_time()} - {self} exposed at {self.location}")

    def tick_infection(self):
        """
        Advances the disease progression to the current time. The person turns
        Infectious once `incubation_time` has elapsed since the infection and
        Recovered once `incubation_time + disease_time` has elapsed.
        """
        if self.state == InfectionState.SUSCEPTIBLE or self.state == InfectionState.RECOVERED:
            return

        since_infection = self.model.now - self._infection_time
        if self.state == InfectionState.EXPOSED and since_infection > self._incubation_seconds:
            self.state = InfectionState.INFECTIOUS
        if (self.state == InfectionState.INFECTIOUS and
                since_infection > self._incubation_seconds + self._disease_seconds):
            self.state = InfectionState.RECOVERED

    ########### MOBILITY ###########

    @property
    def itinerary(self):
        """
        Returns:
            list: entries whose end has not been reached yet, in the order they were added
        """
        return list(self._itinerary.values())

    @property
    def active_itinerary_entry(self):
        """
        Returns:
            ItineraryEntry: the entry the person is following, None when at home
        """
        if self._active_entry_index is None:
            return None
        return self._itinerary[self._active_entry_index]

    @property
    def membership(self):
        return self._membership

    def add_itinerary_entry(self, entry):
        """
        Appends `entry` to the itinerary and schedules its beginning and end.

        Args:
            entry (ItineraryEntry): the visit to make

        Raises:
            UsageError: if the entry's location belongs to another model
            OrderingError: if the entry starts before the current time
        """
        if entry.location.model is not self.model:
            raise UsageError(f"{entry} refers to a location of another model")

        index = self._next_entry_index
        self.model.add_to_schedule(entry.start, functools.partial(self._begin_itinerary_entry, index))
        self.model.add_to_schedule(entry.end, functools.partial(self._end_itinerary_entry, index))
        self._itinerary[index] = entry
        self._next_entry_index += 1

    def _begin_itinerary_entry(self, index):
        entry = self._itinerary[index]
        self._active_entry_index = index
        self._move_to(entry.location)

    def _end_itinerary_entry(self, index):
        del self._itinerary[index]
        if self._active_entry_index == index:
            self._active_entry_index = None
            self._move_to(self.home)

    def _move_to(self, location):
        """
        Leaves the current location and enters `location`. Both locations
        update their infections on the way.
        """
        self.location.leave(self._membership)
        self.location = location
        self._membership = location.enter(self)
