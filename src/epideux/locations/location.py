"""
Locations hold persons and infect them. Infections are not computed at a fixed
rate: every time the population of a location changes (or a report needs fresh
numbers) the location samples the infections that happened since its last
update, assuming the force of infection stayed constant in between.
"""
import math
import typing
from collections import namedtuple

import numpy as np

from epideux.epidemiology.infection_state import InfectionState, SeirReport
from epideux.exceptions import UsageError
from epideux.utils.constants import SECONDS_PER_DAY

if typing.TYPE_CHECKING:
    from epideux.model import Model
    from epideux.person import Person

# returned by `Location.enter`, identifies the cell of a person in the member list
MembershipHandle = namedtuple("MembershipHandle", ["location_id", "cell"])


class Location(object):
    """
    Class representing a place where persons meet
    """

    def __init__(self, model: "Model", location_id: int, beta: float, name: str = ""):
        """
        Locations are created with model.create_location(), not instantiated directly

        Args:
            model (epideux.model.Model): model providing the clock and the random number generator
            location_id (int): index of the location in the model
            beta (float): infection rate of the SEIR model, in infections per day
            name (str): The location's name
        """
        if beta < 0:
            raise UsageError(f"infection rate must be non-negative, got {beta}")

        self.model = model
        self.id = location_id
        self.name = name
        self.beta_per_sec = beta / SECONDS_PER_DAY

        # cell -> person, in the order the persons entered. Cells are never reused.
        self._members: typing.Dict[int, "Person"] = {}
        self._next_cell = 0

        # None until the model has a start date
        self.last_update = model.now if model.env is not None else None

    def __repr__(self):
        name = self.name or f"location-{self.id}"
        return f"{name} - occ:{len(self._members)}"

    def __len__(self):
        return len(self._members)

    def __iter__(self):
        return iter(self._members.values())

    @property
    def beta(self):
        """
        Returns:
            float: infection rate in infections per day
        """
        return self.beta_per_sec * SECONDS_PER_DAY

    @property
    def persons(self):
        """
        Returns:
            tuple: persons at the location, in the order they entered
        """
        return tuple(self._members.values())

    def set_beta(self, new_beta):
        """
        Replaces the infection rate. Infections up to now are sampled with the
        previous rate first.

        Args:
            new_beta (float): infection rate in infections per day
        """
        if new_beta < 0:
            raise UsageError(f"infection rate must be non-negative, got {new_beta}")
        if self.last_update is not None:
            self.update_infections()
        self.beta_per_sec = new_beta / SECONDS_PER_DAY

    def enter(self, person):
        """
        Adds `person` to the location.

        Args:
            person (epideux.person.Person): the person entering

        Returns:
            MembershipHandle: to give back to `leave`
        """
        self.update_infections()
        cell = self._next_cell
        self._next_cell += 1
        self._members[cell] = person
        return MembershipHandle(self.id, cell)

    def leave(self, handle):
        """
        Removes the person registered under `handle`.

        Args:
            handle (MembershipHandle): handle obtained from `enter`

        Returns:
            epideux.person.Person: the person who left
        """
        assert handle.location_id == self.id and handle.cell in self._members, \
            f"{self}: membership handle {handle} does not refer to a member"
        self.update_infections()
        return self._members.pop(handle.cell)

    def holds(self, handle, person):
        """
        Returns:
            bool: True if `handle` is a valid handle of this location and refers to `person`
        """
        return handle.location_id == self.id and self._members.get(handle.cell) is person

    def update_infections(self):
        """
        Samples the infections that happened since the last update.

        Everybody first updates their own disease progression. Then, with
        `I` infectious persons among `N` present during the elapsed time `dt`,
        each person gets infected with probability
        `p = 1 - exp(-beta * dt * I / N)`. The number of infections is drawn
        from Binomial(N, p) and the infected persons are picked uniformly,
        with replacement, among everybody present. A pick may land on someone
        who is not susceptible anymore; such picks are lost.
        """
        now = self.model.now
        time_delta = now - self.last_update
        if time_delta == 0:
            return
        assert time_delta > 0, f"{self}: clock went backwards since last update"

        for person in self._members.values():
            person.tick_infection()

        n_persons = len(self._members)
        n_infectious = sum(person.state == InfectionState.INFECTIOUS for person in self._members.values())
        if n_infectious > 0:
            p_infection = 1 - math.exp(-self.beta_per_sec * time_delta * n_infectious / n_persons)
            n_infected = self.model.random_generator().binomial(n_persons, p_infection)
            if n_infected > 0:
                self._infect_random_persons(n_persons, n_infected)

        self.last_update = now

    def _infect_random_persons(self, n_persons, n_infected):
        """
        Picks `n_infected` member indices with replacement and infects them
        walking the member list once.

        Args:
            n_persons (int): number of members
            n_infected (int): number of picks
        """
        rng = self.model.random_generator()
        picks = np.sort(rng.randint(0, n_persons, size=n_infected))
        # increments between sorted picks, so the member list is walked forward only
        increments = np.diff(picks, prepend=0)

        members = iter(self._members.values())
        person = next(members)
        for increment in increments:
            for _ in range(increment):
                person = next(members)
            person.infect()

    def collect_seir(self):
        """
        Returns:
            SeirReport: number of persons in each state at the location, after an update
        """
        self.update_infections()
        return SeirReport.from_states(
            (person.state for person in self._members.values()),
            timestamp=self.model.current_time()
        )
