"""
Builders for the standard scenarios: a single shared home, two age groups
living apart with regular visits, and a group moving to another location for
a couple of hours.
"""
import datetime

from epideux.itinerary import ItineraryEntry
from epideux.utils.constants import ALL_SCENARIOS


def build_single_home(model, n_people, beta, incubation_time, disease_time, n_infected=1):
    """
    Everybody lives in the same home and `n_infected` of them are infected at
    the current time.

    Args:
        model (epideux.model.Model): model with a start date
        n_people (int): population size
        beta (float): infection rate of the home, per day
        incubation_time (datetime.timedelta): time spent Exposed
        disease_time (datetime.timedelta): time spent Infectious
        n_infected (int): number of persons infected at the start

    Returns:
        epideux.locations.location.Location: the home
    """
    home = model.create_location(beta, "Home")
    persons = [model.create_person(home, incubation_time, disease_time) for _ in range(n_people)]
    for person in persons[:n_infected]:
        person.infect()
    return home


def build_two_age_groups(model, n_young, n_old, beta, incubation_time, disease_time,
                         simulation_days, n_infected=1, visit_duration=datetime.timedelta(hours=2)):
    """
    Old and young people live in two separate homes. Starting half way
    through the simulation, every young person visits the old people's home
    once a day. The epidemic starts among the young.

    Returns:
        tuple: (home of the young, home of the old)
    """
    old_home = model.create_location(beta, "Old home")
    for _ in range(n_old):
        model.create_person(old_home, incubation_time, disease_time)

    young_home = model.create_location(beta, "Young home")
    start = model.current_time()
    first_visit = start + datetime.timedelta(days=simulation_days // 2)
    end = start + datetime.timedelta(days=simulation_days)
    young = []
    for _ in range(n_young):
        person = model.create_person(young_home, incubation_time, disease_time)
        t = first_visit
        while t < end:
            person.add_itinerary_entry(ItineraryEntry(old_home, t, t + visit_duration))
            t += datetime.timedelta(days=1)
        young.append(person)

    for person in young[:n_infected]:
        person.infect()
    return young_home, old_home


def build_move_location(model, n_people, beta, incubation_time, disease_time,
                        visit_start=datetime.timedelta(hours=1), visit_duration=datetime.timedelta(hours=2)):
    """
    Everybody lives at "Location1" and spends `visit_duration` at "Location2",
    leaving `visit_start` after the current time.

    Returns:
        tuple: (Location1, Location2)
    """
    location1 = model.create_location(beta, "Location1")
    location2 = model.create_location(beta, "Location2")
    start = model.current_time() + visit_start
    visit = ItineraryEntry(location2, start, start + visit_duration)
    for _ in range(n_people):
        person = model.create_person(location1, incubation_time, disease_time)
        person.add_itinerary_entry(visit)
    return location1, location2


def build_scenario(model, conf):
    """
    Builds the scenario named by `conf["scenario"]` into `model`.

    Args:
        model (epideux.model.Model): model with a start date
        conf (dict): parsed configuration of the experiment

    Raises:
        ValueError: if the scenario is unknown
    """
    scenario = conf["scenario"]
    incubation_time = datetime.timedelta(days=conf["INCUBATION_DAYS"])
    disease_time = datetime.timedelta(days=conf["DISEASE_DAYS"])

    if scenario == "single_home":
        return build_single_home(model, conf["n_people"], conf["BETA"], incubation_time, disease_time,
                                 n_infected=conf["INIT_INFECTED"])

    if scenario == "two_age_groups":
        return build_two_age_groups(model, conf["n_people"], conf["n_people_old"], conf["BETA"],
                                    incubation_time, disease_time, conf["simulation_days"],
                                    n_infected=conf["INIT_INFECTED"])

    if scenario == "move_location":
        return build_move_location(model, conf["n_people"], conf["BETA"], incubation_time, disease_time)

    raise ValueError(f"Unknown scenario: {scenario}, expected one of {ALL_SCENARIOS}")
