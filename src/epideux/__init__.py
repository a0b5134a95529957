"""
Epideux - agent based location-graph epidemic simulation.
"""
from epideux.epidemiology.infection_state import InfectionState, SeirReport
from epideux.exceptions import EpideuxError, OrderingError, SchedulerClosedError, UsageError
from epideux.itinerary import ItineraryEntry
from epideux.locations.location import Location, MembershipHandle
from epideux.log.track import SeirTimeline
from epideux.model import Model
from epideux.person import Person
