"""
Planned visits of a person to a location.
"""
import dataclasses
import datetime
import typing

from epideux.exceptions import UsageError

if typing.TYPE_CHECKING:
    from epideux.locations.location import Location


@dataclasses.dataclass(frozen=True, eq=False)
class ItineraryEntry:
    """
    From `start` to `end` the owner of this entry should be at `location`.
    Outside that window they return home unless another entry is active.

    Entries compare by identity: two visits to the same place at the same
    time are two different entries.
    """
    location: "Location"
    start: datetime.datetime
    end: datetime.datetime

    def __post_init__(self):
        if not self.start < self.end:
            raise UsageError(f"itinerary entry must end after it starts: {self.start} >= {self.end}")

    def __repr__(self):
        return f"<visit {self.location} from {self.start} to {self.end}>"
