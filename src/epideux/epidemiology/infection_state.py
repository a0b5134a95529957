"""
SEIR compartments and the per-snapshot aggregate used in reports.
"""
import dataclasses
import datetime
import enum
import typing


class InfectionState(enum.IntEnum):
    """
    Infection state of a person. Values only ever increase during a run:
    S -> E -> I -> R.
    """
    SUSCEPTIBLE = 0
    EXPOSED = 1
    INFECTIOUS = 2
    RECOVERED = 3


@dataclasses.dataclass(frozen=True)
class SeirReport:
    """
    Number of persons in each infection state at `timestamp`.
    """
    timestamp: typing.Optional[datetime.datetime] = None
    susceptible: int = 0
    exposed: int = 0
    infectious: int = 0
    recovered: int = 0

    @classmethod
    def from_states(cls, states, timestamp=None):
        """
        Args:
            states (iterable of InfectionState): states to count
            timestamp (datetime.datetime): time of the snapshot

        Returns:
            SeirReport: the counts
        """
        counts = [0, 0, 0, 0]
        for state in states:
            counts[state] += 1
        return cls(timestamp, *counts)

    @property
    def total(self):
        return self.susceptible + self.exposed + self.infectious + self.recovered

    def __add__(self, other):
        if not isinstance(other, SeirReport):
            return NotImplemented
        return SeirReport(
            self.timestamp if self.timestamp is not None else other.timestamp,
            self.susceptible + other.susceptible,
            self.exposed + other.exposed,
            self.infectious + other.infectious,
            self.recovered + other.recovered,
        )

    def as_dict(self):
        report = dataclasses.asdict(self)
        if self.timestamp is not None:
            report["timestamp"] = self.timestamp.isoformat()
        return report
