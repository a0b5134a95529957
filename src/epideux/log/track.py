"""
Keeps the SEIR snapshots taken during a simulation.
"""
import logging
import typing

from epideux.epidemiology.infection_state import SeirReport
from epideux.utils.constants import SEIR_STATES


class SeirTimeline(object):
    """
    Sequence of `SeirReport`s with strictly increasing timestamps.
    Each compartment is also available as a series, e.g. `timeline.infectious`.
    """

    def __init__(self, reports=None):
        self._reports: typing.List[SeirReport] = list(reports) if reports is not None else []

    def __len__(self):
        return len(self._reports)

    def __iter__(self):
        return iter(self._reports)

    def __getitem__(self, item):
        return self._reports[item]

    def __eq__(self, other):
        if not isinstance(other, SeirTimeline):
            return NotImplemented
        return self._reports == other._reports

    def __repr__(self):
        return f"SeirTimeline({len(self)} reports)"

    def append(self, report):
        if self._reports:
            assert report.timestamp > self._reports[-1].timestamp, \
                f"report at {report.timestamp} does not come after {self._reports[-1].timestamp}"
        self._reports.append(report)

    @property
    def timestamps(self):
        return [report.timestamp for report in self._reports]

    @property
    def susceptible(self):
        return [report.susceptible for report in self._reports]

    @property
    def exposed(self):
        return [report.exposed for report in self._reports]

    @property
    def infectious(self):
        return [report.infectious for report in self._reports]

    @property
    def recovered(self):
        return [report.recovered for report in self._reports]

    def as_dict(self):
        """
        Returns:
            dict: series of timestamps (iso format) and of each SEIR compartment
        """
        series = {"timestamp": [timestamp.isoformat() for timestamp in self.timestamps]}
        for state in SEIR_STATES:
            series[state] = getattr(self, state)
        return series


class Tracker(object):
    """
    Stores the latest SEIR snapshot of the model and the timeline of all of them.
    """

    def __init__(self):
        self.latest_report = SeirReport()
        self.timeline = SeirTimeline()

    def track_seir(self, report):
        """
        Args:
            report (SeirReport): model-wide counts, with the time they were taken
        """
        self.latest_report = report
        self.timeline.append(report)
        logging.debug(f"{report.timestamp} - S:{report.susceptible} E:{report.exposed} "
                      f"I:{report.infectious} R:{report.recovered}")
