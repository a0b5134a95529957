import simpy
import datetime


class Env(simpy.Environment):
    """
    Custom simpy.Environment whose clock counts POSIX seconds from local
    midnight of the start date.
    """

    def __init__(self, initial_timestamp):
        """
        Args:
            initial_timestamp (datetime.datetime | datetime.date): The environment's initial timestamp.
                Only the date is kept, the clock starts at midnight local time.
        """
        if not isinstance(initial_timestamp, datetime.datetime):
            initial_timestamp = datetime.datetime.combine(initial_timestamp, datetime.time())
        self.initial_timestamp = datetime.datetime.combine(initial_timestamp.date(),
                                                           datetime.time())
        self.ts_initial = int(self.initial_timestamp.timestamp())
        super().__init__(self.ts_initial)

    @property
    def timestamp(self):
        """
        Returns:
            datetime.datetime: Current date.
        """
        #
        ## timedelta arithmetic ignores Daylight Saving Time, which keeps the
        ## simulated day exactly SECONDS_PER_DAY long.
        #
        return self.to_timestamp(self.now)

    def to_timestamp(self, seconds):
        """
        Args:
            seconds (float): instant on the environment's clock

        Returns:
            datetime.datetime: the corresponding date
        """
        return self.initial_timestamp + datetime.timedelta(seconds=seconds - self.ts_initial)

    def to_seconds(self, timestamp):
        """
        Args:
            timestamp (datetime.datetime): date to convert

        Returns:
            float: the corresponding instant on the environment's clock
        """
        return self.ts_initial + (timestamp - self.initial_timestamp).total_seconds()

    def time_of_day(self):
        """
        Time of day in iso format
        datetime(2020, 2, 28, 0, 0) => '2020-02-28T00:00:00'

        Returns:
            str: iso string representing current timestamp
        """
        return self.timestamp.isoformat()
