import datetime
import unittest

from epideux.epidemiology.infection_state import InfectionState
from epideux.exceptions import OrderingError, SchedulerClosedError, UsageError
from epideux.model import Model
from epideux.scenarios import build_single_home, build_two_age_groups

START_DATE = datetime.date(2020, 4, 1)
START_TIME = datetime.datetime(2020, 4, 1)
ONE_HOUR = datetime.timedelta(hours=1)
ONE_DAY = datetime.timedelta(days=1)


class ModelSetupTests(unittest.TestCase):
    def test_no_start_date(self):
        model = Model()
        with self.assertRaises(UsageError):
            model.current_time()
        with self.assertRaises(UsageError):
            model.simulate(ONE_DAY)

        home = model.create_location(0.7)
        with self.assertRaises(UsageError):
            model.create_person(home, ONE_DAY, ONE_DAY)

    def test_locations_created_before_the_start_date(self):
        model = Model()
        home = model.create_location(0.7)
        self.assertIsNone(home.last_update)

        model.set_start_date(2020, 4, 1)
        self.assertEqual(home.last_update, model.now)
        model.create_person(home, ONE_DAY, ONE_DAY)
        self.assertEqual(len(home), 1)

    def test_set_start_date(self):
        model = Model()
        model.set_start_date(2021, 12, 31)
        self.assertEqual(model.current_time(), datetime.datetime(2021, 12, 31))

    def test_invalid_start_date(self):
        model = Model()
        with self.assertRaises(UsageError):
            model.set_start_date(2020, 2, 30)
        with self.assertRaises(UsageError):
            model.set_start_date(2020, 13, 1)

    def test_start_date_after_persons_raises(self):
        model = Model(start_date=START_DATE)
        model.create_person(model.create_location(0.7), ONE_DAY, ONE_DAY)
        with self.assertRaises(UsageError):
            model.set_start_date(2020, 5, 1)

    def test_invalid_report_interval(self):
        with self.assertRaises(UsageError):
            Model(report_interval=datetime.timedelta(0))

    def test_ids(self):
        model = Model(start_date=START_DATE)
        home = model.create_location(0.7)
        persons = [model.create_person(home, ONE_DAY, ONE_DAY) for _ in range(3)]
        self.assertListEqual([person.id for person in persons], [0, 1, 2])
        self.assertIs(model.get_person(1), persons[1])

        with self.assertRaises(UsageError):
            model.get_person(3)
        with self.assertRaises(UsageError):
            model.get_person(-1)

    def test_home_of_another_model_raises(self):
        model = Model(start_date=START_DATE)
        foreign_home = Model(start_date=START_DATE).create_location(0.7)
        with self.assertRaises(UsageError):
            model.create_person(foreign_home, ONE_DAY, ONE_DAY)

    def test_random_generator_is_seeded(self):
        draws = [Model(seed=42).random_generator().randint(0, 1000, size=10).tolist() for _ in range(2)]
        self.assertListEqual(draws[0], draws[1])


class SimulateTests(unittest.TestCase):
    def setUp(self):
        self.model = Model(seed=0, start_date=START_DATE)

    def test_nobody_infected_stays_susceptible(self):
        build_single_home(self.model, 1000, 0.7, 4 * ONE_DAY, 5 * ONE_DAY, n_infected=0)

        self.model.simulate(14 * ONE_DAY)

        timeline = self.model.get_daily_reports()
        self.assertEqual(len(timeline), 15)
        for report in timeline:
            self.assertEqual(report.susceptible, 1000)
            self.assertEqual(report.total, 1000)

    def test_reports_include_both_ends(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        self.model.simulate(ONE_DAY)

        self.assertListEqual(self.model.get_daily_reports().timestamps, [START_TIME, START_TIME + ONE_DAY])
        self.assertEqual(self.model.current_time(), START_TIME + ONE_DAY)

    def test_reuse_after_a_short_run(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        self.model.simulate(2 * ONE_HOUR)
        self.model.simulate(22 * ONE_HOUR)

        self.assertEqual(self.model.current_time(), START_TIME + ONE_DAY)
        self.assertListEqual(self.model.get_daily_reports().timestamps, [START_TIME, START_TIME + ONE_DAY])

    def test_consecutive_runs_do_not_repeat_reports(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        self.model.simulate(ONE_DAY)
        self.model.simulate(ONE_DAY)

        self.assertListEqual(
            self.model.get_daily_reports().timestamps,
            [START_TIME, START_TIME + ONE_DAY, START_TIME + 2 * ONE_DAY]
        )

    def test_runs_off_the_report_grid(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        self.model.simulate(36 * ONE_HOUR)
        self.assertEqual(self.model.current_time(), START_TIME + 36 * ONE_HOUR)
        self.assertListEqual(self.model.get_daily_reports().timestamps, [START_TIME, START_TIME + ONE_DAY])

        self.model.simulate(12 * ONE_HOUR)
        self.assertEqual(self.model.get_report().timestamp, START_TIME + 2 * ONE_DAY)
        self.assertEqual(len(self.model.get_daily_reports()), 3)

    def test_zero_duration(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        self.model.simulate(datetime.timedelta(0))
        self.model.simulate(datetime.timedelta(0))

        self.assertListEqual(self.model.get_daily_reports().timestamps, [START_TIME])
        self.assertEqual(self.model.current_time(), START_TIME)

    def test_report_interval(self):
        model = Model(seed=0, start_date=START_DATE, report_interval=12 * ONE_HOUR)
        build_single_home(model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)

        model.simulate(ONE_DAY)

        self.assertListEqual(
            model.get_daily_reports().timestamps,
            [START_TIME, START_TIME + 12 * ONE_HOUR, START_TIME + ONE_DAY]
        )

    def test_latest_report(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)
        self.assertEqual(self.model.get_report().total, 0)

        self.model.simulate(3 * ONE_DAY)

        report = self.model.get_report()
        self.assertEqual(report, self.model.get_daily_reports()[-1])
        self.assertEqual(report.total, 10)
        self.assertEqual(report.timestamp, START_TIME + 3 * ONE_DAY)

    def test_negative_duration_raises(self):
        with self.assertRaises(UsageError):
            self.model.simulate(-ONE_DAY)

    def test_nested_simulate_raises(self):
        self.model.add_to_schedule(START_TIME + ONE_HOUR, lambda: self.model.simulate(ONE_HOUR))
        with self.assertRaises(UsageError):
            self.model.simulate(ONE_DAY)
        self.assertFalse(self.model.scheduler.running)

    def test_simulate_again_after_a_failed_run(self):
        build_single_home(self.model, 10, 0.7, 4 * ONE_DAY, 5 * ONE_DAY)
        self.model.add_to_schedule(START_TIME + ONE_HOUR, lambda: self.model.add_to_schedule(START_TIME, lambda: None))

        with self.assertRaises(OrderingError):
            self.model.simulate(3 * ONE_DAY)
        self.assertEqual(self.model.current_time(), START_TIME + ONE_HOUR)
        self.assertFalse(self.model.scheduler.running)

        # reports and stop of the failed run must not fire anymore
        self.model.simulate(ONE_DAY)
        self.assertEqual(self.model.current_time(), START_TIME + 25 * ONE_HOUR)
        self.assertListEqual(self.model.get_daily_reports().timestamps, [START_TIME, START_TIME + ONE_DAY])

        self.model.simulate(3 * ONE_DAY)
        self.assertEqual(self.model.current_time(), START_TIME + 4 * ONE_DAY + ONE_HOUR)
        self.assertListEqual(
            self.model.get_daily_reports().timestamps,
            [START_TIME + k * ONE_DAY for k in range(5)]
        )
        self.model.check_invariants()

    def test_start_date_after_scheduling_raises(self):
        model = Model()
        model.set_start_date(2020, 4, 1)
        model.add_to_schedule(START_TIME + ONE_HOUR, lambda: None)
        with self.assertRaises(UsageError):
            model.set_start_date(2020, 5, 1)
        self.assertEqual(model.scheduler.peek(), model.env.to_seconds(START_TIME + ONE_HOUR))

    def test_callbacks_run_at_their_time(self):
        seen = []
        for hours in [5, 1, 3]:
            self.model.add_to_schedule(START_TIME + hours * ONE_HOUR, lambda: seen.append(self.model.current_time()))

        self.model.simulate(ONE_DAY)

        self.assertListEqual(seen, [START_TIME + hours * ONE_HOUR for hours in [1, 3, 5]])

    def test_callback_scheduling_more_callbacks(self):
        seen = []

        def every_six_hours():
            seen.append(self.model.current_time())
            self.model.add_to_schedule(self.model.current_time() + 6 * ONE_HOUR, every_six_hours)

        self.model.add_to_schedule(START_TIME, every_six_hours)
        self.model.simulate(ONE_DAY)

        # the last one was pushed after the stop event of the run
        self.assertListEqual(seen, [START_TIME + k * 6 * ONE_HOUR for k in range(4)])

        self.model.simulate(ONE_HOUR)
        self.assertListEqual(seen, [START_TIME + k * 6 * ONE_HOUR for k in range(5)])

    def test_scheduling_in_the_past_raises(self):
        self.model.simulate(ONE_DAY)
        with self.assertRaises(OrderingError):
            self.model.add_to_schedule(START_TIME + ONE_HOUR, lambda: None)

    def test_closed_model(self):
        self.model.close()
        with self.assertRaises(SchedulerClosedError):
            self.model.add_to_schedule(START_TIME + ONE_HOUR, lambda: None)
        with self.assertRaises(SchedulerClosedError):
            self.model.simulate(ONE_DAY)


class InvariantTests(unittest.TestCase):
    def test_two_age_groups(self):
        """
        Everybody is in exactly one location at every hour and nobody's state ever goes back
        """
        model = Model(seed=3, start_date=START_DATE)
        build_two_age_groups(model, 20, 10, 2.0, 2 * ONE_DAY, 3 * ONE_DAY, simulation_days=10)
        previous_states = [person.state for person in model.persons]

        for _ in range(10 * 24):
            model.simulate(ONE_HOUR)
            model.check_invariants()
            for location in model.locations:
                location.update_infections()

            states = [person.state for person in model.persons]
            for before, after in zip(previous_states, states):
                self.assertGreaterEqual(after, before)
            previous_states = states

        for report in model.get_daily_reports():
            self.assertEqual(report.total, 30)
        self.assertEqual(len(model.get_daily_reports()), 11)

    def test_visits_follow_the_itinerary(self):
        model = Model(seed=0, start_date=START_DATE)
        young_home, old_home = build_two_age_groups(model, 5, 3, 0.0, ONE_DAY, ONE_DAY, simulation_days=4)

        # visits start on day 2 at midnight and last two hours
        model.simulate(2 * ONE_DAY + ONE_HOUR)
        self.assertEqual((len(young_home), len(old_home)), (0, 8))
        model.simulate(2 * ONE_HOUR)
        self.assertEqual((len(young_home), len(old_home)), (5, 3))
        model.simulate(ONE_DAY - 2 * ONE_HOUR)
        self.assertEqual((len(young_home), len(old_home)), (0, 8))

        young = [person for person in model.persons if person.home is young_home]
        self.assertEqual(len(young), 5)
        for person in young:
            self.assertIs(person.location, old_home)
            self.assertEqual(person.active_itinerary_entry.location, old_home)
        self.assertNotEqual(young[0].state, InfectionState.SUSCEPTIBLE)

        # no visit after the last day
        model.simulate(2 * ONE_DAY)
        self.assertEqual((len(young_home), len(old_home)), (5, 3))
        for person in young:
            self.assertListEqual(person.itinerary, [])


if __name__ == "__main__":
    unittest.main()
