import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import default_schedule
from scheduling import (
    days_for_group,
    groups_for_date,
    groups_scheduled_for,
    schedule_from_group_map,
    toggle_schedule,
    weekday_index,
)


class SchedulingTest(unittest.TestCase):
    def setUp(self) -> None:
        self.schedule = default_schedule()

    def test_weekday_index_starts_on_sunday(self) -> None:
        self.assertEqual(weekday_index(datetime.date(2024, 1, 7)), 0)
        self.assertEqual(weekday_index(datetime.date(2024, 1, 8)), 1)
        self.assertEqual(weekday_index(datetime.date(2024, 1, 13)), 6)

    def test_toggle_adds_sorted_and_removes(self) -> None:
        self.assertTrue(toggle_schedule(self.schedule, 1, "C"))
        self.assertTrue(toggle_schedule(self.schedule, 1, "A"))
        self.assertEqual(self.schedule["1"], ["A", "C"])
        self.assertFalse(toggle_schedule(self.schedule, "1", "A"))
        self.assertEqual(self.schedule["1"], ["C"])

    def test_group_on_several_days(self) -> None:
        toggle_schedule(self.schedule, 1, "A")
        toggle_schedule(self.schedule, 4, "A")
        self.assertEqual(days_for_group(self.schedule, "A"), [1, 4])
        self.assertEqual(days_for_group(self.schedule, "F"), [])

    def test_invalid_input(self) -> None:
        with self.assertRaises(ValueError):
            toggle_schedule(self.schedule, 1, "G")
        with self.assertRaises(ValueError):
            toggle_schedule(self.schedule, 7, "A")
        with self.assertRaises(ValueError):
            groups_scheduled_for(self.schedule, -1)

    def test_lookup(self) -> None:
        toggle_schedule(self.schedule, 1, "B")
        toggle_schedule(self.schedule, 1, "A")
        self.assertEqual(groups_scheduled_for(self.schedule, 1), ["A", "B"])
        self.assertEqual(groups_for_date(self.schedule, datetime.date(2024, 1, 8)), ["A", "B"])
        self.assertEqual(groups_for_date(self.schedule, datetime.date(2024, 1, 9)), [])
        result = groups_scheduled_for(self.schedule, 1)
        result.append("F")
        self.assertEqual(self.schedule["1"], ["A", "B"])

    def test_missing_day_key(self) -> None:
        self.assertEqual(groups_scheduled_for({}, 3), [])

    def test_schedule_from_group_map(self) -> None:
        schedule = schedule_from_group_map({"A": "Monday", "C": "Monday", "B": "", "D": "Someday"})
        self.assertEqual(schedule["1"], ["A", "C"])
        self.assertEqual(sum(len(v) for v in schedule.values()), 2)


if __name__ == "__main__":
    unittest.main()
