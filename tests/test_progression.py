import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from migration import migrate
from progression import Performance, last_performance, performance_delta


def _session(session_id: str, exercise_id: str, series: list, start: int) -> dict:
    return {
        "id": session_id,
        "date": "2024-02-01",
        "startTime": start,
        "endTime": start + 3_600_000,
        "details": [
            {"exerciseId": exercise_id, "exerciseName": exercise_id, "type": "strength",
             "series": [{"load": load, "reps": reps} for load, reps in series]}
        ],
    }


class ProgressionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.state = migrate(
            {
                "categories": [{"id": "c1", "name": "Peito", "groupLetter": "A"}],
                "exercises": [
                    {"id": "e1", "name": "Supino", "categoryIds": ["c1"], "defaultReps": 10, "initialLoad": 20},
                    {"id": "e2", "name": "Crucifixo", "categoryIds": ["c1"], "defaultReps": 12, "initialLoad": 8},
                ],
                "sessions": [
                    _session("s1", "e1", [(40, 8), (42, 6)], 1000),
                    _session("s2", "e1", [(45, 6), (40, 8)], 2000),
                    _session("s3", "e9", [(99, 1)], 3000),
                ],
            }
        )

    def test_most_recent_session_first_series(self) -> None:
        self.assertEqual(last_performance(self.state, "e1"), Performance(45, 6))

    def test_fallback_to_configured_values(self) -> None:
        self.assertEqual(last_performance(self.state, "e2"), Performance(8, 12))

    def test_unknown_exercise(self) -> None:
        self.assertEqual(last_performance(self.state, "missing"), Performance(0, 0))

    def test_detail_without_series_is_skipped(self) -> None:
        self.state.sessions[1].details[0].series = []
        self.assertEqual(last_performance(self.state, "e1"), Performance(40, 8))

    def test_delta(self) -> None:
        up = performance_delta(self.state, "e1", 47.5, 6)
        self.assertEqual((up.load, up.reps, up.trend), (2.5, 0, "up"))
        down = performance_delta(self.state, "e1", 45, 5)
        self.assertEqual(down.trend, "down")
        same = performance_delta(self.state, "e1", 45, 6)
        self.assertEqual(same.trend, "same")
        heavier_fewer = performance_delta(self.state, "e1", 50, 4)
        self.assertEqual(heavier_fewer.trend, "up")


if __name__ == "__main__":
    unittest.main()
