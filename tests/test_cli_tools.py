import datetime
import os
import shutil
import sys
import tempfile
import unittest

import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import (
    demo_data,
    export_data,
    import_data,
    main,
    open_repository,
    reset_data,
    today_summary,
    workout_status,
)
from backup import InvalidImportError
from localization import translator
from workout_service import WorkoutService


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.mkdtemp()
        self.data_dir = os.path.join(self.tmp, "data")
        self.out_dir = os.path.join(self.tmp, "exports")

    def tearDown(self) -> None:
        translator.set_language("en")
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_demo_data(self) -> None:
        self.assertTrue(demo_data(self.data_dir))
        self.assertFalse(demo_data(self.data_dir))
        state = open_repository(self.data_dir).state
        self.assertEqual(len(state.categories), 8)
        self.assertEqual(state.schedule["1"], ["A"])
        self.assertTrue(any(e.type == "cardio" for e in state.exercises))

    def test_today_summary(self) -> None:
        demo_data(self.data_dir)
        monday = datetime.date(2024, 1, 8)
        sunday = datetime.date(2024, 1, 7)
        self.assertEqual(today_summary(self.data_dir, monday), "Monday: Groups A")
        self.assertEqual(today_summary(self.data_dir, sunday), "Sunday: Rest day")
        translator.set_language("pt")
        self.assertEqual(today_summary(self.data_dir, monday), "Segunda: Grupos A")

    def test_unknown_language_falls_back_to_english(self) -> None:
        with self.assertLogs("localization", level="WARNING"):
            translator.set_language("xx")
        self.assertEqual(translator.language, "en")
        self.assertEqual(translator.languages, ["en", "pt"])

    def test_export_import_reset(self) -> None:
        demo_data(self.data_dir)
        path = export_data(self.data_dir, self.out_dir)
        self.assertTrue(os.path.exists(path))

        other = os.path.join(self.tmp, "other")
        import_data(path, other)
        self.assertEqual(
            open_repository(other).state.to_document(),
            open_repository(self.data_dir).state.to_document(),
        )
        self.assertFalse(reset_data(other, confirm=False))
        self.assertTrue(reset_data(other, confirm=True))
        self.assertEqual(open_repository(other).state.exercises, [])

    def test_import_rejects_bad_file(self) -> None:
        bad = os.path.join(self.tmp, "bad.json")
        with open(bad, "w", encoding="utf-8") as f:
            f.write('{"categories": []}')
        with self.assertRaises(InvalidImportError):
            import_data(bad, self.data_dir)

    def test_workout_status(self) -> None:
        demo_data(self.data_dir)
        self.assertEqual(workout_status(self.data_dir), "No workout in progress")
        start = datetime.datetime(2024, 1, 8, 18, 0, tzinfo=datetime.timezone.utc)
        service = WorkoutService(open_repository(self.data_dir), clock=lambda: start)
        service.start_workout(["A"])
        status = workout_status(self.data_dir, start + datetime.timedelta(minutes=20))
        self.assertTrue(status.startswith("Workout in progress (A): Minutes 20"))
        self.assertNotIn("Long session", status)

        late = start + datetime.timedelta(minutes=95)
        self.assertTrue(workout_status(self.data_dir, late).endswith("(Long session)"))
        relaxed = {"long_session_minutes": 120, "auto_finish_countdown_minutes": 5}
        self.assertNotIn("Long session", workout_status(self.data_dir, late, relaxed))

    def test_main(self) -> None:
        cfg = os.path.join(self.tmp, "settings.yaml")
        with open(cfg, "w", encoding="utf-8") as f:
            yaml.safe_dump({"data_dir": self.data_dir}, f)
        self.assertEqual(main(["--config", cfg, "demo"]), 0)
        self.assertEqual(main(["--config", cfg, "today", "--date", "2024-01-09"]), 0)
        self.assertEqual(main(["--config", cfg, "reset", "--yes"]), 0)
        missing = os.path.join(self.tmp, "missing.json")
        self.assertEqual(main(["--config", cfg, "import", "--in", missing]), 1)


if __name__ == "__main__":
    unittest.main()
