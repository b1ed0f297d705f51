import os
import shutil
import sys
import tempfile
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import DEFAULT_CONFIG, YamlConfig
from settings_schema import validate_settings


class YamlConfigTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.mkdtemp()
        self.path = os.path.join(self.tmp, "settings.yaml")
        os.environ.pop("WORKOUT_DATA_DIR", None)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)
        os.environ.pop("WORKOUT_DATA_DIR", None)

    def test_defaults_without_file(self) -> None:
        self.assertEqual(YamlConfig(self.path).load(), DEFAULT_CONFIG)

    def test_save_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({"data_dir": "/tmp/treino", "long_session_minutes": 120, "unknown": 1})
        data = cfg.load()
        self.assertEqual(data["data_dir"], "/tmp/treino")
        self.assertEqual(data["long_session_minutes"], 120)
        self.assertEqual(data["auto_finish_countdown_minutes"], 5)
        self.assertNotIn("unknown", data)

    def test_environment_override(self) -> None:
        os.environ["WORKOUT_DATA_DIR"] = "/srv/treino"
        self.assertEqual(YamlConfig(self.path).load()["data_dir"], "/srv/treino")


class SettingsSchemaTest(unittest.TestCase):
    def test_valid(self) -> None:
        validate_settings({"autoTimer": False, "restTimeSeconds": 120, "soundEnabled": True})

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            validate_settings({"restTimeSeconds": -1})
        with self.assertRaises(ValueError):
            validate_settings({"autoTimer": "maybe"})


if __name__ == "__main__":
    unittest.main()
