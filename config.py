import os
import yaml

APP_VERSION = "3.0.0"

DEFAULT_CONFIG = {
    "data_dir": "data",
    "language": "en",
    "long_session_minutes": 90,
    "auto_finish_countdown_minutes": 5,
    "log_level": "INFO",
}


class YamlConfig:
    """Load and save application options to a YAML file."""

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        data = dict(DEFAULT_CONFIG)
        if os.path.exists(self.path):
            with open(self.path, "r", encoding="utf-8") as f:
                data.update(yaml.safe_load(f) or {})
        env_dir = os.environ.get("WORKOUT_DATA_DIR")
        if env_dir:
            data["data_dir"] = env_dir
        return data

    def save(self, data: dict) -> None:
        out = {k: v for k, v in data.items() if k in DEFAULT_CONFIG}
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)
