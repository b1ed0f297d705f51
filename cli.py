import argparse
import datetime
import logging
import sys

from backup import BackupService, InvalidImportError
from catalog_service import CatalogService
from config import DEFAULT_CONFIG, YamlConfig
from localization import translator
from scheduling import WEEKDAY_NAMES, groups_for_date, weekday_index
from seed_sample_data import seed
from session_timeout import LongSessionWatchdog, TimeoutState
from storage import JsonStore, StateRepository
from workout_service import WorkoutService


def open_repository(data_dir: str) -> StateRepository:
    return StateRepository(JsonStore(data_dir))


def export_data(data_dir: str, out_dir: str = ".") -> str:
    return BackupService(open_repository(data_dir)).export(out_dir)


def import_data(path: str, data_dir: str) -> None:
    BackupService(open_repository(data_dir)).import_file(path)


def reset_data(data_dir: str, confirm: bool) -> bool:
    return BackupService(open_repository(data_dir)).reset(confirm)


def today_summary(data_dir: str, day: datetime.date | None = None) -> str:
    day = day or datetime.date.today()
    state = open_repository(data_dir).state
    name = translator.gettext(WEEKDAY_NAMES[weekday_index(day)])
    groups = groups_for_date(state.schedule, day)
    if not groups:
        return f"{name}: {translator.gettext('Rest day')}"
    return f"{name}: {translator.gettext('Groups')} {', '.join(groups)}"


def workout_status(
    data_dir: str,
    now: datetime.datetime | None = None,
    config: dict | None = None,
) -> str:
    service = WorkoutService(open_repository(data_dir))
    if not service.is_active:
        return translator.gettext("No workout in progress")
    now = now or service.clock()
    watchdog = LongSessionWatchdog.from_config(service, config or DEFAULT_CONFIG)
    minutes = service.elapsed_minutes(now)
    text = (
        f"{translator.gettext('Workout in progress')} "
        f"({', '.join(service.draft.selected_groups)}): "
        f"{translator.gettext('Minutes')} {minutes}, "
        f"{translator.gettext('Series')} {service.draft_completed_series()}, "
        f"{translator.gettext('Volume')} {service.draft_volume():g}"
    )
    if watchdog.tick(now) is TimeoutState.WARNING:
        text += f" ({translator.gettext('Long session')})"
    return text


def demo_data(data_dir: str) -> bool:
    return seed(CatalogService(open_repository(data_dir)))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Workout tracker data utilities")
    parser.add_argument("--config", default="settings.yaml")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--out", default=".")

    imp = sub.add_parser("import")
    imp.add_argument("--in", dest="src", required=True)

    rst = sub.add_parser("reset")
    rst.add_argument("--yes", action="store_true")

    today = sub.add_parser("today")
    today.add_argument("--date", type=datetime.date.fromisoformat)

    sub.add_parser("status")
    sub.add_parser("demo")

    args = parser.parse_args(argv)
    cfg = YamlConfig(args.config).load()
    logging.basicConfig(
        level=getattr(logging, str(cfg["log_level"]).upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    translator.set_language(cfg["language"])
    data_dir = cfg["data_dir"]

    if args.cmd == "export":
        print(export_data(data_dir, args.out))
    elif args.cmd == "import":
        try:
            import_data(args.src, data_dir)
        except InvalidImportError as e:
            print(f"Import failed: {e}", file=sys.stderr)
            return 1
        print("Import complete")
    elif args.cmd == "reset":
        confirm = args.yes or input("Delete all data permanently? [y/N] ").strip().lower() == "y"
        if not reset_data(data_dir, confirm):
            print("Reset cancelled")
            return 1
        print("All data deleted")
    elif args.cmd == "today":
        print(today_summary(data_dir, args.date))
    elif args.cmd == "status":
        print(workout_status(data_dir, config=cfg))
    elif args.cmd == "demo":
        if not demo_data(data_dir):
            print("Catalog already contains data")
            return 1
        print("Demo data inserted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
