"""Bring persisted state documents up to the current shape.

Three generations of documents exist in the wild:

* v1/v2 -- one ``categoryId`` per exercise, ``targetSets``/``targetReps``,
  categories tagged with ``group``, a ``settings.groupSchedule`` mapping each
  group to a weekday name and sessions storing raw sets under ``exercises``.
* early v3 -- a top-level ``schedule`` holding ``None`` or a single group
  letter per weekday.
* v3 -- ``categoryIds``, ``type`` and ``sortOrder`` on exercises, lists of
  group letters per weekday and committed sessions with ``details``.

Every rule only fills in what is missing, so running :func:`migrate` on its
own output is a no-op. Fields the rules do not know about are carried over.
"""

from __future__ import annotations

import copy
import datetime
import enum
import logging
from typing import Any, Dict, List, Mapping

from models import (
    CARDIO,
    GROUP_LETTERS,
    STRENGTH,
    WEEKDAY_KEYS,
    AppState,
    SessionDetail,
)
from scheduling import schedule_from_group_map
from settings_schema import DEFAULT_SETTINGS
from stats_service import duration_minutes, session_totals

logger = logging.getLogger(__name__)

EXERCISE_DEFAULTS = {
    "defaultSets": 3,
    "defaultReps": 10,
    "initialLoad": 0,
}

# new key -> key used by older documents
_EXERCISE_RENAMES = {
    "defaultSets": "targetSets",
    "defaultReps": "targetReps",
    "viewUrl": "videoUrl",
    "notes": "note",
}


class MigrationError(ValueError):
    """Raised when a document cannot be turned into an :class:`AppState`."""


class ScheduleShape(enum.Enum):
    EMPTY = "empty"
    SINGLE = "single"
    MULTIPLE = "multiple"


def classify_schedule_value(value: Any) -> ScheduleShape:
    if isinstance(value, list):
        return ScheduleShape.MULTIPLE
    if isinstance(value, str) and value:
        return ScheduleShape.SINGLE
    return ScheduleShape.EMPTY


def normalize_schedule_value(value: Any) -> List[str]:
    shape = classify_schedule_value(value)
    if shape is ScheduleShape.MULTIPLE:
        groups = [g for g in value if isinstance(g, str) and g]
        if len(groups) != len(value):
            logger.warning("Dropping unrecognised schedule entries in %r", value)
        return groups
    if shape is ScheduleShape.SINGLE:
        return [value]
    if value not in (None, ""):
        logger.warning("Dropping unrecognised schedule value %r", value)
    return []


def migrate_schedule(schedule: Mapping[Any, Any]) -> Dict[str, List[str]]:
    out = {str(key): normalize_schedule_value(value) for key, value in schedule.items()}
    for key in WEEKDAY_KEYS:
        out.setdefault(key, [])
    return out


def migrate_exercise(ex: Dict[str, Any]) -> Dict[str, Any]:
    if "categoryIds" not in ex or ex["categoryIds"] is None:
        legacy = ex.get("categoryId")
        ex["categoryIds"] = [legacy] if legacy else []
    if not ex.get("type"):
        ex["type"] = STRENGTH
    if ex.get("sortOrder") is None:
        ex["sortOrder"] = 0
    for key, legacy_key in _EXERCISE_RENAMES.items():
        if ex.get(key) is None and ex.get(legacy_key) is not None:
            ex[key] = ex[legacy_key]
    for key, default in EXERCISE_DEFAULTS.items():
        if ex.get(key) is None:
            ex[key] = default
    return ex


def migrate_category(cat: Dict[str, Any]) -> Dict[str, Any]:
    if not cat.get("groupLetter"):
        legacy = cat.get("group")
        cat["groupLetter"] = legacy if legacy in GROUP_LETTERS else GROUP_LETTERS[0]
    return cat


def migrate_settings(settings: Mapping[str, Any] | None) -> Dict[str, Any]:
    settings = dict(settings or {})
    if "restTimeSeconds" not in settings and settings.get("restTimerDefault") is not None:
        settings["restTimeSeconds"] = settings["restTimerDefault"]
    return {**DEFAULT_SETTINGS, **settings}


def _legacy_details(
    exercises: Mapping[str, Any], names: Mapping[str, Dict[str, Any]]
) -> List[Dict[str, Any]]:
    details = []
    for key, entry in exercises.items():
        if not isinstance(entry, dict):
            continue
        exercise_id = entry.get("exerciseId") or key
        series = [
            {"load": s.get("weight", s.get("load", 0)) or 0, "reps": s.get("reps", 0) or 0}
            for s in entry.get("sets") or []
            if isinstance(s, dict) and s.get("completed")
        ]
        ex = names.get(exercise_id, {})
        ex_type = ex.get("type") or STRENGTH
        if not series and ex_type != CARDIO:
            continue
        details.append(
            {
                "exerciseId": exercise_id,
                "exerciseName": ex.get("name") or exercise_id,
                "type": ex_type,
                "series": series,
            }
        )
    return details


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def migrate_session(session: Dict[str, Any], exercises: Mapping[str, Dict[str, Any]]) -> Dict[str, Any]:
    if "details" not in session and isinstance(session.get("exercises"), dict):
        session["details"] = _legacy_details(session["exercises"], exercises)
    details = session.setdefault("details", [])
    if session.get("volume") is None or session.get("totalSeries") is None:
        volume, count = session_totals(SessionDetail.model_validate(d) for d in details)
        if session.get("volume") is None:
            session["volume"] = volume
        if session.get("totalSeries") is None:
            session["totalSeries"] = count
    start = session.get("startTime")
    for key in ("startTime", "endTime"):
        if session.get(key) is not None and not _is_timestamp(session[key]):
            raise MigrationError(f"session {key} must be a number, got {session[key]!r}")
    if session.get("endTime") is None and start is not None:
        session["endTime"] = start
    if session.get("durationMinutes") is None and start is not None:
        session["durationMinutes"] = duration_minutes(start, session["endTime"])
    if not session.get("date") and start is not None:
        stamp = datetime.datetime.fromtimestamp(start / 1000, tz=datetime.timezone.utc)
        session["date"] = stamp.date().isoformat()
    if session.get("notes") is None:
        session["notes"] = session.get("note") or ""
    if session.get("groups") is None:
        session["groups"] = []
    if not session.get("id") and start is not None:
        session["id"] = f"legacy-{start}"
    return session


def _objects(doc: Mapping[str, Any], key: str) -> List[Dict[str, Any]]:
    items = doc.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise MigrationError(f"{key} must be a list of objects")
    return items


def migrate(raw: Mapping[str, Any] | AppState) -> AppState:
    """Return the canonical :class:`AppState` for ``raw``."""
    if isinstance(raw, AppState):
        raw = raw.to_document()
    if not isinstance(raw, Mapping):
        raise MigrationError(f"state document must be an object, got {type(raw).__name__}")
    doc = copy.deepcopy(dict(raw))

    settings = doc.get("settings") if isinstance(doc.get("settings"), Mapping) else {}

    schedule = doc.get("schedule")
    if isinstance(schedule, Mapping):
        doc["schedule"] = migrate_schedule(schedule)
    elif isinstance(settings.get("groupSchedule"), Mapping):
        doc["schedule"] = schedule_from_group_map(settings["groupSchedule"])
    else:
        doc["schedule"] = migrate_schedule({})

    doc["settings"] = migrate_settings(settings)
    doc["categories"] = [migrate_category(c) for c in _objects(doc, "categories")]
    doc["exercises"] = [migrate_exercise(e) for e in _objects(doc, "exercises")]
    by_id = {e.get("id"): e for e in doc["exercises"]}
    for key in ("logs", "history"):
        if doc.get(key) is None:
            doc[key] = []

    try:
        doc["sessions"] = [migrate_session(s, by_id) for s in _objects(doc, "sessions")]
        return AppState.model_validate(doc)
    except MigrationError:
        raise
    except (TypeError, ValueError, OverflowError) as e:
        raise MigrationError(str(e)) from e
