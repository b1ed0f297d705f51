"""Weekly schedule helpers.

A schedule maps weekday keys ``"0"``..``"6"`` (0 is Sunday) to the group
letters trained on that day. Any group may appear on any number of days.
"""

from __future__ import annotations

import datetime
from typing import Dict, List, Mapping

from models import GROUP_LETTERS, WEEKDAY_KEYS

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def weekday_index(day: datetime.date) -> int:
    """Return the weekday of ``day`` with Sunday as 0."""
    return (day.weekday() + 1) % 7


def _day_key(day: int | str) -> str:
    key = str(day)
    if key not in WEEKDAY_KEYS:
        raise ValueError(f"invalid weekday: {day!r}")
    return key


def groups_scheduled_for(schedule: Mapping[str, List[str]], day: int | str) -> List[str]:
    return list(schedule.get(_day_key(day)) or [])


def groups_for_date(schedule: Mapping[str, List[str]], day: datetime.date) -> List[str]:
    return groups_scheduled_for(schedule, weekday_index(day))


def days_for_group(schedule: Mapping[str, List[str]], group: str) -> List[int]:
    return [int(key) for key in WEEKDAY_KEYS if group in (schedule.get(key) or [])]


def toggle_schedule(schedule: Dict[str, List[str]], day: int | str, group: str) -> bool:
    """Toggle ``group`` on ``day`` in place.

    Returns ``True`` when the group is scheduled on that day afterwards.
    """
    if group not in GROUP_LETTERS:
        raise ValueError(f"invalid group letter: {group!r}")
    key = _day_key(day)
    groups = list(schedule.get(key) or [])
    if group in groups:
        groups.remove(group)
        scheduled = False
    else:
        groups.append(group)
        groups.sort()
        scheduled = True
    schedule[key] = groups
    return scheduled


def schedule_from_group_map(group_schedule: Mapping[str, str]) -> Dict[str, List[str]]:
    """Build a schedule from the old ``{group: weekday name}`` mapping."""
    schedule: Dict[str, List[str]] = {key: [] for key in WEEKDAY_KEYS}
    for group, day_name in group_schedule.items():
        if not day_name or day_name not in WEEKDAY_NAMES:
            continue
        key = str(WEEKDAY_NAMES.index(day_name))
        if group not in schedule[key]:
            schedule[key].append(group)
            schedule[key].sort()
    return schedule
