from __future__ import annotations

import logging
import uuid
from typing import Iterable, List

from models import GROUP_LETTERS, STRENGTH, CARDIO, Category, Exercise, Settings
from scheduling import toggle_schedule
from settings_schema import validate_settings
from storage import StateRepository

logger = logging.getLogger(__name__)

_EXERCISE_TYPES = (STRENGTH, CARDIO)


def _check_group(group: str) -> None:
    if group not in GROUP_LETTERS:
        raise ValueError(f"invalid group letter: {group!r}")


class CatalogService:
    """Manage categories, exercises, the weekly schedule and saved sessions."""

    def __init__(self, repository: StateRepository) -> None:
        self.repository = repository

    @property
    def state(self):
        return self.repository.state

    # categories

    def add_category(self, name: str, group_letter: str = GROUP_LETTERS[0]) -> Category:
        _check_group(group_letter)
        cat = Category(id=uuid.uuid4().hex, name=name, group_letter=group_letter)
        self.state.categories.append(cat)
        self.repository.commit()
        return cat

    def update_category(self, category_id: str, name: str | None = None, group_letter: str | None = None) -> bool:
        cat = self.state.find_category(category_id)
        if cat is None:
            return False
        if group_letter is not None:
            _check_group(group_letter)
            cat.group_letter = group_letter
        if name is not None:
            cat.name = name
        self.repository.commit()
        return True

    def category_removal_impact(self, category_id: str) -> int:
        """Number of exercises that would lose ``category_id``."""
        return sum(1 for e in self.state.exercises if category_id in e.category_ids)

    def remove_category(self, category_id: str) -> bool:
        """Delete a category; linked exercises stay, minus that category."""
        before = len(self.state.categories)
        self.state.categories = [c for c in self.state.categories if c.id != category_id]
        if len(self.state.categories) == before:
            return False
        for ex in self.state.exercises:
            if category_id in ex.category_ids:
                ex.category_ids = [cid for cid in ex.category_ids if cid != category_id]
        self.repository.commit()
        logger.info("Removed category %s", category_id)
        return True

    # exercises

    def add_exercise(
        self,
        name: str,
        category_ids: Iterable[str],
        type: str = STRENGTH,
        default_sets: int = 3,
        default_reps: int = 10,
        initial_load: float = 0.0,
        view_url: str | None = None,
        notes: str | None = None,
    ) -> Exercise:
        if type not in _EXERCISE_TYPES:
            raise ValueError(f"invalid exercise type: {type!r}")
        sort_order = max([0] + [e.sort_order for e in self.state.exercises]) + 1
        ex = Exercise(
            id=uuid.uuid4().hex,
            name=name,
            category_ids=list(category_ids),
            type=type,
            sort_order=sort_order,
            default_sets=default_sets,
            default_reps=default_reps,
            initial_load=initial_load,
            view_url=view_url,
            notes=notes,
        )
        self.state.exercises.append(ex)
        self.repository.commit()
        return ex

    def update_exercise(self, exercise_id: str, **changes) -> bool:
        ex = self.state.find_exercise(exercise_id)
        if ex is None:
            return False
        if "type" in changes and changes["type"] not in _EXERCISE_TYPES:
            raise ValueError(f"invalid exercise type: {changes['type']!r}")
        for key in changes:
            if key == "id" or key not in Exercise.model_fields:
                raise ValueError(f"cannot update exercise field {key!r}")
        for key, value in changes.items():
            setattr(ex, key, value)
        self.repository.commit()
        return True

    def remove_exercise(self, exercise_id: str) -> bool:
        before = len(self.state.exercises)
        self.state.exercises = [e for e in self.state.exercises if e.id != exercise_id]
        if len(self.state.exercises) == before:
            return False
        self.repository.commit()
        return True

    def reorder_exercises(self, ordered_ids: List[str]) -> None:
        """Give each listed exercise its list position as ``sort_order``.

        Exercises missing from ``ordered_ids`` keep their current value.
        """
        positions = {}
        for index, exercise_id in enumerate(ordered_ids):
            positions.setdefault(exercise_id, index)
        for ex in self.state.exercises:
            if ex.id in positions:
                ex.sort_order = positions[ex.id]
        self.repository.commit()

    def sorted_exercises(self) -> List[Exercise]:
        return sorted(self.state.exercises, key=lambda e: e.sort_order)

    def exercises_for_groups(self, groups: Iterable[str]) -> List[Exercise]:
        groups = set(groups)
        category_ids = {c.id for c in self.state.categories if c.group_letter in groups}
        return [e for e in self.sorted_exercises() if category_ids.intersection(e.category_ids)]

    def orphaned_exercises(self) -> List[Exercise]:
        return [e for e in self.sorted_exercises() if not e.category_ids]

    # schedule, settings and history

    def toggle_schedule(self, day: int | str, group: str) -> bool:
        scheduled = toggle_schedule(self.state.schedule, day, group)
        self.repository.commit()
        return scheduled

    def update_settings(self, **changes) -> Settings:
        aliases = {name: f.alias or name for name, f in Settings.model_fields.items()}
        data = self.state.settings.to_document()
        for key, value in changes.items():
            data[aliases.get(key, key)] = value
        validate_settings(data)
        self.state.settings = Settings.model_validate(data)
        self.repository.commit()
        return self.state.settings

    def remove_session(self, session_id: str) -> bool:
        before = len(self.state.sessions)
        self.state.sessions = [s for s in self.state.sessions if s.id != session_id]
        if len(self.state.sessions) == before:
            return False
        self.repository.commit()
        return True
