from __future__ import annotations

import datetime
import logging
import uuid
from typing import Callable, Dict, Iterable, List

from models import CARDIO, STRENGTH, SeriesEntry, SeriesRecord, Session, SessionDetail, WorkoutDraft
from progression import last_performance
from stats_service import completed_series_count, duration_minutes, series_volume, session_totals
from storage import StateRepository

logger = logging.getLogger(__name__)

AUTO_FINISH_NOTE = "Finished automatically: no answer to the long session warning."

_SERIES_FIELDS = {"load", "reps", "completed"}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def to_millis(moment: datetime.datetime) -> int:
    return int(moment.timestamp() * 1000)


def clamp_series_changes(**changes) -> dict:
    """Clamp ``load``/``reps`` to zero or more before calling the service.

    :meth:`WorkoutService.update_series` stores values as given; input
    surfaces run user input through this first.
    """
    out = dict(changes)
    for key in ("load", "reps"):
        if key in out and out[key] is not None:
            out[key] = max(0, out[key])
    return out


class WorkoutService:
    """Run the single in-progress workout from start to commit.

    With no draft the service is idle; :meth:`start_workout` makes it
    active and :meth:`finish_workout` or :meth:`cancel_workout` make it idle
    again. Calls that make no sense in the current state change nothing and
    report that through their return value.
    """

    def __init__(
        self,
        repository: StateRepository,
        clock: Callable[[], datetime.datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.clock = clock or _utcnow

    @property
    def draft(self) -> WorkoutDraft | None:
        return self.repository.draft

    @property
    def is_active(self) -> bool:
        return self.repository.draft is not None

    def _set_draft(self, draft: WorkoutDraft | None) -> None:
        self.repository.draft = draft
        self.repository.commit_draft()

    def start_workout(self, groups: Iterable[str]) -> WorkoutDraft | None:
        if self.is_active:
            logger.debug("start_workout ignored, a workout is already running")
            return None
        groups = list(groups)
        state = self.repository.state
        category_ids = {c.id for c in state.categories if c.group_letter in groups}
        selected = [e for e in state.exercises if category_ids.intersection(e.category_ids)]
        selected.sort(key=lambda e: e.sort_order)

        exercises: Dict[str, List[SeriesEntry]] = {}
        cardio: Dict[str, bool] = {}
        for ex in selected:
            if ex.is_cardio:
                exercises[ex.id] = []
                cardio[ex.id] = False
                continue
            last = last_performance(state, ex.id)
            exercises[ex.id] = [
                SeriesEntry(id=uuid.uuid4().hex, load=last.load, reps=last.reps)
                for _ in range(max(0, ex.default_sets))
            ]

        draft = WorkoutDraft(
            start_time=to_millis(self.clock()),
            selected_groups=groups,
            exercises=exercises,
            cardio_completed=cardio,
        )
        self._set_draft(draft)
        logger.info("Workout started for groups %s with %d exercises", groups, len(exercises))
        return draft

    def _series(self, exercise_id: str) -> List[SeriesEntry] | None:
        if self.draft is None:
            logger.debug("Series update ignored, no workout in progress")
            return None
        return self.draft.exercises.get(exercise_id)

    @staticmethod
    def _apply(entry: SeriesEntry, changes: dict) -> None:
        unknown = set(changes) - _SERIES_FIELDS
        if unknown:
            raise ValueError(f"unknown series fields: {sorted(unknown)}")
        for key, value in changes.items():
            setattr(entry, key, value)

    def update_series(self, exercise_id: str, series_id: str, **changes) -> bool:
        series = self._series(exercise_id)
        for entry in series or []:
            if entry.id == series_id:
                self._apply(entry, changes)
                self.repository.commit_draft()
                return True
        return False

    def update_all_series(self, exercise_id: str, **changes) -> bool:
        series = self._series(exercise_id)
        if not series:
            return False
        for entry in series:
            self._apply(entry, changes)
        self.repository.commit_draft()
        return True

    def mark_cardio_complete(self, exercise_id: str, completed: bool) -> bool:
        if self.draft is None:
            return False
        ex = self.repository.state.find_exercise(exercise_id)
        if ex is None or not ex.is_cardio:
            logger.debug("Cardio completion ignored for %s", exercise_id)
            return False
        self.draft.cardio_completed[exercise_id] = bool(completed)
        self.repository.commit_draft()
        return True

    def finish_workout(self, notes: str = "") -> Session | None:
        draft = self.draft
        if draft is None:
            logger.debug("finish_workout ignored, no workout in progress")
            return None
        state = self.repository.state
        now = self.clock()
        end_time = to_millis(now)

        details: List[SessionDetail] = []
        for exercise_id, series in draft.exercises.items():
            ex = state.find_exercise(exercise_id)
            if ex is None or ex.is_cardio:
                continue
            done = [s for s in series if s.completed]
            if not done:
                continue
            details.append(
                SessionDetail(
                    exercise_id=exercise_id,
                    exercise_name=ex.name,
                    type=STRENGTH,
                    series=[SeriesRecord(load=s.load, reps=s.reps) for s in done],
                )
            )
        for exercise_id, completed in draft.cardio_completed.items():
            ex = state.find_exercise(exercise_id)
            if completed and ex is not None:
                details.append(
                    SessionDetail(exercise_id=exercise_id, exercise_name=ex.name, type=CARDIO)
                )

        volume, total_series = session_totals(details)
        session = Session(
            id=uuid.uuid4().hex,
            date=now.date().isoformat(),
            start_time=draft.start_time,
            end_time=end_time,
            duration_minutes=duration_minutes(draft.start_time, end_time),
            volume=volume,
            total_series=total_series,
            notes=notes,
            groups=list(draft.selected_groups),
            details=details,
        )
        state.sessions.append(session)
        self.repository.commit()
        self._set_draft(None)
        logger.info(
            "Workout finished: %d exercises, %d series, volume %.1f",
            len(details),
            total_series,
            volume,
        )
        return session

    def auto_finish(self) -> Session | None:
        return self.finish_workout(AUTO_FINISH_NOTE)

    def cancel_workout(self) -> bool:
        if self.draft is None:
            return False
        self._set_draft(None)
        logger.info("Workout cancelled")
        return True

    def elapsed_minutes(self, now: datetime.datetime | None = None) -> int | None:
        if self.draft is None:
            return None
        return duration_minutes(self.draft.start_time, to_millis(now or self.clock()))

    def draft_volume(self) -> float:
        if self.draft is None:
            return 0.0
        return sum(series_volume(s) for s in self.draft.exercises.values())

    def draft_completed_series(self) -> int:
        if self.draft is None:
            return 0
        return sum(completed_series_count(s) for s in self.draft.exercises.values())
