"""Progressive overload lookup."""

from __future__ import annotations

from dataclasses import dataclass

from models import AppState


@dataclass(frozen=True)
class Performance:
    load: float
    reps: int


@dataclass(frozen=True)
class PerformanceDelta:
    load: float
    reps: int

    @property
    def trend(self) -> str:
        """``up``, ``down`` or ``same``; load decides before reps."""
        if self.load > 0 or (self.load == 0 and self.reps > 0):
            return "up"
        if self.load < 0 or (self.load == 0 and self.reps < 0):
            return "down"
        return "same"


def last_performance(state: AppState, exercise_id: str) -> Performance:
    """Return the load and reps to pre-fill for ``exercise_id``.

    Sessions are append-only, so walking the list backwards visits the most
    recent workouts first. The first set of the latest recorded attempt wins.
    Without history the exercise's configured starting values are used.
    """
    for session in reversed(state.sessions):
        for detail in session.details:
            if detail.exercise_id == exercise_id and detail.series:
                first = detail.series[0]
                return Performance(first.load, first.reps)
    ex = state.find_exercise(exercise_id)
    if ex is None:
        return Performance(0.0, 0)
    return Performance(ex.initial_load, ex.default_reps)


def performance_delta(state: AppState, exercise_id: str, load: float, reps: int) -> PerformanceDelta:
    last = last_performance(state, exercise_id)
    return PerformanceDelta(load - last.load, reps - last.reps)
