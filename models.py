"""Domain types for the workout tracker.

The persisted documents use camelCase keys; models expose snake_case
attributes and keep any field they do not know about, so documents written
by newer or older versions survive a load/save cycle unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

GROUP_LETTERS = ("A", "B", "C", "D", "E", "F")
WEEKDAY_KEYS = ("0", "1", "2", "3", "4", "5", "6")
STRENGTH = "strength"
CARDIO = "cardio"


class Document(BaseModel):
    """Base model for everything that is written to disk."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Category(Document):
    id: str
    name: str = ""
    group_letter: str = Field(GROUP_LETTERS[0], alias="groupLetter")


class Exercise(Document):
    id: str
    name: str = ""
    category_ids: List[str] = Field(default_factory=list, alias="categoryIds")
    type: str = STRENGTH
    sort_order: int = Field(0, alias="sortOrder")
    default_sets: int = Field(3, alias="defaultSets")
    default_reps: int = Field(10, alias="defaultReps")
    initial_load: float = Field(0.0, alias="initialLoad")
    view_url: Optional[str] = Field(None, alias="viewUrl")
    notes: Optional[str] = None

    @property
    def is_cardio(self) -> bool:
        return self.type == CARDIO


class SeriesEntry(Document):
    id: str
    load: float = 0.0
    reps: int = 0
    completed: bool = False


class SeriesRecord(Document):
    load: float = 0.0
    reps: int = 0


class SessionDetail(Document):
    exercise_id: str = Field(alias="exerciseId")
    exercise_name: str = Field("", alias="exerciseName")
    type: str = STRENGTH
    series: List[SeriesRecord] = Field(default_factory=list)


class Session(Document):
    id: str
    date: str
    start_time: int = Field(alias="startTime")
    end_time: int = Field(alias="endTime")
    duration_minutes: int = Field(0, alias="durationMinutes")
    volume: float = 0.0
    total_series: int = Field(0, alias="totalSeries")
    notes: str = ""
    groups: List[str] = Field(default_factory=list)
    details: List[SessionDetail] = Field(default_factory=list)


class WorkoutDraft(Document):
    start_time: int = Field(alias="startTime")
    selected_groups: List[str] = Field(default_factory=list, alias="selectedGroups")
    exercises: Dict[str, List[SeriesEntry]] = Field(default_factory=dict)
    cardio_completed: Dict[str, bool] = Field(default_factory=dict, alias="cardioCompleted")


class Settings(Document):
    auto_timer: bool = Field(True, alias="autoTimer")
    rest_time_seconds: int = Field(60, alias="restTimeSeconds")


def default_schedule() -> Dict[str, List[str]]:
    return {key: [] for key in WEEKDAY_KEYS}


class AppState(Document):
    categories: List[Category] = Field(default_factory=list)
    exercises: List[Exercise] = Field(default_factory=list)
    sessions: List[Session] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    schedule: Dict[str, List[str]] = Field(default_factory=default_schedule)
    logs: Any = Field(default_factory=list)
    history: Any = Field(default_factory=list)

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        return None

    def find_category(self, category_id: str) -> Category | None:
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        return None
