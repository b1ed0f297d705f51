from __future__ import annotations

import datetime
from collections import Counter
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

from models import SeriesEntry, SeriesRecord, Session, SessionDetail

if TYPE_CHECKING:
    from storage import StateRepository


def series_volume(entries: Iterable[SeriesEntry | SeriesRecord]) -> float:
    """Return the sum of load times reps over completed entries.

    Committed :class:`SeriesRecord` items have no completion flag and always
    count.
    """
    total = 0.0
    for entry in entries:
        if getattr(entry, "completed", True):
            total += entry.load * entry.reps
    return total


def completed_series_count(entries: Iterable[SeriesEntry | SeriesRecord]) -> int:
    return sum(1 for entry in entries if getattr(entry, "completed", True))


def duration_minutes(start_ms: int, end_ms: int) -> int:
    """Whole minutes between two epoch-millisecond timestamps."""
    return (end_ms - start_ms) // 60000


def session_totals(details: Iterable[SessionDetail]) -> Tuple[float, int]:
    volume = 0.0
    count = 0
    for detail in details:
        volume += series_volume(detail.series)
        count += completed_series_count(detail.series)
    return volume, count


def verify_session(session: Session) -> bool:
    """Check that the stored totals match the session's own details."""
    volume, count = session_totals(session.details)
    return session.volume == volume and session.total_series == count


class StatisticsService:
    """Compute workout statistics for the history and progress views."""

    def __init__(self, repository: "StateRepository") -> None:
        self.repository = repository

    @property
    def sessions(self) -> List[Session]:
        return self.repository.state.sessions

    def recent_volume(self, limit: int = 7) -> List[Dict[str, float | str]]:
        """Return ``{"date", "volume"}`` points for the latest sessions."""
        if limit <= 0:
            return []
        return [
            {"date": s.date, "volume": s.volume} for s in self.sessions[-limit:]
        ]

    def exercise_history(self, exercise_id: str) -> List[Dict[str, float | int | str]]:
        """Per-session progress of one exercise, oldest first."""
        out: List[Dict[str, float | int | str]] = []
        for session in self.sessions:
            for detail in session.details:
                if detail.exercise_id != exercise_id or not detail.series:
                    continue
                out.append(
                    {
                        "date": session.date,
                        "max_load": max(s.load for s in detail.series),
                        "max_reps": max(s.reps for s in detail.series),
                        "volume": series_volume(detail.series),
                        "series": len(detail.series),
                    }
                )
        return out

    def sessions_on(self, day: datetime.date) -> List[Session]:
        key = day.isoformat()
        return [s for s in self.sessions if s.date == key]

    def monthly_session_counts(self, year: int) -> List[int]:
        """Number of sessions in each month of ``year`` (January first)."""
        counts = [0] * 12
        for s in self.sessions:
            d = datetime.date.fromisoformat(s.date)
            if d.year == year:
                counts[d.month - 1] += 1
        return counts

    def monthly_duration_ms(self, year: int, month: int) -> int:
        total = 0
        for s in self.sessions:
            d = datetime.date.fromisoformat(s.date)
            if d.year == year and d.month == month and s.end_time and s.start_time:
                total += s.end_time - s.start_time
        return total

    def training_days(self, year: int, month: int) -> int:
        """Distinct days in the month with at least one session."""
        days = set()
        for s in self.sessions:
            d = datetime.date.fromisoformat(s.date)
            if d.year == year and d.month == month:
                days.add(d)
        return len(days)

    def group_frequency(self) -> Dict[str, int]:
        counter: Counter[str] = Counter()
        for s in self.sessions:
            counter.update(s.groups)
        return dict(sorted(counter.items()))
