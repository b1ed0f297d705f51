from __future__ import annotations

import datetime
import enum
import logging

from models import Session
from workout_service import WorkoutService, to_millis

logger = logging.getLogger(__name__)

LONG_SESSION_MINUTES = 90
AUTO_FINISH_COUNTDOWN_MINUTES = 5


class TimeoutState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    WARNING = "warning"
    AUTO_FINISHED = "auto_finished"


class LongSessionWatchdog:
    """Tick-driven guard against workouts left running by accident.

    The host calls :meth:`tick` from its own timer. Once a workout has run
    for ``warning_minutes`` the watchdog enters ``WARNING`` and the host shows
    a countdown. :meth:`acknowledge` keeps the workout going and starts a new
    warning window; if the countdown runs out first the workout is finished
    with the automatic note.
    """

    def __init__(
        self,
        service: WorkoutService,
        warning_minutes: int = LONG_SESSION_MINUTES,
        countdown_minutes: int = AUTO_FINISH_COUNTDOWN_MINUTES,
    ) -> None:
        self.service = service
        self.warning_ms = warning_minutes * 60000
        self.countdown_ms = countdown_minutes * 60000
        self.last_session: Session | None = None
        self._draft_start: int | None = None
        self._window_start: int | None = None
        self._warning_start: int | None = None

    @classmethod
    def from_config(cls, service: WorkoutService, config: dict) -> LongSessionWatchdog:
        return cls(
            service,
            warning_minutes=config.get("long_session_minutes", LONG_SESSION_MINUTES),
            countdown_minutes=config.get("auto_finish_countdown_minutes", AUTO_FINISH_COUNTDOWN_MINUTES),
        )

    def _reset(self) -> None:
        self._draft_start = None
        self._window_start = None
        self._warning_start = None

    def _sync(self) -> bool:
        draft = self.service.draft
        if draft is None:
            self._reset()
            return False
        if draft.start_time != self._draft_start:
            self._draft_start = draft.start_time
            self._window_start = draft.start_time
            self._warning_start = None
        return True

    def tick(self, now: datetime.datetime) -> TimeoutState:
        if not self._sync():
            return TimeoutState.IDLE
        now_ms = to_millis(now)
        if self._warning_start is None:
            if now_ms - self._window_start < self.warning_ms:
                return TimeoutState.RUNNING
            self._warning_start = now_ms
            logger.info("Workout has been running for a long time, countdown started")
            return TimeoutState.WARNING
        if now_ms - self._warning_start < self.countdown_ms:
            return TimeoutState.WARNING
        self.last_session = self.service.auto_finish()
        self._reset()
        return TimeoutState.AUTO_FINISHED

    def acknowledge(self, now: datetime.datetime) -> bool:
        if not self._sync() or self._warning_start is None:
            return False
        self._warning_start = None
        self._window_start = to_millis(now)
        return True

    def countdown_remaining(self, now: datetime.datetime) -> int | None:
        """Seconds left before the automatic finish, ``None`` outside a warning."""
        if not self._sync() or self._warning_start is None:
            return None
        left = self.countdown_ms - (to_millis(now) - self._warning_start)
        return max(0, left // 1000)
