"""Live workout session state machine.

The controller is either idle or active on exactly one workout set. Only the
active workout set's completion flags may change, and finishing reduces the
completed entries into a :class:`WorkoutSummary` before clearing every flag.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Literal

from liftlog.workout.store import RoutineStore
from liftlog.workout.summary import WorkoutSummary, summarize_workout
from liftlog.workout.ticker import ElapsedTicker

logger = logging.getLogger(__name__)

SessionState = Literal["idle", "active"]

SAVE_ACKNOWLEDGMENT = "Workout saved to your history!"


class CompletionRejectedError(RuntimeError):
    """Raised when a completion toggle violates the session policy."""

    notice = "Completion cannot be changed right now."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.notice)


class SessionNotActiveError(CompletionRejectedError):
    notice = "Please start a workout before marking sets as completed."


class WrongWorkoutSetError(CompletionRejectedError):
    notice = "You can only mark sets as completed in your active workout."


@dataclass(frozen=True)
class ActiveSession:
    workout_set_id: str
    started_at: float


class SessionController:
    def __init__(
        self,
        store: RoutineStore,
        *,
        clock: Callable[[], float] = time.time,
        ticker_factory: Callable[[], ElapsedTicker] | None = ElapsedTicker,
    ) -> None:
        self._store = store
        self._clock = clock
        self._ticker_factory = ticker_factory
        self._ticker: ElapsedTicker | None = None
        self._active: ActiveSession | None = None
        self._elapsed_seconds = 0
        self._pending_summary: WorkoutSummary | None = None

    @property
    def state(self) -> SessionState:
        return "active" if self._active is not None else "idle"

    @property
    def active_workout_set_id(self) -> str | None:
        return self._active.workout_set_id if self._active is not None else None

    @property
    def started_at(self) -> float | None:
        return self._active.started_at if self._active is not None else None

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def pending_summary(self) -> WorkoutSummary | None:
        return self._pending_summary

    @property
    def ticker_running(self) -> bool:
        return self._ticker is not None and self._ticker.is_running

    def is_active(self, workout_set_id: str) -> bool:
        return self._active is not None and self._active.workout_set_id == workout_set_id

    def start(self, workout_set_id: str) -> bool:
        if self._active is not None:
            logger.info(
                "Ignoring start of %s: session already active on %s",
                workout_set_id,
                self._active.workout_set_id,
            )
            return False
        if self._store.get(workout_set_id) is None:
            logger.info("Ignoring start of unknown workout set %s", workout_set_id)
            return False

        self._active = ActiveSession(workout_set_id=workout_set_id, started_at=self._clock())
        self._elapsed_seconds = 0
        self._start_ticker()
        logger.info("Workout session started on %s", workout_set_id)
        return True

    def tick(self) -> int:
        """Recompute elapsed seconds from the start timestamp."""
        if self._active is None:
            return self._elapsed_seconds
        elapsed = math.floor(self._clock() - self._active.started_at)
        self._elapsed_seconds = max(self._elapsed_seconds, int(elapsed))
        return self._elapsed_seconds

    def toggle_completion(self, workout_set_id: str, exercise_id: str, entry_id: str) -> bool | None:
        """Flip one entry's completed flag; returns the new value.

        Returns ``None`` when the entry no longer exists.
        """
        if self._active is None:
            logger.info("Rejected completion toggle on %s: no active session", workout_set_id)
            raise SessionNotActiveError()
        if self._active.workout_set_id != workout_set_id:
            logger.info(
                "Rejected completion toggle on %s: active session is %s",
                workout_set_id,
                self._active.workout_set_id,
            )
            raise WrongWorkoutSetError()

        workout_set = self._store.get(workout_set_id)
        exercise = workout_set.find_exercise(exercise_id) if workout_set else None
        entry = exercise.find_entry(entry_id) if exercise else None
        if entry is None:
            return None

        self._store.set_completion(workout_set_id, exercise_id, entry_id, not entry.completed)
        return not entry.completed

    def finish(self) -> WorkoutSummary | None:
        if self._active is None:
            return None

        # Duration is the last elapsed value shown, not a fresh clock read.
        self._stop_ticker()
        active = self._active

        workout_set = self._store.get(active.workout_set_id)
        if workout_set is None:
            logger.warning(
                "Active workout set %s disappeared before finish; summary is empty",
                active.workout_set_id,
            )
        summary = summarize_workout(workout_set, self._elapsed_seconds)

        self._store.reset_completions(active.workout_set_id)
        self._active = None
        self._pending_summary = summary
        logger.info(
            "Workout session finished on %s after %ss: %s sets, %s reps",
            active.workout_set_id,
            summary.duration_seconds,
            summary.total_sets,
            summary.total_reps,
        )
        return summary

    def dismiss_summary(self) -> None:
        self._pending_summary = None

    def save_summary(self) -> str | None:
        """Acknowledge a save request; nothing is persisted."""
        summary = self._pending_summary
        if summary is None:
            return None
        logger.info(
            "Save requested for %s (%s sets); workout history is not persisted",
            summary.workout_name,
            summary.total_sets,
        )
        self._pending_summary = None
        return SAVE_ACKNOWLEDGMENT

    def close(self) -> None:
        self._stop_ticker()

    def _start_ticker(self) -> None:
        if self._ticker_factory is None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; elapsed time updates on demand only")
            return
        self._ticker = self._ticker_factory()
        self._ticker.start(self.tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
