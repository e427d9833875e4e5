"""Two-step confirmation in front of destructive routine edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from liftlog.workout.session import SessionController
from liftlog.workout.store import RoutineStore, WorkoutSets

logger = logging.getLogger(__name__)

DeletionKind = Literal["workout_set", "exercise"]


class ActiveWorkoutSetDeletionError(RuntimeError):
    """Raised when deleting the workout set of the running session."""

    def __init__(self, workout_set_id: str) -> None:
        super().__init__("Finish the active workout before deleting it.")
        self.workout_set_id = workout_set_id


@dataclass(frozen=True)
class PendingDeletion:
    kind: DeletionKind
    workout_set_id: str
    exercise_id: str | None = None


class DeletionGuard:
    def __init__(self, store: RoutineStore, session: SessionController | None = None) -> None:
        self._store = store
        self._session = session
        self._pending: PendingDeletion | None = None

    @property
    def pending(self) -> PendingDeletion | None:
        return self._pending

    def request_workout_set_deletion(self, workout_set_id: str) -> PendingDeletion | None:
        if self._session is not None and self._session.is_active(workout_set_id):
            raise ActiveWorkoutSetDeletionError(workout_set_id)
        if not self._store.can_remove_workout_sets:
            return None
        self._pending = PendingDeletion(kind="workout_set", workout_set_id=workout_set_id)
        return self._pending

    def request_exercise_deletion(self, workout_set_id: str, exercise_id: str) -> PendingDeletion:
        self._pending = PendingDeletion(
            kind="exercise",
            workout_set_id=workout_set_id,
            exercise_id=exercise_id,
        )
        return self._pending

    def cancel(self) -> None:
        self._pending = None

    def confirm(self) -> WorkoutSets:
        pending = self._pending
        self._pending = None
        if pending is None:
            return self._store.workout_sets

        if pending.kind == "workout_set":
            if self._session is not None and self._session.is_active(pending.workout_set_id):
                raise ActiveWorkoutSetDeletionError(pending.workout_set_id)
            logger.info("Confirmed deletion of workout set %s", pending.workout_set_id)
            return self._store.remove_workout_set(pending.workout_set_id)

        assert pending.exercise_id is not None
        logger.info(
            "Confirmed deletion of exercise %s in %s",
            pending.exercise_id,
            pending.workout_set_id,
        )
        return self._store.remove_exercise(pending.workout_set_id, pending.exercise_id)
