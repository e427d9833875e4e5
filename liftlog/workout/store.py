"""In-memory routine store with structural edit operations.

Every operation returns the updated collection. Unknown ids are no-ops, so
the store never raises for stale edits coming from the UI; completion policy
lives in :mod:`liftlog.workout.session`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable, Literal
from uuid import uuid4

from liftlog.workout.library import DEFAULT_TEMPLATE_KEY, build_workout_set_from_template
from liftlog.workout.model import DEFAULT_EQUIPMENT, Equipment, Exercise, SetEntry, WorkoutSet

logger = logging.getLogger(__name__)

NEW_WORKOUT_NAME = "New Workout"
DEFAULT_WEIGHT = 50
DEFAULT_REPS = 10

EntryField = Literal["weight", "reps"]
WorkoutSets = tuple[WorkoutSet, ...]


def _new_id() -> str:
    return uuid4().hex


def coerce_weight(raw: object) -> float:
    """Non-negative weight; unparseable input maps to 0."""
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value) or value < 0:
        return 0
    return int(value) if value.is_integer() else value


def coerce_reps(raw: object) -> int:
    """Positive rep count; unparseable input maps to 1."""
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(value):
        return 1
    return max(1, int(value))


class RoutineStore:
    def __init__(
        self,
        workout_sets: WorkoutSets | list[WorkoutSet] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._new_id = id_factory or _new_id
        if workout_sets is None:
            workout_sets = (build_workout_set_from_template(DEFAULT_TEMPLATE_KEY, self._new_id),)
        self._workout_sets: WorkoutSets = tuple(workout_sets)
        self._selected_id: str | None = (
            self._workout_sets[0].id if self._workout_sets else None
        )

    @property
    def workout_sets(self) -> WorkoutSets:
        return self._workout_sets

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected(self) -> WorkoutSet | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    @property
    def can_remove_workout_sets(self) -> bool:
        return len(self._workout_sets) > 1

    def get(self, set_id: str) -> WorkoutSet | None:
        return next((ws for ws in self._workout_sets if ws.id == set_id), None)

    def select(self, set_id: str) -> WorkoutSets:
        if self.get(set_id) is not None:
            self._selected_id = set_id
        return self._workout_sets

    # Workout sets

    def add_workout_set(self) -> WorkoutSets:
        workout_set = WorkoutSet(id=self._new_id(), name=NEW_WORKOUT_NAME)
        return self._append_and_select(workout_set)

    def add_workout_set_from_template(self, template_key: str) -> WorkoutSets:
        workout_set = build_workout_set_from_template(template_key, self._new_id)
        return self._append_and_select(workout_set)

    def rename_workout_set(self, set_id: str, name: str) -> WorkoutSets:
        return self._update_set(set_id, lambda ws: replace(ws, name=name))

    def remove_workout_set(self, set_id: str) -> WorkoutSets:
        if self.get(set_id) is None:
            return self._workout_sets
        if not self.can_remove_workout_sets:
            logger.info("Refusing to remove the last workout set %s", set_id)
            return self._workout_sets

        remaining = tuple(ws for ws in self._workout_sets if ws.id != set_id)
        self._workout_sets = remaining
        if self._selected_id == set_id:
            self._selected_id = remaining[0].id
        logger.info("Removed workout set %s", set_id)
        return self._workout_sets

    # Exercises

    def add_exercise(self, set_id: str) -> WorkoutSets:
        exercise = Exercise(
            id=self._new_id(),
            name="",
            equipment=DEFAULT_EQUIPMENT,
            entries=(
                SetEntry(
                    id=self._new_id(),
                    set_number=1,
                    weight=DEFAULT_WEIGHT,
                    reps=DEFAULT_REPS,
                ),
            ),
        )
        return self._update_set(
            set_id, lambda ws: replace(ws, exercises=ws.exercises + (exercise,))
        )

    def rename_exercise(self, set_id: str, exercise_id: str, name: str) -> WorkoutSets:
        return self._update_exercise(set_id, exercise_id, lambda ex: replace(ex, name=name))

    def set_exercise_equipment(
        self,
        set_id: str,
        exercise_id: str,
        equipment: Equipment | None,
    ) -> WorkoutSets:
        return self._update_exercise(
            set_id, exercise_id, lambda ex: replace(ex, equipment=equipment)
        )

    def set_exercise_notes(self, set_id: str, exercise_id: str, notes: str | None) -> WorkoutSets:
        return self._update_exercise(
            set_id, exercise_id, lambda ex: replace(ex, notes=notes or None)
        )

    def remove_exercise(self, set_id: str, exercise_id: str) -> WorkoutSets:
        return self._update_set(
            set_id,
            lambda ws: replace(
                ws, exercises=tuple(ex for ex in ws.exercises if ex.id != exercise_id)
            ),
        )

    # Set entries

    def add_set_entry(self, set_id: str, exercise_id: str) -> WorkoutSets:
        def _append(exercise: Exercise) -> Exercise:
            weight = exercise.entries[-1].weight if exercise.entries else DEFAULT_WEIGHT
            entry = SetEntry(
                id=self._new_id(),
                set_number=len(exercise.entries) + 1,
                weight=weight,
                reps=DEFAULT_REPS,
            )
            return replace(exercise, entries=exercise.entries + (entry,))

        return self._update_exercise(set_id, exercise_id, _append)

    def update_set_entry_field(
        self,
        set_id: str,
        exercise_id: str,
        entry_id: str,
        field: EntryField,
        value: object,
    ) -> WorkoutSets:
        if field == "weight":
            weight = coerce_weight(value)
            return self._update_entry(
                set_id, exercise_id, entry_id, lambda e: replace(e, weight=weight)
            )
        if field == "reps":
            reps = coerce_reps(value)
            return self._update_entry(
                set_id, exercise_id, entry_id, lambda e: replace(e, reps=reps)
            )
        logger.warning("Ignoring update of unsupported set entry field %r", field)
        return self._workout_sets

    def remove_set_entry(self, set_id: str, exercise_id: str, entry_id: str) -> WorkoutSets:
        return self._update_exercise(
            set_id,
            exercise_id,
            lambda ex: replace(
                ex, entries=tuple(entry for entry in ex.entries if entry.id != entry_id)
            ),
        )

    # Completion flags, written only by the session controller

    def set_completion(
        self,
        set_id: str,
        exercise_id: str,
        entry_id: str,
        completed: bool,
    ) -> WorkoutSets:
        return self._update_entry(
            set_id, exercise_id, entry_id, lambda e: replace(e, completed=completed)
        )

    def reset_completions(self, set_id: str) -> WorkoutSets:
        def _reset(workout_set: WorkoutSet) -> WorkoutSet:
            return replace(
                workout_set,
                exercises=tuple(
                    replace(
                        ex,
                        entries=tuple(replace(e, completed=False) for e in ex.entries),
                    )
                    for ex in workout_set.exercises
                ),
            )

        return self._update_set(set_id, _reset)

    def _append_and_select(self, workout_set: WorkoutSet) -> WorkoutSets:
        self._workout_sets = self._workout_sets + (workout_set,)
        self._selected_id = workout_set.id
        return self._workout_sets

    def _update_set(
        self,
        set_id: str,
        change: Callable[[WorkoutSet], WorkoutSet],
    ) -> WorkoutSets:
        self._workout_sets = tuple(
            change(ws) if ws.id == set_id else ws for ws in self._workout_sets
        )
        return self._workout_sets

    def _update_exercise(
        self,
        set_id: str,
        exercise_id: str,
        change: Callable[[Exercise], Exercise],
    ) -> WorkoutSets:
        return self._update_set(
            set_id,
            lambda ws: replace(
                ws,
                exercises=tuple(
                    change(ex) if ex.id == exercise_id else ex for ex in ws.exercises
                ),
            ),
        )

    def _update_entry(
        self,
        set_id: str,
        exercise_id: str,
        entry_id: str,
        change: Callable[[SetEntry], SetEntry],
    ) -> WorkoutSets:
        return self._update_exercise(
            set_id,
            exercise_id,
            lambda ex: replace(
                ex,
                entries=tuple(change(e) if e.id == entry_id else e for e in ex.entries),
            ),
        )
