"""End-of-session summary computation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from liftlog.workout.model import Exercise, WorkoutSet


@dataclass(frozen=True)
class ExerciseSummary:
    name: str
    equipment_label: str | None
    set_count: int
    total_reps: int
    total_weight: float
    display_reps: int
    display_weight: float
    first_reps: int
    first_weight: float
    uniform: bool

    @property
    def formatted(self) -> str:
        return f"{self.set_count} X {self.display_reps} X {format_weight(self.display_weight)}lb"


@dataclass(frozen=True)
class WorkoutSummary:
    workout_name: str | None
    duration_seconds: int
    total_exercises: int
    total_sets: int
    total_reps: int
    total_weight_moved: float
    exercises: tuple[ExerciseSummary, ...]

    @property
    def is_empty(self) -> bool:
        return self.total_sets == 0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_weight(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{float(value):f}".rstrip("0").rstrip(".")


def format_elapsed(total_seconds: int) -> str:
    """Render seconds as m:ss, or h:mm:ss past the hour."""
    hours, rest = divmod(max(0, int(total_seconds)), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def summarize_exercise(exercise: Exercise) -> ExerciseSummary | None:
    completed = exercise.completed_entries
    if not completed:
        return None

    set_count = len(completed)
    total_reps = sum(entry.reps for entry in completed)
    total_weight = sum(entry.reps * entry.weight for entry in completed)
    first = completed[0]
    uniform = all(
        entry.reps == first.reps and entry.weight == first.weight for entry in completed
    )

    if uniform:
        display_reps = first.reps
        display_weight = first.weight
    else:
        display_reps = _round_half_up(total_reps / set_count)
        display_weight = _round_half_up(total_weight / total_reps) if total_reps else 0

    return ExerciseSummary(
        name=exercise.name,
        equipment_label=exercise.equipment.label if exercise.equipment else None,
        set_count=set_count,
        total_reps=total_reps,
        total_weight=total_weight,
        display_reps=display_reps,
        display_weight=display_weight,
        first_reps=first.reps,
        first_weight=first.weight,
        uniform=uniform,
    )


def summarize_workout(workout_set: WorkoutSet | None, duration_seconds: int) -> WorkoutSummary:
    """Reduce completed entries of a workout set into session totals.

    A missing workout set (deleted while active) yields an all-zero summary.
    """
    exercises: list[ExerciseSummary] = []
    for exercise in workout_set.exercises if workout_set is not None else ():
        item = summarize_exercise(exercise)
        if item is not None:
            exercises.append(item)

    return WorkoutSummary(
        workout_name=workout_set.name if workout_set is not None else None,
        duration_seconds=max(0, int(duration_seconds)),
        total_exercises=len(exercises),
        total_sets=sum(item.set_count for item in exercises),
        total_reps=sum(item.total_reps for item in exercises),
        total_weight_moved=sum(item.total_weight for item in exercises),
        exercises=tuple(exercises),
    )
