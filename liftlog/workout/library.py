"""Built-in routine templates, including the default Leg Day."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from liftlog.workout.model import Equipment, EquipmentKind, Exercise, SetEntry, WorkoutSet


@dataclass(frozen=True)
class ExerciseTemplate:
    name: str
    equipment: EquipmentKind
    sets: int
    reps: int
    weight: float


@dataclass(frozen=True)
class RoutineTemplate:
    key: str
    name: str
    exercises: tuple[ExerciseTemplate, ...]


TEMPLATES: tuple[RoutineTemplate, ...] = (
    RoutineTemplate(
        key="leg_day",
        name="Leg Day",
        exercises=(
            ExerciseTemplate("Deadlift", "Barbell", 3, 8, 30),
            ExerciseTemplate("Squat", "Barbell", 6, 12, 75),
            ExerciseTemplate("Hip Abductor", "Machine", 4, 12, 120),
            ExerciseTemplate("Leg Press", "Machine", 6, 12, 160),
            ExerciseTemplate("Hip Thrust", "Barbell", 3, 12, 75),
            ExerciseTemplate("Bulgarian Split Squat", "Dumbbell", 4, 12, 65),
            ExerciseTemplate("Seated Calf Raise", "Machine", 4, 12, 35),
        ),
    ),
    RoutineTemplate(
        key="push_day",
        name="Push Day",
        exercises=(
            ExerciseTemplate("Bench Press", "Barbell", 4, 8, 135),
            ExerciseTemplate("Overhead Press", "Dumbbell", 3, 10, 40),
            ExerciseTemplate("Cable Fly", "Cable", 3, 12, 25),
            ExerciseTemplate("Push-up", "Bodyweight", 3, 15, 0),
        ),
    ),
    RoutineTemplate(
        key="pull_day",
        name="Pull Day",
        exercises=(
            ExerciseTemplate("Barbell Row", "Barbell", 4, 8, 115),
            ExerciseTemplate("Lat Pulldown", "Machine", 3, 10, 100),
            ExerciseTemplate("Kettlebell Swing", "Kettlebell", 3, 15, 35),
            ExerciseTemplate("Band Pull-apart", "Bands", 3, 20, 0),
        ),
    ),
)

DEFAULT_TEMPLATE_KEY = "leg_day"


def list_templates() -> tuple[RoutineTemplate, ...]:
    return TEMPLATES


def build_workout_set_from_template(
    template_key: str,
    id_factory: Callable[[], str],
) -> WorkoutSet:
    template = next((item for item in TEMPLATES if item.key == template_key), None)
    if template is None:
        raise ValueError(f"Unknown routine template '{template_key}'")

    exercises: list[Exercise] = []
    for item in template.exercises:
        entries = tuple(
            SetEntry(
                id=id_factory(),
                set_number=number,
                weight=item.weight,
                reps=item.reps,
            )
            for number in range(1, item.sets + 1)
        )
        exercises.append(
            Exercise(
                id=id_factory(),
                name=item.name,
                entries=entries,
                equipment=Equipment(item.equipment),
            )
        )
    return WorkoutSet(id=id_factory(), name=template.name, exercises=tuple(exercises))
