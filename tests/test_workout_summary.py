from __future__ import annotations

from liftlog.workout.model import Equipment, Exercise, SetEntry, WorkoutSet
from liftlog.workout.summary import format_elapsed, format_weight, summarize_workout


def _entry(entry_id: str, number: int, weight: float, reps: int, done: bool = True) -> SetEntry:
    return SetEntry(entry_id, number, weight, reps, completed=done)


def test_uniform_sets_use_shared_values() -> None:
    workout = WorkoutSet(
        "w",
        "Leg Day",
        (
            Exercise(
                "ex1",
                "Squat",
                tuple(_entry(f"e{i}", i, 50, 10) for i in range(1, 4)),
                equipment=Equipment("Barbell"),
            ),
        ),
    )

    summary = summarize_workout(workout, 95)

    assert summary.duration_seconds == 95
    assert summary.total_exercises == 1
    assert summary.total_sets == 3
    assert summary.total_reps == 30
    assert summary.total_weight_moved == 1500
    item = summary.exercises[0]
    assert item.formatted == "3 X 10 X 50lb"
    assert item.uniform is True
    assert item.equipment_label == "Barbell"


def test_non_uniform_sets_use_rounded_averages() -> None:
    workout = WorkoutSet(
        "w",
        "Arms",
        (
            Exercise(
                "ex1",
                "Curl",
                (_entry("a", 1, 30, 8), _entry("b", 2, 20, 12)),
            ),
        ),
    )

    summary = summarize_workout(workout, 0)

    item = summary.exercises[0]
    assert item.total_reps == 20
    assert item.total_weight == 480
    assert item.display_reps == 10
    assert item.display_weight == 24
    assert item.formatted == "2 X 10 X 24lb"
    assert (item.first_reps, item.first_weight) == (8, 30)


def test_rounding_is_half_up() -> None:
    workout = WorkoutSet(
        "w",
        "Arms",
        (
            Exercise(
                "ex1",
                "Curl",
                (_entry("a", 1, 10, 2), _entry("b", 2, 10, 3)),
            ),
        ),
    )

    item = summarize_workout(workout, 0).exercises[0]

    # 5 reps over 2 sets is 2.5
    assert item.display_reps == 3


def test_exercises_without_completed_entries_are_skipped() -> None:
    workout = WorkoutSet(
        "w",
        "Leg Day",
        (
            Exercise("ex1", "Squat", (_entry("a", 1, 50, 10, done=False),)),
            Exercise("ex2", "Lunge", (_entry("b", 1, 20, 12), _entry("c", 2, 20, 12, done=False))),
        ),
    )

    summary = summarize_workout(workout, 10)

    assert summary.total_exercises == 1
    assert summary.total_sets == 1
    assert [item.name for item in summary.exercises] == ["Lunge"]


def test_missing_workout_set_yields_zero_summary() -> None:
    summary = summarize_workout(None, 42)

    assert summary.duration_seconds == 42
    assert summary.total_exercises == 0
    assert summary.total_sets == 0
    assert summary.total_reps == 0
    assert summary.total_weight_moved == 0
    assert summary.exercises == ()
    assert summary.is_empty


def test_summary_is_deterministic() -> None:
    workout = WorkoutSet(
        "w",
        "Leg Day",
        (Exercise("ex1", "Squat", (_entry("a", 1, 62.5, 5), _entry("b", 2, 60, 5))),),
    )

    assert summarize_workout(workout, 30) == summarize_workout(workout, 30)


def test_format_helpers() -> None:
    assert format_elapsed(0) == "0:00"
    assert format_elapsed(75) == "1:15"
    assert format_elapsed(3725) == "1:02:05"
    assert format_weight(50) == "50"
    assert format_weight(50.0) == "50"
    assert format_weight(62.5) == "62.5"


def test_format_weight_keeps_every_digit_of_large_values() -> None:
    assert format_weight(102562.5) == "102562.5"
    assert format_weight(1234567.5) == "1234567.5"
    assert format_weight(2500000) == "2500000"
    assert format_weight(0.1 + 0.2) == "0.3"


def test_large_volume_is_formatted_in_full() -> None:
    workout = WorkoutSet(
        "w",
        "Leg Day",
        (Exercise("ex1", "Leg Press", (_entry("a", 1, 1025.5, 100), _entry("b", 2, 1025.5, 100))),),
    )

    summary = summarize_workout(workout, 0)

    assert summary.total_weight_moved == 205100
    assert summary.exercises[0].formatted == "2 X 100 X 1025.5lb"
