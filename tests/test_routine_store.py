from __future__ import annotations

from itertools import count
from typing import Callable

from liftlog.workout.model import Equipment, Exercise, SetEntry, WorkoutSet
from liftlog.workout.store import RoutineStore, coerce_reps, coerce_weight


def _ids() -> Callable[[], str]:
    counter = count(1)
    return lambda: f"id{next(counter)}"


def _store() -> RoutineStore:
    squat = Exercise(
        id="ex1",
        name="Squat",
        equipment=Equipment("Barbell"),
        entries=(
            SetEntry("e1", 1, 75, 12),
            SetEntry("e2", 2, 80, 10),
        ),
    )
    return RoutineStore(
        workout_sets=(
            WorkoutSet("legs", "Leg Day", (squat,)),
            WorkoutSet("push", "Push Day"),
        ),
        id_factory=_ids(),
    )


def test_default_store_is_seeded_with_leg_day() -> None:
    store = RoutineStore(id_factory=_ids())

    assert len(store.workout_sets) == 1
    assert store.selected is not None
    assert store.selected.name == "Leg Day"
    assert [ex.name for ex in store.selected.exercises][:2] == ["Deadlift", "Squat"]


def test_add_workout_set_appends_and_selects() -> None:
    store = _store()

    sets = store.add_workout_set()

    assert len(sets) == 3
    assert sets[-1].name == "New Workout"
    assert sets[-1].exercises == ()
    assert store.selected_id == sets[-1].id


def test_add_exercise_has_one_default_entry() -> None:
    store = _store()

    store.add_exercise("push")

    exercise = store.get("push").exercises[0]
    assert exercise.name == ""
    assert exercise.equipment == Equipment("Barbell")
    assert len(exercise.entries) == 1
    entry = exercise.entries[0]
    assert (entry.set_number, entry.weight, entry.reps, entry.completed) == (1, 50, 10, False)


def test_add_set_entry_copies_previous_weight_and_numbers_after_count() -> None:
    store = _store()

    store.add_set_entry("legs", "ex1")

    entries = store.get("legs").exercises[0].entries
    assert entries[-1].set_number == 3
    assert entries[-1].weight == 80
    assert entries[-1].reps == 10


def test_set_number_is_count_plus_one_after_removal() -> None:
    store = _store()

    store.remove_set_entry("legs", "ex1", "e1")
    store.add_set_entry("legs", "ex1")

    entries = store.get("legs").exercises[0].entries
    assert [e.set_number for e in entries] == [2, 2]


def test_add_set_entry_to_empty_exercise_defaults_weight() -> None:
    store = _store()
    store.remove_set_entry("legs", "ex1", "e1")
    store.remove_set_entry("legs", "ex1", "e2")

    store.add_set_entry("legs", "ex1")

    entry = store.get("legs").exercises[0].entries[0]
    assert entry.set_number == 1
    assert entry.weight == 50


def test_field_updates_are_coerced() -> None:
    store = _store()

    store.update_set_entry_field("legs", "ex1", "e1", "weight", "-5")
    store.update_set_entry_field("legs", "ex1", "e2", "reps", "abc")

    entries = store.get("legs").exercises[0].entries
    assert entries[0].weight == 0
    assert entries[1].reps == 1


def test_coercion_helpers() -> None:
    assert coerce_weight("62.5") == 62.5
    assert coerce_weight(100.0) == 100
    assert coerce_weight(None) == 0
    assert coerce_weight("nan") == 0
    assert coerce_reps("12") == 12
    assert coerce_reps(0) == 1
    assert coerce_reps(8.9) == 8


def test_renames_equipment_and_notes() -> None:
    store = _store()

    store.rename_workout_set("legs", "Lower Body")
    store.rename_exercise("legs", "ex1", "Front Squat")
    store.set_exercise_equipment("legs", "ex1", Equipment("Other", "Safety bar"))
    store.set_exercise_notes("legs", "ex1", "Pause at the bottom")

    workout_set = store.get("legs")
    exercise = workout_set.exercises[0]
    assert workout_set.name == "Lower Body"
    assert exercise.name == "Front Squat"
    assert exercise.equipment.label == "Safety bar"
    assert exercise.notes == "Pause at the bottom"


def test_unknown_ids_are_noops() -> None:
    store = _store()
    before = store.workout_sets

    store.rename_workout_set("missing", "x")
    store.rename_exercise("legs", "missing", "x")
    store.add_set_entry("legs", "missing")
    store.update_set_entry_field("legs", "ex1", "missing", "reps", 5)
    store.remove_set_entry("legs", "ex1", "missing")
    store.remove_exercise("missing", "ex1")
    store.remove_workout_set("missing")

    assert store.workout_sets == before


def test_unsupported_entry_field_is_a_noop() -> None:
    store = _store()
    before = store.workout_sets

    result = store.update_set_entry_field("legs", "ex1", "e1", "completed", True)  # type: ignore[arg-type]

    assert result == before
    assert store.workout_sets == before


def test_removing_selected_workout_set_reselects_first_remaining() -> None:
    store = _store()
    store.select("push")

    store.remove_workout_set("push")

    assert [ws.id for ws in store.workout_sets] == ["legs"]
    assert store.selected_id == "legs"


def test_last_workout_set_cannot_be_removed() -> None:
    store = _store()
    store.remove_workout_set("push")

    store.remove_workout_set("legs")

    assert [ws.id for ws in store.workout_sets] == ["legs"]
    assert store.can_remove_workout_sets is False


def test_reset_completions_clears_only_that_workout_set() -> None:
    store = _store()
    store.add_exercise("push")
    push_exercise = store.get("push").exercises[0]
    store.set_completion("legs", "ex1", "e1", True)
    store.set_completion("push", push_exercise.id, push_exercise.entries[0].id, True)

    store.reset_completions("legs")

    assert not any(e.completed for e in store.get("legs").exercises[0].entries)
    assert store.get("push").exercises[0].entries[0].completed is True


def test_add_workout_set_from_template() -> None:
    store = _store()

    store.add_workout_set_from_template("push_day")

    assert store.selected is not None
    assert store.selected.name == "Push Day"
    assert store.selected.total_entries > 0
