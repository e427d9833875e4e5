"""Workout routine domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args


EquipmentKind = Literal[
    "Barbell",
    "Dumbbell",
    "Machine",
    "Cable",
    "Bodyweight",
    "Kettlebell",
    "Bands",
    "Other",
]

EQUIPMENT_KINDS: tuple[EquipmentKind, ...] = get_args(EquipmentKind)


@dataclass(frozen=True)
class Equipment:
    kind: EquipmentKind
    custom_label: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in EQUIPMENT_KINDS:
            raise ValueError(f"Unknown equipment kind '{self.kind}'")
        if self.kind == "Other" and not (self.custom_label or "").strip():
            raise ValueError("Other equipment needs a custom label")
        if self.kind != "Other" and self.custom_label is not None:
            raise ValueError("Only Other equipment carries a custom label")

    @property
    def label(self) -> str:
        if self.kind == "Other":
            assert self.custom_label is not None
            return self.custom_label.strip()
        return self.kind

    @classmethod
    def parse(cls, text: str | None) -> Equipment | None:
        """Map a free-text label onto the closed set, falling back to Other."""
        cleaned = (text or "").strip()
        if not cleaned:
            return None
        for kind in EQUIPMENT_KINDS:
            if kind != "Other" and kind.lower() == cleaned.lower():
                return cls(kind)
        return cls("Other", cleaned)


DEFAULT_EQUIPMENT = Equipment("Barbell")


@dataclass(frozen=True)
class SetEntry:
    id: str
    set_number: int
    weight: float
    reps: int
    completed: bool = False

    @property
    def volume(self) -> float:
        return self.reps * self.weight


@dataclass(frozen=True)
class Exercise:
    id: str
    name: str
    entries: tuple[SetEntry, ...] = ()
    notes: str | None = None
    equipment: Equipment | None = None

    @property
    def completed_entries(self) -> tuple[SetEntry, ...]:
        return tuple(entry for entry in self.entries if entry.completed)

    def find_entry(self, entry_id: str) -> SetEntry | None:
        return next((entry for entry in self.entries if entry.id == entry_id), None)


@dataclass(frozen=True)
class WorkoutSet:
    id: str
    name: str
    exercises: tuple[Exercise, ...] = ()

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        return next((ex for ex in self.exercises if ex.id == exercise_id), None)

    @property
    def total_entries(self) -> int:
        return sum(len(exercise.entries) for exercise in self.exercises)
