"""Exercises, workout templates and performed workouts."""

from dataclasses import dataclass, field
from datetime import datetime

from fitness_journal.domain.common import new_id, utc_now
from fitness_journal.domain.errors import NotFoundError, ValidationError
from fitness_journal.domain.validation import (
    require_id,
    require_name,
    require_non_negative,
    require_positive_int,
)


@dataclass(frozen=True)
class ExercisePatch:
    name: str | None = None


@dataclass
class Exercise:
    """A movement that can be added to templates and workouts."""

    id: str
    name: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.name = require_name(self.name)

    def apply(self, patch: ExercisePatch) -> None:
        if patch.name is None:
            raise ValidationError("Exercise: no changes provided")
        self.name = require_name(patch.name)
        self.updated_at = utc_now()


@dataclass(frozen=True)
class WorkoutLinePatch:
    """Partial update for a performed set."""

    reps: int | None = None
    weight_in_kg: float | None = None


@dataclass
class WorkoutLine:
    """One performed set of an exercise."""

    id: str
    workout_id: str
    exercise_id: str
    set_number: int
    reps: int = 0
    weight_in_kg: float = 0.0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.workout_id = require_id(self.workout_id, "workout_id")
        self.exercise_id = require_id(self.exercise_id, "exercise_id")
        self.set_number = require_positive_int(self.set_number, "set_number")
        self.reps = _require_reps(self.reps)
        self.weight_in_kg = require_non_negative(self.weight_in_kg, "weight_in_kg")

    def apply(self, patch: WorkoutLinePatch) -> None:
        if patch.reps is None and patch.weight_in_kg is None:
            raise ValidationError("WorkoutLine: no changes provided")
        if patch.reps is not None:
            self.reps = _require_reps(patch.reps)
        if patch.weight_in_kg is not None:
            self.weight_in_kg = require_non_negative(
                patch.weight_in_kg, "weight_in_kg"
            )
        self.updated_at = utc_now()


@dataclass(frozen=True)
class WorkoutPatch:
    name: str | None = None


@dataclass
class Workout:
    """A performed session, optionally started from a template."""

    id: str
    user_id: str
    name: str
    exercises: list[WorkoutLine] = field(default_factory=list)
    workout_template_id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        self.name = require_name(self.name)
        if self.workout_template_id is not None:
            self.workout_template_id = require_id(
                self.workout_template_id, "workout_template_id"
            )

    def apply(self, patch: WorkoutPatch) -> None:
        if patch.name is None:
            raise ValidationError("Workout: no changes provided")
        self.name = require_name(patch.name)
        self.updated_at = utc_now()

    def sets_for(self, exercise_id: str) -> list[WorkoutLine]:
        return sorted(
            (line for line in self.exercises if line.exercise_id == exercise_id),
            key=lambda line: line.set_number,
        )

    def add_exercise(self, line: WorkoutLine) -> None:
        """Append a set; the (exercise, set number) pair must be new."""
        for existing in self.exercises:
            if (
                existing.exercise_id == line.exercise_id
                and existing.set_number == line.set_number
            ):
                raise ValidationError(
                    f"Set {line.set_number} of exercise {line.exercise_id} exists"
                )
        self.exercises.append(line)
        self.updated_at = utc_now()

    def add_set(
        self, exercise_id: str, reps: int = 0, weight_in_kg: float = 0.0
    ) -> WorkoutLine:
        """Append the next set number for an exercise and return the line."""
        line = WorkoutLine(
            id=new_id(),
            workout_id=self.id,
            exercise_id=exercise_id,
            set_number=max(
                (done.set_number for done in self.sets_for(exercise_id)), default=0
            )
            + 1,
            reps=reps,
            weight_in_kg=weight_in_kg,
        )
        self.add_exercise(line)
        return line

    def remove_exercise(self, exercise_id: str) -> None:
        remaining = [line for line in self.exercises if line.exercise_id != exercise_id]
        if len(remaining) == len(self.exercises):
            raise ValidationError(f"Exercise {exercise_id} is not in this workout")
        self.exercises = remaining
        self.updated_at = utc_now()

    def remove_set(self, exercise_id: str, set_number: int) -> None:
        """Remove one set and renumber the remaining sets of that exercise."""
        set_number = require_positive_int(set_number, "set_number")
        sets = self.sets_for(exercise_id)
        if not sets:
            raise ValidationError(f"Exercise {exercise_id} is not in this workout")
        target = next((line for line in sets if line.set_number == set_number), None)
        if target is None:
            raise ValidationError(
                f"Set {set_number} of exercise {exercise_id} does not exist"
            )
        self.exercises.remove(target)
        for index, line in enumerate(self.sets_for(exercise_id), start=1):
            line.set_number = index
        self.updated_at = utc_now()

    def update_exercise(
        self, exercise_id: str, set_number: int, patch: WorkoutLinePatch
    ) -> WorkoutLine:
        for line in self.exercises:
            if line.exercise_id == exercise_id and line.set_number == set_number:
                line.apply(patch)
                self.updated_at = utc_now()
                return line
        raise ValidationError(
            f"Set {set_number} of exercise {exercise_id} does not exist"
        )


@dataclass
class WorkoutTemplateLine:
    """An exercise and its planned number of sets."""

    id: str
    template_id: str
    exercise_id: str
    sets: int
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.template_id = require_id(self.template_id, "template_id")
        self.exercise_id = require_id(self.exercise_id, "exercise_id")
        self.sets = require_positive_int(self.sets, "sets")


@dataclass(frozen=True)
class WorkoutTemplatePatch:
    name: str | None = None


@dataclass
class WorkoutTemplate:
    """A reusable workout blueprint. Deletion is soft."""

    id: str
    user_id: str
    name: str
    exercises: list[WorkoutTemplateLine] = field(default_factory=list)
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        self.name = require_name(self.name)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_as_deleted(self) -> None:
        now = utc_now()
        self.deleted_at = now
        self.updated_at = now

    def apply(self, patch: WorkoutTemplatePatch) -> None:
        if patch.name is None:
            raise ValidationError("WorkoutTemplate: no changes provided")
        self.name = require_name(patch.name)
        self.updated_at = utc_now()

    def add_exercise(self, exercise_id: str, sets: int) -> WorkoutTemplateLine:
        if any(line.exercise_id == exercise_id for line in self.exercises):
            raise ValidationError(f"Exercise {exercise_id} is already in template")
        line = WorkoutTemplateLine(
            id=new_id(), template_id=self.id, exercise_id=exercise_id, sets=sets
        )
        self.exercises.append(line)
        self.updated_at = utc_now()
        return line

    def remove_exercise(self, exercise_id: str) -> None:
        self.exercises.remove(self._find(exercise_id))
        self.updated_at = utc_now()

    def update_exercise(self, exercise_id: str, sets: int) -> WorkoutTemplateLine:
        line = self._find(exercise_id)
        line.sets = require_positive_int(sets, "sets")
        line.updated_at = utc_now()
        self.updated_at = line.updated_at
        return line

    def reorder_exercise(self, exercise_id: str, new_index: int) -> None:
        line = self._find(exercise_id)
        if (
            isinstance(new_index, bool)
            or not isinstance(new_index, int)
            or not 0 <= new_index < len(self.exercises)
        ):
            raise ValidationError(f"Invalid position: {new_index}")
        self.exercises.remove(line)
        self.exercises.insert(new_index, line)
        self.updated_at = utc_now()

    def duplicate(self, name: str | None = None) -> "WorkoutTemplate":
        template_id = new_id()
        return WorkoutTemplate(
            id=template_id,
            user_id=self.user_id,
            name=name if name is not None else f"{self.name} (Copy)",
            exercises=[
                WorkoutTemplateLine(
                    id=new_id(),
                    template_id=template_id,
                    exercise_id=line.exercise_id,
                    sets=line.sets,
                )
                for line in self.exercises
            ],
        )

    def _find(self, exercise_id: str) -> WorkoutTemplateLine:
        for line in self.exercises:
            if line.exercise_id == exercise_id:
                return line
        raise NotFoundError(f"Exercise {exercise_id} is not in template {self.id}")


def _require_reps(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("reps must be a non-negative integer")
    return value
