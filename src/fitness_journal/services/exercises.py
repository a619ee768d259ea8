"""Use-cases for the exercise catalogue."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import NotFoundError
from fitness_journal.domain.validation import require_id
from fitness_journal.domain.workouts import Exercise, ExercisePatch
from fitness_journal.services.dtos import ExerciseDTO, to_exercise_dto
from fitness_journal.services.meals import require_id_list


class ExerciseRepository(Protocol):
    """Persistence interface for exercises."""

    def get_by_id(self, exercise_id: str) -> Exercise | None:
        """Return an exercise by id, if present."""

    def get_by_ids(self, exercise_ids: Sequence[str]) -> list[Exercise]:
        """Return the exercises that exist among the given ids."""

    def get_all(self) -> list[Exercise]:
        """Return every exercise."""

    def save(self, exercise: Exercise) -> None:
        """Insert or replace an exercise."""

    def delete(self, exercise_id: str) -> None:
        """Delete an exercise by id."""


def load_exercise(exercises: ExerciseRepository, exercise_id: object) -> Exercise:
    resolved_id = require_id(exercise_id, "exercise_id")
    exercise = exercises.get_by_id(resolved_id)
    if exercise is None:
        raise NotFoundError(f"Exercise {resolved_id} not found")
    return exercise


@dataclass
class CreateExercise:
    exercises: ExerciseRepository

    def execute(self, name: str) -> ExerciseDTO:
        exercise = Exercise(id=new_id(), name=name)
        self.exercises.save(exercise)
        return to_exercise_dto(exercise)


@dataclass
class GetExerciseById:
    exercises: ExerciseRepository

    def execute(self, exercise_id: str) -> ExerciseDTO | None:
        exercise = self.exercises.get_by_id(require_id(exercise_id, "exercise_id"))
        return to_exercise_dto(exercise) if exercise else None


@dataclass
class GetExercisesByIds:
    exercises: ExerciseRepository

    def execute(self, exercise_ids: list[str]) -> list[ExerciseDTO]:
        ids = require_id_list(exercise_ids, "exercise_id")
        return [to_exercise_dto(x) for x in self.exercises.get_by_ids(ids)]


@dataclass
class GetAllExercises:
    exercises: ExerciseRepository

    def execute(self) -> list[ExerciseDTO]:
        return [to_exercise_dto(x) for x in self.exercises.get_all()]


@dataclass(frozen=True)
class UpdateExerciseRequest:
    exercise_id: str
    patch: ExercisePatch


@dataclass
class UpdateExercise:
    exercises: ExerciseRepository

    def execute(self, request: UpdateExerciseRequest) -> ExerciseDTO:
        exercise = load_exercise(self.exercises, request.exercise_id)
        exercise.apply(request.patch)
        self.exercises.save(exercise)
        return to_exercise_dto(exercise)


@dataclass
class DeleteExercise:
    exercises: ExerciseRepository

    def execute(self, exercise_id: str) -> None:
        exercise = load_exercise(self.exercises, exercise_id)
        self.exercises.delete(exercise.id)
