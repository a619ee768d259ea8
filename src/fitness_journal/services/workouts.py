"""Use-cases for performed workouts."""

import logging
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.validation import require_id
from fitness_journal.domain.workouts import Workout, WorkoutLinePatch, WorkoutPatch
from fitness_journal.services.dtos import WorkoutDTO, to_workout_dto
from fitness_journal.services.exercises import ExerciseRepository, load_exercise
from fitness_journal.services.users import (
    UserRepository,
    load_owned,
    load_user,
    visible_to,
)

logger = logging.getLogger(__name__)


class WorkoutRepository(Protocol):
    """Persistence interface for workouts."""

    def get_by_id(self, workout_id: str) -> Workout | None:
        """Return a workout by id, if present."""

    def get_all_for_user(self, user_id: str) -> list[Workout]:
        """Return every workout of the user."""

    def get_by_template_for_user(
        self, template_id: str, user_id: str
    ) -> list[Workout]:
        """Return the user's workouts started from a template."""

    def save(self, workout: Workout) -> None:
        """Insert or replace a workout."""

    def delete(self, workout_id: str) -> None:
        """Delete a workout by id."""


@dataclass(frozen=True)
class WorkoutRequest:
    workout_id: str
    user_id: str


@dataclass
class GetWorkoutById:
    workouts: WorkoutRepository

    def execute(self, request: WorkoutRequest) -> WorkoutDTO | None:
        user_id = require_id(request.user_id, "user_id")
        workout = visible_to(
            self.workouts.get_by_id(require_id(request.workout_id, "workout_id")),
            user_id,
        )
        return to_workout_dto(workout) if workout else None


@dataclass
class GetAllWorkoutsForUser:
    workouts: WorkoutRepository

    def execute(self, user_id: str) -> list[WorkoutDTO]:
        resolved_id = require_id(user_id, "user_id")
        workouts = sorted(
            self.workouts.get_all_for_user(resolved_id),
            key=lambda workout: workout.created_at,
            reverse=True,
        )
        return [to_workout_dto(workout) for workout in workouts]


@dataclass(frozen=True)
class GetWorkoutsByTemplateRequest:
    template_id: str
    user_id: str


@dataclass
class GetWorkoutsByTemplate:
    workouts: WorkoutRepository

    def execute(self, request: GetWorkoutsByTemplateRequest) -> list[WorkoutDTO]:
        user_id = require_id(request.user_id, "user_id")
        template_id = require_id(request.template_id, "template_id")
        return [
            to_workout_dto(workout)
            for workout in self.workouts.get_by_template_for_user(
                template_id, user_id
            )
        ]


@dataclass(frozen=True)
class UpdateWorkoutRequest:
    workout_id: str
    user_id: str
    patch: WorkoutPatch


@dataclass
class UpdateWorkout:
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: UpdateWorkoutRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        workout.apply(request.patch)
        self.workouts.save(workout)
        return to_workout_dto(workout)


@dataclass
class DeleteWorkout:
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: WorkoutRequest) -> None:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        self.workouts.delete(workout.id)
        logger.info("Deleted workout %s", workout.id)


@dataclass(frozen=True)
class AddExerciseToWorkoutRequest:
    workout_id: str
    user_id: str
    exercise_id: str
    reps: int = 0
    weight_in_kg: float = 0.0


@dataclass
class AddExerciseToWorkout:
    """Append the next set of an exercise to a workout."""

    workouts: WorkoutRepository
    exercises: ExerciseRepository
    users: UserRepository

    def execute(self, request: AddExerciseToWorkoutRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        exercise = load_exercise(self.exercises, request.exercise_id)
        workout.add_set(exercise.id, request.reps, request.weight_in_kg)
        self.workouts.save(workout)
        return to_workout_dto(workout)


@dataclass(frozen=True)
class UpdateExerciseInWorkoutRequest:
    workout_id: str
    user_id: str
    exercise_id: str
    set_number: int
    patch: WorkoutLinePatch


@dataclass
class UpdateExerciseInWorkout:
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: UpdateExerciseInWorkoutRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        workout.update_exercise(
            require_id(request.exercise_id, "exercise_id"),
            request.set_number,
            request.patch,
        )
        self.workouts.save(workout)
        return to_workout_dto(workout)


@dataclass(frozen=True)
class RemoveExerciseFromWorkoutRequest:
    workout_id: str
    user_id: str
    exercise_id: str


@dataclass
class RemoveExerciseFromWorkout:
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: RemoveExerciseFromWorkoutRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        workout.remove_exercise(require_id(request.exercise_id, "exercise_id"))
        self.workouts.save(workout)
        return to_workout_dto(workout)


@dataclass(frozen=True)
class RemoveSetFromWorkoutRequest:
    workout_id: str
    user_id: str
    exercise_id: str
    set_number: int


@dataclass
class RemoveSetFromWorkout:
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: RemoveSetFromWorkoutRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        workout = load_owned(
            self.workouts.get_by_id, request.workout_id, user.id, "Workout"
        )
        workout.remove_set(
            require_id(request.exercise_id, "exercise_id"), request.set_number
        )
        self.workouts.save(workout)
        return to_workout_dto(workout)
