"""Use-cases for workout templates."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import NotFoundError, ValidationError
from fitness_journal.domain.validation import require_id
from fitness_journal.domain.workouts import (
    Workout,
    WorkoutLine,
    WorkoutTemplate,
    WorkoutTemplatePatch,
)
from fitness_journal.services.dtos import (
    WorkoutDTO,
    WorkoutTemplateDTO,
    to_workout_dto,
    to_workout_template_dto,
)
from fitness_journal.services.exercises import ExerciseRepository, load_exercise
from fitness_journal.services.users import UserRepository, load_owned, load_user
from fitness_journal.services.workouts import WorkoutRepository

logger = logging.getLogger(__name__)


class WorkoutTemplateRepository(Protocol):
    """Persistence interface for workout templates.

    Deletion is soft: deleted templates are saved with ``deleted_at`` set.
    """

    def get_by_id(self, template_id: str) -> WorkoutTemplate | None:
        """Return a template by id, if present, including soft-deleted ones."""

    def get_all_for_user(self, user_id: str) -> list[WorkoutTemplate]:
        """Return every template of the user, including soft-deleted ones."""

    def save(self, template: WorkoutTemplate) -> None:
        """Insert or replace a template."""


def _load_active_template(
    templates: WorkoutTemplateRepository, template_id: object, user_id: str
) -> WorkoutTemplate:
    template = load_owned(templates.get_by_id, template_id, user_id, "WorkoutTemplate")
    if template.is_deleted:
        raise NotFoundError(f"WorkoutTemplate {template.id} not found")
    return template


@dataclass(frozen=True)
class CreateWorkoutTemplateRequest:
    user_id: str
    name: str


@dataclass
class CreateWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(self, request: CreateWorkoutTemplateRequest) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = WorkoutTemplate(id=new_id(), user_id=user.id, name=request.name)
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass(frozen=True)
class WorkoutTemplateRequest:
    template_id: str
    user_id: str


@dataclass
class GetWorkoutTemplateById:
    """Return an active template of the user, or None."""

    templates: WorkoutTemplateRepository

    def execute(self, request: WorkoutTemplateRequest) -> WorkoutTemplateDTO | None:
        user_id = require_id(request.user_id, "user_id")
        template = self.templates.get_by_id(
            require_id(request.template_id, "template_id")
        )
        if template is None or template.user_id != user_id or template.is_deleted:
            return None
        return to_workout_template_dto(template)


@dataclass
class GetAllWorkoutTemplatesForUser:
    templates: WorkoutTemplateRepository

    def execute(self, user_id: str) -> list[WorkoutTemplateDTO]:
        resolved_id = require_id(user_id, "user_id")
        return [
            to_workout_template_dto(template)
            for template in self.templates.get_all_for_user(resolved_id)
            if not template.is_deleted
        ]


@dataclass(frozen=True)
class UpdateWorkoutTemplateRequest:
    template_id: str
    user_id: str
    patch: WorkoutTemplatePatch


@dataclass
class UpdateWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(self, request: UpdateWorkoutTemplateRequest) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        template.apply(request.patch)
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass
class DeleteWorkoutTemplate:
    """Soft-delete a template; workouts started from it are kept."""

    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(self, request: WorkoutTemplateRequest) -> None:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        template.mark_as_deleted()
        self.templates.save(template)
        logger.info("Soft-deleted workout template %s", template.id)


@dataclass(frozen=True)
class DuplicateWorkoutTemplateRequest:
    template_id: str
    user_id: str
    name: str | None = None


@dataclass
class DuplicateWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(self, request: DuplicateWorkoutTemplateRequest) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        copy = template.duplicate(request.name)
        self.templates.save(copy)
        return to_workout_template_dto(copy)


@dataclass(frozen=True)
class AddExerciseToWorkoutTemplateRequest:
    template_id: str
    user_id: str
    exercise_id: str
    sets: int


@dataclass
class AddExerciseToWorkoutTemplate:
    templates: WorkoutTemplateRepository
    exercises: ExerciseRepository
    users: UserRepository

    def execute(
        self, request: AddExerciseToWorkoutTemplateRequest
    ) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        exercise = load_exercise(self.exercises, request.exercise_id)
        template.add_exercise(exercise.id, request.sets)
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass(frozen=True)
class TemplateExerciseRequest:
    template_id: str
    user_id: str
    exercise_id: str


@dataclass
class RemoveExerciseFromWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(self, request: TemplateExerciseRequest) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        template.remove_exercise(require_id(request.exercise_id, "exercise_id"))
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass(frozen=True)
class ReorderExerciseInWorkoutTemplateRequest:
    template_id: str
    user_id: str
    exercise_id: str
    new_index: int


@dataclass
class ReorderExerciseInWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(
        self, request: ReorderExerciseInWorkoutTemplateRequest
    ) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        template.reorder_exercise(
            require_id(request.exercise_id, "exercise_id"), request.new_index
        )
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass(frozen=True)
class UpdateExerciseInWorkoutTemplateRequest:
    template_id: str
    user_id: str
    exercise_id: str
    sets: int


@dataclass
class UpdateExerciseInWorkoutTemplate:
    templates: WorkoutTemplateRepository
    users: UserRepository

    def execute(
        self, request: UpdateExerciseInWorkoutTemplateRequest
    ) -> WorkoutTemplateDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        template.update_exercise(
            require_id(request.exercise_id, "exercise_id"), request.sets
        )
        self.templates.save(template)
        return to_workout_template_dto(template)


@dataclass(frozen=True)
class CreateWorkoutFromTemplateRequest:
    template_id: str
    user_id: str
    name: str | None = None
    performed_on: date | None = None


@dataclass
class CreateWorkoutFromTemplate:
    """Start a workout with one empty set per planned template set."""

    templates: WorkoutTemplateRepository
    workouts: WorkoutRepository
    users: UserRepository

    def execute(self, request: CreateWorkoutFromTemplateRequest) -> WorkoutDTO:
        user = load_user(self.users, request.user_id)
        template = _load_active_template(self.templates, request.template_id, user.id)
        if not template.exercises:
            raise ValidationError(f"WorkoutTemplate {template.id} has no exercises")
        performed_on = request.performed_on or date.today()
        workout_id = new_id()
        workout = Workout(
            id=workout_id,
            user_id=user.id,
            name=request.name or f"{template.name} - {performed_on.isoformat()}",
            workout_template_id=template.id,
            exercises=[
                WorkoutLine(
                    id=new_id(),
                    workout_id=workout_id,
                    exercise_id=line.exercise_id,
                    set_number=set_number,
                )
                for line in template.exercises
                for set_number in range(1, line.sets + 1)
            ],
        )
        self.workouts.save(workout)
        logger.info("Started workout %s from template %s", workout.id, template.id)
        return to_workout_dto(workout)
