"""Tests for exercise, workout template and workout use-cases."""

from datetime import date

import pytest

from fitness_journal.containers import Repositories
from fitness_journal.domain.errors import AuthError, NotFoundError, ValidationError
from fitness_journal.domain.workouts import (
    ExercisePatch,
    WorkoutLinePatch,
    WorkoutTemplatePatch,
)
from fitness_journal.services.dtos import WorkoutTemplateDTO
from fitness_journal.services.exercises import (
    CreateExercise,
    DeleteExercise,
    GetAllExercises,
    GetExerciseById,
    UpdateExercise,
    UpdateExerciseRequest,
)
from fitness_journal.services.workout_templates import (
    AddExerciseToWorkoutTemplate,
    AddExerciseToWorkoutTemplateRequest,
    CreateWorkoutFromTemplate,
    CreateWorkoutFromTemplateRequest,
    CreateWorkoutTemplate,
    CreateWorkoutTemplateRequest,
    DeleteWorkoutTemplate,
    DuplicateWorkoutTemplate,
    DuplicateWorkoutTemplateRequest,
    GetAllWorkoutTemplatesForUser,
    GetWorkoutTemplateById,
    RemoveExerciseFromWorkoutTemplate,
    ReorderExerciseInWorkoutTemplate,
    ReorderExerciseInWorkoutTemplateRequest,
    TemplateExerciseRequest,
    UpdateExerciseInWorkoutTemplate,
    UpdateExerciseInWorkoutTemplateRequest,
    UpdateWorkoutTemplate,
    UpdateWorkoutTemplateRequest,
    WorkoutTemplateRequest,
)
from fitness_journal.services.workouts import (
    AddExerciseToWorkout,
    AddExerciseToWorkoutRequest,
    DeleteWorkout,
    GetAllWorkoutsForUser,
    GetWorkoutById,
    GetWorkoutsByTemplate,
    GetWorkoutsByTemplateRequest,
    RemoveExerciseFromWorkout,
    RemoveExerciseFromWorkoutRequest,
    RemoveSetFromWorkout,
    RemoveSetFromWorkoutRequest,
    UpdateExerciseInWorkout,
    UpdateExerciseInWorkoutRequest,
    WorkoutRequest,
)
from tests.conftest import make_user


def _template_with_exercises(
    repositories: Repositories, user_id: str, *plan: tuple[str, int]
) -> WorkoutTemplateDTO:
    template = CreateWorkoutTemplate(
        templates=repositories.workout_templates, users=repositories.users
    ).execute(CreateWorkoutTemplateRequest(user_id=user_id, name="Push day"))
    add = AddExerciseToWorkoutTemplate(
        templates=repositories.workout_templates,
        exercises=repositories.exercises,
        users=repositories.users,
    )
    for exercise_id, sets in plan:
        template = add.execute(
            AddExerciseToWorkoutTemplateRequest(
                template_id=template.id,
                user_id=user_id,
                exercise_id=exercise_id,
                sets=sets,
            )
        )
    return template


def _exercise_id(repositories: Repositories, name: str) -> str:
    return CreateExercise(exercises=repositories.exercises).execute(name).id


def test_exercise_catalogue_crud(repositories) -> None:
    exercise = CreateExercise(exercises=repositories.exercises).execute("Bench press")

    renamed = UpdateExercise(exercises=repositories.exercises).execute(
        UpdateExerciseRequest(
            exercise_id=exercise.id, patch=ExercisePatch(name="Incline bench")
        )
    )
    assert renamed.name == "Incline bench"
    listed = GetAllExercises(exercises=repositories.exercises).execute()
    assert [x.id for x in listed] == [exercise.id]

    DeleteExercise(exercises=repositories.exercises).execute(exercise.id)
    get = GetExerciseById(exercises=repositories.exercises)
    assert get.execute(exercise.id) is None
    with pytest.raises(NotFoundError):
        DeleteExercise(exercises=repositories.exercises).execute(exercise.id)


def test_template_exercise_management(repositories, user) -> None:
    bench = _exercise_id(repositories, "Bench press")
    dips = _exercise_id(repositories, "Dips")
    template = _template_with_exercises(repositories, user.id, (bench, 3), (dips, 2))
    templates = repositories.workout_templates
    users = repositories.users

    reordered = ReorderExerciseInWorkoutTemplate(
        templates=templates, users=users
    ).execute(
        ReorderExerciseInWorkoutTemplateRequest(
            template_id=template.id, user_id=user.id, exercise_id=dips, new_index=0
        )
    )
    updated = UpdateExerciseInWorkoutTemplate(templates=templates, users=users).execute(
        UpdateExerciseInWorkoutTemplateRequest(
            template_id=template.id, user_id=user.id, exercise_id=bench, sets=5
        )
    )
    removed = RemoveExerciseFromWorkoutTemplate(
        templates=templates, users=users
    ).execute(
        TemplateExerciseRequest(
            template_id=template.id, user_id=user.id, exercise_id=dips
        )
    )

    assert [line.exercise_id for line in reordered.exercises] == [dips, bench]
    assert [line.sets for line in updated.exercises] == [2, 5]
    assert [line.exercise_id for line in removed.exercises] == [bench]
    with pytest.raises(NotFoundError):
        RemoveExerciseFromWorkoutTemplate(templates=templates, users=users).execute(
            TemplateExerciseRequest(
                template_id=template.id, user_id=user.id, exercise_id=dips
            )
        )


def test_adding_unknown_exercise_to_template_raises(repositories, user) -> None:
    with pytest.raises(NotFoundError):
        _template_with_exercises(repositories, user.id, ("missing", 3))


def test_template_rename_duplicate_and_soft_delete(repositories, user) -> None:
    bench = _exercise_id(repositories, "Bench press")
    template = _template_with_exercises(repositories, user.id, (bench, 3))
    templates = repositories.workout_templates
    users = repositories.users

    renamed = UpdateWorkoutTemplate(templates=templates, users=users).execute(
        UpdateWorkoutTemplateRequest(
            template_id=template.id,
            user_id=user.id,
            patch=WorkoutTemplatePatch(name="Chest"),
        )
    )
    copy = DuplicateWorkoutTemplate(templates=templates, users=users).execute(
        DuplicateWorkoutTemplateRequest(template_id=template.id, user_id=user.id)
    )
    DeleteWorkoutTemplate(templates=templates, users=users).execute(
        WorkoutTemplateRequest(template_id=template.id, user_id=user.id)
    )

    assert renamed.name == "Chest"
    assert copy.name == "Chest (Copy)"
    assert [line.sets for line in copy.exercises] == [3]
    active = GetAllWorkoutTemplatesForUser(templates=templates).execute(user.id)
    assert [x.id for x in active] == [copy.id]
    assert GetWorkoutTemplateById(templates=templates).execute(
        WorkoutTemplateRequest(template_id=template.id, user_id=user.id)
    ) is None
    assert templates.get_by_id(template.id).deleted_at is not None
    with pytest.raises(NotFoundError):
        DeleteWorkoutTemplate(templates=templates, users=users).execute(
            WorkoutTemplateRequest(template_id=template.id, user_id=user.id)
        )


def test_foreign_template_is_hidden_and_protected(repositories, user) -> None:
    other = make_user(repositories, email="bob@example.com", name="Bob")
    template = _template_with_exercises(repositories, other.id)
    templates = repositories.workout_templates

    assert GetWorkoutTemplateById(templates=templates).execute(
        WorkoutTemplateRequest(template_id=template.id, user_id=user.id)
    ) is None
    with pytest.raises(AuthError):
        DeleteWorkoutTemplate(templates=templates, users=repositories.users).execute(
            WorkoutTemplateRequest(template_id=template.id, user_id=user.id)
        )


def _start_workout(repositories: Repositories):
    return CreateWorkoutFromTemplate(
        templates=repositories.workout_templates,
        workouts=repositories.workouts,
        users=repositories.users,
    )


def test_create_workout_from_template_plans_every_set(repositories, user) -> None:
    bench = _exercise_id(repositories, "Bench press")
    dips = _exercise_id(repositories, "Dips")
    template = _template_with_exercises(repositories, user.id, (bench, 3), (dips, 2))

    workout = _start_workout(repositories).execute(
        CreateWorkoutFromTemplateRequest(
            template_id=template.id,
            user_id=user.id,
            performed_on=date(2024, 3, 1),
        )
    )

    assert workout.name == "Push day - 2024-03-01"
    assert workout.workout_template_id == template.id
    assert [(line.exercise_id, line.set_number) for line in workout.exercises] == [
        (bench, 1),
        (bench, 2),
        (bench, 3),
        (dips, 1),
        (dips, 2),
    ]
    assert all(line.reps == 0 for line in workout.exercises)
    by_template = GetWorkoutsByTemplate(workouts=repositories.workouts).execute(
        GetWorkoutsByTemplateRequest(template_id=template.id, user_id=user.id)
    )
    assert [x.id for x in by_template] == [workout.id]


def test_create_workout_from_empty_or_deleted_template(repositories, user) -> None:
    template = _template_with_exercises(repositories, user.id)

    with pytest.raises(ValidationError):
        _start_workout(repositories).execute(
            CreateWorkoutFromTemplateRequest(template_id=template.id, user_id=user.id)
        )

    DeleteWorkoutTemplate(
        templates=repositories.workout_templates, users=repositories.users
    ).execute(WorkoutTemplateRequest(template_id=template.id, user_id=user.id))
    with pytest.raises(NotFoundError):
        _start_workout(repositories).execute(
            CreateWorkoutFromTemplateRequest(template_id=template.id, user_id=user.id)
        )


def test_workout_set_operations(repositories, user) -> None:
    bench = _exercise_id(repositories, "Bench press")
    squat = _exercise_id(repositories, "Squat")
    template = _template_with_exercises(repositories, user.id, (bench, 2))
    workout = _start_workout(repositories).execute(
        CreateWorkoutFromTemplateRequest(
            template_id=template.id, user_id=user.id, name="Monday"
        )
    )
    workouts = repositories.workouts
    users = repositories.users

    added = AddExerciseToWorkout(
        workouts=workouts, exercises=repositories.exercises, users=users
    ).execute(
        AddExerciseToWorkoutRequest(
            workout_id=workout.id, user_id=user.id, exercise_id=bench, reps=8
        )
    )
    logged = UpdateExerciseInWorkout(workouts=workouts, users=users).execute(
        UpdateExerciseInWorkoutRequest(
            workout_id=workout.id,
            user_id=user.id,
            exercise_id=bench,
            set_number=1,
            patch=WorkoutLinePatch(reps=10, weight_in_kg=60),
        )
    )
    trimmed = RemoveSetFromWorkout(workouts=workouts, users=users).execute(
        RemoveSetFromWorkoutRequest(
            workout_id=workout.id, user_id=user.id, exercise_id=bench, set_number=1
        )
    )

    assert workout.name == "Monday"
    assert [line.set_number for line in added.exercises] == [1, 2, 3]
    assert added.exercises[-1].reps == 8
    assert (logged.exercises[0].reps, logged.exercises[0].weight_in_kg) == (10, 60)
    assert sorted((line.set_number, line.reps) for line in trimmed.exercises) == [
        (1, 0),
        (2, 8),
    ]
    with pytest.raises(ValidationError):
        RemoveExerciseFromWorkout(workouts=workouts, users=users).execute(
            RemoveExerciseFromWorkoutRequest(
                workout_id=workout.id, user_id=user.id, exercise_id=squat
            )
        )


def test_delete_workout(repositories, user) -> None:
    bench = _exercise_id(repositories, "Bench press")
    template = _template_with_exercises(repositories, user.id, (bench, 1))
    workout = _start_workout(repositories).execute(
        CreateWorkoutFromTemplateRequest(template_id=template.id, user_id=user.id)
    )
    delete = DeleteWorkout(workouts=repositories.workouts, users=repositories.users)

    delete.execute(WorkoutRequest(workout_id=workout.id, user_id=user.id))

    assert GetWorkoutById(workouts=repositories.workouts).execute(
        WorkoutRequest(workout_id=workout.id, user_id=user.id)
    ) is None
    assert GetAllWorkoutsForUser(workouts=repositories.workouts).execute(user.id) == []
    with pytest.raises(NotFoundError):
        delete.execute(WorkoutRequest(workout_id=workout.id, user_id=user.id))
