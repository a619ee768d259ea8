"""Tests for day and workout entities."""

from datetime import date

import pytest

from fitness_journal.domain.days import Day, date_from_day_id, day_id_from_date
from fitness_journal.domain.errors import NotFoundError, ValidationError
from fitness_journal.domain.workouts import (
    Workout,
    WorkoutLinePatch,
    WorkoutTemplate,
)


def test_day_id_round_trips_through_date() -> None:
    assert day_id_from_date(date(2024, 3, 9)) == "20240309"
    assert date_from_day_id("20240309") == date(2024, 3, 9)


@pytest.mark.parametrize("day_id", ["2024-03-09", "20241345", "", "2024039", 20240309])
def test_invalid_day_ids_are_rejected(day_id: object) -> None:
    with pytest.raises(ValidationError):
        date_from_day_id(day_id)


def test_day_meal_references() -> None:
    day = Day(id="20240309", user_id="user-1")
    day.add_meal("meal-1")
    day.add_meal("fake-1")

    with pytest.raises(ValidationError):
        day.add_meal("meal-1")
    with pytest.raises(ValidationError):
        day.remove_meal("missing")

    day.remove_meal("meal-1")
    assert day.meal_ids == ["fake-1"]
    assert day.date == date(2024, 3, 9)

    day.replace_meals(["b", "a"])
    assert day.meal_ids == ["b", "a"]
    with pytest.raises(ValidationError):
        day.replace_meals(["a", "a"])


def test_workout_sets_are_numbered_and_renumbered() -> None:
    workout = Workout(id="workout-1", user_id="user-1", name="Push")
    workout.add_set("bench", reps=8, weight_in_kg=60)
    workout.add_set("bench", reps=6, weight_in_kg=65)
    third = workout.add_set("bench")
    workout.add_set("dips")

    assert third.set_number == 3
    workout.remove_set("bench", 1)

    bench = workout.sets_for("bench")
    assert [line.set_number for line in bench] == [1, 2]
    assert bench[0].weight_in_kg == 65
    assert workout.add_set("bench").set_number == 3

    workout.update_exercise("dips", 1, WorkoutLinePatch(reps=12))
    assert workout.sets_for("dips")[0].reps == 12

    workout.remove_exercise("dips")
    assert workout.sets_for("dips") == []
    with pytest.raises(ValidationError):
        workout.remove_exercise("dips")
    with pytest.raises(ValidationError):
        workout.remove_set("bench", 9)


def test_workout_line_rejects_negative_reps() -> None:
    workout = Workout(id="workout-1", user_id="user-1", name="Pull")
    with pytest.raises(ValidationError):
        workout.add_set("rows", reps=-1)


def test_template_exercise_management() -> None:
    template = WorkoutTemplate(id="template-1", user_id="user-1", name="Legs")
    template.add_exercise("squat", 5)
    template.add_exercise("lunge", 3)
    template.add_exercise("calf", 4)

    with pytest.raises(ValidationError):
        template.add_exercise("squat", 2)
    with pytest.raises(ValidationError):
        template.add_exercise("press", 0)

    template.reorder_exercise("calf", 0)
    assert [line.exercise_id for line in template.exercises] == [
        "calf",
        "squat",
        "lunge",
    ]
    with pytest.raises(ValidationError):
        template.reorder_exercise("calf", 3)
    with pytest.raises(NotFoundError):
        template.reorder_exercise("missing", 0)

    template.update_exercise("lunge", 4)
    template.remove_exercise("squat")
    assert [(line.exercise_id, line.sets) for line in template.exercises] == [
        ("calf", 4),
        ("lunge", 4),
    ]
    with pytest.raises(NotFoundError):
        template.remove_exercise("squat")


def test_template_soft_delete_and_duplicate() -> None:
    template = WorkoutTemplate(id="template-1", user_id="user-1", name="Core")
    template.add_exercise("plank", 3)

    copy = template.duplicate()
    template.mark_as_deleted()

    assert template.is_deleted
    assert not copy.is_deleted
    assert copy.name == "Core (Copy)"
    assert copy.exercises[0].template_id == copy.id
    assert copy.exercises[0].id != template.exercises[0].id
