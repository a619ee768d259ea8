"""Data transfer objects returned by use-cases."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from fitness_journal.domain.days import Day
from fitness_journal.domain.ingredients import (
    Ingredient,
    IngredientLine,
    IngredientSearchResult,
)
from fitness_journal.domain.meals import FakeMeal, Meal
from fitness_journal.domain.recipes import Recipe
from fitness_journal.domain.users import User
from fitness_journal.domain.workouts import (
    Exercise,
    Workout,
    WorkoutLine,
    WorkoutTemplate,
    WorkoutTemplateLine,
)


@dataclass(frozen=True)
class IngredientDTO:
    id: str
    name: str
    calories_per_100g: float
    protein_per_100g: float
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class IngredientLineDTO:
    id: str
    parent_id: str
    parent_type: str
    ingredient: IngredientDTO
    quantity_in_grams: float
    calories: float
    protein: float


@dataclass(frozen=True)
class MealDTO:
    id: str
    user_id: str
    name: str
    ingredient_lines: list[IngredientLineDTO]
    calories: float
    protein: float
    created_from_recipe_id: str | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FakeMealDTO:
    id: str
    user_id: str
    name: str
    calories: float
    protein: float
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RecipeDTO:
    id: str
    user_id: str
    name: str
    ingredient_lines: list[IngredientLineDTO]
    calories: float
    protein: float
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DayDTO:
    id: str
    date: str
    user_id: str
    meal_ids: list[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DayMealSummaryDTO:
    """One resolved entry of an assembled day."""

    id: str
    kind: Literal["meal", "fake_meal"]
    name: str
    calories: float
    protein: float
    image_url: str | None = None
    created_from_recipe_id: str | None = None


@dataclass(frozen=True)
class AssembledDayDTO:
    """A day with its meal references resolved and totals computed."""

    id: str
    date: str
    user_id: str
    meals: list[DayMealSummaryDTO]
    calories: float
    protein: float
    meals_count: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DayNutritionalSummaryDTO:
    day_id: str
    calories: float
    protein: float
    meals_count: int


@dataclass(frozen=True)
class UserDTO:
    id: str
    name: str
    email: str
    customer_id: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ExerciseDTO:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class WorkoutLineDTO:
    id: str
    exercise_id: str
    set_number: int
    reps: int
    weight_in_kg: float


@dataclass(frozen=True)
class WorkoutDTO:
    id: str
    user_id: str
    name: str
    workout_template_id: str | None
    exercises: list[WorkoutLineDTO]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class WorkoutTemplateLineDTO:
    id: str
    exercise_id: str
    sets: int


@dataclass(frozen=True)
class WorkoutTemplateDTO:
    id: str
    user_id: str
    name: str
    exercises: list[WorkoutTemplateLineDTO]
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class IngredientSearchResultDTO:
    name: str
    calories_per_100g: float
    protein_per_100g: float
    image_url: str | None
    external_id: str
    source: str
    barcode: str | None


def to_ingredient_dto(ingredient: Ingredient) -> IngredientDTO:
    return IngredientDTO(
        id=ingredient.id,
        name=ingredient.name,
        calories_per_100g=ingredient.calories,
        protein_per_100g=ingredient.protein,
        image_url=ingredient.image_url,
        created_at=ingredient.created_at,
        updated_at=ingredient.updated_at,
    )


def to_ingredient_line_dto(line: IngredientLine) -> IngredientLineDTO:
    return IngredientLineDTO(
        id=line.id,
        parent_id=line.parent_id,
        parent_type=line.parent_type,
        ingredient=to_ingredient_dto(line.ingredient),
        quantity_in_grams=line.quantity_in_grams,
        calories=line.calories,
        protein=line.protein,
    )


def to_meal_dto(meal: Meal) -> MealDTO:
    return MealDTO(
        id=meal.id,
        user_id=meal.user_id,
        name=meal.name,
        ingredient_lines=[to_ingredient_line_dto(x) for x in meal.ingredient_lines],
        calories=meal.calories,
        protein=meal.protein,
        created_from_recipe_id=meal.created_from_recipe_id,
        image_url=meal.image_url,
        created_at=meal.created_at,
        updated_at=meal.updated_at,
    )


def to_fake_meal_dto(fake_meal: FakeMeal) -> FakeMealDTO:
    return FakeMealDTO(
        id=fake_meal.id,
        user_id=fake_meal.user_id,
        name=fake_meal.name,
        calories=fake_meal.calories,
        protein=fake_meal.protein,
        created_at=fake_meal.created_at,
        updated_at=fake_meal.updated_at,
    )


def to_recipe_dto(recipe: Recipe) -> RecipeDTO:
    return RecipeDTO(
        id=recipe.id,
        user_id=recipe.user_id,
        name=recipe.name,
        ingredient_lines=[to_ingredient_line_dto(x) for x in recipe.ingredient_lines],
        calories=recipe.calories,
        protein=recipe.protein,
        image_url=recipe.image_url,
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


def to_day_dto(day: Day) -> DayDTO:
    return DayDTO(
        id=day.id,
        date=day.date.isoformat(),
        user_id=day.user_id,
        meal_ids=list(day.meal_ids),
        created_at=day.created_at,
        updated_at=day.updated_at,
    )


def to_day_meal_summary(item: Meal | FakeMeal) -> DayMealSummaryDTO:
    if isinstance(item, Meal):
        return DayMealSummaryDTO(
            id=item.id,
            kind="meal",
            name=item.name,
            calories=item.calories,
            protein=item.protein,
            image_url=item.image_url,
            created_from_recipe_id=item.created_from_recipe_id,
        )
    return DayMealSummaryDTO(
        id=item.id,
        kind="fake_meal",
        name=item.name,
        calories=item.calories,
        protein=item.protein,
    )


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        name=user.name,
        email=user.email,
        customer_id=user.customer_id,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_exercise_dto(exercise: Exercise) -> ExerciseDTO:
    return ExerciseDTO(
        id=exercise.id,
        name=exercise.name,
        created_at=exercise.created_at,
        updated_at=exercise.updated_at,
    )


def _to_workout_line_dto(line: WorkoutLine) -> WorkoutLineDTO:
    return WorkoutLineDTO(
        id=line.id,
        exercise_id=line.exercise_id,
        set_number=line.set_number,
        reps=line.reps,
        weight_in_kg=line.weight_in_kg,
    )


def to_workout_dto(workout: Workout) -> WorkoutDTO:
    return WorkoutDTO(
        id=workout.id,
        user_id=workout.user_id,
        name=workout.name,
        workout_template_id=workout.workout_template_id,
        exercises=[_to_workout_line_dto(line) for line in workout.exercises],
        created_at=workout.created_at,
        updated_at=workout.updated_at,
    )


def _to_template_line_dto(line: WorkoutTemplateLine) -> WorkoutTemplateLineDTO:
    return WorkoutTemplateLineDTO(
        id=line.id, exercise_id=line.exercise_id, sets=line.sets
    )


def to_workout_template_dto(template: WorkoutTemplate) -> WorkoutTemplateDTO:
    return WorkoutTemplateDTO(
        id=template.id,
        user_id=template.user_id,
        name=template.name,
        exercises=[_to_template_line_dto(line) for line in template.exercises],
        deleted_at=template.deleted_at,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def to_search_result_dto(result: IngredientSearchResult) -> IngredientSearchResultDTO:
    return IngredientSearchResultDTO(
        name=result.name,
        calories_per_100g=result.calories_per_100g,
        protein_per_100g=result.protein_per_100g,
        image_url=result.image_url,
        external_id=result.external_id,
        source=result.source,
        barcode=result.barcode,
    )
