"""JSON document mapping for persisted entities."""

from datetime import datetime

from fitness_journal.domain.days import Day
from fitness_journal.domain.ingredients import (
    ExternalIngredientRef,
    Ingredient,
    IngredientLine,
    NutritionalInfo,
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

Document = dict[str, object]


def _timestamps(entity: object) -> Document:
    return {
        "createdAt": entity.created_at.isoformat(),
        "updatedAt": entity.updated_at.isoformat(),
    }


def _parse_datetime(value: object) -> datetime:
    return datetime.fromisoformat(str(value))


def _parse_optional_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def dump_ingredient(ingredient: Ingredient) -> Document:
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "nutritionalInfoPer100g": {
            "calories": ingredient.calories,
            "protein": ingredient.protein,
        },
        "imageUrl": ingredient.image_url,
        **_timestamps(ingredient),
    }


def parse_ingredient(data: Document) -> Ingredient:
    info = data["nutritionalInfoPer100g"]
    return Ingredient(
        id=str(data["id"]),
        name=str(data["name"]),
        nutritional_info_per_100g=NutritionalInfo(
            calories=float(info["calories"]), protein=float(info["protein"])
        ),
        image_url=data.get("imageUrl"),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_external_ref(ref: ExternalIngredientRef) -> Document:
    return {
        "externalId": ref.external_id,
        "source": ref.source,
        "ingredientId": ref.ingredient_id,
        "createdAt": ref.created_at.isoformat(),
    }


def parse_external_ref(data: Document) -> ExternalIngredientRef:
    return ExternalIngredientRef(
        external_id=str(data["externalId"]),
        source=str(data["source"]),
        ingredient_id=str(data["ingredientId"]),
        created_at=_parse_datetime(data["createdAt"]),
    )


def dump_ingredient_line(line: IngredientLine) -> Document:
    return {
        "id": line.id,
        "parentId": line.parent_id,
        "parentType": line.parent_type,
        "ingredient": dump_ingredient(line.ingredient),
        "quantityInGrams": line.quantity_in_grams,
        **_timestamps(line),
    }


def parse_ingredient_line(data: Document) -> IngredientLine:
    return IngredientLine(
        id=str(data["id"]),
        parent_id=str(data["parentId"]),
        parent_type=data["parentType"],
        ingredient=parse_ingredient(data["ingredient"]),
        quantity_in_grams=float(data["quantityInGrams"]),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_meal(meal: Meal) -> Document:
    return {
        "id": meal.id,
        "userId": meal.user_id,
        "name": meal.name,
        "ingredientLines": [dump_ingredient_line(x) for x in meal.ingredient_lines],
        "createdFromRecipeId": meal.created_from_recipe_id,
        "imageUrl": meal.image_url,
        **_timestamps(meal),
    }


def parse_meal(data: Document) -> Meal:
    return Meal(
        id=str(data["id"]),
        user_id=str(data["userId"]),
        name=str(data["name"]),
        ingredient_lines=[parse_ingredient_line(x) for x in data["ingredientLines"]],
        created_from_recipe_id=data.get("createdFromRecipeId"),
        image_url=data.get("imageUrl"),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_fake_meal(fake_meal: FakeMeal) -> Document:
    return {
        "id": fake_meal.id,
        "userId": fake_meal.user_id,
        "name": fake_meal.name,
        "calories": fake_meal.calories,
        "protein": fake_meal.protein,
        **_timestamps(fake_meal),
    }


def parse_fake_meal(data: Document) -> FakeMeal:
    return FakeMeal(
        id=str(data["id"]),
        user_id=str(data["userId"]),
        name=str(data["name"]),
        calories=float(data["calories"]),
        protein=float(data["protein"]),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_recipe(recipe: Recipe) -> Document:
    return {
        "id": recipe.id,
        "userId": recipe.user_id,
        "name": recipe.name,
        "ingredientLines": [dump_ingredient_line(x) for x in recipe.ingredient_lines],
        "imageUrl": recipe.image_url,
        **_timestamps(recipe),
    }


def parse_recipe(data: Document) -> Recipe:
    return Recipe(
        id=str(data["id"]),
        user_id=str(data["userId"]),
        name=str(data["name"]),
        ingredient_lines=[parse_ingredient_line(x) for x in data["ingredientLines"]],
        image_url=data.get("imageUrl"),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_day(day: Day) -> Document:
    return {
        "id": day.id,
        "userId": day.user_id,
        "mealIds": list(day.meal_ids),
        **_timestamps(day),
    }


def parse_day(data: Document) -> Day:
    return Day(
        id=str(data["id"]),
        user_id=str(data["userId"]),
        meal_ids=[str(x) for x in data.get("mealIds", [])],
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_user(user: User) -> Document:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "hashedPassword": user.hashed_password,
        "customerId": user.customer_id,
        **_timestamps(user),
    }


def parse_user(data: Document) -> User:
    return User(
        id=str(data["id"]),
        name=str(data["name"]),
        email=str(data["email"]),
        hashed_password=str(data["hashedPassword"]),
        customer_id=data.get("customerId"),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_exercise(exercise: Exercise) -> Document:
    return {"id": exercise.id, "name": exercise.name, **_timestamps(exercise)}


def parse_exercise(data: Document) -> Exercise:
    return Exercise(
        id=str(data["id"]),
        name=str(data["name"]),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_workout(workout: Workout) -> Document:
    return {
        "id": workout.id,
        "userId": workout.user_id,
        "name": workout.name,
        "workoutTemplateId": workout.workout_template_id,
        "exercises": [
            {
                "id": line.id,
                "exerciseId": line.exercise_id,
                "setNumber": line.set_number,
                "reps": line.reps,
                "weightInKg": line.weight_in_kg,
                **_timestamps(line),
            }
            for line in workout.exercises
        ],
        **_timestamps(workout),
    }


def parse_workout(data: Document) -> Workout:
    workout_id = str(data["id"])
    return Workout(
        id=workout_id,
        user_id=str(data["userId"]),
        name=str(data["name"]),
        workout_template_id=data.get("workoutTemplateId"),
        exercises=[
            WorkoutLine(
                id=str(line["id"]),
                workout_id=workout_id,
                exercise_id=str(line["exerciseId"]),
                set_number=int(line["setNumber"]),
                reps=int(line["reps"]),
                weight_in_kg=float(line["weightInKg"]),
                created_at=_parse_datetime(line["createdAt"]),
                updated_at=_parse_datetime(line["updatedAt"]),
            )
            for line in data.get("exercises", [])
        ],
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )


def dump_workout_template(template: WorkoutTemplate) -> Document:
    return {
        "id": template.id,
        "userId": template.user_id,
        "name": template.name,
        "exercises": [
            {
                "id": line.id,
                "exerciseId": line.exercise_id,
                "sets": line.sets,
                **_timestamps(line),
            }
            for line in template.exercises
        ],
        "deletedAt": template.deleted_at.isoformat() if template.deleted_at else None,
        **_timestamps(template),
    }


def parse_workout_template(data: Document) -> WorkoutTemplate:
    template_id = str(data["id"])
    return WorkoutTemplate(
        id=template_id,
        user_id=str(data["userId"]),
        name=str(data["name"]),
        exercises=[
            WorkoutTemplateLine(
                id=str(line["id"]),
                template_id=template_id,
                exercise_id=str(line["exerciseId"]),
                sets=int(line["sets"]),
                created_at=_parse_datetime(line["createdAt"]),
                updated_at=_parse_datetime(line["updatedAt"]),
            )
            for line in data.get("exercises", [])
        ],
        deleted_at=_parse_optional_datetime(data.get("deletedAt")),
        created_at=_parse_datetime(data["createdAt"]),
        updated_at=_parse_datetime(data["updatedAt"]),
    )
