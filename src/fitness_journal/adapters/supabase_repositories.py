"""Supabase document-store repositories.

Each entity type lives in its own table with an ``id`` key, a few indexed
columns used for filtering and a JSON ``data`` column holding the document.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from supabase import Client

from fitness_journal.adapters import serialization
from fitness_journal.adapters.serialization import Document
from fitness_journal.domain.days import Day
from fitness_journal.domain.ingredients import (
    ExternalIngredientRef,
    Ingredient,
    external_ref_key,
)
from fitness_journal.domain.meals import FakeMeal, Meal
from fitness_journal.domain.recipes import Recipe
from fitness_journal.domain.users import User
from fitness_journal.domain.workouts import Exercise, Workout, WorkoutTemplate
from fitness_journal.services.days import DayRepository
from fitness_journal.services.exercises import ExerciseRepository
from fitness_journal.services.fake_meals import FakeMealRepository
from fitness_journal.services.ingredients import (
    ExternalIngredientRefRepository,
    IngredientRepository,
)
from fitness_journal.services.meals import MealRepository
from fitness_journal.services.recipes import RecipeRepository
from fitness_journal.services.users import UserRepository
from fitness_journal.services.workout_templates import WorkoutTemplateRepository
from fitness_journal.services.workouts import WorkoutRepository

EntityT = TypeVar("EntityT")


@dataclass
class SupabaseDocuments(Generic[EntityT]):
    """Typed access to one document table."""

    client: Client
    table: str
    parse: Callable[[Document], EntityT]

    def get(self, key: str) -> EntityT | None:
        response = (
            self.client.table(self.table)
            .select("data")
            .eq("id", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self.parse(response.data[0]["data"])

    def get_many(self, keys: Sequence[str]) -> list[EntityT]:
        unique_keys = list(dict.fromkeys(keys))
        if not unique_keys:
            return []
        response = (
            self.client.table(self.table)
            .select("id, data")
            .in_("id", unique_keys)
            .execute()
        )
        by_key = {row["id"]: self.parse(row["data"]) for row in response.data or []}
        return [by_key[key] for key in unique_keys if key in by_key]

    def find(self, **filters: object) -> list[EntityT]:
        query = self.client.table(self.table).select("data")
        for column, value in filters.items():
            query = query.eq(column, value)
        response = query.execute()
        return [self.parse(row["data"]) for row in response.data or []]

    def upsert(self, key: str, data: Document, **columns: object) -> None:
        self.client.table(self.table).upsert(
            {"id": key, **columns, "data": data}
        ).execute()

    def upsert_many(self, rows: list[dict[str, object]]) -> None:
        if rows:
            self.client.table(self.table).upsert(rows).execute()

    def delete(self, key: str) -> None:
        self.client.table(self.table).delete().eq("id", key).execute()


@dataclass
class SupabaseUserRepository(UserRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[User]:
        return SupabaseDocuments(self.client, "users", serialization.parse_user)

    def get_by_id(self, user_id: str) -> User | None:
        return self._documents.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        found = self._documents.find(email=email)
        return found[0] if found else None

    def get_by_customer_id(self, customer_id: str) -> User | None:
        found = self._documents.find(customer_id=customer_id)
        return found[0] if found else None

    def save(self, user: User) -> None:
        self._documents.upsert(
            user.id,
            serialization.dump_user(user),
            email=user.email,
            customer_id=user.customer_id,
        )

    def delete(self, user_id: str) -> None:
        self._documents.delete(user_id)


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Ingredient]:
        return SupabaseDocuments(
            self.client, "ingredients", serialization.parse_ingredient
        )

    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        return self._documents.get(ingredient_id)

    def get_by_ids(self, ingredient_ids: Sequence[str]) -> list[Ingredient]:
        return self._documents.get_many(ingredient_ids)

    def get_all(self) -> list[Ingredient]:
        return self._documents.find()

    def save(self, ingredient: Ingredient) -> None:
        self._documents.upsert(ingredient.id, serialization.dump_ingredient(ingredient))

    def delete(self, ingredient_id: str) -> None:
        self._documents.delete(ingredient_id)


@dataclass
class SupabaseExternalIngredientRefRepository(ExternalIngredientRefRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[ExternalIngredientRef]:
        return SupabaseDocuments(
            self.client, "external_ingredient_refs", serialization.parse_external_ref
        )

    def get_by_external_id_and_source(
        self, external_id: str, source: str
    ) -> ExternalIngredientRef | None:
        return self._documents.get(external_ref_key(external_id, source))

    def save(self, ref: ExternalIngredientRef) -> None:
        self._documents.upsert(ref.key, serialization.dump_external_ref(ref))


@dataclass
class SupabaseMealRepository(MealRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Meal]:
        return SupabaseDocuments(self.client, "meals", serialization.parse_meal)

    def get_by_id(self, meal_id: str) -> Meal | None:
        return self._documents.get(meal_id)

    def get_by_ids(self, meal_ids: Sequence[str]) -> list[Meal]:
        return self._documents.get_many(meal_ids)

    def get_all_for_user(self, user_id: str) -> list[Meal]:
        return self._documents.find(user_id=user_id)

    def save(self, meal: Meal) -> None:
        self._documents.upsert(
            meal.id, serialization.dump_meal(meal), user_id=meal.user_id
        )

    def save_many(self, meals: Sequence[Meal]) -> None:
        self._documents.upsert_many(
            [
                {
                    "id": meal.id,
                    "user_id": meal.user_id,
                    "data": serialization.dump_meal(meal),
                }
                for meal in meals
            ]
        )

    def delete(self, meal_id: str) -> None:
        self._documents.delete(meal_id)


@dataclass
class SupabaseFakeMealRepository(FakeMealRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[FakeMeal]:
        return SupabaseDocuments(
            self.client, "fake_meals", serialization.parse_fake_meal
        )

    def get_by_id(self, fake_meal_id: str) -> FakeMeal | None:
        return self._documents.get(fake_meal_id)

    def get_by_ids(self, fake_meal_ids: Sequence[str]) -> list[FakeMeal]:
        return self._documents.get_many(fake_meal_ids)

    def get_all_for_user(self, user_id: str) -> list[FakeMeal]:
        return self._documents.find(user_id=user_id)

    def save(self, fake_meal: FakeMeal) -> None:
        self._documents.upsert(
            fake_meal.id,
            serialization.dump_fake_meal(fake_meal),
            user_id=fake_meal.user_id,
        )

    def delete(self, fake_meal_id: str) -> None:
        self._documents.delete(fake_meal_id)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Recipe]:
        return SupabaseDocuments(self.client, "recipes", serialization.parse_recipe)

    def get_by_id(self, recipe_id: str) -> Recipe | None:
        return self._documents.get(recipe_id)

    def get_by_ids(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        return self._documents.get_many(recipe_ids)

    def get_all_for_user(self, user_id: str) -> list[Recipe]:
        return self._documents.find(user_id=user_id)

    def save(self, recipe: Recipe) -> None:
        self._documents.upsert(
            recipe.id, serialization.dump_recipe(recipe), user_id=recipe.user_id
        )

    def delete(self, recipe_id: str) -> None:
        self._documents.delete(recipe_id)


@dataclass
class SupabaseDayRepository(DayRepository):
    """Days are keyed ``<user_id>-<day_id>`` with a separate ``day_id`` column."""

    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Day]:
        return SupabaseDocuments(self.client, "days", serialization.parse_day)

    def get_by_id_and_user(self, day_id: str, user_id: str) -> Day | None:
        return self._documents.get(f"{user_id}-{day_id}")

    def get_by_ids_and_user(self, day_ids: Sequence[str], user_id: str) -> list[Day]:
        return self._documents.get_many([f"{user_id}-{day_id}" for day_id in day_ids])

    def get_all_for_user(self, user_id: str) -> list[Day]:
        return self._documents.find(user_id=user_id)

    def get_range_for_user(
        self, user_id: str, start_day_id: str, end_day_id: str
    ) -> list[Day]:
        response = (
            self.client.table("days")
            .select("data")
            .eq("user_id", user_id)
            .gte("day_id", start_day_id)
            .lte("day_id", end_day_id)
            .order("day_id")
            .execute()
        )
        return [serialization.parse_day(row["data"]) for row in response.data or []]

    def save(self, day: Day) -> None:
        self._documents.upsert(
            f"{day.user_id}-{day.id}",
            serialization.dump_day(day),
            user_id=day.user_id,
            day_id=day.id,
        )

    def delete(self, day_id: str, user_id: str) -> None:
        self._documents.delete(f"{user_id}-{day_id}")


@dataclass
class SupabaseExerciseRepository(ExerciseRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Exercise]:
        return SupabaseDocuments(self.client, "exercises", serialization.parse_exercise)

    def get_by_id(self, exercise_id: str) -> Exercise | None:
        return self._documents.get(exercise_id)

    def get_by_ids(self, exercise_ids: Sequence[str]) -> list[Exercise]:
        return self._documents.get_many(exercise_ids)

    def get_all(self) -> list[Exercise]:
        return self._documents.find()

    def save(self, exercise: Exercise) -> None:
        self._documents.upsert(exercise.id, serialization.dump_exercise(exercise))

    def delete(self, exercise_id: str) -> None:
        self._documents.delete(exercise_id)


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[Workout]:
        return SupabaseDocuments(self.client, "workouts", serialization.parse_workout)

    def get_by_id(self, workout_id: str) -> Workout | None:
        return self._documents.get(workout_id)

    def get_all_for_user(self, user_id: str) -> list[Workout]:
        return self._documents.find(user_id=user_id)

    def get_by_template_for_user(
        self, template_id: str, user_id: str
    ) -> list[Workout]:
        return self._documents.find(
            user_id=user_id, workout_template_id=template_id
        )

    def save(self, workout: Workout) -> None:
        self._documents.upsert(
            workout.id,
            serialization.dump_workout(workout),
            user_id=workout.user_id,
            workout_template_id=workout.workout_template_id,
        )

    def delete(self, workout_id: str) -> None:
        self._documents.delete(workout_id)


@dataclass
class SupabaseWorkoutTemplateRepository(WorkoutTemplateRepository):
    client: Client

    @property
    def _documents(self) -> SupabaseDocuments[WorkoutTemplate]:
        return SupabaseDocuments(
            self.client, "workout_templates", serialization.parse_workout_template
        )

    def get_by_id(self, template_id: str) -> WorkoutTemplate | None:
        return self._documents.get(template_id)

    def get_all_for_user(self, user_id: str) -> list[WorkoutTemplate]:
        return self._documents.find(user_id=user_id)

    def save(self, template: WorkoutTemplate) -> None:
        self._documents.upsert(
            template.id,
            serialization.dump_workout_template(template),
            user_id=template.user_id,
        )
