"""In-memory repositories, used for local runs and tests."""

import copy
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

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
from fitness_journal.services.transactions import TransactionContext
from fitness_journal.services.users import UserRepository
from fitness_journal.services.workout_templates import WorkoutTemplateRepository
from fitness_journal.services.workouts import WorkoutRepository

EntityT = TypeVar("EntityT")
ResultT = TypeVar("ResultT")

logger = logging.getLogger(__name__)


@dataclass
class _MemoryStore(Generic[EntityT]):
    """Copies entities in and out so callers never share stored instances."""

    items: dict[str, EntityT] = field(default_factory=dict)

    def _get(self, key: str) -> EntityT | None:
        item = self.items.get(key)
        return copy.deepcopy(item) if item is not None else None

    def _get_many(self, keys: Sequence[str]) -> list[EntityT]:
        return [
            copy.deepcopy(self.items[key])
            for key in dict.fromkeys(keys)
            if key in self.items
        ]

    def _where(self, predicate: Callable[[EntityT], bool]) -> list[EntityT]:
        return [copy.deepcopy(x) for x in self.items.values() if predicate(x)]

    def _put(self, key: str, item: EntityT) -> None:
        self.items[key] = copy.deepcopy(item)

    def _remove(self, key: str) -> None:
        self.items.pop(key, None)

    def snapshot(self) -> dict[str, EntityT]:
        return copy.deepcopy(self.items)

    def restore(self, state: dict[str, EntityT]) -> None:
        self.items = state


@dataclass
class MemoryUserRepository(_MemoryStore[User], UserRepository):
    def get_by_id(self, user_id: str) -> User | None:
        return self._get(user_id)

    def get_by_email(self, email: str) -> User | None:
        found = self._where(lambda user: user.email == email)
        return found[0] if found else None

    def get_by_customer_id(self, customer_id: str) -> User | None:
        found = self._where(lambda user: user.customer_id == customer_id)
        return found[0] if found else None

    def save(self, user: User) -> None:
        self._put(user.id, user)

    def delete(self, user_id: str) -> None:
        self._remove(user_id)


@dataclass
class MemoryIngredientRepository(_MemoryStore[Ingredient], IngredientRepository):
    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        return self._get(ingredient_id)

    def get_by_ids(self, ingredient_ids: Sequence[str]) -> list[Ingredient]:
        return self._get_many(ingredient_ids)

    def get_all(self) -> list[Ingredient]:
        return self._where(lambda _: True)

    def save(self, ingredient: Ingredient) -> None:
        self._put(ingredient.id, ingredient)

    def delete(self, ingredient_id: str) -> None:
        self._remove(ingredient_id)


@dataclass
class MemoryExternalIngredientRefRepository(
    _MemoryStore[ExternalIngredientRef], ExternalIngredientRefRepository
):
    def get_by_external_id_and_source(
        self, external_id: str, source: str
    ) -> ExternalIngredientRef | None:
        return self._get(external_ref_key(external_id, source))

    def save(self, ref: ExternalIngredientRef) -> None:
        self._put(ref.key, ref)


@dataclass
class MemoryMealRepository(_MemoryStore[Meal], MealRepository):
    def get_by_id(self, meal_id: str) -> Meal | None:
        return self._get(meal_id)

    def get_by_ids(self, meal_ids: Sequence[str]) -> list[Meal]:
        return self._get_many(meal_ids)

    def get_all_for_user(self, user_id: str) -> list[Meal]:
        return self._where(lambda meal: meal.user_id == user_id)

    def save(self, meal: Meal) -> None:
        self._put(meal.id, meal)

    def save_many(self, meals: Sequence[Meal]) -> None:
        for meal in meals:
            self._put(meal.id, meal)

    def delete(self, meal_id: str) -> None:
        self._remove(meal_id)


@dataclass
class MemoryFakeMealRepository(_MemoryStore[FakeMeal], FakeMealRepository):
    def get_by_id(self, fake_meal_id: str) -> FakeMeal | None:
        return self._get(fake_meal_id)

    def get_by_ids(self, fake_meal_ids: Sequence[str]) -> list[FakeMeal]:
        return self._get_many(fake_meal_ids)

    def get_all_for_user(self, user_id: str) -> list[FakeMeal]:
        return self._where(lambda fake_meal: fake_meal.user_id == user_id)

    def save(self, fake_meal: FakeMeal) -> None:
        self._put(fake_meal.id, fake_meal)

    def delete(self, fake_meal_id: str) -> None:
        self._remove(fake_meal_id)


@dataclass
class MemoryRecipeRepository(_MemoryStore[Recipe], RecipeRepository):
    def get_by_id(self, recipe_id: str) -> Recipe | None:
        return self._get(recipe_id)

    def get_by_ids(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        return self._get_many(recipe_ids)

    def get_all_for_user(self, user_id: str) -> list[Recipe]:
        return self._where(lambda recipe: recipe.user_id == user_id)

    def save(self, recipe: Recipe) -> None:
        self._put(recipe.id, recipe)

    def delete(self, recipe_id: str) -> None:
        self._remove(recipe_id)


def day_key(day_id: str, user_id: str) -> str:
    return f"{user_id}-{day_id}"


@dataclass
class MemoryDayRepository(_MemoryStore[Day], DayRepository):
    def get_by_id_and_user(self, day_id: str, user_id: str) -> Day | None:
        return self._get(day_key(day_id, user_id))

    def get_by_ids_and_user(self, day_ids: Sequence[str], user_id: str) -> list[Day]:
        return self._get_many([day_key(day_id, user_id) for day_id in day_ids])

    def get_all_for_user(self, user_id: str) -> list[Day]:
        return self._where(lambda day: day.user_id == user_id)

    def get_range_for_user(
        self, user_id: str, start_day_id: str, end_day_id: str
    ) -> list[Day]:
        return self._where(
            lambda day: day.user_id == user_id
            and start_day_id <= day.id <= end_day_id
        )

    def save(self, day: Day) -> None:
        self._put(day_key(day.id, day.user_id), day)

    def delete(self, day_id: str, user_id: str) -> None:
        self._remove(day_key(day_id, user_id))


@dataclass
class MemoryExerciseRepository(_MemoryStore[Exercise], ExerciseRepository):
    def get_by_id(self, exercise_id: str) -> Exercise | None:
        return self._get(exercise_id)

    def get_by_ids(self, exercise_ids: Sequence[str]) -> list[Exercise]:
        return self._get_many(exercise_ids)

    def get_all(self) -> list[Exercise]:
        return self._where(lambda _: True)

    def save(self, exercise: Exercise) -> None:
        self._put(exercise.id, exercise)

    def delete(self, exercise_id: str) -> None:
        self._remove(exercise_id)


@dataclass
class MemoryWorkoutRepository(_MemoryStore[Workout], WorkoutRepository):
    def get_by_id(self, workout_id: str) -> Workout | None:
        return self._get(workout_id)

    def get_all_for_user(self, user_id: str) -> list[Workout]:
        return self._where(lambda workout: workout.user_id == user_id)

    def get_by_template_for_user(
        self, template_id: str, user_id: str
    ) -> list[Workout]:
        return self._where(
            lambda workout: workout.user_id == user_id
            and workout.workout_template_id == template_id
        )

    def save(self, workout: Workout) -> None:
        self._put(workout.id, workout)

    def delete(self, workout_id: str) -> None:
        self._remove(workout_id)


@dataclass
class MemoryWorkoutTemplateRepository(
    _MemoryStore[WorkoutTemplate], WorkoutTemplateRepository
):
    def get_by_id(self, template_id: str) -> WorkoutTemplate | None:
        return self._get(template_id)

    def get_all_for_user(self, user_id: str) -> list[WorkoutTemplate]:
        return self._where(lambda template: template.user_id == user_id)

    def save(self, template: WorkoutTemplate) -> None:
        self._put(template.id, template)


class _Snapshottable(Protocol):
    def snapshot(self) -> object: ...

    def restore(self, state: object) -> None: ...


@dataclass
class MemoryTransactionContext(TransactionContext):
    """Restores every participating store if the unit of work raises."""

    participants: list[_Snapshottable] = field(default_factory=list)

    def run(self, work: Callable[[], ResultT]) -> ResultT:
        states = [participant.snapshot() for participant in self.participants]
        try:
            return work()
        except Exception:
            for participant, state in zip(self.participants, states, strict=True):
                participant.restore(state)
            logger.warning("Rolled back in-memory transaction")
            raise
