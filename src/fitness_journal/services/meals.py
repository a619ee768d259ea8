"""Use-cases for logged meals."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.ingredients import IngredientLine, IngredientLinePatch
from fitness_journal.domain.meals import Meal, MealPatch
from fitness_journal.domain.validation import require_id
from fitness_journal.services.dtos import MealDTO, to_meal_dto
from fitness_journal.services.ingredients import (
    IngredientResolver,
    IngredientSource,
)
from fitness_journal.services.transactions import TransactionContext
from fitness_journal.services.users import (
    UserRepository,
    load_owned,
    load_user,
    visible_to,
)

logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def get_by_id(self, meal_id: str) -> Meal | None:
        """Return a meal by id, if present."""

    def get_by_ids(self, meal_ids: Sequence[str]) -> list[Meal]:
        """Return the meals that exist among the given ids."""

    def get_all_for_user(self, user_id: str) -> list[Meal]:
        """Return every meal owned by the user."""

    def save(self, meal: Meal) -> None:
        """Insert or replace a meal."""

    def save_many(self, meals: Sequence[Meal]) -> None:
        """Insert or replace several meals."""

    def delete(self, meal_id: str) -> None:
        """Delete a meal by id."""


def require_id_list(values: object, field_name: str) -> list[str]:
    """Validate a list of ids, keeping order."""
    if not isinstance(values, list | tuple):
        raise ValidationError(f"{field_name} must be a list")
    return [require_id(value, field_name) for value in values]


@dataclass(frozen=True)
class GetMealByIdRequest:
    meal_id: str
    user_id: str


@dataclass
class GetMealById:
    meals: MealRepository

    def execute(self, request: GetMealByIdRequest) -> MealDTO | None:
        user_id = require_id(request.user_id, "user_id")
        meal = visible_to(
            self.meals.get_by_id(require_id(request.meal_id, "meal_id")), user_id
        )
        return to_meal_dto(meal) if meal else None


@dataclass(frozen=True)
class GetMealsByIdsRequest:
    meal_ids: list[str]
    user_id: str


@dataclass
class GetMealsByIds:
    meals: MealRepository

    def execute(self, request: GetMealsByIdsRequest) -> list[MealDTO]:
        user_id = require_id(request.user_id, "user_id")
        ids = require_id_list(request.meal_ids, "meal_id")
        return [
            to_meal_dto(meal)
            for meal in self.meals.get_by_ids(ids)
            if meal.user_id == user_id
        ]


@dataclass
class GetAllMealsForUser:
    meals: MealRepository

    def execute(self, user_id: str) -> list[MealDTO]:
        resolved_id = require_id(user_id, "user_id")
        return [to_meal_dto(meal) for meal in self.meals.get_all_for_user(resolved_id)]


@dataclass(frozen=True)
class UpdateMealRequest:
    meal_id: str
    user_id: str
    patch: MealPatch


@dataclass
class UpdateMeal:
    meals: MealRepository
    users: UserRepository

    def execute(self, request: UpdateMealRequest) -> MealDTO:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        meal.apply(request.patch)
        self.meals.save(meal)
        return to_meal_dto(meal)


@dataclass(frozen=True)
class DeleteMealRequest:
    meal_id: str
    user_id: str


@dataclass
class DeleteMeal:
    meals: MealRepository
    users: UserRepository

    def execute(self, request: DeleteMealRequest) -> None:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        self.meals.delete(meal.id)
        logger.info("Deleted meal %s", meal.id)


@dataclass(frozen=True)
class AddIngredientToMealRequest:
    meal_id: str
    user_id: str
    source: IngredientSource
    quantity_in_grams: float


@dataclass
class AddIngredientToMeal:
    meals: MealRepository
    users: UserRepository
    resolver: IngredientResolver
    transaction: TransactionContext

    def execute(self, request: AddIngredientToMealRequest) -> MealDTO:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        resolution = self.resolver.resolve(request.source)
        meal.add_ingredient_line(
            IngredientLine(
                id=new_id(),
                parent_id=meal.id,
                parent_type="meal",
                ingredient=resolution.ingredient,
                quantity_in_grams=request.quantity_in_grams,
            )
        )

        def work() -> None:
            self.resolver.persist([resolution])
            self.meals.save(meal)

        self.transaction.run(work)
        return to_meal_dto(meal)


@dataclass(frozen=True)
class RemoveIngredientFromMealRequest:
    meal_id: str
    user_id: str
    ingredient_id: str


@dataclass
class RemoveIngredientFromMeal:
    meals: MealRepository
    users: UserRepository

    def execute(self, request: RemoveIngredientFromMealRequest) -> MealDTO:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        meal.remove_ingredient_line_by_ingredient_id(
            require_id(request.ingredient_id, "ingredient_id")
        )
        self.meals.save(meal)
        return to_meal_dto(meal)


@dataclass(frozen=True)
class UpdateIngredientInMealRequest:
    meal_id: str
    user_id: str
    ingredient_line_id: str
    patch: IngredientLinePatch


@dataclass
class UpdateIngredientInMeal:
    meals: MealRepository
    users: UserRepository

    def execute(self, request: UpdateIngredientInMealRequest) -> MealDTO:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        meal.update_ingredient_line(
            require_id(request.ingredient_line_id, "ingredient_line_id"),
            request.patch,
        )
        self.meals.save(meal)
        return to_meal_dto(meal)
