"""Use-cases for calendar days and day assembly."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_journal.domain.days import Day, date_from_day_id, day_id_from_date
from fitness_journal.domain.errors import (
    AlreadyExistsError,
    AuthError,
    NotFoundError,
    ValidationError,
)
from fitness_journal.domain.meals import FakeMeal, Meal
from fitness_journal.domain.nutrition import sum_nutrition
from fitness_journal.domain.validation import require_id
from fitness_journal.services.dtos import (
    AssembledDayDTO,
    DayDTO,
    DayNutritionalSummaryDTO,
    to_day_dto,
    to_day_meal_summary,
)
from fitness_journal.services.fake_meals import FakeMealRepository
from fitness_journal.services.meals import MealRepository, require_id_list
from fitness_journal.services.recipes import RecipeRepository
from fitness_journal.services.transactions import TransactionContext
from fitness_journal.services.users import UserRepository, load_owned, load_user

logger = logging.getLogger(__name__)

MAX_DAYS_PER_BATCH = 14


class DayRepository(Protocol):
    """Persistence interface for days, keyed by (day id, user id)."""

    def get_by_id_and_user(self, day_id: str, user_id: str) -> Day | None:
        """Return the user's day, if present."""

    def get_by_ids_and_user(self, day_ids: Sequence[str], user_id: str) -> list[Day]:
        """Return the user's days that exist among the given ids."""

    def get_all_for_user(self, user_id: str) -> list[Day]:
        """Return every day of the user."""

    def get_range_for_user(
        self, user_id: str, start_day_id: str, end_day_id: str
    ) -> list[Day]:
        """Return the user's days between two day ids, inclusive."""

    def save(self, day: Day) -> None:
        """Insert or replace a day."""

    def delete(self, day_id: str, user_id: str) -> None:
        """Delete the user's day."""


def _require_day_id(value: object) -> str:
    date_from_day_id(value)
    return value


def _get_or_create_day(days: DayRepository, day_id: str, user_id: str) -> Day:
    day = days.get_by_id_and_user(day_id, user_id)
    if day is None:
        day = Day(id=day_id, user_id=user_id)
        logger.info("Creating day %s for user %s", day_id, user_id)
    return day


def _resolve_entries(
    day: Day,
    meals: dict[str, Meal],
    fake_meals: dict[str, FakeMeal],
) -> list[Meal | FakeMeal]:
    """Resolve a day's references in order: meals first, then fake meals."""
    resolved: list[Meal | FakeMeal] = []
    for meal_id in day.meal_ids:
        item = meals.get(meal_id) or fake_meals.get(meal_id)
        if item is None or item.user_id != day.user_id:
            logger.warning("Day %s references unknown meal %s", day.id, meal_id)
            continue
        resolved.append(item)
    return resolved


def _assemble(
    day: Day, meals: dict[str, Meal], fake_meals: dict[str, FakeMeal]
) -> AssembledDayDTO:
    entries = _resolve_entries(day, meals, fake_meals)
    totals = sum_nutrition(entries)
    return AssembledDayDTO(
        id=day.id,
        date=day.date.isoformat(),
        user_id=day.user_id,
        meals=[to_day_meal_summary(item) for item in entries],
        calories=totals.calories,
        protein=totals.protein,
        meals_count=len(entries),
        created_at=day.created_at,
        updated_at=day.updated_at,
    )


@dataclass(frozen=True)
class DayRequest:
    """Identifies one day of one user."""

    day_id: str
    user_id: str


@dataclass
class CreateDay:
    days: DayRepository
    users: UserRepository

    def execute(self, request: DayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        if self.days.get_by_id_and_user(day_id, user.id) is not None:
            raise AlreadyExistsError(f"Day {day_id} already exists")
        day = Day(id=day_id, user_id=user.id)
        self.days.save(day)
        return to_day_dto(day)


@dataclass
class GetDayById:
    """Return the day or None; a missing day is not an error."""

    days: DayRepository

    def execute(self, request: DayRequest) -> DayDTO | None:
        user_id = require_id(request.user_id, "user_id")
        day = self.days.get_by_id_and_user(_require_day_id(request.day_id), user_id)
        return to_day_dto(day) if day else None


@dataclass
class GetAllDays:
    days: DayRepository

    def execute(self, user_id: str) -> list[DayDTO]:
        resolved_id = require_id(user_id, "user_id")
        days = sorted(self.days.get_all_for_user(resolved_id), key=lambda d: d.id)
        return [to_day_dto(day) for day in days]


@dataclass(frozen=True)
class GetDaysByDateRangeRequest:
    user_id: str
    start: date
    end: date


@dataclass
class GetDaysByDateRange:
    days: DayRepository

    def execute(self, request: GetDaysByDateRangeRequest) -> list[DayDTO]:
        user_id = require_id(request.user_id, "user_id")
        start_id = day_id_from_date(request.start)
        end_id = day_id_from_date(request.end)
        if start_id > end_id:
            raise ValidationError("start date must not be after end date")
        days = self.days.get_range_for_user(user_id, start_id, end_id)
        return [to_day_dto(day) for day in sorted(days, key=lambda d: d.id)]


@dataclass
class DeleteDay:
    """Delete a day together with the meals it holds."""

    days: DayRepository
    meals: MealRepository
    fake_meals: FakeMealRepository
    users: UserRepository
    transaction: TransactionContext

    def execute(self, request: DayRequest) -> None:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        day = self.days.get_by_id_and_user(day_id, user.id)
        if day is None:
            raise NotFoundError(f"Day {day_id} not found")
        meal_ids = {meal.id for meal in self.meals.get_by_ids(day.meal_ids)}
        fake_meal_ids = {
            fake.id for fake in self.fake_meals.get_by_ids(day.meal_ids)
        }

        def work() -> None:
            for meal_id in meal_ids:
                self.meals.delete(meal_id)
            for fake_meal_id in fake_meal_ids:
                self.fake_meals.delete(fake_meal_id)
            self.days.delete(day.id, user.id)

        self.transaction.run(work)
        logger.info("Deleted day %s for user %s", day.id, user.id)


@dataclass(frozen=True)
class AddMealToDayRequest:
    day_id: str
    user_id: str
    meal_id: str


@dataclass
class AddMealToDay:
    days: DayRepository
    meals: MealRepository
    users: UserRepository

    def execute(self, request: AddMealToDayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        day = _get_or_create_day(self.days, _require_day_id(request.day_id), user.id)
        day.add_meal(meal.id)
        self.days.save(day)
        return to_day_dto(day)


@dataclass(frozen=True)
class AddFakeMealToDayRequest:
    day_id: str
    user_id: str
    fake_meal_id: str


@dataclass
class AddFakeMealToDay:
    days: DayRepository
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: AddFakeMealToDayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        fake_meal = load_owned(
            self.fake_meals.get_by_id, request.fake_meal_id, user.id, "FakeMeal"
        )
        day = _get_or_create_day(self.days, _require_day_id(request.day_id), user.id)
        day.add_meal(fake_meal.id)
        self.days.save(day)
        return to_day_dto(day)


@dataclass(frozen=True)
class AddMultipleMealsToDayRequest:
    day_id: str
    user_id: str
    recipe_ids: list[str]


@dataclass
class AddMultipleMealsToDay:
    """Log one new meal per recipe into a day."""

    days: DayRepository
    meals: MealRepository
    recipes: RecipeRepository
    users: UserRepository
    transaction: TransactionContext

    def execute(self, request: AddMultipleMealsToDayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        recipe_ids = require_id_list(request.recipe_ids, "recipe_id")
        if not recipe_ids:
            raise ValidationError("recipe_ids must not be empty")
        recipes = [
            load_owned(self.recipes.get_by_id, recipe_id, user.id, "Recipe")
            for recipe_id in recipe_ids
        ]
        day = _get_or_create_day(self.days, day_id, user.id)
        new_meals = [recipe.to_meal() for recipe in recipes]
        for meal in new_meals:
            day.add_meal(meal.id)

        def work() -> None:
            self.meals.save_many(new_meals)
            self.days.save(day)

        self.transaction.run(work)
        return to_day_dto(day)


@dataclass(frozen=True)
class AddMultipleMealsToMultipleDaysRequest:
    day_ids: list[str]
    user_id: str
    recipe_ids: list[str]


@dataclass
class AddMultipleMealsToMultipleDays:
    """Log one new meal per recipe into each of several days."""

    days: DayRepository
    meals: MealRepository
    recipes: RecipeRepository
    users: UserRepository
    transaction: TransactionContext
    max_days: int = MAX_DAYS_PER_BATCH

    def execute(self, request: AddMultipleMealsToMultipleDaysRequest) -> list[DayDTO]:
        user = load_user(self.users, request.user_id)
        day_ids = list(
            dict.fromkeys(
                _require_day_id(day_id)
                for day_id in require_id_list(request.day_ids, "day_id")
            )
        )
        if not day_ids:
            raise ValidationError("day_ids must not be empty")
        if len(day_ids) > self.max_days:
            raise ValidationError(f"Cannot add meals to more than {self.max_days} days")
        recipe_ids = require_id_list(request.recipe_ids, "recipe_id")
        if not recipe_ids:
            raise ValidationError("recipe_ids must not be empty")
        recipes = [
            load_owned(self.recipes.get_by_id, recipe_id, user.id, "Recipe")
            for recipe_id in recipe_ids
        ]
        existing = {
            day.id: day for day in self.days.get_by_ids_and_user(day_ids, user.id)
        }
        days: list[Day] = []
        new_meals: list[Meal] = []
        for day_id in day_ids:
            day = existing.get(day_id) or Day(id=day_id, user_id=user.id)
            for recipe in recipes:
                meal = recipe.to_meal()
                day.add_meal(meal.id)
                new_meals.append(meal)
            days.append(day)

        def work() -> None:
            self.meals.save_many(new_meals)
            for day in days:
                self.days.save(day)

        self.transaction.run(work)
        logger.info(
            "Added %s meals across %s days for user %s",
            len(new_meals),
            len(days),
            user.id,
        )
        return [to_day_dto(day) for day in days]


@dataclass(frozen=True)
class RemoveMealFromDayRequest:
    day_id: str
    user_id: str
    meal_id: str


@dataclass
class RemoveMealFromDay:
    """Detach a meal from a day and delete the meal."""

    days: DayRepository
    meals: MealRepository
    users: UserRepository
    transaction: TransactionContext

    def execute(self, request: RemoveMealFromDayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        day = self.days.get_by_id_and_user(day_id, user.id)
        if day is None:
            raise NotFoundError(f"Day {day_id} not found")
        meal = load_owned(self.meals.get_by_id, request.meal_id, user.id, "Meal")
        day.remove_meal(meal.id)

        def work() -> None:
            self.days.save(day)
            self.meals.delete(meal.id)

        self.transaction.run(work)
        return to_day_dto(day)


@dataclass(frozen=True)
class RemoveFakeMealFromDayRequest:
    day_id: str
    user_id: str
    fake_meal_id: str


@dataclass
class RemoveFakeMealFromDay:
    """Detach a fake meal from a day and delete it."""

    days: DayRepository
    fake_meals: FakeMealRepository
    users: UserRepository
    transaction: TransactionContext

    def execute(self, request: RemoveFakeMealFromDayRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        day = self.days.get_by_id_and_user(day_id, user.id)
        if day is None:
            raise NotFoundError(f"Day {day_id} not found")
        fake_meal = load_owned(
            self.fake_meals.get_by_id, request.fake_meal_id, user.id, "FakeMeal"
        )
        day.remove_meal(fake_meal.id)

        def work() -> None:
            self.days.save(day)
            self.fake_meals.delete(fake_meal.id)

        self.transaction.run(work)
        return to_day_dto(day)


@dataclass(frozen=True)
class UpdateDayMealsRequest:
    day_id: str
    user_id: str
    meal_ids: list[str]


@dataclass
class UpdateDayMeals:
    """Replace the ordered meal list of a day, creating the day if needed."""

    days: DayRepository
    meals: MealRepository
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: UpdateDayMealsRequest) -> DayDTO:
        user = load_user(self.users, request.user_id)
        day_id = _require_day_id(request.day_id)
        meal_ids = require_id_list(request.meal_ids, "meal_id")
        items: dict[str, Meal | FakeMeal] = {
            item.id: item
            for item in [
                *self.meals.get_by_ids(meal_ids),
                *self.fake_meals.get_by_ids(meal_ids),
            ]
        }
        for meal_id in meal_ids:
            item = items.get(meal_id)
            if item is None:
                raise NotFoundError(f"Meal {meal_id} not found")
            if item.user_id != user.id:
                raise AuthError(f"Meal {meal_id} does not belong to user {user.id}")
        day = _get_or_create_day(self.days, day_id, user.id)
        day.replace_meals(meal_ids)
        self.days.save(day)
        return to_day_dto(day)


@dataclass
class GetDayNutritionalSummary:
    days: DayRepository
    meals: MealRepository
    fake_meals: FakeMealRepository

    def execute(self, request: DayRequest) -> DayNutritionalSummaryDTO:
        user_id = require_id(request.user_id, "user_id")
        day_id = _require_day_id(request.day_id)
        day = self.days.get_by_id_and_user(day_id, user_id)
        if day is None:
            raise NotFoundError(f"Day {day_id} not found")
        assembled = _assemble(
            day,
            {meal.id: meal for meal in self.meals.get_by_ids(day.meal_ids)},
            {fake.id: fake for fake in self.fake_meals.get_by_ids(day.meal_ids)},
        )
        return DayNutritionalSummaryDTO(
            day_id=day.id,
            calories=assembled.calories,
            protein=assembled.protein,
            meals_count=assembled.meals_count,
        )


@dataclass
class GetAssembledDayById:
    """Resolve a day's meals and fake meals and compute its totals.

    Returns None when the user has no day with that id.
    """

    days: DayRepository
    meals: MealRepository
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: DayRequest) -> AssembledDayDTO | None:
        user = load_user(self.users, request.user_id)
        day = self.days.get_by_id_and_user(_require_day_id(request.day_id), user.id)
        if day is None:
            return None
        return _assemble(
            day,
            {meal.id: meal for meal in self.meals.get_by_ids(day.meal_ids)},
            {fake.id: fake for fake in self.fake_meals.get_by_ids(day.meal_ids)},
        )


@dataclass(frozen=True)
class GetMultipleAssembledDaysRequest:
    day_ids: list[str]
    user_id: str


@dataclass
class GetMultipleAssembledDaysByIds:
    """Assemble many days at once, aligned with the requested ids.

    Missing days yield None in their position.
    """

    days: DayRepository
    meals: MealRepository
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(
        self, request: GetMultipleAssembledDaysRequest
    ) -> list[AssembledDayDTO | None]:
        user = load_user(self.users, request.user_id)
        day_ids = [
            _require_day_id(day_id)
            for day_id in require_id_list(request.day_ids, "day_id")
        ]
        found = {
            day.id: day for day in self.days.get_by_ids_and_user(day_ids, user.id)
        }
        referenced = list(
            dict.fromkeys(
                meal_id for day in found.values() for meal_id in day.meal_ids
            )
        )
        meals = {meal.id: meal for meal in self.meals.get_by_ids(referenced)}
        fake_meals = {fake.id: fake for fake in self.fake_meals.get_by_ids(referenced)}
        return [
            _assemble(found[day_id], meals, fake_meals) if day_id in found else None
            for day_id in day_ids
        ]
