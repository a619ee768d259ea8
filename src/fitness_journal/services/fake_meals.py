"""Use-cases for quick-log fake meals."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.meals import FakeMeal, FakeMealPatch
from fitness_journal.domain.validation import require_id
from fitness_journal.services.dtos import FakeMealDTO, to_fake_meal_dto
from fitness_journal.services.meals import require_id_list
from fitness_journal.services.users import (
    UserRepository,
    load_owned,
    load_user,
    visible_to,
)


class FakeMealRepository(Protocol):
    """Persistence interface for fake meals."""

    def get_by_id(self, fake_meal_id: str) -> FakeMeal | None:
        """Return a fake meal by id, if present."""

    def get_by_ids(self, fake_meal_ids: Sequence[str]) -> list[FakeMeal]:
        """Return the fake meals that exist among the given ids."""

    def get_all_for_user(self, user_id: str) -> list[FakeMeal]:
        """Return every fake meal owned by the user."""

    def save(self, fake_meal: FakeMeal) -> None:
        """Insert or replace a fake meal."""

    def delete(self, fake_meal_id: str) -> None:
        """Delete a fake meal by id."""


@dataclass(frozen=True)
class CreateFakeMealRequest:
    user_id: str
    name: str
    calories: float
    protein: float


@dataclass
class CreateFakeMeal:
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: CreateFakeMealRequest) -> FakeMealDTO:
        user = load_user(self.users, request.user_id)
        fake_meal = FakeMeal(
            id=new_id(),
            user_id=user.id,
            name=request.name,
            calories=request.calories,
            protein=request.protein,
        )
        self.fake_meals.save(fake_meal)
        return to_fake_meal_dto(fake_meal)


@dataclass(frozen=True)
class GetFakeMealByIdRequest:
    fake_meal_id: str
    user_id: str


@dataclass
class GetFakeMealById:
    fake_meals: FakeMealRepository

    def execute(self, request: GetFakeMealByIdRequest) -> FakeMealDTO | None:
        user_id = require_id(request.user_id, "user_id")
        fake_meal = visible_to(
            self.fake_meals.get_by_id(
                require_id(request.fake_meal_id, "fake_meal_id")
            ),
            user_id,
        )
        return to_fake_meal_dto(fake_meal) if fake_meal else None


@dataclass(frozen=True)
class GetFakeMealsByIdsRequest:
    fake_meal_ids: list[str]
    user_id: str


@dataclass
class GetFakeMealsByIds:
    fake_meals: FakeMealRepository

    def execute(self, request: GetFakeMealsByIdsRequest) -> list[FakeMealDTO]:
        user_id = require_id(request.user_id, "user_id")
        ids = require_id_list(request.fake_meal_ids, "fake_meal_id")
        return [
            to_fake_meal_dto(fake_meal)
            for fake_meal in self.fake_meals.get_by_ids(ids)
            if fake_meal.user_id == user_id
        ]


@dataclass
class GetAllFakeMealsForUser:
    fake_meals: FakeMealRepository

    def execute(self, user_id: str) -> list[FakeMealDTO]:
        resolved_id = require_id(user_id, "user_id")
        return [
            to_fake_meal_dto(fake_meal)
            for fake_meal in self.fake_meals.get_all_for_user(resolved_id)
        ]


@dataclass(frozen=True)
class UpdateFakeMealRequest:
    fake_meal_id: str
    user_id: str
    patch: FakeMealPatch


@dataclass
class UpdateFakeMeal:
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: UpdateFakeMealRequest) -> FakeMealDTO:
        user = load_user(self.users, request.user_id)
        fake_meal = load_owned(
            self.fake_meals.get_by_id, request.fake_meal_id, user.id, "FakeMeal"
        )
        fake_meal.apply(request.patch)
        self.fake_meals.save(fake_meal)
        return to_fake_meal_dto(fake_meal)


@dataclass(frozen=True)
class DeleteFakeMealRequest:
    fake_meal_id: str
    user_id: str


@dataclass
class DeleteFakeMeal:
    fake_meals: FakeMealRepository
    users: UserRepository

    def execute(self, request: DeleteFakeMealRequest) -> None:
        user = load_user(self.users, request.user_id)
        fake_meal = load_owned(
            self.fake_meals.get_by_id, request.fake_meal_id, user.id, "FakeMeal"
        )
        self.fake_meals.delete(fake_meal.id)
