"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fitness_journal.api.app import create_app
from fitness_journal.config import Settings
from fitness_journal.containers import AppContainer, Repositories, build_container
from fitness_journal.domain.common import new_id
from fitness_journal.domain.ingredients import (
    Ingredient,
    IngredientLine,
    IngredientSearchResult,
    NutritionalInfo,
)
from fitness_journal.domain.meals import FakeMeal, Meal
from fitness_journal.domain.recipes import Recipe
from fitness_journal.domain.users import User
from fitness_journal.services.ingredients import IngredientFinder


@dataclass
class FakeIngredientFinder(IngredientFinder):
    """Finder returning canned results and recording queries."""

    results: list[IngredientSearchResult] = field(default_factory=list)
    barcodes: dict[str, IngredientSearchResult] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)

    async def search_by_fuzzy_name(self, name: str) -> list[IngredientSearchResult]:
        self.queries.append(name)
        return list(self.results)

    async def search_by_barcode(self, barcode: str) -> IngredientSearchResult | None:
        self.queries.append(barcode)
        return self.barcodes.get(barcode)


def make_user(
    repositories: Repositories,
    email: str = "alice@example.com",
    name: str = "Alice",
) -> User:
    user = User(id=new_id(), name=name, email=email, hashed_password="hashed")
    repositories.users.save(user)
    return user


def make_ingredient(
    name: str = "Chicken breast",
    calories: float = 165,
    protein: float = 31,
    repositories: Repositories | None = None,
) -> Ingredient:
    ingredient = Ingredient(
        id=new_id(),
        name=name,
        nutritional_info_per_100g=NutritionalInfo(calories=calories, protein=protein),
    )
    if repositories is not None:
        repositories.ingredients.save(ingredient)
    return ingredient


def make_line(
    parent_id: str,
    ingredient: Ingredient,
    quantity_in_grams: float,
    parent_type: str = "meal",
) -> IngredientLine:
    return IngredientLine(
        id=new_id(),
        parent_id=parent_id,
        parent_type=parent_type,
        ingredient=ingredient,
        quantity_in_grams=quantity_in_grams,
    )


def make_meal(
    repositories: Repositories,
    user_id: str,
    name: str = "Lunch",
    calories: float = 165,
    protein: float = 31,
    grams: float = 200,
) -> Meal:
    meal_id = new_id()
    ingredient = make_ingredient(calories=calories, protein=protein)
    meal = Meal(
        id=meal_id,
        user_id=user_id,
        name=name,
        ingredient_lines=[make_line(meal_id, ingredient, grams)],
    )
    repositories.meals.save(meal)
    return meal


def make_fake_meal(
    repositories: Repositories,
    user_id: str,
    name: str = "Snack",
    calories: float = 250,
    protein: float = 10,
) -> FakeMeal:
    fake_meal = FakeMeal(
        id=new_id(), user_id=user_id, name=name, calories=calories, protein=protein
    )
    repositories.fake_meals.save(fake_meal)
    return fake_meal


def make_recipe(
    repositories: Repositories,
    user_id: str,
    name: str = "Chicken and rice",
    ingredients: list[tuple[Ingredient, float]] | None = None,
) -> Recipe:
    recipe_id = new_id()
    pairs = ingredients or [
        (make_ingredient(repositories=repositories), 200),
        (make_ingredient("Rice", 130, 2.7, repositories), 150),
    ]
    recipe = Recipe(
        id=recipe_id,
        user_id=user_id,
        name=name,
        ingredient_lines=[
            make_line(recipe_id, ingredient, grams, parent_type="recipe")
            for ingredient, grams in pairs
        ],
    )
    repositories.recipes.save(recipe)
    return recipe


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        repository_backend="memory",
        data_dir=tmp_path / "data",
        images_dir=tmp_path / "images",
        jwt_secret="test-secret",
    )


@pytest.fixture
def ingredient_finder() -> FakeIngredientFinder:
    return FakeIngredientFinder()


@pytest.fixture
def container(
    settings: Settings, ingredient_finder: FakeIngredientFinder
) -> AppContainer:
    return build_container(settings, ingredient_finder=ingredient_finder)


@pytest.fixture
def repositories(container: AppContainer) -> Repositories:
    return container.repositories


@pytest.fixture
def user(repositories: Repositories) -> User:
    return make_user(repositories)


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def signed_in_client(
    client: TestClient, container: AppContainer, user: User
) -> TestClient:
    client.cookies.set("token", container.auth_service.generate_token(user.id))
    return client
