"""Tests for meal, fake meal and ingredient use-cases."""

import asyncio

import pytest

from fitness_journal.domain.errors import AuthError, NotFoundError, ValidationError
from fitness_journal.domain.ingredients import (
    IngredientLinePatch,
    IngredientPatch,
    IngredientSearchResult,
)
from fitness_journal.domain.meals import FakeMealPatch, MealPatch
from fitness_journal.services.cache import InMemoryCache
from fitness_journal.services.fake_meals import (
    CreateFakeMeal,
    CreateFakeMealRequest,
    DeleteFakeMeal,
    DeleteFakeMealRequest,
    GetAllFakeMealsForUser,
    GetFakeMealById,
    GetFakeMealByIdRequest,
    UpdateFakeMeal,
    UpdateFakeMealRequest,
)
from fitness_journal.services.ingredients import (
    CreateIngredient,
    CreateIngredientRequest,
    DeleteIngredient,
    ExternalIngredient,
    GetAllIngredients,
    GetIngredientsByBarcode,
    GetIngredientsByFuzzyName,
    GetIngredientsByIds,
    IngredientSource,
    UpdateIngredient,
    UpdateIngredientRequest,
)
from fitness_journal.services.meals import (
    AddIngredientToMeal,
    AddIngredientToMealRequest,
    DeleteMeal,
    DeleteMealRequest,
    GetAllMealsForUser,
    GetMealById,
    GetMealByIdRequest,
    GetMealsByIds,
    GetMealsByIdsRequest,
    RemoveIngredientFromMeal,
    RemoveIngredientFromMealRequest,
    UpdateIngredientInMeal,
    UpdateIngredientInMealRequest,
    UpdateMeal,
    UpdateMealRequest,
)
from tests.conftest import make_fake_meal, make_ingredient, make_meal, make_user


def test_delete_meal_of_other_user_raises_auth_error(container, user) -> None:
    repositories = container.repositories
    other = make_user(repositories, email="bob@example.com", name="Bob")
    meal = make_meal(repositories, other.id)
    use_case = DeleteMeal(meals=repositories.meals, users=repositories.users)

    with pytest.raises(AuthError):
        use_case.execute(DeleteMealRequest(meal_id=meal.id, user_id=user.id))
    assert repositories.meals.get_by_id(meal.id) is not None


def test_delete_meal_then_get_returns_none(container, user) -> None:
    repositories = container.repositories
    meal = make_meal(repositories, user.id)
    use_case = DeleteMeal(meals=repositories.meals, users=repositories.users)

    use_case.execute(DeleteMealRequest(meal_id=meal.id, user_id=user.id))

    get_meal = GetMealById(meals=repositories.meals)
    request = GetMealByIdRequest(meal_id=meal.id, user_id=user.id)
    assert get_meal.execute(request) is None
    with pytest.raises(NotFoundError):
        use_case.execute(DeleteMealRequest(meal_id=meal.id, user_id=user.id))


def test_meal_queries_are_user_scoped(container, user) -> None:
    repositories = container.repositories
    other = make_user(repositories, email="bob@example.com", name="Bob")
    mine = make_meal(repositories, user.id)
    theirs = make_meal(repositories, other.id)

    by_ids = GetMealsByIds(meals=repositories.meals).execute(
        GetMealsByIdsRequest(meal_ids=[theirs.id, mine.id], user_id=user.id)
    )
    hidden = GetMealById(meals=repositories.meals).execute(
        GetMealByIdRequest(meal_id=theirs.id, user_id=user.id)
    )

    assert [meal.id for meal in by_ids] == [mine.id]
    assert hidden is None
    assert GetAllMealsForUser(meals=repositories.meals).execute("nobody") == []
    with pytest.raises(ValidationError):
        GetAllMealsForUser(meals=repositories.meals).execute("  ")


def test_add_ingredient_to_meal_increases_total(container, user) -> None:
    repositories = container.repositories
    meal = make_meal(repositories, user.id)
    yoghurt = make_ingredient("Yoghurt", 200, 10, repositories)

    updated = AddIngredientToMeal(
        meals=repositories.meals,
        users=repositories.users,
        resolver=container.ingredient_resolver,
        transaction=container.transaction,
    ).execute(
        AddIngredientToMealRequest(
            meal_id=meal.id,
            user_id=user.id,
            source=IngredientSource(ingredient_id=yoghurt.id),
            quantity_in_grams=50,
        )
    )

    assert updated.calories == 430
    assert len(updated.ingredient_lines) == 2


def test_add_external_ingredient_creates_ingredient_once(container, user) -> None:
    repositories = container.repositories
    first = make_meal(repositories, user.id)
    second = make_meal(repositories, user.id)
    external = ExternalIngredient(
        external_id="3017620422003",
        source="openfoodfacts",
        name="Hazelnut spread",
        calories_per_100g=539,
        protein_per_100g=6.3,
    )
    use_case = AddIngredientToMeal(
        meals=repositories.meals,
        users=repositories.users,
        resolver=container.ingredient_resolver,
        transaction=container.transaction,
    )

    for meal in (first, second):
        use_case.execute(
            AddIngredientToMealRequest(
                meal_id=meal.id,
                user_id=user.id,
                source=IngredientSource(external=external),
                quantity_in_grams=20,
            )
        )

    ref = repositories.external_ingredient_refs.get_by_external_id_and_source(
        "3017620422003", "openfoodfacts"
    )
    assert ref is not None
    assert [x.name for x in repositories.ingredients.get_all()] == ["Hazelnut spread"]
    stored = repositories.meals.get_by_id(second.id)
    assert stored.ingredient_lines[1].ingredient.id == ref.ingredient_id


def test_remove_and_update_meal_lines(container, user) -> None:
    repositories = container.repositories
    meal = make_meal(repositories, user.id)
    yoghurt = make_ingredient("Yoghurt", 200, 10, repositories)
    AddIngredientToMeal(
        meals=repositories.meals,
        users=repositories.users,
        resolver=container.ingredient_resolver,
        transaction=container.transaction,
    ).execute(
        AddIngredientToMealRequest(
            meal_id=meal.id,
            user_id=user.id,
            source=IngredientSource(ingredient_id=yoghurt.id),
            quantity_in_grams=50,
        )
    )

    removed = RemoveIngredientFromMeal(
        meals=repositories.meals, users=repositories.users
    ).execute(
        RemoveIngredientFromMealRequest(
            meal_id=meal.id, user_id=user.id, ingredient_id=yoghurt.id
        )
    )
    line_id = removed.ingredient_lines[0].id
    updated = UpdateIngredientInMeal(
        meals=repositories.meals, users=repositories.users
    ).execute(
        UpdateIngredientInMealRequest(
            meal_id=meal.id,
            user_id=user.id,
            ingredient_line_id=line_id,
            patch=IngredientLinePatch(quantity_in_grams=100),
        )
    )
    renamed = UpdateMeal(meals=repositories.meals, users=repositories.users).execute(
        UpdateMealRequest(meal_id=meal.id, user_id=user.id, patch=MealPatch("Dinner"))
    )

    assert removed.calories == 330
    assert updated.calories == 165
    assert renamed.name == "Dinner"


def test_fake_meal_lifecycle(container, user) -> None:
    repositories = container.repositories
    created = CreateFakeMeal(
        fake_meals=repositories.fake_meals, users=repositories.users
    ).execute(
        CreateFakeMealRequest(user_id=user.id, name="Bar", calories=210, protein=20)
    )
    updated = UpdateFakeMeal(
        fake_meals=repositories.fake_meals, users=repositories.users
    ).execute(
        UpdateFakeMealRequest(
            fake_meal_id=created.id,
            user_id=user.id,
            patch=FakeMealPatch(protein=22),
        )
    )

    assert (updated.calories, updated.protein) == (210, 22)
    listed = GetAllFakeMealsForUser(fake_meals=repositories.fake_meals).execute(
        user.id
    )
    assert [x.id for x in listed] == [created.id]

    DeleteFakeMeal(
        fake_meals=repositories.fake_meals, users=repositories.users
    ).execute(DeleteFakeMealRequest(fake_meal_id=created.id, user_id=user.id))
    assert GetFakeMealById(fake_meals=repositories.fake_meals).execute(
        GetFakeMealByIdRequest(fake_meal_id=created.id, user_id=user.id)
    ) is None


def test_update_fake_meal_of_other_user(container, user) -> None:
    repositories = container.repositories
    other = make_user(repositories, email="bob@example.com", name="Bob")
    fake = make_fake_meal(repositories, other.id)

    with pytest.raises(AuthError):
        UpdateFakeMeal(
            fake_meals=repositories.fake_meals, users=repositories.users
        ).execute(
            UpdateFakeMealRequest(
                fake_meal_id=fake.id, user_id=user.id, patch=FakeMealPatch(name="x")
            )
        )


def test_ingredient_catalogue(container) -> None:
    repositories = container.repositories
    created = CreateIngredient(ingredients=repositories.ingredients).execute(
        CreateIngredientRequest(name="Oats", calories_per_100g=389, protein_per_100g=17)
    )
    updated = UpdateIngredient(ingredients=repositories.ingredients).execute(
        UpdateIngredientRequest(
            ingredient_id=created.id, patch=IngredientPatch(protein=16.9)
        )
    )

    assert updated.protein_per_100g == 16.9
    found = GetIngredientsByIds(ingredients=repositories.ingredients).execute(
        [created.id, "missing"]
    )
    assert [x.id for x in found] == [created.id]

    DeleteIngredient(ingredients=repositories.ingredients).execute(created.id)
    assert GetAllIngredients(ingredients=repositories.ingredients).execute() == []
    with pytest.raises(NotFoundError):
        DeleteIngredient(ingredients=repositories.ingredients).execute(created.id)


def test_fuzzy_search_is_cached(ingredient_finder) -> None:
    ingredient_finder.results = [
        IngredientSearchResult(
            name="Skyr",
            calories_per_100g=63,
            protein_per_100g=11,
            external_id="123",
            source="openfoodfacts",
        )
    ]
    use_case = GetIngredientsByFuzzyName(
        finder=ingredient_finder, cache=InMemoryCache(), ttl_seconds=60
    )

    first = asyncio.run(use_case.execute("Skyr"))
    second = asyncio.run(use_case.execute("skyr"))

    assert first == second
    assert first[0].name == "Skyr"
    assert ingredient_finder.queries == ["Skyr"]


def test_barcode_lookup(ingredient_finder) -> None:
    ingredient_finder.barcodes["5449000000996"] = IngredientSearchResult(
        name="Cola",
        calories_per_100g=42,
        protein_per_100g=0,
        external_id="5449000000996",
        source="openfoodfacts",
        barcode="5449000000996",
    )
    use_case = GetIngredientsByBarcode(finder=ingredient_finder)

    found = asyncio.run(use_case.execute("5449000000996"))

    assert found is not None
    assert found.barcode == "5449000000996"
    assert asyncio.run(use_case.execute("000")) is None
    with pytest.raises(ValidationError):
        asyncio.run(use_case.execute("12ab"))
