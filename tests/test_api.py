"""Tests for the HTTP routes."""

from fastapi.testclient import TestClient

from fitness_journal.api.app import create_app
from fitness_journal.containers import build_container
from fitness_journal.domain.days import Day
from fitness_journal.domain.errors import InfrastructureError
from fitness_journal.domain.ingredients import IngredientSearchResult
from tests.conftest import (
    FakeIngredientFinder,
    make_fake_meal,
    make_meal,
    make_recipe,
    make_user,
)

_SKYR = IngredientSearchResult(
    name="Skyr",
    calories_per_100g=63,
    protein_per_100g=11,
    external_id="5701",
    source="openfoodfacts",
    barcode="5701",
)


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register_sets_session_cookie(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "alice@example.com", "password": "long-enough"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["user"]["email"] == "alice@example.com"
    assert "hashed_password" not in body["data"]["user"]
    assert "token" in response.cookies


def test_register_duplicate_and_invalid(client) -> None:
    payload = {"name": "Alice", "email": "alice@example.com", "password": "long-enough"}
    client.post("/api/auth/register", json=payload)

    duplicate = client.post("/api/auth/register", json=payload)
    short = client.post(
        "/api/auth/register",
        json={"name": "Bob", "email": "bob@example.com", "password": "short"},
    )
    missing = client.post("/api/auth/register", json={"name": "Bob"})

    assert duplicate.status_code == 409
    assert duplicate.json()["status"] == "fail"
    assert short.status_code == 422
    assert missing.status_code == 422
    assert missing.json()["data"]["message"] == "Invalid request"


def test_login_and_logout(client) -> None:
    client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "alice@example.com", "password": "long-enough"},
    )
    client.cookies.clear()

    bad = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"}
    )
    good = client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "long-enough"},
    )
    logout = client.post("/api/auth/logout")

    assert bad.status_code == 422
    assert bad.json()["data"]["message"] == "Invalid email or password"
    assert good.status_code == 200
    assert "token" in good.cookies
    assert logout.status_code == 200
    assert logout.json() == {"status": "success", "data": None}
    assert "token" not in client.cookies


def test_app_pages_redirect_signed_out_visitors(client) -> None:
    response = client.get("/app/days", follow_redirects=False)
    client.cookies.set("token", "forged")
    forged = client.get("/app/days", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/auth/login"
    assert forged.status_code == 307
    assert "Sign in" in client.get("/auth/login").text


def test_api_requires_session(client) -> None:
    response = client.get("/api/recipes")

    assert response.status_code == 422
    assert response.json() == {
        "status": "fail",
        "data": {"message": "Not authenticated"},
    }


def test_view_assembled_days(signed_in_client, repositories, user) -> None:
    meal = make_meal(repositories, user.id)
    fake_meal = make_fake_meal(repositories, user.id)
    repositories.days.save(
        Day(id="20240301", user_id=user.id, meal_ids=[meal.id, fake_meal.id])
    )

    single = signed_in_client.get("/app/days/20240301").json()["data"]["day"]
    many = signed_in_client.get("/app/days?ids=20240302,20240301").json()["data"]

    assert single["calories"] == 580
    assert [entry["kind"] for entry in single["meals"]] == ["meal", "fake_meal"]
    assert [day["id"] if day else None for day in many["days"]] == [None, "20240301"]


def test_add_recipes_to_days(signed_in_client, repositories, user) -> None:
    recipe = make_recipe(repositories, user.id)

    single = signed_in_client.post(
        "/api/days/20240301/meals", json={"recipe_id": recipe.id}
    )
    bulk = signed_in_client.post(
        "/api/days/20240301/meals/bulk", json={"recipe_ids": [recipe.id, recipe.id]}
    )
    spread = signed_in_client.post(
        "/api/days/meals/bulk",
        json={"day_ids": ["20240302", "20240303"], "recipe_ids": [recipe.id]},
    )
    invalid = signed_in_client.post(
        "/api/days/2024-03-01/meals", json={"recipe_id": recipe.id}
    )
    unknown = signed_in_client.post(
        "/api/days/20240301/meals", json={"recipe_id": "missing"}
    )

    assert single.status_code == 200
    assert len(single.json()["data"]["day"]["meal_ids"]) == 1
    assert len(bulk.json()["data"]["day"]["meal_ids"]) == 3
    assert [day["id"] for day in spread.json()["data"]["days"]] == [
        "20240302",
        "20240303",
    ]
    assert invalid.status_code == 422
    assert unknown.status_code == 404


def test_ingredient_search_and_barcode(container, signed_in_client) -> None:
    container.ingredient_finder.results = [_SKYR]
    container.ingredient_finder.barcodes = {"5701": _SKYR}

    search = signed_in_client.get("/api/ingredients/search", params={"name": "skyr"})
    signed_in_client.get("/api/ingredients/search", params={"name": "SKYR"})
    found = signed_in_client.get("/api/ingredients/barcode/5701")
    missing = signed_in_client.get("/api/ingredients/barcode/0000")
    not_digits = signed_in_client.get("/api/ingredients/barcode/abc")

    assert search.json()["data"]["ingredients"][0]["name"] == "Skyr"
    assert container.ingredient_finder.queries.count("skyr") == 1
    assert "SKYR" not in container.ingredient_finder.queries
    assert found.json()["data"]["ingredient"]["external_id"] == "5701"
    assert missing.status_code == 404
    assert missing.json()["data"] == {"barcode": "No product found for 0000"}
    assert not_digits.status_code == 422


def test_list_recipes(signed_in_client, repositories, user) -> None:
    recipe = make_recipe(repositories, user.id)

    response = signed_in_client.get("/api/recipes")

    recipes = response.json()["data"]["recipes"]
    assert [item["id"] for item in recipes] == [recipe.id]
    assert recipes[0]["calories"] == recipe.calories


def test_serve_images(client, container) -> None:
    container.image_store.save("oats.png", b"\x89PNG")

    found = client.get("/api/images/oats.png")
    missing = client.get("/api/images/nope.png")
    invalid = client.get("/api/images/..%5Csecret")

    assert found.status_code == 200
    assert found.content == b"\x89PNG"
    assert found.headers["content-type"] == "image/png"
    assert "max-age" in found.headers["cache-control"]
    assert missing.status_code == 404
    assert invalid.status_code == 422


def test_recipe_actions(signed_in_client, repositories, user) -> None:
    created = signed_in_client.post(
        "/actions/recipes",
        json={
            "name": "Banana bowl",
            "ingredient_lines": [
                {
                    "external": {
                        "external_id": "4011",
                        "source": "usda",
                        "name": "Banana",
                        "calories_per_100g": 89,
                        "protein_per_100g": 1.1,
                    },
                    "quantity_in_grams": 120,
                }
            ],
        },
    ).json()
    recipe = repositories.recipes.get_all_for_user(user.id)[0]

    renamed = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/rename", json={"name": "Banana split"}
    ).json()
    image = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/image",
        content=b"\x89PNG",
        headers={"content-type": "image/png"},
    ).json()
    bad_image = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/image",
        content=b"GIF89a",
        headers={"content-type": "image/gif"},
    ).json()
    duplicated = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/duplicate", json={}
    ).json()

    assert created == {
        "ok": True,
        "message": "Recipe Banana bowl created",
        "revalidate": ["/app/recipes"],
    }
    assert renamed["revalidate"] == ["/app/recipes", f"/app/recipes/{recipe.id}"]
    assert image["ok"] is True
    stored = repositories.recipes.get_by_id(recipe.id)
    assert stored.name == "Banana split"
    assert stored.image_url.startswith("/api/images/")
    assert bad_image["ok"] is False
    assert "image/gif" in bad_image["message"]
    assert duplicated["message"] == "Recipe duplicated as Banana split (Copy)"
    assert len(repositories.recipes.get_all_for_user(user.id)) == 2


def test_recipe_image_action_rejects_foreign_recipe_without_writing(
    signed_in_client, repositories, settings
) -> None:
    stranger = make_user(repositories, email="bob@example.com", name="Bob")
    foreign = make_recipe(repositories, stranger.id)

    foreign_upload = signed_in_client.post(
        f"/actions/recipes/{foreign.id}/image",
        content=b"\x89PNG",
        headers={"content-type": "image/png"},
    ).json()
    missing_upload = signed_in_client.post(
        "/actions/recipes/missing-recipe/image",
        content=b"\x89PNG",
        headers={"content-type": "image/png"},
    ).json()

    assert foreign_upload["ok"] is False
    assert missing_upload["ok"] is False
    assert repositories.recipes.get_by_id(foreign.id).image_url is None
    images_dir = settings.images_dir
    assert not images_dir.exists() or list(images_dir.iterdir()) == []


def test_recipe_ingredient_actions(signed_in_client, repositories, user) -> None:
    recipe = make_recipe(repositories, user.id)
    chicken_id = recipe.ingredient_lines[0].ingredient.id
    rice_id = recipe.ingredient_lines[1].ingredient.id

    removed = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/ingredients/{chicken_id}/remove"
    ).json()
    last = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/ingredients/{rice_id}/remove"
    ).json()
    added = signed_in_client.post(
        f"/actions/recipes/{recipe.id}/ingredients",
        json={"ingredient_id": chicken_id, "quantity_in_grams": 100},
    ).json()
    deleted = signed_in_client.post(f"/actions/recipes/{recipe.id}/delete").json()

    assert removed["ok"] is True
    assert last == {
        "ok": False,
        "message": "Cannot remove the last ingredient line",
        "revalidate": [],
    }
    assert added["revalidate"] == [f"/app/recipes/{recipe.id}"]
    assert deleted["ok"] is True
    assert repositories.recipes.get_by_id(recipe.id) is None


def test_remove_meal_action_handles_meals_and_fake_meals(
    signed_in_client, repositories, user
) -> None:
    meal = make_meal(repositories, user.id)
    fake_meal = make_fake_meal(repositories, user.id)
    repositories.days.save(
        Day(id="20240301", user_id=user.id, meal_ids=[meal.id, fake_meal.id])
    )

    first = signed_in_client.post(f"/actions/days/20240301/meals/{meal.id}/remove")
    second = signed_in_client.post(
        f"/actions/days/20240301/meals/{fake_meal.id}/remove"
    )

    assert first.json()["revalidate"] == ["/app/days/20240301"]
    assert second.json()["ok"] is True
    assert repositories.days.get_by_id_and_user("20240301", user.id).meal_ids == []
    assert repositories.meals.get_by_id(meal.id) is None
    assert repositories.fake_meals.get_by_id(fake_meal.id) is None


def test_actions_without_session_report_failure(client) -> None:
    response = client.post("/actions/recipes/abc/delete")

    assert response.status_code == 200
    assert response.json()["ok"] is False


class _BrokenFinder(FakeIngredientFinder):
    async def search_by_fuzzy_name(self, name: str) -> list[IngredientSearchResult]:
        raise InfrastructureError("upstream down")


def test_unexpected_errors_return_jsend_error(settings, user) -> None:
    container = build_container(settings, ingredient_finder=_BrokenFinder())
    container.repositories.users.save(user)
    client = TestClient(create_app(container), raise_server_exceptions=False)
    client.cookies.set("token", container.auth_service.generate_token(user.id))

    response = client.get("/api/ingredients/search", params={"name": "rice"})

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error"}
