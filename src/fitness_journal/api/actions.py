"""Form-bound mutations that report a message instead of raising.

Each action returns ``{"ok": bool, "message": str, "revalidate": [paths]}``;
``revalidate`` lists the pages whose data changed.
"""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Cookie, Depends, Request

from fitness_journal.api.dependencies import get_container
from fitness_journal.api.models import (
    CreateRecipeBody,
    DuplicateRecipeBody,
    IngredientLineBody,
    RenameRecipeBody,
)
from fitness_journal.containers import AppContainer
from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import DomainError, ValidationError
from fitness_journal.services.days import (
    RemoveFakeMealFromDay,
    RemoveFakeMealFromDayRequest,
    RemoveMealFromDay,
    RemoveMealFromDayRequest,
)
from fitness_journal.services.recipes import (
    AddIngredientToRecipe,
    AddIngredientToRecipeRequest,
    CreateRecipe,
    CreateRecipeRequest,
    DeleteRecipe,
    DeleteRecipeRequest,
    DuplicateRecipe,
    DuplicateRecipeRequest,
    RemoveIngredientFromRecipe,
    RemoveIngredientFromRecipeRequest,
    RenameRecipe,
    RenameRecipeRequest,
    UpdateRecipeImage,
    UpdateRecipeImageRequest,
)
from fitness_journal.services.users import load_owned, load_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/actions", tags=["actions"])

RECIPES_PATH = "/app/recipes"

_IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def _recipe_path(recipe_id: str) -> str:
    return f"{RECIPES_PATH}/{recipe_id}"


def _run_action(
    container: AppContainer,
    token: str | None,
    work: Callable[[str], tuple[str, list[str]]],
) -> dict[str, object]:
    """Resolve the user, run ``work`` and fold any failure into a message."""
    try:
        user_id = container.auth_service.get_current_user_id_from_token(token or "")
        message, revalidate = work(user_id)
    except DomainError as exc:
        return {"ok": False, "message": str(exc), "revalidate": []}
    except Exception:
        logger.exception("Server action failed")
        return {"ok": False, "message": "Something went wrong", "revalidate": []}
    return {"ok": True, "message": message, "revalidate": revalidate}


@router.post("/recipes")
async def create_recipe(
    body: CreateRecipeBody,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        recipe = CreateRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
            resolver=container.ingredient_resolver,
            transaction=container.transaction,
        ).execute(
            CreateRecipeRequest(
                user_id=user_id,
                name=body.name,
                ingredient_lines=[line.to_new_line() for line in body.ingredient_lines],
                image_url=body.image_url,
            )
        )
        return f"Recipe {recipe.name} created", [RECIPES_PATH]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/duplicate")
async def duplicate_recipe(
    recipe_id: str,
    body: DuplicateRecipeBody,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        recipe = DuplicateRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
        ).execute(
            DuplicateRecipeRequest(recipe_id=recipe_id, user_id=user_id, name=body.name)
        )
        return f"Recipe duplicated as {recipe.name}", [RECIPES_PATH]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/delete")
async def delete_recipe(
    recipe_id: str,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        DeleteRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
        ).execute(DeleteRecipeRequest(recipe_id=recipe_id, user_id=user_id))
        return "Recipe deleted", [RECIPES_PATH]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/rename")
async def rename_recipe(
    recipe_id: str,
    body: RenameRecipeBody,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        recipe = RenameRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
        ).execute(
            RenameRecipeRequest(recipe_id=recipe_id, user_id=user_id, name=body.name)
        )
        return f"Recipe renamed to {recipe.name}", [
            RECIPES_PATH,
            _recipe_path(recipe_id),
        ]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/image")
async def upload_recipe_image(
    recipe_id: str,
    request: Request,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Store the raw request body as the recipe image."""
    content = await request.body()
    content_type = request.headers.get("content-type", "").split(";")[0].strip()

    def work(user_id: str) -> tuple[str, list[str]]:
        extension = _IMAGE_EXTENSIONS.get(content_type)
        if extension is None:
            raise ValidationError(f"Unsupported image type: {content_type or 'none'}")
        if not content:
            raise ValidationError("Image is empty")
        repositories = container.repositories
        user = load_user(repositories.users, user_id)
        load_owned(repositories.recipes.get_by_id, recipe_id, user.id, "Recipe")
        url = container.image_store.save(f"{new_id()}{extension}", content)
        UpdateRecipeImage(
            recipes=repositories.recipes, users=repositories.users
        ).execute(
            UpdateRecipeImageRequest(
                recipe_id=recipe_id, user_id=user.id, image_url=url
            )
        )
        return "Recipe image updated", [RECIPES_PATH, _recipe_path(recipe_id)]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/ingredients")
async def add_recipe_ingredient(
    recipe_id: str,
    body: IngredientLineBody,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        AddIngredientToRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
            resolver=container.ingredient_resolver,
            transaction=container.transaction,
        ).execute(
            AddIngredientToRecipeRequest(
                recipe_id=recipe_id,
                user_id=user_id,
                source=body.to_source(),
                quantity_in_grams=body.quantity_in_grams,
            )
        )
        return "Ingredient added", [_recipe_path(recipe_id)]

    return _run_action(container, token, work)


@router.post("/recipes/{recipe_id}/ingredients/{ingredient_id}/remove")
async def remove_recipe_ingredient(
    recipe_id: str,
    ingredient_id: str,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    def work(user_id: str) -> tuple[str, list[str]]:
        RemoveIngredientFromRecipe(
            recipes=container.repositories.recipes,
            users=container.repositories.users,
        ).execute(
            RemoveIngredientFromRecipeRequest(
                recipe_id=recipe_id, user_id=user_id, ingredient_id=ingredient_id
            )
        )
        return "Ingredient removed", [_recipe_path(recipe_id)]

    return _run_action(container, token, work)


@router.post("/days/{day_id}/meals/{meal_id}/remove")
async def remove_meal_from_day(
    day_id: str,
    meal_id: str,
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a meal or a fake meal from the day, deleting it."""

    def work(user_id: str) -> tuple[str, list[str]]:
        repositories = container.repositories
        if repositories.meals.get_by_id(meal_id) is not None:
            RemoveMealFromDay(
                days=repositories.days,
                meals=repositories.meals,
                users=repositories.users,
                transaction=container.transaction,
            ).execute(
                RemoveMealFromDayRequest(
                    day_id=day_id, user_id=user_id, meal_id=meal_id
                )
            )
        else:
            RemoveFakeMealFromDay(
                days=repositories.days,
                fake_meals=repositories.fake_meals,
                users=repositories.users,
                transaction=container.transaction,
            ).execute(
                RemoveFakeMealFromDayRequest(
                    day_id=day_id, user_id=user_id, fake_meal_id=meal_id
                )
            )
        return "Meal removed", [f"/app/days/{day_id}"]

    return _run_action(container, token, work)
