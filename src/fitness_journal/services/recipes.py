"""Use-cases for recipes and meals created from them."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.ingredients import IngredientLine, IngredientLinePatch
from fitness_journal.domain.recipes import Recipe
from fitness_journal.domain.validation import require_id
from fitness_journal.services.dtos import MealDTO, RecipeDTO, to_meal_dto, to_recipe_dto
from fitness_journal.services.ingredients import IngredientResolver, IngredientSource
from fitness_journal.services.meals import MealRepository, require_id_list
from fitness_journal.services.transactions import TransactionContext
from fitness_journal.services.users import (
    UserRepository,
    load_owned,
    load_user,
    visible_to,
)

logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def get_by_id(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""

    def get_by_ids(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        """Return the recipes that exist among the given ids."""

    def get_all_for_user(self, user_id: str) -> list[Recipe]:
        """Return every recipe owned by the user."""

    def save(self, recipe: Recipe) -> None:
        """Insert or replace a recipe."""

    def delete(self, recipe_id: str) -> None:
        """Delete a recipe by id."""


@dataclass(frozen=True)
class NewIngredientLine:
    source: IngredientSource
    quantity_in_grams: float


@dataclass(frozen=True)
class CreateRecipeRequest:
    user_id: str
    name: str
    ingredient_lines: list[NewIngredientLine]
    image_url: str | None = None


@dataclass
class CreateRecipe:
    """Create a recipe, registering external ingredients on the way."""

    recipes: RecipeRepository
    users: UserRepository
    resolver: IngredientResolver
    transaction: TransactionContext

    def execute(self, request: CreateRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        if not request.ingredient_lines:
            raise ValidationError("Recipe needs at least one ingredient line")
        resolutions = self.resolver.resolve_all(
            [line.source for line in request.ingredient_lines]
        )
        recipe_id = new_id()
        recipe = Recipe(
            id=recipe_id,
            user_id=user.id,
            name=request.name,
            ingredient_lines=[
                IngredientLine(
                    id=new_id(),
                    parent_id=recipe_id,
                    parent_type="recipe",
                    ingredient=resolution.ingredient,
                    quantity_in_grams=line.quantity_in_grams,
                )
                for line, resolution in zip(
                    request.ingredient_lines, resolutions, strict=True
                )
            ],
            image_url=request.image_url,
        )

        def work() -> None:
            self.resolver.persist(resolutions)
            self.recipes.save(recipe)

        self.transaction.run(work)
        logger.info("Created recipe %s for user %s", recipe.id, user.id)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class GetRecipeByIdRequest:
    recipe_id: str
    user_id: str


@dataclass
class GetRecipeById:
    recipes: RecipeRepository

    def execute(self, request: GetRecipeByIdRequest) -> RecipeDTO | None:
        user_id = require_id(request.user_id, "user_id")
        recipe = visible_to(
            self.recipes.get_by_id(require_id(request.recipe_id, "recipe_id")),
            user_id,
        )
        return to_recipe_dto(recipe) if recipe else None


@dataclass(frozen=True)
class GetRecipesByIdsRequest:
    recipe_ids: list[str]
    user_id: str


@dataclass
class GetRecipesByIds:
    recipes: RecipeRepository

    def execute(self, request: GetRecipesByIdsRequest) -> list[RecipeDTO]:
        user_id = require_id(request.user_id, "user_id")
        ids = require_id_list(request.recipe_ids, "recipe_id")
        return [
            to_recipe_dto(recipe)
            for recipe in self.recipes.get_by_ids(ids)
            if recipe.user_id == user_id
        ]


@dataclass
class GetAllRecipesForUser:
    recipes: RecipeRepository

    def execute(self, user_id: str) -> list[RecipeDTO]:
        resolved_id = require_id(user_id, "user_id")
        return [
            to_recipe_dto(recipe)
            for recipe in self.recipes.get_all_for_user(resolved_id)
        ]


@dataclass(frozen=True)
class RenameRecipeRequest:
    recipe_id: str
    user_id: str
    name: str


@dataclass
class RenameRecipe:
    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: RenameRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        recipe.rename(request.name)
        self.recipes.save(recipe)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class UpdateRecipeImageRequest:
    recipe_id: str
    user_id: str
    image_url: str | None


@dataclass
class UpdateRecipeImage:
    """Point a recipe at an already stored image."""

    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: UpdateRecipeImageRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        if request.image_url is not None and not request.image_url.strip():
            raise ValidationError("image_url must not be blank")
        recipe.update_image_url(request.image_url)
        self.recipes.save(recipe)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class DuplicateRecipeRequest:
    recipe_id: str
    user_id: str
    name: str | None = None


@dataclass
class DuplicateRecipe:
    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: DuplicateRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        copy = recipe.duplicate(request.name)
        self.recipes.save(copy)
        return to_recipe_dto(copy)


@dataclass(frozen=True)
class DeleteRecipeRequest:
    recipe_id: str
    user_id: str


@dataclass
class DeleteRecipe:
    """Delete a recipe. Meals created from it are kept."""

    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: DeleteRecipeRequest) -> None:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        self.recipes.delete(recipe.id)
        logger.info("Deleted recipe %s", recipe.id)


@dataclass(frozen=True)
class AddIngredientToRecipeRequest:
    recipe_id: str
    user_id: str
    source: IngredientSource
    quantity_in_grams: float


@dataclass
class AddIngredientToRecipe:
    recipes: RecipeRepository
    users: UserRepository
    resolver: IngredientResolver
    transaction: TransactionContext

    def execute(self, request: AddIngredientToRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        resolution = self.resolver.resolve(request.source)
        recipe.add_ingredient_line(
            IngredientLine(
                id=new_id(),
                parent_id=recipe.id,
                parent_type="recipe",
                ingredient=resolution.ingredient,
                quantity_in_grams=request.quantity_in_grams,
            )
        )

        def work() -> None:
            self.resolver.persist([resolution])
            self.recipes.save(recipe)

        self.transaction.run(work)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class RemoveIngredientFromRecipeRequest:
    recipe_id: str
    user_id: str
    ingredient_id: str


@dataclass
class RemoveIngredientFromRecipe:
    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: RemoveIngredientFromRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        recipe.remove_ingredient_line_by_ingredient_id(
            require_id(request.ingredient_id, "ingredient_id")
        )
        self.recipes.save(recipe)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class UpdateIngredientInRecipeRequest:
    recipe_id: str
    user_id: str
    ingredient_line_id: str
    patch: IngredientLinePatch


@dataclass
class UpdateIngredientInRecipe:
    recipes: RecipeRepository
    users: UserRepository

    def execute(self, request: UpdateIngredientInRecipeRequest) -> RecipeDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        recipe.update_ingredient_line(
            require_id(request.ingredient_line_id, "ingredient_line_id"),
            request.patch,
        )
        self.recipes.save(recipe)
        return to_recipe_dto(recipe)


@dataclass(frozen=True)
class CreateMealFromRecipeRequest:
    recipe_id: str
    user_id: str


@dataclass
class CreateMealFromRecipe:
    recipes: RecipeRepository
    meals: MealRepository
    users: UserRepository

    def execute(self, request: CreateMealFromRecipeRequest) -> MealDTO:
        user = load_user(self.users, request.user_id)
        recipe = load_owned(
            self.recipes.get_by_id, request.recipe_id, user.id, "Recipe"
        )
        meal = recipe.to_meal()
        self.meals.save(meal)
        return to_meal_dto(meal)
