"""Reusable recipes."""

from dataclasses import dataclass, field
from datetime import datetime

from fitness_journal.domain.common import new_id, utc_now
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.ingredients import (
    IngredientLine,
    IngredientLinePatch,
    add_line,
    ensure_unique_ingredients,
    find_line,
    remove_line_by_ingredient_id,
)
from fitness_journal.domain.meals import Meal
from fitness_journal.domain.nutrition import NutritionTotals, sum_nutrition
from fitness_journal.domain.validation import require_id, require_name

COPY_SUFFIX = " (Copy)"


@dataclass
class Recipe:
    """A named set of ingredient lines that can be turned into meals."""

    id: str
    user_id: str
    name: str
    ingredient_lines: list[IngredientLine]
    image_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        self.name = require_name(self.name)
        if not self.ingredient_lines:
            raise ValidationError("Recipe: ingredient lines must not be empty")
        ensure_unique_ingredients(self.ingredient_lines)

    @property
    def calories(self) -> float:
        return self.totals.calories

    @property
    def protein(self) -> float:
        return self.totals.protein

    @property
    def totals(self) -> NutritionTotals:
        return sum_nutrition(self.ingredient_lines)

    def rename(self, name: str) -> None:
        self.name = require_name(name)
        self.updated_at = utc_now()

    def update_image_url(self, image_url: str | None) -> None:
        self.image_url = image_url
        self.updated_at = utc_now()

    def add_ingredient_line(self, line: IngredientLine) -> None:
        add_line(self.ingredient_lines, line)
        self.updated_at = utc_now()

    def remove_ingredient_line_by_ingredient_id(
        self, ingredient_id: str
    ) -> IngredientLine:
        removed = remove_line_by_ingredient_id(self.ingredient_lines, ingredient_id)
        self.updated_at = utc_now()
        return removed

    def update_ingredient_line(
        self, line_id: str, patch: IngredientLinePatch
    ) -> IngredientLine:
        line = find_line(self.ingredient_lines, line_id)
        line.apply(patch)
        self.updated_at = utc_now()
        return line

    def duplicate(self, name: str | None = None) -> "Recipe":
        """Return a copy with fresh ids, named "<name> (Copy)" by default."""
        recipe_id = new_id()
        return Recipe(
            id=recipe_id,
            user_id=self.user_id,
            name=name or f"{self.name}{COPY_SUFFIX}",
            ingredient_lines=[
                line.copy_to(recipe_id, "recipe") for line in self.ingredient_lines
            ],
            image_url=self.image_url,
        )

    def to_meal(self, meal_id: str | None = None) -> Meal:
        """Create a meal carrying copies of this recipe's lines."""
        resolved_id = meal_id or new_id()
        return Meal(
            id=resolved_id,
            user_id=self.user_id,
            name=self.name,
            ingredient_lines=[
                line.copy_to(resolved_id, "meal") for line in self.ingredient_lines
            ],
            created_from_recipe_id=self.id,
            image_url=self.image_url,
        )
