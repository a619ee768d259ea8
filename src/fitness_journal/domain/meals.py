"""Meals logged by users, with and without an ingredient breakdown."""

from dataclasses import dataclass, field
from datetime import datetime

from fitness_journal.domain.common import utc_now
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.ingredients import (
    IngredientLine,
    IngredientLinePatch,
    add_line,
    find_line,
    remove_line_by_ingredient_id,
)
from fitness_journal.domain.nutrition import NutritionTotals, sum_nutrition
from fitness_journal.domain.validation import (
    require_id,
    require_name,
    require_non_negative,
)


@dataclass(frozen=True)
class MealPatch:
    """Partial update for a meal."""

    name: str | None = None
    image_url: str | None = None


@dataclass
class Meal:
    """A logged meal composed of ingredient lines."""

    id: str
    user_id: str
    name: str
    ingredient_lines: list[IngredientLine]
    created_from_recipe_id: str | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        self.name = require_name(self.name)
        if not self.ingredient_lines:
            raise ValidationError("Meal: ingredient lines must not be empty")

    @property
    def calories(self) -> float:
        return self.totals.calories

    @property
    def protein(self) -> float:
        return self.totals.protein

    @property
    def totals(self) -> NutritionTotals:
        return sum_nutrition(self.ingredient_lines)

    def apply(self, patch: MealPatch) -> None:
        if patch.name is None and patch.image_url is None:
            raise ValidationError("Meal: no changes provided")
        if patch.name is not None:
            self.name = require_name(patch.name)
        if patch.image_url is not None:
            self.image_url = patch.image_url
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


@dataclass(frozen=True)
class FakeMealPatch:
    """Partial update for a fake meal."""

    name: str | None = None
    calories: float | None = None
    protein: float | None = None


@dataclass
class FakeMeal:
    """A quick-log meal with directly stated nutrition totals."""

    id: str
    user_id: str
    name: str
    calories: float
    protein: float
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        self.name = require_name(self.name)
        self.calories = require_non_negative(self.calories, "calories")
        self.protein = require_non_negative(self.protein, "protein")

    @property
    def totals(self) -> NutritionTotals:
        return NutritionTotals(calories=self.calories, protein=self.protein)

    def apply(self, patch: FakeMealPatch) -> None:
        if patch == FakeMealPatch():
            raise ValidationError("FakeMeal: no changes provided")
        name = require_name(patch.name) if patch.name is not None else self.name
        calories = (
            require_non_negative(patch.calories, "calories")
            if patch.calories is not None
            else self.calories
        )
        protein = (
            require_non_negative(patch.protein, "protein")
            if patch.protein is not None
            else self.protein
        )
        self.name = name
        self.calories = calories
        self.protein = protein
        self.updated_at = utc_now()
