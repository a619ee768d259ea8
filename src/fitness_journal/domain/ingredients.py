"""Ingredients, external references and ingredient lines."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal

from fitness_journal.domain.common import new_id, utc_now
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.nutrition import scale_per_100g
from fitness_journal.domain.validation import (
    require_id,
    require_name,
    require_non_negative,
    require_positive,
)

ParentType = Literal["meal", "recipe"]
EXTERNAL_SOURCES = ("openfoodfacts", "usda")


@dataclass(frozen=True)
class NutritionalInfo:
    """Nutrition basis per 100 grams."""

    calories: float
    protein: float

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "calories", require_non_negative(self.calories, "calories")
        )
        object.__setattr__(
            self, "protein", require_non_negative(self.protein, "protein")
        )


@dataclass(frozen=True)
class IngredientPatch:
    """Partial update for an ingredient."""

    name: str | None = None
    calories: float | None = None
    protein: float | None = None
    image_url: str | None = None


@dataclass
class Ingredient:
    """A food with a per-100g nutrition basis."""

    id: str
    name: str
    nutritional_info_per_100g: NutritionalInfo
    image_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.name = require_name(self.name)

    @property
    def calories(self) -> float:
        return self.nutritional_info_per_100g.calories

    @property
    def protein(self) -> float:
        return self.nutritional_info_per_100g.protein

    def apply(self, patch: IngredientPatch) -> None:
        """Validate and apply a partial update in one step."""
        if patch == IngredientPatch():
            raise ValidationError("Ingredient: no changes provided")
        name = require_name(patch.name) if patch.name is not None else self.name
        info = NutritionalInfo(
            calories=(
                patch.calories if patch.calories is not None else self.calories
            ),
            protein=patch.protein if patch.protein is not None else self.protein,
        )
        self.name = name
        self.nutritional_info_per_100g = info
        if patch.image_url is not None:
            self.image_url = patch.image_url
        self.updated_at = utc_now()


@dataclass(frozen=True)
class ExternalIngredientRef:
    """Link between a third-party food database entry and an ingredient."""

    external_id: str
    source: str
    ingredient_id: str
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "external_id", require_id(self.external_id, "external_id")
        )
        object.__setattr__(
            self, "ingredient_id", require_id(self.ingredient_id, "ingredient_id")
        )
        if self.source not in EXTERNAL_SOURCES:
            raise ValidationError(f"Unsupported ingredient source: {self.source}")

    @property
    def key(self) -> str:
        return external_ref_key(self.external_id, self.source)


def external_ref_key(external_id: str, source: str) -> str:
    """Return the storage key for an external reference."""
    return f"{external_id}-{source}"


@dataclass(frozen=True)
class IngredientLinePatch:
    """Partial update for an ingredient line."""

    ingredient: Ingredient | None = None
    quantity_in_grams: float | None = None


@dataclass
class IngredientLine:
    """A quantity of one ingredient inside a meal or recipe."""

    id: str
    parent_id: str
    parent_type: ParentType
    ingredient: Ingredient
    quantity_in_grams: float
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.parent_id = require_id(self.parent_id, "parent_id")
        if self.parent_type not in ("meal", "recipe"):
            raise ValidationError(f"Invalid parent type: {self.parent_type}")
        self.quantity_in_grams = require_positive(
            self.quantity_in_grams, "quantity_in_grams"
        )

    @property
    def calories(self) -> float:
        return scale_per_100g(self.ingredient.calories, self.quantity_in_grams)

    @property
    def protein(self) -> float:
        return scale_per_100g(self.ingredient.protein, self.quantity_in_grams)

    def apply(self, patch: IngredientLinePatch) -> None:
        """Validate and apply a partial update in one step."""
        if patch.ingredient is None and patch.quantity_in_grams is None:
            raise ValidationError("IngredientLine: no changes provided")
        if patch.quantity_in_grams is not None:
            self.quantity_in_grams = require_positive(
                patch.quantity_in_grams, "quantity_in_grams"
            )
        if patch.ingredient is not None:
            self.ingredient = patch.ingredient
        self.updated_at = utc_now()

    def copy_to(self, parent_id: str, parent_type: ParentType) -> "IngredientLine":
        """Return a copy of this line with a new id under another parent."""
        now = utc_now()
        return replace(
            self,
            id=new_id(),
            parent_id=parent_id,
            parent_type=parent_type,
            created_at=now,
            updated_at=now,
        )


def ensure_unique_ingredients(lines: list[IngredientLine]) -> None:
    seen: set[str] = set()
    for line in lines:
        if line.ingredient.id in seen:
            raise ValidationError(
                f"Ingredient {line.ingredient.id} appears more than once"
            )
        seen.add(line.ingredient.id)


def add_line(lines: list[IngredientLine], line: IngredientLine) -> None:
    """Append a line unless its ingredient is already present."""
    if any(existing.ingredient.id == line.ingredient.id for existing in lines):
        raise ValidationError(
            f"Ingredient {line.ingredient.id} is already part of this item"
        )
    lines.append(line)


def remove_line_by_ingredient_id(
    lines: list[IngredientLine], ingredient_id: str
) -> IngredientLine:
    """Remove exactly one line for the ingredient, keeping the list non-empty."""
    for index, line in enumerate(lines):
        if line.ingredient.id == ingredient_id:
            if len(lines) == 1:
                raise ValidationError("Cannot remove the last ingredient line")
            return lines.pop(index)
    raise ValidationError(f"No ingredient line for ingredient {ingredient_id}")


def find_line(lines: list[IngredientLine], line_id: str) -> IngredientLine:
    for line in lines:
        if line.id == line_id:
            return line
    raise ValidationError(f"Ingredient line {line_id} not found")


@dataclass(frozen=True)
class IngredientSearchResult:
    """An ingredient candidate returned by a third-party food database."""

    name: str
    calories_per_100g: float
    protein_per_100g: float
    external_id: str
    source: str
    image_url: str | None = None
    barcode: str | None = None
