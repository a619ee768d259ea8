"""Nutrition totals and aggregation helpers."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


class HasNutrition(Protocol):
    """Anything exposing calories and protein totals."""

    @property
    def calories(self) -> float: ...

    @property
    def protein(self) -> float: ...


@dataclass(frozen=True)
class NutritionTotals:
    """Calories and protein for a meal, recipe or day."""

    calories: float = 0.0
    protein: float = 0.0

    def rounded(self, digits: int = 1) -> "NutritionTotals":
        """Return totals rounded for presentation."""
        return NutritionTotals(
            calories=round(self.calories, digits),
            protein=round(self.protein, digits),
        )


def scale_per_100g(basis_per_100g: float, quantity_in_grams: float) -> float:
    """Scale a per-100g value to the given quantity."""
    return basis_per_100g * quantity_in_grams / 100


def sum_nutrition(items: Iterable[HasNutrition]) -> NutritionTotals:
    """Sum calories and protein over items without rounding."""
    calories = 0.0
    protein = 0.0
    for item in items:
        calories += item.calories
        protein += item.protein
    return NutritionTotals(calories=calories, protein=protein)
