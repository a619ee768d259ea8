"""Request bodies for JSON routes and server actions."""

from pydantic import BaseModel, Field

from fitness_journal.services.ingredients import ExternalIngredient, IngredientSource
from fitness_journal.services.recipes import NewIngredientLine


class RegisterBody(BaseModel):
    name: str
    email: str
    password: str


class LoginBody(BaseModel):
    email: str
    password: str


class AddMealBody(BaseModel):
    recipe_id: str


class AddMealsBody(BaseModel):
    recipe_ids: list[str]


class AddMealsToDaysBody(BaseModel):
    day_ids: list[str]
    recipe_ids: list[str]


class ExternalIngredientBody(BaseModel):
    external_id: str
    source: str
    name: str
    calories_per_100g: float
    protein_per_100g: float
    image_url: str | None = None


class IngredientLineBody(BaseModel):
    """Either ``ingredient_id`` or ``external`` must be given."""

    ingredient_id: str | None = None
    external: ExternalIngredientBody | None = None
    quantity_in_grams: float

    def to_source(self) -> IngredientSource:
        external = (
            ExternalIngredient(**self.external.model_dump()) if self.external else None
        )
        return IngredientSource(ingredient_id=self.ingredient_id, external=external)

    def to_new_line(self) -> NewIngredientLine:
        return NewIngredientLine(
            source=self.to_source(), quantity_in_grams=self.quantity_in_grams
        )


class CreateRecipeBody(BaseModel):
    name: str
    ingredient_lines: list[IngredientLineBody] = Field(default_factory=list)
    image_url: str | None = None


class RenameRecipeBody(BaseModel):
    name: str


class DuplicateRecipeBody(BaseModel):
    name: str | None = None
