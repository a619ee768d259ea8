"""Ingredient catalogue, external lookups and ingredient resolution."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import NotFoundError, ValidationError
from fitness_journal.domain.ingredients import (
    ExternalIngredientRef,
    Ingredient,
    IngredientPatch,
    IngredientSearchResult,
    NutritionalInfo,
    external_ref_key,
)
from fitness_journal.domain.validation import require_id, require_name
from fitness_journal.services.cache import Cache
from fitness_journal.services.dtos import (
    IngredientDTO,
    IngredientSearchResultDTO,
    to_ingredient_dto,
    to_search_result_dto,
)

logger = logging.getLogger(__name__)


class IngredientRepository(Protocol):
    """Persistence interface for ingredients."""

    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        """Return an ingredient by id, if present."""

    def get_by_ids(self, ingredient_ids: Sequence[str]) -> list[Ingredient]:
        """Return the ingredients that exist among the given ids."""

    def get_all(self) -> list[Ingredient]:
        """Return every stored ingredient."""

    def save(self, ingredient: Ingredient) -> None:
        """Insert or replace an ingredient."""

    def delete(self, ingredient_id: str) -> None:
        """Delete an ingredient by id."""


class ExternalIngredientRefRepository(Protocol):
    """Persistence interface for external ingredient references."""

    def get_by_external_id_and_source(
        self, external_id: str, source: str
    ) -> ExternalIngredientRef | None:
        """Return the reference for an external entry, if present."""

    def save(self, ref: ExternalIngredientRef) -> None:
        """Insert or replace a reference."""


class IngredientFinder(Protocol):
    """Third-party food database lookups."""

    async def search_by_fuzzy_name(self, name: str) -> list[IngredientSearchResult]:
        """Return candidates whose name matches the query."""

    async def search_by_barcode(self, barcode: str) -> IngredientSearchResult | None:
        """Return the product for a barcode, if known."""


@dataclass(frozen=True)
class ExternalIngredient:
    """Ingredient data coming from a third-party food database."""

    external_id: str
    source: str
    name: str
    calories_per_100g: float
    protein_per_100g: float
    image_url: str | None = None


@dataclass(frozen=True)
class IngredientSource:
    """Either an existing ingredient id or external ingredient data."""

    ingredient_id: str | None = None
    external: ExternalIngredient | None = None


@dataclass(frozen=True)
class IngredientResolution:
    ingredient: Ingredient
    new_ref: ExternalIngredientRef | None = None


@dataclass
class IngredientResolver:
    """Turns ingredient sources into ingredients, creating missing ones."""

    ingredients: IngredientRepository
    external_refs: ExternalIngredientRefRepository

    def resolve(self, source: IngredientSource) -> IngredientResolution:
        return self.resolve_all([source])[0]

    def resolve_all(
        self, sources: Sequence[IngredientSource]
    ) -> list[IngredientResolution]:
        """Resolve sources; repeated external entries share one new ingredient."""
        pending: dict[str, IngredientResolution] = {}
        resolutions: list[IngredientResolution] = []
        for source in sources:
            if source.ingredient_id is not None:
                ingredient_id = require_id(source.ingredient_id, "ingredient_id")
                ingredient = self.ingredients.get_by_id(ingredient_id)
                if ingredient is None:
                    raise NotFoundError(f"Ingredient {ingredient_id} not found")
                resolutions.append(IngredientResolution(ingredient=ingredient))
                continue
            if source.external is None:
                raise ValidationError("Ingredient id or external ingredient required")
            external = source.external
            key = external_ref_key(external.external_id, external.source)
            if key in pending:
                resolutions.append(IngredientResolution(pending[key].ingredient))
                continue
            resolution = self._resolve_external(external)
            if resolution.new_ref is not None:
                pending[key] = resolution
            resolutions.append(resolution)
        return resolutions

    def persist(self, resolutions: Sequence[IngredientResolution]) -> None:
        """Store ingredients and references created during resolution."""
        for resolution in resolutions:
            if resolution.new_ref is None:
                continue
            self.ingredients.save(resolution.ingredient)
            self.external_refs.save(resolution.new_ref)
            logger.info(
                "Created ingredient %s from %s",
                resolution.ingredient.id,
                resolution.new_ref.key,
            )

    def _resolve_external(self, external: ExternalIngredient) -> IngredientResolution:
        ref = self.external_refs.get_by_external_id_and_source(
            external.external_id, external.source
        )
        if ref is not None:
            ingredient = self.ingredients.get_by_id(ref.ingredient_id)
            if ingredient is not None:
                return IngredientResolution(ingredient=ingredient)
            logger.warning("External ref %s points to a missing ingredient", ref.key)
        ingredient = Ingredient(
            id=new_id(),
            name=external.name,
            nutritional_info_per_100g=NutritionalInfo(
                calories=external.calories_per_100g,
                protein=external.protein_per_100g,
            ),
            image_url=external.image_url,
        )
        new_ref = ExternalIngredientRef(
            external_id=external.external_id,
            source=external.source,
            ingredient_id=ingredient.id,
        )
        return IngredientResolution(ingredient=ingredient, new_ref=new_ref)


@dataclass(frozen=True)
class CreateIngredientRequest:
    name: str
    calories_per_100g: float
    protein_per_100g: float
    image_url: str | None = None


@dataclass
class CreateIngredient:
    ingredients: IngredientRepository

    def execute(self, request: CreateIngredientRequest) -> IngredientDTO:
        ingredient = Ingredient(
            id=new_id(),
            name=request.name,
            nutritional_info_per_100g=NutritionalInfo(
                calories=request.calories_per_100g,
                protein=request.protein_per_100g,
            ),
            image_url=request.image_url,
        )
        self.ingredients.save(ingredient)
        return to_ingredient_dto(ingredient)


@dataclass
class GetIngredientById:
    ingredients: IngredientRepository

    def execute(self, ingredient_id: str) -> IngredientDTO | None:
        ingredient = self.ingredients.get_by_id(
            require_id(ingredient_id, "ingredient_id")
        )
        return to_ingredient_dto(ingredient) if ingredient else None


@dataclass
class GetIngredientsByIds:
    ingredients: IngredientRepository

    def execute(self, ingredient_ids: Sequence[str]) -> list[IngredientDTO]:
        if not isinstance(ingredient_ids, list | tuple):
            raise ValidationError("ingredient_ids must be a list")
        ids = [require_id(value, "ingredient_id") for value in ingredient_ids]
        return [to_ingredient_dto(x) for x in self.ingredients.get_by_ids(ids)]


@dataclass
class GetAllIngredients:
    ingredients: IngredientRepository

    def execute(self) -> list[IngredientDTO]:
        return [to_ingredient_dto(x) for x in self.ingredients.get_all()]


@dataclass(frozen=True)
class UpdateIngredientRequest:
    ingredient_id: str
    patch: IngredientPatch


@dataclass
class UpdateIngredient:
    ingredients: IngredientRepository

    def execute(self, request: UpdateIngredientRequest) -> IngredientDTO:
        ingredient_id = require_id(request.ingredient_id, "ingredient_id")
        ingredient = self.ingredients.get_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        ingredient.apply(request.patch)
        self.ingredients.save(ingredient)
        return to_ingredient_dto(ingredient)


@dataclass
class DeleteIngredient:
    """Delete a catalogue ingredient. Existing lines keep their snapshot."""

    ingredients: IngredientRepository

    def execute(self, ingredient_id: str) -> None:
        resolved_id = require_id(ingredient_id, "ingredient_id")
        if self.ingredients.get_by_id(resolved_id) is None:
            raise NotFoundError(f"Ingredient {resolved_id} not found")
        self.ingredients.delete(resolved_id)


@dataclass
class GetIngredientsByFuzzyName:
    """Search the external food database by name, with caching."""

    finder: IngredientFinder
    cache: Cache
    ttl_seconds: int = 3600

    async def execute(self, name: str) -> list[IngredientSearchResultDTO]:
        query = require_name(name, "name")
        cache_key = f"ingredients:search:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        results = [
            to_search_result_dto(result)
            for result in await self.finder.search_by_fuzzy_name(query)
        ]
        self.cache.set(cache_key, results, ttl_seconds=self.ttl_seconds)
        logger.info("Ingredient search: query=%s results=%s", query, len(results))
        return results


@dataclass
class GetIngredientsByBarcode:
    finder: IngredientFinder

    async def execute(self, barcode: str) -> IngredientSearchResultDTO | None:
        code = require_id(barcode, "barcode")
        if not code.isdigit():
            raise ValidationError("barcode must contain only digits")
        result = await self.finder.search_by_barcode(code)
        return to_search_result_dto(result) if result else None
