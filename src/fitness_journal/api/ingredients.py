"""Ingredient lookups proxied to the external food database."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from fitness_journal.api.dependencies import get_container, get_current_user_id
from fitness_journal.api.jsend import fail, success
from fitness_journal.containers import AppContainer
from fitness_journal.services.ingredients import (
    GetIngredientsByBarcode,
    GetIngredientsByFuzzyName,
)

router = APIRouter(
    prefix="/api/ingredients",
    tags=["ingredients"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("/barcode/{barcode}")
async def ingredient_by_barcode(
    barcode: str, container: AppContainer = Depends(get_container)
) -> JSONResponse:
    result = await GetIngredientsByBarcode(finder=container.ingredient_finder).execute(
        barcode
    )
    if result is None:
        return fail(
            {"barcode": f"No product found for {barcode}"},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return success({"ingredient": result})


@router.get("/search")
async def search_ingredients(
    name: str = Query(default=""),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Fuzzy name search, cached per query."""
    results = await GetIngredientsByFuzzyName(
        finder=container.ingredient_finder,
        cache=container.search_cache,
        ttl_seconds=container.settings.ingredient_search_ttl_seconds,
    ).execute(name)
    return success({"ingredients": results})
