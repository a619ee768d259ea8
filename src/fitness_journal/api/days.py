"""Routes that log recipes as meals into days."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fitness_journal.api.dependencies import get_container, get_current_user_id
from fitness_journal.api.jsend import success
from fitness_journal.api.models import AddMealBody, AddMealsBody, AddMealsToDaysBody
from fitness_journal.containers import AppContainer
from fitness_journal.services.days import (
    AddMultipleMealsToDay,
    AddMultipleMealsToDayRequest,
    AddMultipleMealsToMultipleDays,
    AddMultipleMealsToMultipleDaysRequest,
)

router = APIRouter(prefix="/api/days", tags=["days"])


def _add_meals_to_day(container: AppContainer) -> AddMultipleMealsToDay:
    repositories = container.repositories
    return AddMultipleMealsToDay(
        days=repositories.days,
        meals=repositories.meals,
        recipes=repositories.recipes,
        users=repositories.users,
        transaction=container.transaction,
    )


@router.post("/meals/bulk")
async def add_meals_to_days(
    body: AddMealsToDaysBody,
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Log every recipe on every listed day."""
    repositories = container.repositories
    days = AddMultipleMealsToMultipleDays(
        days=repositories.days,
        meals=repositories.meals,
        recipes=repositories.recipes,
        users=repositories.users,
        transaction=container.transaction,
    ).execute(
        AddMultipleMealsToMultipleDaysRequest(
            day_ids=body.day_ids, user_id=user_id, recipe_ids=body.recipe_ids
        )
    )
    return success({"days": days})


@router.post("/{day_id}/meals")
async def add_meal_to_day(
    day_id: str,
    body: AddMealBody,
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    day = _add_meals_to_day(container).execute(
        AddMultipleMealsToDayRequest(
            day_id=day_id, user_id=user_id, recipe_ids=[body.recipe_id]
        )
    )
    return success({"day": day})


@router.post("/{day_id}/meals/bulk")
async def add_meals_to_day(
    day_id: str,
    body: AddMealsBody,
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    day = _add_meals_to_day(container).execute(
        AddMultipleMealsToDayRequest(
            day_id=day_id, user_id=user_id, recipe_ids=body.recipe_ids
        )
    )
    return success({"day": day})
