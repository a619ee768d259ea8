"""Signed-in views of assembled days."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from fitness_journal.api.dependencies import get_container, get_current_user_id
from fitness_journal.api.jsend import success
from fitness_journal.containers import AppContainer
from fitness_journal.services.days import (
    DayRequest,
    GetAssembledDayById,
    GetMultipleAssembledDaysByIds,
    GetMultipleAssembledDaysRequest,
)

router = APIRouter(prefix="/app", tags=["app"])


@router.get("/days")
async def view_days(
    ids: str = Query(default=""),
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Assembled days for comma separated ``ids``, in the order given."""
    day_ids = [day_id.strip() for day_id in ids.split(",") if day_id.strip()]
    repositories = container.repositories
    days = GetMultipleAssembledDaysByIds(
        days=repositories.days,
        meals=repositories.meals,
        fake_meals=repositories.fake_meals,
        users=repositories.users,
    ).execute(GetMultipleAssembledDaysRequest(day_ids=day_ids, user_id=user_id))
    return success({"days": days})


@router.get("/days/{day_id}")
async def view_day(
    day_id: str,
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    repositories = container.repositories
    day = GetAssembledDayById(
        days=repositories.days,
        meals=repositories.meals,
        fake_meals=repositories.fake_meals,
        users=repositories.users,
    ).execute(DayRequest(day_id=day_id, user_id=user_id))
    return success({"day": day})
