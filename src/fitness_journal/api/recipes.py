"""Recipe listing route."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fitness_journal.api.dependencies import get_container, get_current_user_id
from fitness_journal.api.jsend import success
from fitness_journal.containers import AppContainer
from fitness_journal.services.recipes import GetAllRecipesForUser

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    user_id: str = Depends(get_current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    recipes = GetAllRecipesForUser(recipes=container.repositories.recipes).execute(
        user_id
    )
    return success({"recipes": recipes})
