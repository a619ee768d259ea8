"""Serve stored images by file name."""

from fastapi import APIRouter, Depends, Response

from fitness_journal.api.dependencies import get_container
from fitness_journal.containers import AppContainer

router = APIRouter(prefix="/api/images", tags=["images"])


@router.get("/{filename}")
async def get_image(
    filename: str, container: AppContainer = Depends(get_container)
) -> Response:
    image = container.image_store.read(filename)
    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )
