"""JSEND response helpers and exception mapping."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fitness_journal.domain.errors import (
    AlreadyExistsError,
    AuthError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def success(data: object = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "success", "data": jsonable_encoder(data)},
    )


def fail(
    data: dict[str, object],
    status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "fail", "data": jsonable_encoder(data)},
    )


def error(
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to JSEND fail/error responses."""

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return fail({"message": str(exc)})

    @app.exception_handler(AuthError)
    async def handle_auth(request: Request, exc: AuthError) -> JSONResponse:
        return fail({"message": str(exc)})

    @app.exception_handler(AlreadyExistsError)
    async def handle_conflict(
        request: Request, exc: AlreadyExistsError
    ) -> JSONResponse:
        return fail({"message": str(exc)}, status_code=status.HTTP_409_CONFLICT)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return fail({"message": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return fail({"message": "Invalid request", "errors": exc.errors()})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error("Internal server error")
