"""Register, login and logout routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from fitness_journal.api.dependencies import SESSION_COOKIE, get_container
from fitness_journal.api.jsend import success
from fitness_journal.api.models import LoginBody, RegisterBody
from fitness_journal.containers import AppContainer
from fitness_journal.services.auth import Login, LoginRequest
from fitness_journal.services.users import CreateUser, CreateUserRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_session_cookie(
    response: JSONResponse, container: AppContainer, token: str
) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=container.settings.token_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=container.settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/register")
async def register(
    body: RegisterBody, container: AppContainer = Depends(get_container)
) -> JSONResponse:
    """Create an account and sign it in."""
    user = CreateUser(
        users=container.repositories.users,
        password_hasher=container.password_hasher,
    ).execute(
        CreateUserRequest(name=body.name, email=body.email, password=body.password)
    )
    token = container.auth_service.generate_token(user.id)
    response = success({"user": user}, status_code=status.HTTP_201_CREATED)
    _set_session_cookie(response, container, token)
    return response


@router.post("/login")
async def login(
    body: LoginBody, container: AppContainer = Depends(get_container)
) -> JSONResponse:
    result = Login(
        users=container.repositories.users,
        password_hasher=container.password_hasher,
        auth_service=container.auth_service,
    ).execute(LoginRequest(email=body.email, password=body.password))
    response = success({"user": result.user})
    _set_session_cookie(response, container, result.token)
    return response


@router.post("/logout")
async def logout() -> JSONResponse:
    response = success(None)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response
