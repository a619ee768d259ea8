"""Request-scoped dependencies shared by routers."""

from fastapi import Cookie, Depends, Request

from fitness_journal.containers import AppContainer
from fitness_journal.domain.errors import AuthError

SESSION_COOKIE = "token"


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_current_user_id(
    token: str | None = Cookie(default=None),
    container: AppContainer = Depends(get_container),
) -> str:
    """Resolve the signed-in user from the session cookie."""
    if not token:
        raise AuthError("Not authenticated")
    return container.auth_service.get_current_user_id_from_token(token)
