"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from fitness_journal.api.actions import router as actions_router
from fitness_journal.api.auth import router as auth_router
from fitness_journal.api.days import router as days_router
from fitness_journal.api.dependencies import SESSION_COOKIE
from fitness_journal.api.images import router as images_router
from fitness_journal.api.ingredients import router as ingredients_router
from fitness_journal.api.jsend import register_exception_handlers
from fitness_journal.api.recipes import router as recipes_router
from fitness_journal.api.views import router as views_router
from fitness_journal.app_logging import configure_logging
from fitness_journal.containers import AppContainer

LOGIN_PATH = "/auth/login"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting fitness journal (%s)", container.settings.environment)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_exception_handlers(app)

    @app.middleware("http")
    async def require_session(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Send signed-out visitors of ``/app`` pages to the login page."""
        path = request.url.path
        if path == "/app" or path.startswith("/app/"):
            token = request.cookies.get(SESSION_COOKIE)
            state_container: AppContainer = request.app.state.container
            if not token or not state_container.auth_service.validate_token(token):
                return RedirectResponse(LOGIN_PATH, status_code=307)
        return await call_next(request)

    app.include_router(auth_router)
    app.include_router(days_router)
    app.include_router(ingredients_router)
    app.include_router(recipes_router)
    app.include_router(images_router)
    app.include_router(views_router)
    app.include_router(actions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get(LOGIN_PATH, response_class=HTMLResponse)
    async def login_page() -> HTMLResponse:
        """Minimal sign-in form that posts to the login route."""
        return HTMLResponse(_LOGIN_HTML)

    return app


_LOGIN_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Fitness Journal</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .row { margin-bottom: 1rem; }
      input { padding: 0.4rem 0.6rem; width: 320px; }
      button { padding: 0.4rem 0.8rem; }
    </style>
  </head>
  <body>
    <h1>Sign in</h1>
    <div class="row"><input id="email" type="email" placeholder="Email" /></div>
    <div class="row">
      <input id="password" type="password" placeholder="Password" />
    </div>
    <button onclick="signIn()">Sign in</button>
    <p id="output"></p>
    <script>
      async function signIn() {
        const res = await fetch('/api/auth/login', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({
            email: document.getElementById('email').value,
            password: document.getElementById('password').value
          })
        });
        const body = await res.json();
        if (body.status === 'success') {
          window.location.href = '/app/days';
          return;
        }
        document.getElementById('output').textContent = body.data.message;
      }
    </script>
  </body>
</html>
"""
