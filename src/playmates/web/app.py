"""FastAPI application for Playmates."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from playmates.config import Settings
from playmates.errors import PlaymatesError, Unauthorized
from playmates.steam import SteamClient, SteamOpenID
from playmates.web.paths import STATIC_DIR
from playmates.web.routes import api, auth, pages
from playmates.web.schemas import ErrorResponse
from playmates.web.session import SESSION_KEY, SessionStore

logger = logging.getLogger(__name__)

SESSION_COOKIE = "playmates_session"


def create_app(
    settings: Settings | None = None,
    steam: SteamClient | None = None,
    openid: SteamOpenID | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        steam: Steam Web API client; built from settings when omitted.
        openid: Steam sign-in client; built from settings when omitted.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.steam.aclose()
        await app.state.openid.aclose()

    app = FastAPI(
        title="Playmates",
        description="Compare Steam libraries and achievements with your friends",
        lifespan=lifespan,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.return_url.startswith("https://"),
    )

    # Mount static files
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # Store shared clients and sessions in app state for access in routes
    app.state.settings = settings
    app.state.sessions = SessionStore(max_age=settings.session_max_age)
    app.state.steam = steam or SteamClient(
        settings.steam_api_key,
        base_url=settings.steam_api_base,
        timeout=settings.request_timeout,
    )
    app.state.openid = openid or SteamOpenID(
        settings.return_url,
        settings.realm,
        timeout=settings.request_timeout,
    )

    @app.exception_handler(Unauthorized)
    async def redirect_unauthorized(request: Request, exc: Unauthorized):
        request.session.pop(SESSION_KEY, None)
        return RedirectResponse(url="/", status_code=302)

    @app.exception_handler(PlaymatesError)
    async def bad_request(request: Request, exc: PlaymatesError):
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())

    # Include routers
    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(api.router)

    return app
