from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from shortlink.app import App
from shortlink.config import Config
from shortlink.errors import UserError
from shortlink.web.error_handlers import general_exception_handler, request_validation_handler, user_error_handler
from shortlink.web.openapi import SESSION_COOKIE_NAME, set_custom_openapi
from shortlink.web.routers import auth_router, links_router, profile_router, redirect_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Shortlink API",
        lifespan=lifespan,
    )

    # Signed cookie carrying the outward session token; an emptied session is sent back expired
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret_key,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=config.session_max_age_seconds,
        same_site="lax",
        https_only=config.secure_cookies,
    )

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(profile_router, prefix="/api/v1")
    app.include_router(links_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    # Catch-all shortcode route goes last
    app.include_router(redirect_router)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
