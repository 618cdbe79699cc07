from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from passentry.app import App
from passentry.config import Config
from passentry.errors import UserError
from passentry.web.error_handlers import general_exception_handler, user_error_handler
from passentry.web.openapi import set_custom_openapi
from passentry.web.routers import auth_router, entry_api_router, entry_router, profile_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Passentry API",
        lifespan=lifespan,
    )
    # Set before startup so routes work even when the lifespan is managed elsewhere
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(profile_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")

    # Passwordless entry can be switched off without removing the service
    if config.entry.enabled:
        app.include_router(entry_api_router, prefix="/api/v1")
        app.include_router(entry_router)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
