"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.api import auth, tasks
from src.config import Settings, get_settings
from src.database import Database
from src.errors import register_exception_handlers
from src.services.auth import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    database: Database = app.state.database
    database.create_all()
    logger.info(f"Task tracker API started ({app.state.settings.environment})")
    yield
    database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an application wired to its own database, token and hashing services."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Task Tracker API",
        description="Per-user task tracking with bearer token authentication",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = TokenService(settings)
    app.state.password_hasher = PasswordHasher(settings.bcrypt_rounds)

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                "http://localhost:3000",
                "http://localhost:5173",
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(tasks.router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Liveness text for humans."""
        return "Task tracker backend is running!"

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "OK"}

    return app


# Entry point for `uvicorn src.main:app`
app = create_app()
