import logging
import os
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import config, db
from projects import router as projects_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing configuration fails here, before any request is served.
    settings = app.state.settings or config.load_settings()
    await db.init_pool(settings)
    try:
        yield
    finally:
        await db.close_pool()


async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error."},
    )


def create_app(settings: config.Settings | None = None) -> FastAPI:
    configure_logging(settings.log_level if settings else os.environ.get("LOG_LEVEL", "INFO"))

    app = FastAPI(title="Test Projects API", lifespan=lifespan)
    app.state.settings = settings

    # Allow the local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins if settings else config.cors_origins()),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_type in (asyncpg.PostgresError, asyncpg.InterfaceError, OSError):
        app.add_exception_handler(exc_type, database_error_handler)

    app.include_router(projects_router.router, prefix="/api/test", tags=["projects"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "test projects api"}

    return app


app = create_app()
