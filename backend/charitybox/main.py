import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from charitybox import database
from charitybox.core.config import Settings, settings as default_settings
from charitybox.core.exceptions import InvalidInput, StorageError
from charitybox.core.logging import setup_logging
from charitybox.database import Base, build_engine, build_session_factory
from charitybox.database_init import ensure_database
from charitybox.models import donation  # noqa: F401  registers the tables
from charitybox.routes import display, donations, health
from charitybox.services.display import DisplayMessageStore

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "POST /api/donation",
    "GET /api/total",
    "GET /api/history",
    "GET /api/daily-stats",
    "GET /api/stats/:period",
    "GET /api/top-donations",
    "GET /api/lcd-message",
    "POST /api/lcd-message",
    "DELETE /api/reset-donations",
]


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.detail or exc.message)
        extra = {"error": exc.detail} if app.state.settings.is_development else {}
        return _error(500, exc.message, **extra)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(
                404,
                f"Endpoint {request.method} {request.url.path} not found",
                availableEndpoints=AVAILABLE_ENDPOINTS,
            )
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        extra = {"error": str(exc)} if app.state.settings.is_development else {}
        return _error(500, "Internal server error", **extra)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(level=settings.LOG_LEVEL)

    if engine is None:
        engine = database.engine if settings.DATABASE_URL == database.DATABASE_URL else build_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- ensure database and tables exist ---
        if settings.AUTO_CREATE_DATABASE and not settings.is_sqlite:
            ensure_database(settings.DATABASE_URL)
        Base.metadata.create_all(bind=engine)

        logger.info("%s started", settings.APP_NAME)
        logger.info("Server: http://%s:%s", settings.HOST, settings.PORT)
        logger.info("Database: %s", database.database_type(engine))
        logger.info("Environment: %s", settings.ENVIRONMENT)
        yield
        logger.info("Shutting down, closing database connections")
        engine.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.display = DisplayMessageStore(
        settings.DISPLAY_LINE1,
        settings.DISPLAY_LINE2,
        max_chars=settings.DISPLAY_MAX_CHARS,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- Include routes ---
    app.include_router(health.router)
    app.include_router(donations.router)
    app.include_router(display.router)

    return app


app = create_app()


def serve():
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    serve()
