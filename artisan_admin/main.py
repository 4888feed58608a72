"""
Application entry point.
Run with:  uvicorn artisan_admin.main:app --reload

DEVELOPMENT NOTE:
    With SEED_DEFAULT_ADMIN=true (the default) a default admin account is
    created on startup (see artisan_admin/db/seeder.py). Disable it in
    production.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from artisan_admin.core.logging_config import configure_logging
from artisan_admin.core.admin_gate import admin_gate
from artisan_admin.core.config import settings
from artisan_admin.core.exceptions import AppError
from artisan_admin.api.router import api_router
from artisan_admin.api.endpoints import pages
from artisan_admin.db.database import init_db
from artisan_admin.db.seeder import seed_admin

configure_logging()

logger = logging.getLogger(__name__)

BODY_SNAPSHOT_LIMIT = 2000


def _validation_summary(exc: RequestValidationError) -> str:
    """Condense pydantic errors into one client-facing line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path"))
        message = str(error.get("msg", "Invalid value"))
        message = message.removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request."


async def capture_body(request: Request, call_next):
    """Keep the start of the request body for the unhandled-error log."""
    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        request.state.body_snapshot = body[:BODY_SNAPSHOT_LIMIT].decode("utf-8", errors="replace")
    return await call_next(request)


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to a sanitized ``{"error": message}`` body."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        summary = _validation_summary(exc)
        logger.info("%s %s -> 400 %s", request.method, request.url.path, summary)
        return JSONResponse(status_code=400, content={"error": summary})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error in %s %s | body=%s",
            request.method,
            request.url.path,
            getattr(request.state, "body_snapshot", ""),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description=(
            "Admin back office and REST API for an artisan marketplace: "
            "users, categories and listing approvals."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    app.middleware("http")(admin_gate)
    app.middleware("http")(capture_body)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors ──────────────────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(api_router)
    app.include_router(pages.router)

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Initialize the database and development seed data."""
        logger.info("Initializing database and seed data")
        init_db()
        if settings.SEED_DEFAULT_ADMIN:
            seed_admin()

    return app


app = create_app()
