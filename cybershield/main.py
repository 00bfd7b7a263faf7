from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cybershield import db
from cybershield.config import DEFAULT_DATABASE_URL, AppInfo, Settings, get_settings
from cybershield.core.logging import setup_logging
import cybershield.models  # registers the tables
from cybershield.routers import get_api_router
from cybershield.services.notifications import Mailer
from cybershield.services.rate_limit import build_rate_limits, rate_limit
from cybershield.utils.errors import error_response

logger = logging.getLogger(__name__)
ALLOWED_CREATE_ENV = {"dev", "local", "test"}
RATE_LIMIT_PRUNE_MINUTES = 10


def _current_settings() -> Settings:
    return get_settings()


def _configure_middlewares(fastapi_app: FastAPI, settings: Settings) -> None:
    """Configure middleware using a snapshot of the settings."""

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    if settings.PROMETHEUS_ENABLED:
        from starlette_exporter import PrometheusMiddleware, handle_metrics

        fastapi_app.add_middleware(PrometheusMiddleware)
        fastapi_app.add_route("/metrics", handle_metrics)

    if settings.SENTRY_DSN:
        import sentry_sdk

        sentry_sdk.init(dsn=settings.SENTRY_DSN, traces_sample_rate=0.2)


def assert_startup_config(settings: Settings) -> None:
    """Refuse to start without the secrets the service cannot run without."""

    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is missing; refusing to start.", extra={"env": settings.app_env})
        raise RuntimeError("Missing JWT_SECRET.")
    env_lower = settings.app_env.lower()
    if env_lower not in ALLOWED_CREATE_ENV and settings.database_url == DEFAULT_DATABASE_URL:
        logger.error("DATABASE_URL is not configured; refusing to start.", extra={"env": settings.app_env})
        raise RuntimeError("Missing DATABASE_URL in non-dev environment.")
    mailer = Mailer(settings)
    if not mailer.enabled:
        logger.warning(
            "No email transport configured; notifications will be skipped.",
            extra={"env": settings.app_env},
        )
    if not settings.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL is not configured; operator notifications disabled.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = _current_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info("Application startup", extra={"env": settings.app_env})
    assert_startup_config(settings)

    db.init_engine()
    env_lower = settings.app_env.lower()
    if settings.ALLOW_DB_CREATE_ALL and env_lower in ALLOWED_CREATE_ENV:
        logger.warning(
            "Running Base.metadata.create_all() because APP_ENV=%s and ALLOW_DB_CREATE_ALL=True",
            settings.app_env,
        )
        db.create_all()
    try:
        db.ping()
        logger.info("Database connection OK")
    except Exception:  # noqa: BLE001
        logger.exception("Database unreachable at startup")

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        app.state.rate_limits.prune,
        "interval",
        minutes=RATE_LIMIT_PRUNE_MINUTES,
        id="rate-limit-prune",
        replace_existing=True,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)
        db.close_engine()
        logger.info("Application shutdown", extra={"env": settings.app_env})


def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return messages


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or _current_settings()
    app_info = AppInfo()

    fastapi_app = FastAPI(
        title=app_info.name,
        version=app_info.version,
        lifespan=lifespan,
        dependencies=[Depends(rate_limit("general"))],
    )
    fastapi_app.state.rate_limits = build_rate_limits(settings)
    fastapi_app.state.mailer = Mailer(settings)

    _configure_middlewares(fastapi_app, settings)
    fastapi_app.include_router(get_api_router())

    @fastapi_app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        payload = error_response("VALIDATION_ERROR", "Invalid data.", _validation_messages(exc))
        return JSONResponse(status_code=400, content=payload)

    @fastapi_app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "success" in detail:
            content: dict[str, Any] = detail
        elif exc.status_code == 404:
            content = error_response("NOT_FOUND", f"Route {request.url.path} does not exist.")
        else:
            content = error_response("HTTP_ERROR", str(detail))
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @fastapi_app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", exc_info=exc)
        message = "Internal server error." if settings.is_production else str(exc) or "Internal server error."
        return JSONResponse(status_code=500, content=error_response("INTERNAL_SERVER_ERROR", message))

    return fastapi_app


app = create_app()

__all__ = ["app", "create_app", "assert_startup_config", "lifespan"]
