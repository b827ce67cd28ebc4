"""ASGI application factory; serve with `uvicorn app.main:create_app --factory`"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.channels import router as channels_router
from app.api.comments import router as comments_router
from app.api.dashboard import router as dashboard_router
from app.api.health import router as health_router
from app.api.likes import router as likes_router
from app.api.playlists import router as playlists_router
from app.api.subscriptions import router as subscriptions_router
from app.api.users import router as users_router
from app.api.videos import router as videos_router
from app.deps.common import new_trace_id
from core.config import AppSettings
from core.db import Base, create_db_engine, create_session_factory
from core.errors import ServiceError
from core.logging import setup_json_logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": {
                "error": {
                    "code": code,
                    "message": message,
                    "trace_id": trace_id
                }
            }
        }
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or AppSettings()

    # Setup logging
    setup_json_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    if settings.auto_create_schema:
        Base.metadata.create_all(app.state.engine)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None) or new_trace_id()
        if exc.status_code >= 500:
            logger.error("Service error", extra={"trace_id": trace_id, "error_code": exc.code})
        else:
            logger.warning("Request rejected", extra={"trace_id": trace_id, "error_code": exc.code})
        return _error_response(exc.status_code, exc.code, exc.message, trace_id)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None) or new_trace_id()
        logger.error("Unexpected error", extra={
            "trace_id": trace_id,
            "error_code": "INTERNAL_ERROR",
        }, exc_info=exc)
        return _error_response(500, "INTERNAL_ERROR", "Internal server error", trace_id)

    # Include routers
    app.include_router(health_router)  # Health at root level
    for router in (
        videos_router,
        comments_router,
        channels_router,
        subscriptions_router,
        playlists_router,
        likes_router,
        users_router,
        dashboard_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app
