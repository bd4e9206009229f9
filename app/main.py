"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.Core.config import Settings, get_settings
from app.DB.base import Base
from app.DB.session import build_engine, build_session_factory
from app.DB import models as _models  # noqa: F401  registers every table on Base.metadata
from app.Auth.routes import router as auth_router
from app.common.errors import register_exception_handlers
from app.common.middleware import request_id_middleware
from app.features.files.endpoints import router as files_router
from app.features.files.service import FileService
from app.features.judge0.service import build_judge_gateway
from app.features.mail.service import MailService
from app.features.playlists.endpoints import router as playlists_router
from app.features.problems.endpoints import router as problems_router
from app.features.submissions.endpoints import execute_router, router as submissions_router

logger = logging.getLogger("app")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.started_at = datetime.now(timezone.utc)
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.judge_gateway = build_judge_gateway(settings)
    app.state.mail_service = MailService(settings)
    app.state.file_service = FileService(settings)

    if settings.db_auto_create:
        Base.metadata.create_all(bind=app.state.engine)

    # ------------------------
    # CORS Setup
    # ------------------------
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)

    # ------------------------
    # Routers
    # ------------------------
    prefix = settings.api_prefix
    app.include_router(auth_router, prefix=prefix)
    app.include_router(execute_router, prefix=prefix)
    app.include_router(problems_router, prefix=prefix)
    app.include_router(playlists_router, prefix=prefix)
    app.include_router(submissions_router, prefix=prefix)
    app.include_router(files_router, prefix=prefix)

    app.mount("/uploads", StaticFiles(directory=app.state.file_service.upload_root), name="uploads")

    # ------------------------
    # Meta endpoints
    # ------------------------
    @app.get("/", tags=["meta"], summary="API Root")
    async def root():
        return {
            "name": settings.app_name,
            "status": "ok",
            "docs": "/docs",
            "health": "/healthz",
        }

    @app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
    def healthz(request: Request) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        db_status = "unknown"
        db_latency_ms: float | None = None
        try:
            start = time.perf_counter()
            with request.app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
            db_status = "ok"
        except SQLAlchemyError as e:
            logger.warning("healthz.database_error %s", type(e).__name__)
            db_status = f"error:{type(e).__name__}"

        return {
            "status": "ok" if db_status == "ok" else "degraded",
            "time_utc": now.isoformat(),
            "uptime_seconds": round((now - request.app.state.started_at).total_seconds(), 2),
            "version": os.getenv("APP_VERSION", "dev"),
            "components": {
                "database": {"status": db_status, "latency_ms": db_latency_ms},
                "judge0": "real" if settings.judge0_enabled else "simulated",
            },
        }

    logger.info("app.created env=%s judge0=%s", settings.environment, "real" if settings.judge0_enabled else "simulated")
    return app


app = create_app()
