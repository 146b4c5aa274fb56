#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - JSON API
FastAPI application over the document store and the scoring/review engine

Version: 1.0.0
Date: 2026-10-19
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import date
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import AppConfig
from core.database import Database, DatabaseError
from dashboard.api import arcs, habits, profile, review
from dashboard.config import DashboardSettings, get_settings
from services.tracker_service import TrackerService
from shared.models import HealthCheck
from utils.datetime_utils import today_provider

logger = logging.getLogger(__name__)

def create_app(database: Optional[Database] = None,
               app_config: Optional[AppConfig] = None,
               settings: Optional[DashboardSettings] = None,
               today: Optional[Callable[[], date]] = None) -> FastAPI:
    """
    Build an app bound to one Database.

    Without an explicit database the storage file from AppConfig is used.
    """
    settings = settings or get_settings()
    if database is None:
        app_config = app_config or AppConfig()
        app_config.ensure_directories()
        database = Database.from_file(app_config.storage.path, app_config.storage.key)

    review_weeks = app_config.review_weeks if app_config else 6
    if today is None:
        today = today_provider(app_config.timezone if app_config else "UTC")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = time.time()
        logger.info(f"🚀 {settings.APP_NAME} {settings.VERSION} starting ({settings.ENVIRONMENT})")
        if database.store.consume_skip_seed_flag():
            logger.info("Store was reset in a previous session, starting without demo data")
        yield
        logger.info("🛑 API stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        docs_url="/api/docs" if settings.docs_enabled else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.tracker = TrackerService(database, today=today, review_weeks=review_weeks)
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        logger.error(f"❌ Storage error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Storage error"})

    @app.get("/health", response_model=HealthCheck)
    def health():
        return HealthCheck(
            status="ok",
            service=settings.APP_NAME,
            version=settings.VERSION,
            timestamp=time.time(),
        )

    app.include_router(habits.router)
    app.include_router(arcs.router)
    app.include_router(review.router)
    app.include_router(profile.router)

    return app
