#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Dashboard Dependencies
FastAPI providers for the database and tracker service

Both live on app.state and are set by create_app, so every app instance
(and every test client) has its own store.

Version: 1.0.0
Date: 2026-10-19
"""

import logging

from fastapi import HTTPException, Request, status

from core.database import Database
from core.models import ValidationError
from services.tracker_service import TrackerService

logger = logging.getLogger(__name__)

def get_database(request: Request) -> Database:
    return request.app.state.database

def get_tracker(request: Request) -> TrackerService:
    return request.app.state.tracker

def not_found(kind: str, item_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} {item_id} not found")

def unprocessable(error: ValidationError) -> HTTPException:
    logger.info(f"Rejected request: {error}")
    return HTTPException(status_code=422, detail=str(error))
