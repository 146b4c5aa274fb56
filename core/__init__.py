#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Core Package
Models, storage and the scoring/streak/review engine
"""

from .models import (
    ArcStage,
    CheckInStatus,
    EffortLevel,
    ValidationError,
    Arc,
    CheckIn,
    DailyNote,
    Document,
    Habit,
    Increment,
    Program,
    ProgramWeek,
    UserProfile,
)
from .scoring import compute_friction
from .streaks import compute_streak
from .review import Window, compute_trailing_weeks, filter_by_window
from .database import Database, DocumentStore, JsonFileStorage, MemoryStorage, STORAGE_KEY

__all__ = [
    # Enums
    'ArcStage',
    'CheckInStatus',
    'EffortLevel',

    # Models
    'Arc',
    'CheckIn',
    'DailyNote',
    'Document',
    'Habit',
    'Increment',
    'Program',
    'ProgramWeek',
    'UserProfile',
    'ValidationError',

    # Engine
    'compute_friction',
    'compute_streak',
    'compute_trailing_weeks',
    'filter_by_window',
    'Window',

    # Storage
    'Database',
    'DocumentStore',
    'JsonFileStorage',
    'MemoryStorage',
    'STORAGE_KEY',
]
