from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Dict, Any, List, Optional

from core.database import Database
from core.models import ValidationError
from services.tracker_service import TrackerService
from shared.models import NoteRequest
from ..dependencies import get_database, get_tracker, unprocessable

router = APIRouter(prefix="/api", tags=["review"])

MAX_WEEKS = 52

@router.get("/today", response_model=Dict[str, Any])
def get_today(tracker: TrackerService = Depends(get_tracker)):
    """
    Today's load, increments, habit statuses and quick-repeat list
    """
    return tracker.today_summary()

@router.get("/review/weeks", response_model=List[Dict[str, Any]])
def list_weeks(count: Optional[int] = Query(None, ge=1, le=MAX_WEEKS),
               tracker: TrackerService = Depends(get_tracker)):
    return [w.to_dict() for w in tracker.weeks(count)]

@router.get("/review/weeks/{index}", response_model=Dict[str, Any])
def get_week(index: int, tracker: TrackerService = Depends(get_tracker)):
    """Week 0 is the current week, 1 the one before, and so on"""
    if not 0 <= index < MAX_WEEKS:
        raise HTTPException(status_code=404, detail=f"Week {index} is out of range")
    window = tracker.weeks(index + 1)[index]
    return tracker.week_review(window)

@router.get("/notes", response_model=List[Dict[str, Any]])
def list_notes(start: Optional[str] = None, end: Optional[str] = None,
               db: Database = Depends(get_database)):
    notes = sorted(db.notes.find_many(start, end), key=lambda n: n.date, reverse=True)
    return [n.to_dict() for n in notes]

@router.get("/notes/{day}")
def get_note(day: str, db: Database = Depends(get_database)):
    note = db.notes.find_unique(day)
    if note is None:
        raise HTTPException(status_code=404, detail=f"No note for {day}")
    return note.to_dict()

@router.put("/notes/{day}")
def put_note(day: str, request: NoteRequest, db: Database = Depends(get_database)):
    try:
        return db.notes.upsert(day, request.text).to_dict()
    except ValidationError as e:
        raise unprocessable(e)
