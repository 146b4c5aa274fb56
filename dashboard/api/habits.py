from fastapi import APIRouter, Depends
from typing import List, Dict, Any

from core.database import Database
from core.models import ValidationError
from services.tracker_service import TrackerService
from shared.models import CheckInRequest, CreateHabitRequest, UpdateHabitRequest, changed_fields
from ..dependencies import get_database, get_tracker, not_found, unprocessable

router = APIRouter(prefix="/api/habits", tags=["habits"])

@router.get("", response_model=List[Dict[str, Any]])
def list_habits(include_archived: bool = False, db: Database = Depends(get_database)):
    return [h.to_dict() for h in db.habits.find_many(include_archived)]

@router.post("", status_code=201)
def create_habit(request: CreateHabitRequest, db: Database = Depends(get_database)):
    if request.program_id and db.programs.find(request.program_id) is None:
        raise not_found("Program", request.program_id)
    try:
        habit = db.habits.create(request.name, request.min_version, request.program_id)
    except ValidationError as e:
        raise unprocessable(e)
    return habit.to_dict()

@router.patch("/{habit_id}")
def update_habit(habit_id: str, request: UpdateHabitRequest, db: Database = Depends(get_database)):
    try:
        habit = db.habits.update(habit_id, **changed_fields(request))
    except ValidationError as e:
        raise unprocessable(e)
    if habit is None:
        raise not_found("Habit", habit_id)
    return habit.to_dict()

@router.post("/{habit_id}/archive")
def toggle_archive(habit_id: str, db: Database = Depends(get_database)):
    """Archive an active habit or restore an archived one"""
    habit = db.habits.toggle_archive(habit_id)
    if habit is None:
        raise not_found("Habit", habit_id)
    return habit.to_dict()

@router.put("/{habit_id}/checkins/{day}")
def check_in(habit_id: str, day: str, request: CheckInRequest,
             tracker: TrackerService = Depends(get_tracker)):
    try:
        result = tracker.check_in(habit_id, request.status.value, day, request.note)
    except ValidationError as e:
        raise unprocessable(e)
    if result is None:
        raise not_found("Habit", habit_id)
    return result.to_dict()

@router.get("/{habit_id}/streak")
def habit_streak(habit_id: str, tracker: TrackerService = Depends(get_tracker)):
    if tracker.db.habits.find(habit_id) is None:
        raise not_found("Habit", habit_id)
    return tracker.habit_streak(habit_id)
