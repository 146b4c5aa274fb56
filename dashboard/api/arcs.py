from fastapi import APIRouter, Depends
from typing import List, Dict, Any

from core.database import Database
from core.models import ValidationError
from core.scoring import arc_stats
from services.tracker_service import TrackerService
from shared.models import (
    CreateArcRequest,
    LogIncrementRequest,
    UpdateArcRequest,
    UpdateIncrementRequest,
    changed_fields,
)
from ..dependencies import get_database, get_tracker, not_found, unprocessable

router = APIRouter(prefix="/api", tags=["arcs"])

@router.get("/arcs", response_model=List[Dict[str, Any]])
def list_arcs(tracker: TrackerService = Depends(get_tracker)):
    """Active arcs in priority order with their count and load"""
    return tracker.arc_overview()

@router.post("/arcs", status_code=201)
def create_arc(request: CreateArcRequest, db: Database = Depends(get_database)):
    try:
        return db.arcs.create(request.name).to_dict()
    except ValidationError as e:
        raise unprocessable(e)

@router.patch("/arcs/{arc_id}")
def update_arc(arc_id: str, request: UpdateArcRequest, db: Database = Depends(get_database)):
    try:
        arc = db.arcs.update(arc_id, **changed_fields(request))
    except ValidationError as e:
        raise unprocessable(e)
    if arc is None:
        raise not_found("Arc", arc_id)
    return arc.to_dict()

@router.get("/arcs/{arc_id}/stats")
def get_arc_stats(arc_id: str, tracker: TrackerService = Depends(get_tracker)):
    if tracker.db.arcs.find(arc_id) is None:
        raise not_found("Arc", arc_id)
    history = tracker.arc_history(arc_id)
    return {
        **arc_stats(history, arc_id).to_dict(),
        "history": [i.to_dict() for i in history],
    }

@router.post("/arcs/{arc_id}/increments", status_code=201)
def log_increment(arc_id: str, request: LogIncrementRequest,
                  tracker: TrackerService = Depends(get_tracker)):
    try:
        increment = tracker.log_increment(
            arc_id, request.description, request.effort.value, request.repeat, request.date
        )
    except ValidationError as e:
        raise unprocessable(e)
    if increment is None:
        raise not_found("Arc", arc_id)
    return increment.to_dict()

@router.patch("/increments/{increment_id}")
def update_increment(increment_id: str, request: UpdateIncrementRequest,
                     db: Database = Depends(get_database)):
    try:
        increment = db.increments.update(increment_id, **changed_fields(request))
    except ValidationError as e:
        raise unprocessable(e)
    if increment is None:
        raise not_found("Increment", increment_id)
    return increment.to_dict()
