from fastapi import APIRouter, Depends
from typing import List, Dict, Any

from core.database import Database
from core.models import ValidationError
from shared.models import (
    CreateProgramRequest,
    UpdateProfileRequest,
    UpdateProgramRequest,
    changed_fields,
)
from ..dependencies import get_database, not_found, unprocessable

router = APIRouter(prefix="/api", tags=["profile"])

@router.get("/profile")
def get_profile(db: Database = Depends(get_database)):
    return db.user.get().to_dict()

@router.patch("/profile")
def update_profile(request: UpdateProfileRequest, db: Database = Depends(get_database)):
    try:
        return db.user.update(**changed_fields(request)).to_dict()
    except ValidationError as e:
        raise unprocessable(e)

@router.post("/profile/reset")
def reset(db: Database = Depends(get_database)):
    """Wipe the whole document"""
    db.user.reset()
    return {"ok": True}

# ===== PROGRAMS =====

@router.get("/programs", response_model=List[Dict[str, Any]])
def list_programs(db: Database = Depends(get_database)):
    return [p.to_dict() for p in db.programs.find_many()]

@router.post("/programs", status_code=201)
def create_program(request: CreateProgramRequest, db: Database = Depends(get_database)):
    try:
        program = db.programs.create(
            request.title,
            request.intensity,
            request.why,
            [w.model_dump() for w in request.weeks],
        )
    except ValidationError as e:
        raise unprocessable(e)
    return program.to_dict()

@router.get("/programs/{program_id}")
def get_program(program_id: str, db: Database = Depends(get_database)):
    program = db.programs.find(program_id)
    if program is None:
        raise not_found("Program", program_id)
    return program.to_dict()

@router.patch("/programs/{program_id}")
def update_program(program_id: str, request: UpdateProgramRequest, db: Database = Depends(get_database)):
    try:
        program = db.programs.update(program_id, **changed_fields(request))
    except ValidationError as e:
        raise unprocessable(e)
    if program is None:
        raise not_found("Program", program_id)
    return program.to_dict()
