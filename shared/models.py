from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from enum import Enum

# Enums mirrored from core.models for request validation
class EffortLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class CheckInStatus(str, Enum):
    DONE = "Done"
    PARTIAL = "Partial"
    SKIP = "Skip"
    PENDING = "Pending"

class ArcStage(str, Enum):
    EARLY = "Early"
    MIDDLE = "Middle"
    MATURE = "Mature"

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float

# Habits
class CreateHabitRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    min_version: Optional[str] = Field(None, max_length=300)
    program_id: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Habit name must not be blank')
        return v.strip()

class UpdateHabitRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    min_version: Optional[str] = Field(None, max_length=300)
    archived: Optional[bool] = None
    program_id: Optional[str] = None

class CheckInRequest(BaseModel):
    status: CheckInStatus = CheckInStatus.DONE
    note: Optional[str] = Field(None, max_length=500)

# Arcs and increments
class CreateArcRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

class UpdateArcRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    stage: Optional[ArcStage] = None
    archived: Optional[bool] = None

class LogIncrementRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=200)
    effort: EffortLevel = EffortLevel.LOW
    repeat: bool = True
    date: Optional[str] = Field(None, description="YYYY-MM-DD, defaults to today")

class UpdateIncrementRequest(BaseModel):
    """effective_friction is not accepted; it follows effort and repeat"""
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    effort: Optional[EffortLevel] = None
    repeat: Optional[bool] = None
    date: Optional[str] = None

# Notes
class NoteRequest(BaseModel):
    text: str = Field(..., max_length=5000)

# Programs
class ProgramWeekModel(BaseModel):
    week_number: int = Field(..., ge=1)
    title: str
    bullets: List[str] = []

class CreateProgramRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    intensity: str = ""
    why: str = ""
    weeks: List[ProgramWeekModel] = []

class UpdateProgramRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    intensity: Optional[str] = None
    why: Optional[str] = None
    weeks: Optional[List[ProgramWeekModel]] = None

# Profile
class UpdateProfileRequest(BaseModel):
    onboarded: Optional[bool] = None
    age_range: Optional[str] = None
    busyness: Optional[str] = None
    optimization_focus: Optional[str] = None

def changed_fields(request: BaseModel) -> dict:
    """Fields the client actually sent, enums flattened to their values"""
    return request.model_dump(exclude_unset=True, mode="json")
