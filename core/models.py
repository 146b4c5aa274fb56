#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Core Data Models
Dataclass models for habits, check-ins, arcs, increments, notes and programs

Version: 1.0.0
Date: 2026-10-19
"""

import uuid
from datetime import datetime, date
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum
import logging

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class EffortLevel(Enum):
    """Effort of a single increment"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class CheckInStatus(Enum):
    """Status of a habit check-in"""
    DONE = "Done"
    PARTIAL = "Partial"
    SKIP = "Skip"
    PENDING = "Pending"

class ArcStage(Enum):
    """Maturity of an arc"""
    EARLY = "Early"
    MIDDLE = "Middle"
    MATURE = "Mature"

class Busyness(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class OptimizationFocus(Enum):
    WORK = "Work"
    HEALTH = "Health"
    LEARNING = "Learning"
    GENERAL = "General"

# Older documents stored effort as Easy/Medium/Hard
LEGACY_EFFORT_NAMES = {
    "Easy": EffortLevel.LOW.value,
    "Hard": EffortLevel.HIGH.value,
}

SUCCESS_STATUSES = (CheckInStatus.DONE.value, CheckInStatus.PARTIAL.value)

DEFAULT_MIN_VERSION = "Just show up"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Invalid field value supplied by a caller"""
    pass

def validate_text(text: str, min_length: int = 1, max_length: int = 1000, field_name: str = "text") -> str:
    """Strip and length-check a text field"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")

    return text

def validate_enum_value(value: str, enum_class: type, field_name: str = "value") -> str:
    """Check that value belongs to enum_class and return it"""
    if isinstance(value, Enum):
        value = value.value
    try:
        enum_class(value)
        return value
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} must be one of: {valid_values}")

def validate_iso_date(value: str, field_name: str = "date") -> str:
    """Dates are stored as zero-padded YYYY-MM-DD strings"""
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r} (expected YYYY-MM-DD)")

def new_id() -> str:
    return str(uuid.uuid4())

def now_iso() -> str:
    return datetime.now().isoformat()

# ===== CORE MODELS =====

@dataclass
class Habit:
    """A habit with a minimum viable version"""
    id: str
    name: str
    min_version: str = DEFAULT_MIN_VERSION
    archived: bool = False
    program_id: Optional[str] = None
    created_at: str = field(default_factory=now_iso)

    def __post_init__(self):
        self.name = validate_text(self.name, max_length=100, field_name="name")
        self.min_version = validate_text(
            self.min_version or DEFAULT_MIN_VERSION, max_length=300, field_name="min_version"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "min_version": self.min_version,
            "archived": self.archived,
            "program_id": self.program_id,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        return cls(
            id=data["id"],
            name=data["name"],
            min_version=data.get("min_version", DEFAULT_MIN_VERSION),
            archived=data.get("archived", False),
            program_id=data.get("program_id"),
            created_at=data.get("created_at", now_iso()),
        )

    @classmethod
    def create(cls, name: str, min_version: Optional[str] = None,
               program_id: Optional[str] = None) -> "Habit":
        return cls(id=new_id(), name=name, min_version=min_version or DEFAULT_MIN_VERSION,
                   program_id=program_id)

@dataclass
class CheckIn:
    """One habit check-in; unique per (habit_id, date)"""
    id: str
    habit_id: str
    date: str
    status: str = CheckInStatus.DONE.value
    note: Optional[str] = None

    def __post_init__(self):
        self.date = validate_iso_date(self.date)
        self.status = validate_enum_value(self.status, CheckInStatus, "status")
        if self.note is not None:
            self.note = validate_text(self.note, min_length=0, max_length=500, field_name="note")

    @property
    def is_success(self) -> bool:
        return self.status in SUCCESS_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "date": self.date,
            "status": self.status,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckIn":
        return cls(
            id=data["id"],
            habit_id=data["habit_id"],
            date=data["date"],
            status=data.get("status", CheckInStatus.DONE.value),
            note=data.get("note"),
        )

@dataclass
class Arc:
    """An area of growth"""
    id: str
    name: str
    stage: str = ArcStage.EARLY.value
    archived: bool = False
    created_at: str = field(default_factory=now_iso)

    def __post_init__(self):
        self.name = validate_text(self.name, max_length=100, field_name="name")
        self.stage = validate_enum_value(self.stage, ArcStage, "stage")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "stage": self.stage,
            "archived": self.archived,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Arc":
        return cls(
            id=data["id"],
            name=data["name"],
            stage=data.get("stage", ArcStage.EARLY.value),
            archived=data.get("archived", False),
            created_at=data.get("created_at", now_iso()),
        )

    @classmethod
    def create(cls, name: str) -> "Arc":
        return cls(id=new_id(), name=name)

@dataclass
class Increment:
    """
    A single logged action towards an arc.

    effective_friction is derived from (effort, repeat) and is recomputed
    whenever either changes; it cannot be passed in.
    """
    id: str
    arc_id: str
    date: str
    description: str
    effort: str = EffortLevel.LOW.value
    repeat: bool = True
    effective_friction: float = field(init=False)

    def __post_init__(self):
        self.date = validate_iso_date(self.date)
        self.description = validate_text(self.description, max_length=200, field_name="description")
        self.effort = validate_enum_value(
            LEGACY_EFFORT_NAMES.get(self.effort, self.effort), EffortLevel, "effort"
        )
        self.repeat = bool(self.repeat)
        self.recompute_friction()

    def recompute_friction(self) -> float:
        # imported here, scoring depends on the enums above
        from core.scoring import compute_friction

        self.effective_friction = compute_friction(self.effort, self.repeat)
        return self.effective_friction

    def apply_changes(self, description: Optional[str] = None, effort: Optional[str] = None,
                      repeat: Optional[bool] = None, date: Optional[str] = None) -> None:
        if description is not None:
            self.description = validate_text(description, max_length=200, field_name="description")
        if effort is not None:
            self.effort = validate_enum_value(LEGACY_EFFORT_NAMES.get(effort, effort), EffortLevel, "effort")
        if repeat is not None:
            self.repeat = bool(repeat)
        if date is not None:
            self.date = validate_iso_date(date)
        self.recompute_friction()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "arc_id": self.arc_id,
            "date": self.date,
            "description": self.description,
            "effort": self.effort,
            "repeat": self.repeat,
            "effective_friction": self.effective_friction,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Increment":
        # stored effective_friction is ignored and recomputed
        return cls(
            id=data["id"],
            arc_id=data["arc_id"],
            date=data["date"],
            description=data["description"],
            effort=data.get("effort", EffortLevel.LOW.value),
            repeat=data.get("repeat", True),
        )

    @classmethod
    def create(cls, arc_id: str, description: str, effort: str, repeat: bool, date: str) -> "Increment":
        return cls(id=new_id(), arc_id=arc_id, date=date, description=description,
                   effort=effort, repeat=repeat)

@dataclass
class DailyNote:
    """Free-text note; unique per date"""
    id: str
    date: str
    text: str

    def __post_init__(self):
        self.date = validate_iso_date(self.date)
        self.text = validate_text(self.text, min_length=0, max_length=5000, field_name="text")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "date": self.date, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyNote":
        return cls(id=data["id"], date=data["date"], text=data.get("text", ""))

@dataclass
class ProgramWeek:
    week_number: int
    title: str
    bullets: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"week_number": self.week_number, "title": self.title, "bullets": list(self.bullets)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgramWeek":
        return cls(
            week_number=int(data["week_number"]),
            title=data.get("title", ""),
            bullets=list(data.get("bullets", [])),
        )

@dataclass
class Program:
    """Multi-week structured plan attached to a habit"""
    id: str
    title: str
    intensity: str = ""
    why: str = ""
    weeks: List[ProgramWeek] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)

    def __post_init__(self):
        self.title = validate_text(self.title, max_length=200, field_name="title")
        weeks = []
        for w in self.weeks:
            if isinstance(w, dict):
                w = ProgramWeek.from_dict(w)
            elif not isinstance(w, ProgramWeek):
                raise ValidationError(f"Program week must be an object, got {type(w).__name__}")
            weeks.append(w)
        self.weeks = sorted(weeks, key=lambda w: w.week_number)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "intensity": self.intensity,
            "why": self.why,
            "weeks": [w.to_dict() for w in self.weeks],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Program":
        return cls(
            id=data["id"],
            title=data["title"],
            intensity=data.get("intensity", ""),
            why=data.get("why", ""),
            weeks=data.get("weeks", []),
            created_at=data.get("created_at", now_iso()),
        )

    @classmethod
    def create(cls, title: str, intensity: str = "", why: str = "",
               weeks: Optional[List[Any]] = None) -> "Program":
        return cls(id=new_id(), title=title, intensity=intensity, why=why, weeks=weeks or [])

@dataclass
class UserProfile:
    """Onboarding state and coarse preference tags"""
    onboarded: bool = False
    age_range: Optional[str] = None
    busyness: Optional[str] = None
    optimization_focus: Optional[str] = None

    def __post_init__(self):
        if self.busyness is not None:
            self.busyness = validate_enum_value(self.busyness, Busyness, "busyness")
        if self.optimization_focus is not None:
            self.optimization_focus = validate_enum_value(
                self.optimization_focus, OptimizationFocus, "optimization_focus"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "onboarded": self.onboarded,
            "age_range": self.age_range,
            "busyness": self.busyness,
            "optimization_focus": self.optimization_focus,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            onboarded=bool(data.get("onboarded", False)),
            age_range=data.get("age_range"),
            busyness=data.get("busyness"),
            optimization_focus=data.get("optimization_focus"),
        )

@dataclass
class Document:
    """The whole persisted state"""
    user_profile: UserProfile = field(default_factory=UserProfile)
    habits: List[Habit] = field(default_factory=list)
    check_ins: List[CheckIn] = field(default_factory=list)
    arcs: List[Arc] = field(default_factory=list)
    increments: List[Increment] = field(default_factory=list)
    daily_notes: List[DailyNote] = field(default_factory=list)
    programs: List[Program] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_profile": self.user_profile.to_dict(),
            "habits": [h.to_dict() for h in self.habits],
            "check_ins": [c.to_dict() for c in self.check_ins],
            "arcs": [a.to_dict() for a in self.arcs],
            "increments": [i.to_dict() for i in self.increments],
            "daily_notes": [n.to_dict() for n in self.daily_notes],
            "programs": [p.to_dict() for p in self.programs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """Missing sections default to empty so older documents still load"""
        profile = data.get("user_profile") or {}
        if not isinstance(profile, dict):
            raise ValidationError("user_profile must be an object")

        def records(name: str) -> List[Dict[str, Any]]:
            items = data.get(name) or []
            if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
                raise ValidationError(f"{name} must be a list of objects")
            return items

        return cls(
            user_profile=UserProfile.from_dict(profile),
            habits=[Habit.from_dict(h) for h in records("habits")],
            check_ins=[CheckIn.from_dict(c) for c in records("check_ins")],
            arcs=[Arc.from_dict(a) for a in records("arcs")],
            increments=[Increment.from_dict(i) for i in records("increments")],
            daily_notes=[DailyNote.from_dict(n) for n in records("daily_notes")],
            programs=[Program.from_dict(p) for p in records("programs")],
        )
