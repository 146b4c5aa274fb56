#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Database
Key-value storage backends, the JSON document store and repositories

Every repository method reads the whole document, applies one change and
writes the whole document back before returning.

Version: 1.0.0
Date: 2026-10-19
"""

import json
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar
import logging

from core.models import (
    Arc,
    CheckIn,
    DailyNote,
    Document,
    Habit,
    Increment,
    Program,
    UserProfile,
    ValidationError,
    new_id,
    validate_enum_value,
    validate_iso_date,
    validate_text,
    ArcStage,
)

logger = logging.getLogger(__name__)

# Bump the suffix on incompatible schema changes; old keys are abandoned
STORAGE_KEY = "increment_app_arcs_v1"
SKIP_SEED_KEY = "increment_skip_seed"

T = TypeVar("T")

# ===== EXCEPTIONS =====

class DatabaseError(Exception):
    """Base class for storage errors"""
    pass

class DatabaseWriteError(DatabaseError):
    """The document could not be written"""
    pass

# ===== STORAGE BACKENDS =====

class StorageBackend:
    """String key/value storage in the shape of browser local storage"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

class MemoryStorage(StorageBackend):
    """In-process storage, mostly for tests"""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

class JsonFileStorage(StorageBackend):
    """All keys kept in one JSON object on disk"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Storage file {self.path} is unreadable: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} does not hold an object, ignoring it")
            return {}
        return data

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix(".tmp")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            shutil.move(str(temp_file), str(self.path))
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise DatabaseWriteError(f"Failed to write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)

# ===== DOCUMENT STORE =====

class DocumentStore:
    """Reads and writes the single persisted document"""

    def __init__(self, storage: StorageBackend, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Document:
        """Absent or corrupt data yields an empty document"""
        raw = self.storage.get_item(self.key)
        if not raw:
            return Document()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("document is not an object")
            return Document.from_dict(data)
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.error(f"Stored document under {self.key} is corrupted, starting empty: {e}")
            return Document()

    def save(self, document: Document) -> None:
        self.storage.set_item(self.key, json.dumps(document.to_dict(), ensure_ascii=False))

    def update(self, mutate: Callable[[Document], T]) -> T:
        """Load, apply mutate, save; returns whatever mutate returns"""
        document = self.load()
        result = mutate(document)
        self.save(document)
        return result

    def reset(self) -> None:
        """Clear everything and tell the seeding logic to stay away once"""
        self.storage.set_item(SKIP_SEED_KEY, "true")
        self.save(Document())
        logger.info("Document reset")

    def consume_skip_seed_flag(self) -> bool:
        flag = self.storage.get_item(SKIP_SEED_KEY) == "true"
        if flag:
            self.storage.remove_item(SKIP_SEED_KEY)
        return flag

# ===== REPOSITORIES =====

def _find_index(items: List[Any], predicate: Callable[[Any], bool]) -> int:
    for idx, item in enumerate(items):
        if predicate(item):
            return idx
    return -1

class UserRepository:
    PROFILE_FIELDS = ("onboarded", "age_range", "busyness", "optimization_focus")

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self) -> UserProfile:
        return self.store.load().user_profile

    def update(self, **fields) -> UserProfile:
        unknown = set(fields) - set(self.PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile fields: {sorted(unknown)}")

        def mutate(doc: Document) -> UserProfile:
            merged = {**doc.user_profile.to_dict(), **fields}
            doc.user_profile = UserProfile.from_dict(merged)
            return doc.user_profile

        return self.store.update(mutate)

    def reset(self) -> None:
        self.store.reset()

class HabitRepository:
    UPDATABLE_FIELDS = ("name", "min_version", "archived", "program_id")

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_many(self, include_archived: bool = False) -> List[Habit]:
        habits = self.store.load().habits
        if include_archived:
            return habits
        return [h for h in habits if not h.archived]

    def find(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.store.load().habits if h.id == habit_id), None)

    def create(self, name: str, min_version: Optional[str] = None,
               program_id: Optional[str] = None) -> Habit:
        habit = Habit.create(name, min_version, program_id)

        def mutate(doc: Document) -> Habit:
            doc.habits.append(habit)
            return habit

        created = self.store.update(mutate)
        logger.info(f"Habit created: {created.name} ({created.id})")
        return created

    def update(self, habit_id: str, **fields) -> Optional[Habit]:
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown habit fields: {sorted(unknown)}")

        document = self.store.load()
        idx = _find_index(document.habits, lambda h: h.id == habit_id)
        if idx < 0:
            return None
        merged = {**document.habits[idx].to_dict(), **fields}
        document.habits[idx] = Habit.from_dict(merged)
        self.store.save(document)
        return document.habits[idx]

    def archive(self, habit_id: str, archived: bool = True) -> Optional[Habit]:
        return self.update(habit_id, archived=archived)

    def toggle_archive(self, habit_id: str) -> Optional[Habit]:
        habit = self.find(habit_id)
        if habit is None:
            return None
        return self.update(habit_id, archived=not habit.archived)

class CheckInRepository:
    """Check-ins are unique per (habit_id, date)"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_many(self, date: Optional[str] = None, habit_id: Optional[str] = None) -> List[CheckIn]:
        check_ins = self.store.load().check_ins
        if date is not None:
            check_ins = [c for c in check_ins if c.date == date]
        if habit_id is not None:
            check_ins = [c for c in check_ins if c.habit_id == habit_id]
        return check_ins

    def upsert(self, habit_id: str, date: str, status: str, note: Optional[str] = None) -> CheckIn:
        date = validate_iso_date(date)
        document = self.store.load()
        idx = _find_index(document.check_ins, lambda c: c.habit_id == habit_id and c.date == date)
        if idx > -1:
            existing = document.check_ins[idx]
            check_in = CheckIn(id=existing.id, habit_id=habit_id, date=date, status=status,
                               note=note if note is not None else existing.note)
            document.check_ins[idx] = check_in
        else:
            check_in = CheckIn(id=new_id(), habit_id=habit_id, date=date, status=status, note=note)
            document.check_ins.append(check_in)
        self.store.save(document)
        logger.debug(f"Check-in {habit_id}@{date} -> {check_in.status}")
        return check_in

class ArcRepository:
    UPDATABLE_FIELDS = ("name", "stage", "archived")

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_many(self, include_archived: bool = False) -> List[Arc]:
        arcs = self.store.load().arcs
        if include_archived:
            return arcs
        return [a for a in arcs if not a.archived]

    def find(self, arc_id: str) -> Optional[Arc]:
        return next((a for a in self.store.load().arcs if a.id == arc_id), None)

    def create(self, name: str) -> Arc:
        arc = Arc.create(name)

        def mutate(doc: Document) -> Arc:
            doc.arcs.append(arc)
            return arc

        created = self.store.update(mutate)
        logger.info(f"Arc created: {created.name} ({created.id})")
        return created

    def update(self, arc_id: str, **fields) -> Optional[Arc]:
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown arc fields: {sorted(unknown)}")
        if "stage" in fields:
            validate_enum_value(fields["stage"], ArcStage, "stage")

        document = self.store.load()
        idx = _find_index(document.arcs, lambda a: a.id == arc_id)
        if idx < 0:
            return None
        document.arcs[idx] = Arc.from_dict({**document.arcs[idx].to_dict(), **fields})
        self.store.save(document)
        return document.arcs[idx]

class IncrementRepository:
    """Several increments per arc per day are allowed"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_many(self, date: Optional[str] = None) -> List[Increment]:
        increments = self.store.load().increments
        if date:
            return [i for i in increments if i.date == date]
        return increments

    def find_by_arc(self, arc_id: str) -> List[Increment]:
        return [i for i in self.store.load().increments if i.arc_id == arc_id]

    def create(self, arc_id: str, description: str, effort: str, repeat: bool, date: str) -> Increment:
        increment = Increment.create(arc_id, description, effort, repeat, date)

        def mutate(doc: Document) -> Increment:
            doc.increments.append(increment)
            return increment

        return self.store.update(mutate)

    UPDATABLE_FIELDS = ("description", "effort", "repeat", "date")

    def update(self, increment_id: str, **fields) -> Optional[Increment]:
        """Friction is recomputed from the resulting effort and repeat"""
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown increment fields: {sorted(unknown)}")

        document = self.store.load()
        idx = _find_index(document.increments, lambda i: i.id == increment_id)
        if idx < 0:
            return None
        increment = document.increments[idx]
        increment.apply_changes(**fields)
        self.store.save(document)
        return increment

class DailyNoteRepository:
    """One note per date"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def find_unique(self, date: str) -> Optional[DailyNote]:
        return next((n for n in self.store.load().daily_notes if n.date == date), None)

    def find_many(self, start: Optional[str] = None, end: Optional[str] = None) -> List[DailyNote]:
        notes = self.store.load().daily_notes
        if start and end:
            return [n for n in notes if start <= n.date <= end]
        return notes

    def upsert(self, date: str, text: str) -> DailyNote:
        date = validate_iso_date(date)
        text = validate_text(text, min_length=0, max_length=5000, field_name="text")
        document = self.store.load()
        idx = _find_index(document.daily_notes, lambda n: n.date == date)
        if idx > -1:
            document.daily_notes[idx].text = text
            note = document.daily_notes[idx]
        else:
            note = DailyNote(id=new_id(), date=date, text=text)
            document.daily_notes.append(note)
        self.store.save(document)
        return note

class ProgramRepository:
    UPDATABLE_FIELDS = ("title", "intensity", "why", "weeks")

    def __init__(self, store: DocumentStore):
        self.store = store

    def find(self, program_id: str) -> Optional[Program]:
        return next((p for p in self.store.load().programs if p.id == program_id), None)

    def find_many(self) -> List[Program]:
        return self.store.load().programs

    def create(self, title: str, intensity: str = "", why: str = "",
               weeks: Optional[List[Any]] = None) -> Program:
        program = Program.create(title, intensity, why, weeks)

        def mutate(doc: Document) -> Program:
            doc.programs.append(program)
            return program

        created = self.store.update(mutate)
        logger.info(f"Program created: {created.title} ({len(created.weeks)} weeks)")
        return created

    def update(self, program_id: str, **fields) -> Optional[Program]:
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown program fields: {sorted(unknown)}")

        document = self.store.load()
        idx = _find_index(document.programs, lambda p: p.id == program_id)
        if idx < 0:
            return None
        merged = {**document.programs[idx].to_dict(), **fields}
        if "weeks" in fields:
            merged["weeks"] = [w.to_dict() if hasattr(w, "to_dict") else w for w in fields["weeks"]]
        document.programs[idx] = Program.from_dict(merged)
        self.store.save(document)
        return document.programs[idx]

class Database:
    """Entry point handed to callers; wraps one DocumentStore"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.user = UserRepository(store)
        self.habits = HabitRepository(store)
        self.check_ins = CheckInRepository(store)
        self.arcs = ArcRepository(store)
        self.increments = IncrementRepository(store)
        self.notes = DailyNoteRepository(store)
        self.programs = ProgramRepository(store)

    @classmethod
    def in_memory(cls) -> "Database":
        return cls(DocumentStore(MemoryStorage()))

    @classmethod
    def from_file(cls, path: Path, key: str = STORAGE_KEY) -> "Database":
        logger.info(f"Using storage file {path} (key {key})")
        return cls(DocumentStore(JsonFileStorage(path), key))
