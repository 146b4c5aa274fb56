# services/tracker_service.py

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from core.database import Database
from core.models import CheckInStatus, Increment
from core.review import Window, compute_trailing_weeks, filter_by_window
from core.scoring import (
    arc_stats,
    daily_load,
    friction_band,
    load_band,
    sort_arcs_by_priority,
)
from core.streaks import compute_streak, longest_streak, success_by_date
from utils.datetime_utils import today_provider

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5

class TrackerService:
    """
    Read-side aggregates over one Database.

    The clock is injected so callers and tests control what "today" means.
    """

    def __init__(self, database: Database, today: Optional[Callable[[], date]] = None,
                 review_weeks: int = 6):
        self.db = database
        self.today = today or today_provider()
        self.review_weeks = review_weeks

    def today_str(self) -> str:
        return self.today().isoformat()

    # ===== LOGGING ACTIONS =====

    def log_increment(self, arc_id: str, description: str, effort: str, repeat: bool,
                      day: Optional[str] = None) -> Optional[Increment]:
        if self.db.arcs.find(arc_id) is None:
            logger.warning(f"Increment for unknown arc {arc_id} ignored")
            return None
        increment = self.db.increments.create(arc_id, description, effort, repeat, day or self.today_str())
        logger.info(f"Logged increment {increment.description!r} "
                    f"({increment.effort}, friction {increment.effective_friction})")
        return increment

    def check_in(self, habit_id: str, status: str = CheckInStatus.DONE.value,
                 day: Optional[str] = None, note: Optional[str] = None):
        if self.db.habits.find(habit_id) is None:
            logger.warning(f"Check-in for unknown habit {habit_id} ignored")
            return None
        return self.db.check_ins.upsert(habit_id, day or self.today_str(), status, note)

    # ===== STREAKS =====

    def habit_streak(self, habit_id: str) -> Dict[str, Any]:
        days = success_by_date(self.db.check_ins.find_many(habit_id=habit_id))
        return {
            "habit_id": habit_id,
            "current": compute_streak(days, self.today()),
            "longest": longest_streak(days),
        }

    def overall_streak(self) -> int:
        """Streak across all active habits"""
        active = {h.id for h in self.db.habits.find_many()}
        check_ins = [c for c in self.db.check_ins.find_many() if c.habit_id in active]
        return compute_streak(success_by_date(check_ins), self.today())

    # ===== DASHBOARD =====

    def recent_activities(self, limit: int = RECENT_ACTIVITY_LIMIT) -> List[Increment]:
        """Newest increments, one per (arc, description), for quick repeat"""
        seen = set()
        recent = []
        for increment in sorted(self.db.increments.find_many(), key=lambda i: i.date, reverse=True):
            key = (increment.arc_id, increment.description)
            if key in seen:
                continue
            seen.add(key)
            recent.append(increment)
            if len(recent) >= limit:
                break
        return recent

    def today_summary(self) -> Dict[str, Any]:
        today = self.today_str()
        document = self.db.store.load()
        todays = [i for i in document.increments if i.date == today]
        load = daily_load(todays, today)

        habits = [h for h in document.habits if not h.archived]
        statuses = {c.habit_id: c.status for c in document.check_ins if c.date == today}

        return {
            "date": today,
            "load": load,
            "load_band": load_band(load),
            "increments": [i.to_dict() for i in todays],
            "arcs": [a.to_dict() for a in sort_arcs_by_priority(a for a in document.arcs if not a.archived)],
            "habits": [
                {**h.to_dict(), "status": statuses.get(h.id, CheckInStatus.PENDING.value)}
                for h in habits
            ],
            "recent": [i.to_dict() for i in self.recent_activities()],
            "streak": self.overall_streak(),
        }

    def arc_overview(self) -> List[Dict[str, Any]]:
        increments = self.db.increments.find_many()
        return [
            {**arc.to_dict(), **arc_stats(increments, arc.id).to_dict()}
            for arc in sort_arcs_by_priority(self.db.arcs.find_many())
        ]

    def arc_history(self, arc_id: str) -> List[Increment]:
        return sorted(self.db.increments.find_by_arc(arc_id), key=lambda i: i.date)

    # ===== WEEKLY REVIEW =====

    def weeks(self, count: Optional[int] = None) -> List[Window]:
        return compute_trailing_weeks(self.review_weeks if count is None else count, self.today())

    def week_review(self, window: Window) -> Dict[str, Any]:
        """Everything the review screen shows for one window"""
        document = self.db.store.load()
        days = window.days()

        increments = filter_by_window(document.increments, window)
        notes = sorted(filter_by_window(document.daily_notes, window), key=lambda n: n.date, reverse=True)
        check_ins = filter_by_window(document.check_ins, window)

        arcs = []
        for arc in sort_arcs_by_priority(document.arcs):
            arc_increments = [i for i in increments if i.arc_id == arc.id]
            if arc.archived and not arc_increments:
                continue
            arcs.append({
                "arc": arc.to_dict(),
                "days": {
                    day: [
                        {**i.to_dict(), "band": friction_band(i.effective_friction)}
                        for i in arc_increments if i.date == day
                    ]
                    for day in days
                },
            })

        habits = []
        for habit in document.habits:
            statuses = {c.date: c.status for c in check_ins if c.habit_id == habit.id}
            if habit.archived and not statuses:
                continue
            habits.append({
                "habit": habit.to_dict(),
                "days": {day: statuses.get(day) for day in days},
            })

        load = round(sum(i.effective_friction for i in increments), 2)
        return {
            "window": window.to_dict(),
            "days": days,
            "load": load,
            "increment_count": len(increments),
            "arcs": arcs,
            "habits": habits,
            "notes": [n.to_dict() for n in notes],
        }
