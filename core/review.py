#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Weekly Review Windows
Trailing Sunday-Saturday week windows and record filtering

Version: 1.0.0
Date: 2026-10-19
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Union

SATURDAY = 6  # day 0 = Sunday

def day_of_week(day: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6"""
    return (day.weekday() + 1) % 7

def format_short_date(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"

@dataclass(frozen=True)
class Window:
    """One calendar week, start (Sunday) to end (Saturday) inclusive"""
    id: str
    start: date
    end: date
    label: str

    @property
    def start_str(self) -> str:
        return self.start.isoformat()

    @property
    def end_str(self) -> str:
        return self.end.isoformat()

    def days(self) -> List[str]:
        return [(self.start + timedelta(days=i)).isoformat() for i in range(7)]

    def contains(self, day: Union[str, date]) -> bool:
        if isinstance(day, date):
            day = day.isoformat()
        return self.start_str <= day <= self.end_str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start_str,
            "end": self.end_str,
            "label": self.label,
        }

def current_week_end(today: date) -> date:
    """The upcoming Saturday, or today when today is a Saturday"""
    return today + timedelta(days=SATURDAY - day_of_week(today))

def compute_trailing_weeks(n: int, today: Union[str, date]) -> List[Window]:
    """
    The last n calendar weeks, most recent first.

    Window 0 is the week containing today. Computed fresh on every call.
    """
    if isinstance(today, str):
        today = date.fromisoformat(today)

    week_end = current_week_end(today)
    windows = []
    for i in range(max(n, 0)):
        end = week_end - timedelta(days=7 * i)
        start = end - timedelta(days=6)
        windows.append(Window(
            id=f"week-{i}",
            start=start,
            end=end,
            label=f"{format_short_date(start)} - {format_short_date(end)}",
        ))
    return windows

def _record_date(record: Any) -> str:
    if isinstance(record, dict):
        return record["date"]
    return record.date

def filter_by_window(records: Iterable[Any], window: Window) -> List[Any]:
    """
    Records dated within [window.start, window.end] inclusive.

    Plain string comparison is enough: dates are zero-padded YYYY-MM-DD.
    """
    start, end = window.start_str, window.end_str
    return [r for r in records if start <= _record_date(r) <= end]
