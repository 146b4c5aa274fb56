# core/streaks.py

from datetime import date, timedelta
from typing import Dict, Iterable, Mapping, Union

from core.models import CheckIn

DateLike = Union[str, date]

def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)

def success_by_date(check_ins: Iterable[CheckIn]) -> Dict[str, bool]:
    """A day counts as a success if any check-in that day is Done or Partial"""
    days: Dict[str, bool] = {}
    for check_in in check_ins:
        days[check_in.date] = days.get(check_in.date, False) or check_in.is_success
    return days

def _normalise(success_dates) -> Dict[date, bool]:
    if isinstance(success_dates, Mapping):
        return {_as_date(d): bool(ok) for d, ok in success_dates.items()}
    return {_as_date(d): True for d in success_dates}

def compute_streak(success_dates: Union[Mapping[DateLike, bool], Iterable[DateLike]],
                   today: DateLike) -> int:
    """
    Consecutive trailing success days anchored at today.

    success_dates is either a mapping of day -> success or an iterable of
    success days. Walking the days newest first, a day further back than
    streak + 1 ends the run, so a missing entry for today does not reset
    yesterday's streak. A recorded non-success day ends the run unless it
    is today. Days after today are ignored.
    """
    today = _as_date(today)
    days = _normalise(success_dates)

    streak = 0
    for day in sorted(days, reverse=True):
        diff = (today - day).days
        if diff < 0:
            continue
        if diff > streak + 1:
            break
        if days[day]:
            streak += 1
        elif day != today:
            break

    return streak

def longest_streak(success_dates: Union[Mapping[DateLike, bool], Iterable[DateLike]]) -> int:
    """Longest run of consecutive success days anywhere in history"""
    successes = sorted(d for d, ok in _normalise(success_dates).items() if ok)
    if not successes:
        return 0

    best = current = 1
    for previous, day in zip(successes, successes[1:]):
        if day == previous + timedelta(days=1):
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best
