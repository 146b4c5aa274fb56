from datetime import date, datetime
from typing import Callable

import pytz

DEFAULT_TIMEZONE = "UTC"

def get_timezone(name: str = DEFAULT_TIMEZONE):
    return pytz.timezone(name)

def now_in(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(get_timezone(tz_name))

def today_in(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return now_in(tz_name).date()

def today_provider(tz_name: str = DEFAULT_TIMEZONE) -> Callable[[], date]:
    """Clock for services; tests pass a lambda returning a fixed date instead"""
    get_timezone(tz_name)  # fail fast on unknown zone names
    return lambda: today_in(tz_name)
