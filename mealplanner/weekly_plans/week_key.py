from datetime import date, datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from mealplanner.core.config import get_settings


def today_in(tz_name: Optional[str] = None) -> date:
    return datetime.now(ZoneInfo(tz_name or get_settings().APP_TIMEZONE)).date()


def resolve_week_start(today: date) -> date:
    """Monday on or before ``today``.

    Sunday counts as day 7, so it resolves to the Monday of the week it ends
    rather than the following one.
    """
    day_of_week = (today.weekday() + 1) % 7  # Sunday = 0 .. Saturday = 6
    offset = 7 if day_of_week == 0 else day_of_week
    return today - timedelta(days=offset - 1)


def week_key(today: Optional[date] = None) -> str:
    return resolve_week_start(today or today_in()).isoformat()


def week_days(week_start: date) -> List[date]:
    return [week_start + timedelta(days=i) for i in range(7)]
