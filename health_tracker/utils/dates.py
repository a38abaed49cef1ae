"""
Date and time helpers shared by the models, routes and risk code.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the database stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """
    Returns a person's age in whole years on `today` (defaults to the current date).
    """
    today = today or utcnow().date()
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


def format_chart_label(value: datetime) -> str:
    """Short label used on the x-axis of history charts, e.g. 'Mar 05'."""
    return value.strftime("%b %d")
