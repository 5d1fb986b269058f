"""
Date helpers for derived ages and age-range filters.
"""

from datetime import date, timedelta
from typing import Optional, Tuple


def shift_years(day: date, years: int) -> date:
    """Move a date back by whole years; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Age in completed years; one less while this year's birthday is still ahead."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def birth_date_bounds(min_age: int, max_age: int, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Inclusive (earliest, latest) birth dates whose derived age lies in
    [min_age, max_age] on `today`.
    """
    today = today or date.today()
    latest = shift_years(today, min_age)
    earliest = shift_years(today, max_age + 1) + timedelta(days=1)
    return earliest, latest
