from __future__ import annotations

import re
from calendar import month_name, monthrange
from datetime import date, timedelta
from typing import List, Optional

from .errors import InvalidMonthError
from .models import MonthBounds

MONTH_PATTERN = re.compile(r"(\d{4})-(\d{2})")


def parse_month(month: str) -> tuple[int, int]:
    if not isinstance(month, str):
        raise InvalidMonthError(month)
    match = MONTH_PATTERN.fullmatch(month)
    if not match:
        raise InvalidMonthError(month)
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12 or year < 1:
        raise InvalidMonthError(month)
    return year, month_number


def month_bounds(month: str) -> MonthBounds:
    """Return the first and last calendar day of a ``YYYY-MM`` month, both inclusive."""

    year, month_number = parse_month(month)
    _, last_day = monthrange(year, month_number)
    return MonthBounds(start=date(year, month_number, 1), end=date(year, month_number, last_day))


def count_working_days(start: date, end: date) -> int:
    """Count Monday-Friday dates in ``[start, end]``. Holidays are not modelled."""

    if start > end:
        return 0
    total = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            total += 1
        current += timedelta(days=1)
    return total


def month_label(month: str) -> str:
    year, month_number = parse_month(month)
    return f"{month_name[month_number]} {year}"


def format_month(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def recent_months(count: int = 12, today: Optional[date] = None) -> List[str]:
    anchor = today or date.today()
    year, month_number = anchor.year, anchor.month
    months: List[str] = []
    for _ in range(max(count, 0)):
        months.append(f"{year:04d}-{month_number:02d}")
        month_number -= 1
        if month_number == 0:
            year, month_number = year - 1, 12
    return months
