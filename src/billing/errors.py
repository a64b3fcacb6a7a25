from __future__ import annotations

from datetime import date
from typing import Any


class BillingError(ValueError):
    """Base class for errors raised by the billing engine."""


class InvalidMonthError(BillingError):
    def __init__(self, month: Any):
        self.month = month
        super().__init__(f"Invalid month identifier {month!r}, expected YYYY-MM")


class InvalidDateRangeError(BillingError):
    def __init__(self, record_id: str, start_date: date, end_date: date):
        self.record_id = record_id
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Payroll record {record_id} starts on {start_date.isoformat()} after it ends on {end_date.isoformat()}"
        )
