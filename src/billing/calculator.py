from __future__ import annotations

import structlog

from .errors import InvalidDateRangeError
from .models import CalculatedPayrollRecord, PayrollRecord, RangeClamp
from .months import count_working_days, month_bounds

logger = structlog.get_logger(__name__)


def validate_record(record: PayrollRecord) -> PayrollRecord:
    """Reject records whose assignment ends before it starts."""

    if record.start_date > record.end_date:
        raise InvalidDateRangeError(record.id, record.start_date, record.end_date)
    return record


def overlaps_month(record: PayrollRecord, month: str) -> bool:
    bounds = month_bounds(month)
    return not (record.end_date < bounds.start or record.start_date > bounds.end)


def clamp_to_month(record: PayrollRecord, month: str) -> RangeClamp:
    bounds = month_bounds(month)
    range_start = max(record.start_date, bounds.start)
    range_end = min(record.end_date, bounds.end)
    if range_start > range_end:
        return RangeClamp(range_start=range_start, range_end=range_start, days_worked=0)
    return RangeClamp(
        range_start=range_start,
        range_end=range_end,
        days_worked=count_working_days(range_start, range_end),
    )


def _proration(effective_days: int, total_working_days: int, full_month: bool) -> float:
    if total_working_days == 0:
        return 0.0
    if full_month:
        return 1.0
    return min(1.0, effective_days / total_working_days)


def calculate(record: PayrollRecord, month: str) -> CalculatedPayrollRecord:
    """Derive billed, payable and profit figures for one record in ``month``.

    Base salary, transportation and the contract amount are prorated by the
    share of the month's working days the assignment covers. Overtime and
    fines are applied in full. An inverted date range is logged and counted
    as zero worked days rather than raised, so one bad record cannot abort a
    whole month's aggregation.
    """

    try:
        validate_record(record)
    except InvalidDateRangeError as exc:
        logger.warning(
            "inverted_date_range",
            record_id=exc.record_id,
            start_date=exc.start_date.isoformat(),
            end_date=exc.end_date.isoformat(),
            month=month,
        )

    bounds = month_bounds(month)
    total_working_days = count_working_days(bounds.start, bounds.end)
    days_worked = clamp_to_month(record, month).days_worked
    effective_days = total_working_days if record.full_month else days_worked
    proration = _proration(effective_days, total_working_days, record.full_month)

    billed_amount = record.contract_amount * proration
    base_salary_amount = record.salary * proration
    transportation_amount = record.transportation * proration
    daily_salary = record.salary / total_working_days if total_working_days > 0 else record.salary
    overtime_amount = record.overtime_days * daily_salary

    payable_amount = base_salary_amount + transportation_amount + overtime_amount - record.fines
    profit = billed_amount - payable_amount

    return CalculatedPayrollRecord(
        record=record,
        month=month,
        days_worked=effective_days,
        total_working_days=total_working_days,
        proration=proration,
        billed_amount=billed_amount,
        base_salary_amount=base_salary_amount,
        transportation_amount=transportation_amount,
        overtime_amount=overtime_amount,
        payable_amount=payable_amount,
        profit=profit,
    )
