from dataclasses import fields
from datetime import date, datetime, timezone

import pytest
from structlog.testing import capture_logs

from billing import calculator
from billing.calculator import calculate, clamp_to_month, overlaps_month, validate_record
from billing.errors import InvalidDateRangeError
from billing.models import PayrollRecord

from factories import make_record


def test_full_month_record_bills_full_contract():
    result = calculate(make_record(full_month=True), "2024-02")

    assert result.total_working_days == 21
    assert result.days_worked == 21
    assert result.proration == 1
    assert result.billed_amount == 3000
    assert result.payable_amount == 2300
    assert result.profit == 700
    assert result.month == "2024-02"


def test_partial_month_record_is_prorated_by_working_days():
    record = make_record(start_date=date(2024, 2, 15), end_date=date(2024, 2, 20))

    result = calculate(record, "2024-02")

    assert result.days_worked == 4
    assert result.proration == pytest.approx(4 / 21)
    assert round(result.billed_amount, 2) == 571.43
    assert result.base_salary_amount == pytest.approx(2000 * 4 / 21)
    assert result.transportation_amount == pytest.approx(300 * 4 / 21)


def test_full_month_ignores_assignment_dates():
    record = make_record(start_date=date(2024, 1, 1), end_date=date(2024, 1, 10), full_month=True)

    result = calculate(record, "2024-02")

    assert result.proration == 1
    assert result.billed_amount == record.contract_amount
    assert result.base_salary_amount == record.salary
    assert result.transportation_amount == record.transportation


def test_record_before_month_contributes_nothing():
    record = make_record(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

    assert not overlaps_month(record, "2024-02")
    result = calculate(record, "2024-02")
    assert result.days_worked == 0
    assert result.proration == 0
    assert result.billed_amount == 0


def test_overtime_and_fines_are_not_prorated():
    partial = make_record(
        salary=2100.0,
        overtime_days=2,
        fines=50.0,
        start_date=date(2024, 2, 15),
        end_date=date(2024, 2, 20),
    )
    full = make_record(salary=2100.0, overtime_days=2, fines=50.0, full_month=True)

    partial_result = calculate(partial, "2024-02")
    full_result = calculate(full, "2024-02")

    assert partial_result.overtime_amount == pytest.approx(200.0)
    assert full_result.overtime_amount == pytest.approx(200.0)
    assert partial_result.fines == full_result.fines == 50.0


@pytest.mark.parametrize("full_month", [True, False])
def test_payable_and_profit_identities(full_month):
    record = make_record(
        overtime_days=1.5,
        fines=75.0,
        start_date=date(2024, 2, 5),
        end_date=date(2024, 3, 12),
        full_month=full_month,
    )

    result = calculate(record, "2024-02")

    expected_payable = (
        result.base_salary_amount + result.transportation_amount + result.overtime_amount - record.fines
    )
    assert abs(result.payable_amount - expected_payable) < 1e-9
    assert abs(result.profit - (result.billed_amount - result.payable_amount)) < 1e-9


def test_profit_can_be_negative():
    record = make_record(contract_amount=1000.0, fines=0.0, full_month=True)

    assert calculate(record, "2024-02").profit == pytest.approx(-1300.0)


def test_zero_working_days_falls_back_to_full_daily_salary(monkeypatch):
    monkeypatch.setattr(calculator, "count_working_days", lambda start, end: 0)
    record = make_record(overtime_days=2, full_month=True)

    result = calculate(record, "2024-02")

    assert result.proration == 0
    assert result.billed_amount == 0
    assert result.overtime_amount == 4000.0


def test_inverted_range_degrades_to_zero_days_and_logs():
    record = make_record(start_date=date(2024, 2, 20), end_date=date(2024, 2, 10))

    with capture_logs() as logs:
        result = calculate(record, "2024-02")

    assert result.days_worked == 0
    assert result.proration == 0
    assert logs[0]["event"] == "inverted_date_range"
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["record_id"] == "rec1"


def test_validate_record_rejects_inverted_range():
    record = make_record(start_date=date(2024, 2, 20), end_date=date(2024, 2, 10))

    with pytest.raises(InvalidDateRangeError) as excinfo:
        validate_record(record)

    assert excinfo.value.record_id == "rec1"


def test_clamp_restricts_multi_month_assignment_to_month():
    record = make_record(start_date=date(2024, 1, 15), end_date=date(2024, 3, 10))

    clamp = clamp_to_month(record, "2024-02")

    assert clamp.range_start == date(2024, 2, 1)
    assert clamp.range_end == date(2024, 2, 29)
    assert clamp.days_worked == 21


def test_clamp_without_overlap_collapses_range():
    record = make_record(start_date=date(2024, 3, 5), end_date=date(2024, 3, 20))

    clamp = clamp_to_month(record, "2024-02")

    assert clamp.days_worked == 0
    assert clamp.range_start == clamp.range_end == date(2024, 3, 5)


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2024, 1, 1), date(2024, 1, 31), False),
        (date(2024, 3, 1), date(2024, 3, 31), False),
        (date(2024, 1, 20), date(2024, 2, 1), True),
        (date(2024, 2, 29), date(2024, 4, 1), True),
        (date(2023, 12, 1), date(2024, 5, 1), True),
    ],
)
def test_overlaps_month_agrees_with_clamp(start, end, expected):
    record = make_record(start_date=start, end_date=end)

    assert overlaps_month(record, "2024-02") is expected
    days = clamp_to_month(record, "2024-02").days_worked
    if expected:
        assert days >= 0
    else:
        assert days == 0


def test_calculate_is_deterministic():
    record = make_record(start_date=date(2024, 2, 7), end_date=date(2024, 2, 22), overtime_days=1)

    assert calculate(record, "2024-02") == calculate(record, "2024-02")


def test_calculated_record_exposes_source_fields():
    record = make_record()

    result = calculate(record, "2024-02")

    assert result.record is record
    assert result.id == "rec1"
    assert result.client_id == "c1"
    assert result.nurse_id == "n1"
    assert result.start_date == date(2024, 2, 1)


def test_calculated_record_exposes_every_record_field():
    record = make_record(
        salary=2100.0,
        transportation=250.0,
        overtime_days=1.5,
        fines=20.0,
        full_month=True,
        created_at=datetime(2024, 1, 31, 9, 0, tzinfo=timezone.utc),
    )

    result = calculate(record, "2024-02")

    for field in fields(PayrollRecord):
        assert getattr(result, field.name) == getattr(record, field.name), field.name
