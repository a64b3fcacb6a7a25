from datetime import date

import pytest

from billing.errors import InvalidMonthError
from billing.months import count_working_days, month_bounds, month_label, recent_months


def test_month_bounds_handles_leap_february():
    bounds = month_bounds("2024-02")

    assert bounds.start == date(2024, 2, 1)
    assert bounds.end == date(2024, 2, 29)


def test_month_bounds_handles_common_year_and_long_months():
    assert month_bounds("2023-02").end == date(2023, 2, 28)
    assert month_bounds("2024-12").end == date(2024, 12, 31)
    assert month_bounds("2024-04").end == date(2024, 4, 30)


@pytest.mark.parametrize("month", ["2024-13", "2024-00", "2024-1", "24-01", "2024/01", "abc", "", " 2024-02 ", "2024-02\n", None, 202401])
def test_month_bounds_rejects_invalid_identifiers(month):
    with pytest.raises(InvalidMonthError) as excinfo:
        month_bounds(month)

    assert excinfo.value.month == month


def test_invalid_month_error_is_a_value_error():
    with pytest.raises(ValueError):
        month_bounds("2024-99")


def test_count_working_days_skips_weekends():
    # 2024-02-12 is a Monday
    assert count_working_days(date(2024, 2, 12), date(2024, 2, 18)) == 5
    assert count_working_days(date(2024, 2, 17), date(2024, 2, 18)) == 0
    assert count_working_days(date(2024, 2, 15), date(2024, 2, 20)) == 4


def test_count_working_days_single_day_and_inverted_range():
    assert count_working_days(date(2024, 2, 15), date(2024, 2, 15)) == 1
    assert count_working_days(date(2024, 2, 20), date(2024, 2, 15)) == 0


def test_february_2024_has_21_working_days():
    bounds = month_bounds("2024-02")

    assert count_working_days(bounds.start, bounds.end) == 21


def test_month_label_uses_full_month_name():
    assert month_label("2024-02") == "February 2024"


def test_recent_months_steps_back_across_year_boundary():
    months = recent_months(3, today=date(2024, 1, 31))

    assert months == ["2024-01", "2023-12", "2023-11"]


def test_recent_months_has_no_duplicates():
    months = recent_months(12, today=date(2024, 3, 1))

    assert len(months) == 12
    assert len(set(months)) == 12
    assert months[-1] == "2023-04"
