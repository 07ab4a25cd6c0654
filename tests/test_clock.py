from datetime import date

import pytest

from timesheet.clock import FixedClock, parse_day


def test_parse_day_accepts_plain_dates_and_timestamps():
    assert parse_day("2024-03-10") == date(2024, 3, 10)
    assert parse_day(" 2024-03-10 ") == date(2024, 3, 10)
    assert parse_day("2024-03-10T23:30:00Z") == date(2024, 3, 10)


@pytest.mark.parametrize(
    "value",
    ["2024-03-10garbage", "2024-W10-1", "20240310", "2024-02-30", "not-a-date", "", None],
)
def test_parse_day_rejects_anything_else(value):
    assert parse_day(value) is None


def test_fixed_clock_returns_its_day():
    assert FixedClock(date(2024, 3, 14)).today() == date(2024, 3, 14)
