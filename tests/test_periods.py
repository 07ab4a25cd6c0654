from datetime import date, timedelta

import pytest

from timesheet.clock import FixedClock
from timesheet.errors import UnknownPolicyError
from timesheet.models import Period
from timesheet.periods import (
    PeriodCalculator,
    RollingTwoWeekPolicy,
    SemiMonthlyPolicy,
    get_policy,
    month_end,
)


def every_day(start: date, days: int):
    for offset in range(days):
        yield start + timedelta(days=offset)


def test_semi_monthly_first_half_scenario():
    policy = SemiMonthlyPolicy()

    current = policy.current(date(2024, 3, 10))

    assert current == Period(date(2024, 3, 1), date(2024, 3, 15))
    assert policy.previous(current.start) == Period(date(2024, 2, 16), date(2024, 2, 29))
    assert policy.previous(policy.previous(current.start).start) == Period(date(2024, 2, 1), date(2024, 2, 15))
    assert policy.next(current.start) == Period(date(2024, 3, 16), date(2024, 3, 31))


def test_semi_monthly_second_half_scenario():
    policy = SemiMonthlyPolicy()

    current = policy.current(date(2024, 3, 16))

    assert current == Period(date(2024, 3, 16), date(2024, 3, 31))
    assert policy.previous(current.start) == Period(date(2024, 3, 1), date(2024, 3, 15))
    assert policy.next(current.start) == Period(date(2024, 4, 1), date(2024, 4, 15))


@pytest.mark.parametrize(
    "reference, expected_end",
    [
        (date(2024, 2, 20), date(2024, 2, 29)),
        (date(2023, 2, 20), date(2023, 2, 28)),
        (date(2024, 4, 30), date(2024, 4, 30)),
        (date(2024, 12, 16), date(2024, 12, 31)),
    ],
)
def test_semi_monthly_second_half_ends_on_month_end(reference, expected_end):
    assert SemiMonthlyPolicy().current(reference).end == expected_end


def test_semi_monthly_wraps_year_boundaries():
    policy = SemiMonthlyPolicy()

    assert policy.previous(date(2024, 1, 1)) == Period(date(2023, 12, 16), date(2023, 12, 31))
    assert policy.next(date(2024, 12, 16)) == Period(date(2025, 1, 1), date(2025, 1, 15))


def test_semi_monthly_navigation_is_mutually_inverse():
    policy = SemiMonthlyPolicy()
    for day in every_day(date(2023, 12, 1), 800):
        current = policy.current(day)
        assert policy.next(policy.previous(current.start).start) == current
        assert policy.previous(policy.next(current.start).start) == current


def test_rolling_two_week_navigation_is_mutually_inverse():
    policy = RollingTwoWeekPolicy()
    for day in every_day(date(2023, 12, 1), 400):
        current = policy.current(day)
        assert policy.next(policy.previous(current.start).start) == current
        assert policy.previous(policy.next(current.start).start) == current


def test_rolling_two_week_window_follows_the_reference_week():
    policy = RollingTwoWeekPolicy()
    earlier = policy.current(date(2024, 3, 14))

    assert date(2024, 3, 20) in earlier
    assert policy.current(date(2024, 3, 20)) == Period(date(2024, 3, 18), date(2024, 3, 31))


def test_rolling_two_week_starts_on_monday():
    policy = RollingTwoWeekPolicy()

    current = policy.current(date(2024, 3, 14))  # Thursday

    assert current == Period(date(2024, 3, 11), date(2024, 3, 24))
    assert policy.previous(current.start) == Period(date(2024, 2, 26), date(2024, 3, 10))
    assert policy.next(current.start) == Period(date(2024, 3, 25), date(2024, 4, 7))


def test_rolling_two_week_sunday_belongs_to_preceding_monday():
    assert RollingTwoWeekPolicy().current(date(2024, 3, 17)).start == date(2024, 3, 11)


@pytest.mark.parametrize("policy", [SemiMonthlyPolicy(), RollingTwoWeekPolicy()])
def test_current_period_contains_its_reference_date(policy):
    for day in every_day(date(2024, 1, 1), 366):
        assert day in policy.current(day)


def test_period_membership_is_stable_for_semi_monthly_ranges():
    policy = SemiMonthlyPolicy()
    period = policy.current(date(2024, 2, 20))
    members = list(every_day(period.start, (period.end - period.start).days + 1))

    assert {policy.current(day) for day in members} == {period}


def test_calculator_uses_injected_clock_and_resolves_missing_bounds():
    calculator = PeriodCalculator(SemiMonthlyPolicy(), FixedClock(date(2024, 3, 20)))

    assert calculator.current() == Period(date(2024, 3, 16), date(2024, 3, 31))
    assert calculator.resolve() == Period(date(2024, 3, 16), date(2024, 3, 31))
    assert calculator.resolve(start=date(2024, 3, 18)) == Period(date(2024, 3, 18), date(2024, 3, 31))
    assert calculator.resolve(date(2024, 1, 1), date(2024, 1, 5)) == Period(date(2024, 1, 1), date(2024, 1, 5))


def test_calculator_lookback_applies_previous_repeatedly():
    calculator = PeriodCalculator(SemiMonthlyPolicy(), FixedClock(date(2024, 3, 10)))

    assert calculator.lookback(calculator.current(), 2) == Period(date(2024, 2, 1), date(2024, 2, 15))


def test_get_policy_by_name():
    assert isinstance(get_policy("semi-monthly"), SemiMonthlyPolicy)
    assert isinstance(get_policy("two-week"), RollingTwoWeekPolicy)
    with pytest.raises(UnknownPolicyError):
        get_policy("weekly")


def test_month_end_handles_leap_years():
    assert month_end(2024, 2) == date(2024, 2, 29)
    assert month_end(2100, 2) == date(2100, 2, 28)
