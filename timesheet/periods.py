from __future__ import annotations
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Optional, Type

from .clock import Clock, SystemClock
from .errors import UnknownPolicyError
from .models import Period


def month_end(year: int, month: int) -> date:
    _, last_day = monthrange(year, month)
    return date(year, month, last_day)


def week_start(anchor: date) -> date:
    return anchor - timedelta(days=anchor.weekday())


@dataclass
class PeriodPolicy:
    """Base pay-period policy interface.

    Implementations must be total over all dates and keep ``next`` and
    ``previous`` mutually inverse for any period they produce.
    """

    name = "abstract"

    def current(self, reference: date) -> Period:
        raise NotImplementedError

    def previous(self, start: date) -> Period:
        raise NotImplementedError

    def next(self, start: date) -> Period:
        raise NotImplementedError


@dataclass
class SemiMonthlyPolicy(PeriodPolicy):
    """Calendar halves: 1st-15th and 16th-end of month."""

    name = "semi-monthly"
    split_day: int = 15

    def first_half(self, year: int, month: int) -> Period:
        return Period(date(year, month, 1), date(year, month, self.split_day))

    def second_half(self, year: int, month: int) -> Period:
        return Period(date(year, month, self.split_day + 1), month_end(year, month))

    def current(self, reference: date) -> Period:
        if reference.day <= self.split_day:
            return self.first_half(reference.year, reference.month)
        return self.second_half(reference.year, reference.month)

    def previous(self, start: date) -> Period:
        if start.day == 1:
            if start.month == 1:
                return self.second_half(start.year - 1, 12)
            return self.second_half(start.year, start.month - 1)
        return self.first_half(start.year, start.month)

    def next(self, start: date) -> Period:
        if start.day == 1:
            return self.second_half(start.year, start.month)
        if start.month == 12:
            return self.first_half(start.year + 1, 1)
        return self.first_half(start.year, start.month + 1)


@dataclass
class RollingTwoWeekPolicy(PeriodPolicy):
    """Fourteen-day windows starting on the Monday of the reference week."""

    name = "two-week"
    length_days: int = 14

    def _window(self, start: date) -> Period:
        return Period(start, start + timedelta(days=self.length_days - 1))

    def current(self, reference: date) -> Period:
        return self._window(week_start(reference))

    def previous(self, start: date) -> Period:
        return self._window(start - timedelta(days=self.length_days))

    def next(self, start: date) -> Period:
        return self._window(start + timedelta(days=self.length_days))


POLICIES: Dict[str, Type[PeriodPolicy]] = {
    SemiMonthlyPolicy.name: SemiMonthlyPolicy,
    RollingTwoWeekPolicy.name: RollingTwoWeekPolicy,
}


def get_policy(name: str) -> PeriodPolicy:
    try:
        return POLICIES[name]()
    except KeyError:
        raise UnknownPolicyError(name) from None


@dataclass
class PeriodCalculator:
    policy: PeriodPolicy
    clock: Clock = field(default_factory=SystemClock)

    def today(self) -> date:
        return self.clock.today()

    def current(self, reference: Optional[date] = None) -> Period:
        return self.policy.current(reference or self.today())

    def previous(self, start: date) -> Period:
        return self.policy.previous(start)

    def next(self, start: date) -> Period:
        return self.policy.next(start)

    def lookback(self, period: Period, cycles: int) -> Period:
        for _ in range(cycles):
            period = self.policy.previous(period.start)
        return period

    def resolve(self, start: Optional[date] = None, end: Optional[date] = None) -> Period:
        """Fill missing bounds from the period containing today."""

        if start and end:
            return Period(start, end)
        default = self.current()
        return Period(start or default.start, end or default.end)
