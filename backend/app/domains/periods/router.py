from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.schemas import CamelModel
from app.core.security import get_current_user
from app.domains.metrics.service import get_clock
from app.models.user import User
from timesheet.clock import Clock, parse_day
from timesheet.hours import expected_hours, weekday_count
from timesheet.models import Period
from timesheet.periods import PeriodCalculator, get_policy

router = APIRouter(prefix="/periods", tags=["periods"])


class PeriodWindowOut(CamelModel):
    start: date
    end: date
    weekdays: int
    expected_hours: int


class PeriodNavigationOut(CamelModel):
    policy: str
    previous: PeriodWindowOut
    current: PeriodWindowOut
    next: PeriodWindowOut


def _window(period: Period) -> PeriodWindowOut:
    return PeriodWindowOut(
        start=period.start,
        end=period.end,
        weekdays=weekday_count(period.start, period.end),
        expected_hours=expected_hours(period.start, period.end, settings.hours_per_weekday),
    )


@router.get("", response_model=PeriodNavigationOut)
def get_periods(
    policy: str = Query(default="semi-monthly"),
    reference: str | None = Query(default=None, alias="date"),
    clock: Clock = Depends(get_clock),
    _: User = Depends(get_current_user),
) -> PeriodNavigationOut:
    calculator = PeriodCalculator(get_policy(policy), clock)
    current = calculator.current(parse_day(reference))
    return PeriodNavigationOut(
        policy=policy,
        previous=_window(calculator.previous(current.start)),
        current=_window(current),
        next=_window(calculator.next(current.start)),
    )
