from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import EMPLOYEE
from app.models.charge_code import ChargeCode
from app.models.time_entry import TimeEntry
from app.models.user import User
from timesheet import models as domain
from timesheet.clock import Clock, SystemClock
from timesheet.metrics import EntrySource, MetricsAggregator


def get_clock() -> Clock:
    return SystemClock()


def entry_source(db: Session) -> EntrySource:
    def fetch(start: date, end: date) -> list[domain.TimeEntry]:
        rows = (
            db.query(TimeEntry.id, TimeEntry.user_id, TimeEntry.charge_code_id, TimeEntry.work_date, TimeEntry.hours)
            .filter(TimeEntry.work_date >= start, TimeEntry.work_date <= end)
            .all()
        )
        return [
            domain.TimeEntry(
                id=row.id,
                employee_id=row.user_id,
                charge_code_id=row.charge_code_id,
                work_date=row.work_date,
                hours=row.hours,
            )
            for row in rows
        ]

    return fetch


def employee_roster(db: Session) -> list[domain.Employee]:
    users = db.query(User).order_by(User.id.asc()).all()
    return [domain.Employee(id=u.id, name=u.name, email=u.email) for u in users if u.has_role(EMPLOYEE)]


def charge_code_roster(db: Session) -> list[domain.ChargeCode]:
    return [
        domain.ChargeCode(id=c.id, code=c.code, description=c.description, is_active=c.is_active)
        for c in db.query(ChargeCode).all()
    ]


def build_aggregator(db: Session, clock: Clock) -> MetricsAggregator:
    return MetricsAggregator(
        fetch_entries=entry_source(db),
        employees=employee_roster(db),
        charge_codes=charge_code_roster(db),
        clock=clock,
        hours_per_weekday=settings.hours_per_weekday,
        chart_limit=settings.charge_code_chart_limit,
        stale_lookback=settings.stale_period_lookback,
    )
