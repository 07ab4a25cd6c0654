from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.observability import get_tracer, record_metrics_computed
from app.core.schemas import CamelModel
from app.core.security import require_admin
from app.db.session import get_session
from app.domains.metrics.service import build_aggregator, get_clock
from app.models.user import User
from timesheet.clock import Clock, parse_day
from timesheet.completion import severity
from timesheet.models import AggregatedMetrics, DashboardMetrics

router = APIRouter(prefix="/admin", tags=["metrics"])
logger = get_logger(__name__)


class PeriodOut(CamelModel):
    start: date
    end: date
    weekdays: int
    expected_hours_per_employee: int


class SummaryOut(CamelModel):
    total_employees: int
    complete_employees: int
    incomplete_employees: int
    completion_rate: int
    average_hours_per_employee: int
    total_hours_logged: int
    old_incomplete_count: int


class ChargeCodeBreakdownOut(CamelModel):
    charge_code_id: int
    code: str
    description: str
    total_hours: int


class IncompleteEmployeeOut(CamelModel):
    id: int
    name: str | None
    email: str | None
    total_hours: int
    expected_hours: int
    completion_percentage: int
    severity: str


class AggregatedMetricsOut(CamelModel):
    period: PeriodOut
    summary: SummaryOut
    charge_code_breakdown: list[ChargeCodeBreakdownOut]
    incomplete_employees_list: list[IncompleteEmployeeOut]


class StaleTimesheetOut(CamelModel):
    user_id: int
    user_email: str | None
    user_name: str | None
    period_start: date
    period_end: date
    hours_logged: int
    expected_hours: int


class CurrentPeriodOut(CamelModel):
    start: date
    end: date
    expected_hours: int


class DashboardMetricsOut(CamelModel):
    complete_timesheet_count: int
    incomplete_old_timesheets: list[StaleTimesheetOut]
    average_hours_per_employee: int
    total_employees: int
    current_period: CurrentPeriodOut


def _aggregated_out(metrics: AggregatedMetrics) -> AggregatedMetricsOut:
    summary = metrics.summary
    return AggregatedMetricsOut(
        period=PeriodOut(
            start=metrics.period.start,
            end=metrics.period.end,
            weekdays=metrics.weekdays,
            expected_hours_per_employee=metrics.expected_hours,
        ),
        summary=SummaryOut(
            total_employees=summary.total_employees,
            complete_employees=summary.complete_employees,
            incomplete_employees=summary.incomplete_employees,
            completion_rate=summary.completion_rate,
            average_hours_per_employee=summary.average_hours_per_employee,
            total_hours_logged=summary.total_hours_logged,
            old_incomplete_count=summary.old_incomplete_count,
        ),
        charge_code_breakdown=[
            ChargeCodeBreakdownOut(
                charge_code_id=t.charge_code_id,
                code=t.code,
                description=t.description,
                total_hours=t.total_hours,
            )
            for t in metrics.charge_code_breakdown
        ],
        incomplete_employees_list=[
            IncompleteEmployeeOut(
                id=r.employee_id,
                name=r.name,
                email=r.email,
                total_hours=r.total_hours,
                expected_hours=r.expected_hours,
                completion_percentage=r.completion_percentage,
                severity=severity(r.completion_percentage).value,
            )
            for r in metrics.incomplete_employees
        ],
    )


def _dashboard_out(metrics: DashboardMetrics) -> DashboardMetricsOut:
    return DashboardMetricsOut(
        complete_timesheet_count=metrics.complete_timesheet_count,
        incomplete_old_timesheets=[
            StaleTimesheetOut(
                user_id=s.employee_id,
                user_email=s.email,
                user_name=s.name,
                period_start=s.period.start,
                period_end=s.period.end,
                hours_logged=s.hours_logged,
                expected_hours=s.expected_hours,
            )
            for s in metrics.incomplete_old_timesheets
        ],
        average_hours_per_employee=metrics.average_hours_per_employee,
        total_employees=metrics.total_employees,
        current_period=CurrentPeriodOut(
            start=metrics.current_period.start,
            end=metrics.current_period.end,
            expected_hours=metrics.expected_hours,
        ),
    )


@router.get("/aggregated-metrics", response_model=AggregatedMetricsOut)
def get_aggregated_metrics(
    period_start: str | None = Query(default=None, alias="periodStart"),
    period_end: str | None = Query(default=None, alias="periodEnd"),
    db: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
    _: User = Depends(require_admin),
) -> AggregatedMetricsOut:
    with get_tracer().start_as_current_span("aggregated_metrics"):
        aggregator = build_aggregator(db, clock)
        metrics = aggregator.aggregated_metrics(parse_day(period_start), parse_day(period_end))
    record_metrics_computed("aggregated")
    return _aggregated_out(metrics)


@router.get("/metrics", response_model=DashboardMetricsOut)
def get_dashboard_metrics(
    db: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
    _: User = Depends(require_admin),
) -> DashboardMetricsOut:
    with get_tracer().start_as_current_span("dashboard_metrics"):
        metrics = build_aggregator(db, clock).dashboard_metrics()
    record_metrics_computed("dashboard")
    logger.info("dashboard_served", stale=len(metrics.incomplete_old_timesheets))
    return _dashboard_out(metrics)
