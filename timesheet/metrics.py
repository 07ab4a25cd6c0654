from __future__ import annotations
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from .clock import Clock, SystemClock
from .completion import classify, incomplete_worklist, meets_expected, round_half_up
from .hours import HOURS_PER_WEEKDAY, expected_hours, weekday_count
from .models import (
    AggregatedMetrics,
    ChargeCode,
    ChargeCodeTotal,
    CompletionRecord,
    DashboardMetrics,
    Employee,
    Identifier,
    MetricsSummary,
    Period,
    StaleTimesheet,
    TimeEntry,
)
from .periods import PeriodCalculator, RollingTwoWeekPolicy, SemiMonthlyPolicy

logger = structlog.get_logger(__name__)

EntrySource = Callable[[date, date], List[TimeEntry]]

CHART_LIMIT = 10
STALE_LOOKBACK = 2


def hours_per_employee(entries: Iterable[TimeEntry]) -> Dict[Identifier, int]:
    totals: Dict[Identifier, int] = defaultdict(int)
    for entry in entries:
        totals[entry.employee_id] += entry.hours
    return dict(totals)


def hours_per_charge_code(
    entries: Iterable[TimeEntry],
    charge_codes: Iterable[ChargeCode],
    limit: Optional[int] = CHART_LIMIT,
) -> List[ChargeCodeTotal]:
    """Charge-code totals, largest first, truncated to ``limit`` rows."""

    catalog = {code.id: code for code in charge_codes}
    totals: Dict[Identifier, ChargeCodeTotal] = {}
    for entry in entries:
        bucket = totals.get(entry.charge_code_id)
        if bucket is None:
            code = catalog.get(entry.charge_code_id)
            bucket = ChargeCodeTotal(
                charge_code_id=entry.charge_code_id,
                code=code.code if code else str(entry.charge_code_id),
                description=code.description if code else "",
            )
            totals[entry.charge_code_id] = bucket
        bucket.total_hours += entry.hours
    ranked = sorted(totals.values(), key=lambda t: t.total_hours, reverse=True)
    return ranked if limit is None else ranked[:limit]


def summarize(
    records: Sequence[CompletionRecord],
    old_incomplete_count: int = 0,
) -> MetricsSummary:
    total_employees = len(records)
    complete = sum(1 for r in records if r.is_complete)
    total_hours = sum(r.total_hours for r in records)
    return MetricsSummary(
        total_employees=total_employees,
        complete_employees=complete,
        incomplete_employees=total_employees - complete,
        completion_rate=round_half_up(complete / total_employees * 100) if total_employees else 0,
        total_hours_logged=total_hours,
        average_hours_per_employee=round_half_up(total_hours / total_employees) if total_employees else 0,
        old_incomplete_count=old_incomplete_count,
    )


def stale_timesheets(
    totals: Mapping[Identifier, int],
    employees: Iterable[Employee],
    period: Period,
    expected: int,
) -> List[StaleTimesheet]:
    stale: List[StaleTimesheet] = []
    for employee in employees:
        logged = totals.get(employee.id) or 0
        if meets_expected(logged, expected):
            continue
        stale.append(
            StaleTimesheet(
                employee_id=employee.id,
                period=period,
                hours_logged=logged,
                expected_hours=expected,
                name=employee.name,
                email=employee.email,
            )
        )
    return stale


class MetricsAggregator:
    """Stateless period metrics over a live snapshot of time entries.

    ``fetch_entries`` returns every entry dated inside an inclusive range.
    Errors it raises propagate; nothing is aggregated from a partial fetch.
    """

    def __init__(
        self,
        fetch_entries: EntrySource,
        employees: Sequence[Employee],
        charge_codes: Sequence[ChargeCode] = (),
        clock: Optional[Clock] = None,
        hours_per_weekday: int = HOURS_PER_WEEKDAY,
        chart_limit: Optional[int] = CHART_LIMIT,
        stale_lookback: int = STALE_LOOKBACK,
    ) -> None:
        self.fetch_entries = fetch_entries
        self.employees = list(employees)
        self.charge_codes = list(charge_codes)
        self.clock = clock or SystemClock()
        self.hours_per_weekday = hours_per_weekday
        self.chart_limit = chart_limit
        self.stale_lookback = stale_lookback
        self.semi_monthly = PeriodCalculator(SemiMonthlyPolicy(), self.clock)
        self.two_week = PeriodCalculator(RollingTwoWeekPolicy(), self.clock)

    def expected_for(self, period: Period) -> int:
        return expected_hours(period.start, period.end, self.hours_per_weekday)

    def completion(self, period: Period) -> List[CompletionRecord]:
        entries = self.fetch_entries(period.start, period.end)
        return classify(hours_per_employee(entries), self.employees, self.expected_for(period))

    def stale_incomplete(self, calculator: PeriodCalculator, period: Period) -> List[StaleTimesheet]:
        old_period = calculator.lookback(period, self.stale_lookback)
        totals = hours_per_employee(self.fetch_entries(old_period.start, old_period.end))
        return stale_timesheets(totals, self.employees, old_period, self.expected_for(old_period))

    def aggregated_metrics(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> AggregatedMetrics:
        period = self.semi_monthly.resolve(start, end)
        expected = self.expected_for(period)
        entries = self.fetch_entries(period.start, period.end)

        records = classify(hours_per_employee(entries), self.employees, expected)
        stale = self.stale_incomplete(self.semi_monthly, period)
        summary = summarize(records, old_incomplete_count=len(stale))

        logger.info(
            "metrics_aggregated",
            period_start=period.start.isoformat(),
            period_end=period.end.isoformat(),
            entries=len(entries),
            employees=summary.total_employees,
            complete=summary.complete_employees,
        )
        return AggregatedMetrics(
            period=period,
            weekdays=weekday_count(period.start, period.end),
            expected_hours=expected,
            summary=summary,
            charge_code_breakdown=hours_per_charge_code(entries, self.charge_codes, self.chart_limit),
            incomplete_employees=incomplete_worklist(records),
        )

    def dashboard_metrics(self) -> DashboardMetrics:
        period = self.two_week.current()
        records = self.completion(period)
        summary = summarize(records)
        stale = self.stale_incomplete(self.two_week, period)

        logger.info(
            "dashboard_metrics_computed",
            period_start=period.start.isoformat(),
            complete=summary.complete_employees,
            stale=len(stale),
        )
        return DashboardMetrics(
            current_period=period,
            expected_hours=self.expected_for(period),
            complete_timesheet_count=summary.complete_employees,
            average_hours_per_employee=summary.average_hours_per_employee,
            total_employees=summary.total_employees,
            incomplete_old_timesheets=stale,
        )
