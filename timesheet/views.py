from __future__ import annotations
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable

from .completion import count_by_severity, day_status, severity
from .models import AggregatedMetrics, DashboardMetrics, TimeEntry


def format_calendar(entries: Iterable[TimeEntry], year: int, month: int) -> str:
    hours_by_day: Dict[date, int] = defaultdict(int)
    for entry in entries:
        if entry.work_date.year == year and entry.work_date.month == month:
            hours_by_day[entry.work_date] += entry.hours

    rows = [f"Calendar {year}-{month:02d}", "Date        Hours  Status"]
    current = date(year, month, 1)
    while current.month == month:
        hours = hours_by_day.get(current, 0)
        status = "weekend" if current.weekday() >= 5 else day_status(hours).value
        rows.append(f"{current.isoformat()}  {hours:>5}  {status}")
        current += timedelta(days=1)
    return "\n".join(rows)


def format_metrics(metrics: AggregatedMetrics) -> str:
    summary = metrics.summary
    rows = [
        f"Period {metrics.period.start.isoformat()} - {metrics.period.end.isoformat()}"
        f" ({metrics.weekdays} weekdays, {metrics.expected_hours}h expected)",
        f"Employees: {summary.total_employees}  complete: {summary.complete_employees}"
        f"  incomplete: {summary.incomplete_employees}  rate: {summary.completion_rate}%",
        f"Hours logged: {summary.total_hours_logged}  average: {summary.average_hours_per_employee}",
        f"Old incomplete: {summary.old_incomplete_count}",
        "Charge codes:",
    ]
    for total in metrics.charge_code_breakdown:
        rows.append(f"  {total.code:<12} {total.total_hours:>5}h  {total.description}")
    bands = count_by_severity(metrics.incomplete_employees)
    rows.append("Incomplete: " + "  ".join(f"{band.value}={count}" for band, count in bands.items()))
    for record in metrics.incomplete_employees:
        rows.append(
            f"  {record.employee_id} {record.name or '-'}  {record.total_hours}/{record.expected_hours}h"
            f"  {record.completion_percentage}%  {severity(record.completion_percentage).value}"
        )
    return "\n".join(rows)


def format_dashboard(metrics: DashboardMetrics) -> str:
    period = metrics.current_period
    rows = [
        f"Current period {period.start.isoformat()} - {period.end.isoformat()} ({metrics.expected_hours}h expected)",
        f"Complete timesheets: {metrics.complete_timesheet_count} of {metrics.total_employees}",
        f"Average hours: {metrics.average_hours_per_employee}",
        f"Old incomplete: {len(metrics.incomplete_old_timesheets)}",
    ]
    for stale in metrics.incomplete_old_timesheets:
        rows.append(
            f"  {stale.employee_id} {stale.name or '-'}  {stale.hours_logged}/{stale.expected_hours}h"
            f"  {stale.period.start.isoformat()} - {stale.period.end.isoformat()}"
        )
    return "\n".join(rows)
