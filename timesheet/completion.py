from __future__ import annotations
import math
from typing import Dict, Iterable, List, Mapping

from .hours import HOURS_PER_WEEKDAY
from .models import CompletionRecord, DayStatus, Employee, Identifier, Severity

NEAR_COMPLETE_THRESHOLD = 75
MODERATE_THRESHOLD = 50


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_percentage(total_hours: float, expected_hours: float) -> int:
    if expected_hours <= 0:
        return 0
    return round_half_up(total_hours / expected_hours * 100)


def meets_expected(total_hours: float, expected_hours: float) -> bool:
    """At least met: the completion rule used for period metrics."""

    return total_hours >= expected_hours


def meets_exactly(total_hours: float, expected_hours: float) -> bool:
    """Exactly met: the stricter rule used for calendar colouring."""

    return total_hours == expected_hours


def day_status(hours: float, daily_quota: int = HOURS_PER_WEEKDAY) -> DayStatus:
    if meets_exactly(hours, daily_quota):
        return DayStatus.COMPLETE
    if hours > 0:
        return DayStatus.PARTIAL
    return DayStatus.EMPTY


def severity(percentage: int) -> Severity:
    if percentage >= NEAR_COMPLETE_THRESHOLD:
        return Severity.NEAR_COMPLETE
    if percentage >= MODERATE_THRESHOLD:
        return Severity.MODERATE
    return Severity.CRITICAL


def classify(
    totals: Mapping[Identifier, float],
    employees: Iterable[Employee],
    expected_hours: int,
) -> List[CompletionRecord]:
    records: List[CompletionRecord] = []
    for employee in employees:
        total = totals.get(employee.id) or 0
        records.append(
            CompletionRecord(
                employee_id=employee.id,
                total_hours=total,
                expected_hours=expected_hours,
                completion_percentage=completion_percentage(total, expected_hours),
                is_complete=meets_expected(total, expected_hours),
                name=employee.name,
                email=employee.email,
            )
        )
    return records


def incomplete_worklist(records: Iterable[CompletionRecord]) -> List[CompletionRecord]:
    """Incomplete records, worst completion first."""

    pending = [r for r in records if not r.is_complete]
    return sorted(pending, key=lambda r: r.completion_percentage)


def count_by_severity(records: Iterable[CompletionRecord]) -> Dict[Severity, int]:
    counts = {band: 0 for band in Severity}
    for record in records:
        counts[severity(record.completion_percentage)] += 1
    return counts
