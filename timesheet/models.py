from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union

Identifier = Union[int, str]

MIN_ENTRY_HOURS = 1
MAX_ENTRY_HOURS = 7


class Role(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"


class DayStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    EMPTY = "empty"


class Severity(str, Enum):
    NEAR_COMPLETE = "near_complete"
    MODERATE = "moderate"
    CRITICAL = "critical"


@dataclass
class Employee:
    id: Identifier
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class ChargeCode:
    id: Identifier
    code: str
    description: str
    is_active: bool = True


@dataclass
class TimeEntry:
    employee_id: Identifier
    charge_code_id: Identifier
    work_date: date
    hours: int
    id: Optional[Identifier] = None

    @property
    def key(self) -> tuple:
        return (self.employee_id, self.charge_code_id, self.work_date)


@dataclass(frozen=True)
class Period:
    """Inclusive date range; derived on demand, never stored."""

    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class CompletionRecord:
    employee_id: Identifier
    total_hours: int
    expected_hours: int
    completion_percentage: int
    is_complete: bool
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class ChargeCodeTotal:
    charge_code_id: Identifier
    code: str
    description: str
    total_hours: int = 0


@dataclass
class MetricsSummary:
    total_employees: int = 0
    complete_employees: int = 0
    incomplete_employees: int = 0
    completion_rate: int = 0
    total_hours_logged: int = 0
    average_hours_per_employee: int = 0
    old_incomplete_count: int = 0


@dataclass
class StaleTimesheet:
    employee_id: Identifier
    period: Period
    hours_logged: int
    expected_hours: int
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class AggregatedMetrics:
    period: Period
    weekdays: int
    expected_hours: int
    summary: MetricsSummary
    charge_code_breakdown: List[ChargeCodeTotal] = field(default_factory=list)
    incomplete_employees: List[CompletionRecord] = field(default_factory=list)


@dataclass
class DashboardMetrics:
    current_period: Period
    expected_hours: int
    complete_timesheet_count: int
    average_hours_per_employee: int
    total_employees: int
    incomplete_old_timesheets: List[StaleTimesheet] = field(default_factory=list)
