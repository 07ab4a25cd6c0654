import pytest

from timesheet.completion import (
    classify,
    completion_percentage,
    count_by_severity,
    day_status,
    incomplete_worklist,
    meets_exactly,
    meets_expected,
    round_half_up,
    severity,
)
from timesheet.models import DayStatus, Employee, Severity


def test_completion_percentage_rounds_half_up():
    assert completion_percentage(20, 35) == 57
    assert completion_percentage(1, 8) == 13  # 12.5
    assert round_half_up(2.5) == 3
    assert round_half_up(0.49) == 0


def test_completion_percentage_zero_baseline():
    assert completion_percentage(10, 0) == 0


def test_at_least_and_exactly_met_are_distinct():
    assert meets_expected(36, 35)
    assert not meets_exactly(36, 35)
    assert meets_expected(35, 35) and meets_exactly(35, 35)
    assert not meets_expected(34, 35)


@pytest.mark.parametrize(
    "hours, status",
    [(7, DayStatus.COMPLETE), (3, DayStatus.PARTIAL), (8, DayStatus.PARTIAL), (0, DayStatus.EMPTY)],
)
def test_day_status_uses_exact_quota(hours, status):
    assert day_status(hours) == status


@pytest.mark.parametrize(
    "percentage, band",
    [
        (100, Severity.NEAR_COMPLETE),
        (75, Severity.NEAR_COMPLETE),
        (74, Severity.MODERATE),
        (50, Severity.MODERATE),
        (49, Severity.CRITICAL),
        (0, Severity.CRITICAL),
    ],
)
def test_severity_bands_are_inclusive_at_lower_bound(percentage, band):
    assert severity(percentage) == band


def test_classify_fills_missing_totals_with_zero():
    employees = [Employee(id="a", name="Ann"), Employee(id="b", name="Ben"), Employee(id="c")]

    records = classify({"a": 35, "b": 20}, employees, 35)

    by_id = {r.employee_id: r for r in records}
    assert by_id["a"].is_complete and by_id["a"].completion_percentage == 100
    assert not by_id["b"].is_complete and by_id["b"].completion_percentage == 57
    assert by_id["c"].total_hours == 0 and by_id["c"].completion_percentage == 0
    assert by_id["a"].name == "Ann"


def test_incomplete_worklist_is_worst_first():
    employees = [Employee(id=i) for i in ("a", "b", "c", "d")]
    records = classify({"a": 30, "b": 10, "c": 35, "d": 20}, employees, 35)

    worklist = incomplete_worklist(records)

    assert [r.employee_id for r in worklist] == ["b", "d", "a"]


def test_count_by_severity():
    employees = [Employee(id=i) for i in ("a", "b", "c")]
    records = classify({"a": 30, "b": 20, "c": 5}, employees, 35)

    counts = count_by_severity(records)

    assert counts == {Severity.NEAR_COMPLETE: 1, Severity.MODERATE: 1, Severity.CRITICAL: 1}
