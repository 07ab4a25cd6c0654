from datetime import date

import pytest

from timesheet import cli
from timesheet.models import ChargeCode, Employee
from timesheet.storage import DataStore


@pytest.fixture
def data_path(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    store = DataStore(path)
    store.add_employee(Employee(id="b", name="Zelda Ops", email="zelda@example.com"))
    store.add_employee(Employee(id="a", name="anna dev"))
    store.add_charge_code(ChargeCode(id="c1", code="PROJ-001", description="Client Project Alpha"))
    store.add_charge_code(ChargeCode(id="c2", code="OLD-001", description="Retired", is_active=False))
    store.save()
    monkeypatch.setattr(cli, "DEFAULT_DATA_PATH", path)
    return path


def test_list_employees_sorts_by_name(capsys, data_path):
    cli.main(["list-employees"])

    captured = capsys.readouterr().out.strip().splitlines()
    assert captured[0].startswith("a anna dev")
    assert captured[1] == "b Zelda Ops <zelda@example.com>"


def test_log_time_upserts_by_employee_code_and_day(capsys, data_path):
    assert cli.main(["log-time", "a", "PROJ-001", "2024-03-04", "3"]) == 0
    assert cli.main(["log-time", "a", "c1", "2024-03-04", "6"]) == 0

    store = DataStore(data_path)
    assert len(store.time_entries) == 1
    assert next(iter(store.time_entries.values())).hours == 6


def test_log_time_rejects_out_of_range_hours(capsys, data_path):
    assert cli.main(["log-time", "a", "PROJ-001", "2024-03-04", "8"]) == 1

    assert "between 1 and 7" in capsys.readouterr().err
    assert DataStore(data_path).time_entries == {}


def test_log_time_rejects_inactive_code(capsys, data_path):
    assert cli.main(["log-time", "a", "OLD-001", "2024-03-04", "2"]) == 1
    assert "inactive" in capsys.readouterr().err


def test_period_command_prints_navigation(capsys):
    cli.main(["period", "2024-03-10"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "previous 2024-02-16 - 2024-02-29",
        "current  2024-03-01 - 2024-03-15",
        "next     2024-03-16 - 2024-03-31",
    ]


def test_period_command_falls_back_to_today_for_bad_date(capsys):
    cli.main(["period", "not-a-date", "--policy", "two-week", "--today", "2024-03-14"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[1] == "current  2024-03-11 - 2024-03-24"


def test_metrics_command_reports_incomplete_employees(capsys, data_path):
    for day in range(4, 9):
        cli.main(["log-time", "a", "PROJ-001", date(2024, 3, day).isoformat(), "7"])
    capsys.readouterr()

    cli.main(["metrics", "--start", "2024-03-04", "--end", "2024-03-08", "--today", "2024-03-10"])

    out = capsys.readouterr().out
    assert "(5 weekdays, 35h expected)" in out
    assert "rate: 50%" in out
    assert "b Zelda Ops  0/35h  0%  critical" in out
    assert "Incomplete: near_complete=0  moderate=0  critical=1" in out


def test_remove_charge_code_deletes_each_entry_in_range(capsys, data_path):
    for day in (4, 5, 20):
        cli.main(["log-time", "a", "PROJ-001", date(2024, 3, day).isoformat(), "2"])
    capsys.readouterr()

    cli.main(["remove-charge-code", "a", "PROJ-001", "2024-03-01", "2024-03-15"])

    assert "Removed 2 entries" in capsys.readouterr().out
    remaining = DataStore(data_path).time_entries.values()
    assert [e.work_date for e in remaining] == [date(2024, 3, 20)]


def test_delete_unknown_entry_fails(capsys, data_path):
    assert cli.main(["delete-time", "missing"]) == 1
    assert "not found" in capsys.readouterr().err


def test_calendar_marks_day_status(capsys, data_path):
    cli.main(["log-time", "a", "PROJ-001", "2024-03-04", "7"])
    cli.main(["log-time", "a", "PROJ-001", "2024-03-05", "3"])
    capsys.readouterr()

    cli.main(["calendar", "a", "2024", "3"])

    out = capsys.readouterr().out
    assert "2024-03-04      7  complete" in out
    assert "2024-03-05      3  partial" in out
    assert "2024-03-06      0  empty" in out
    assert "2024-03-09      0  weekend" in out


def test_add_commands_and_dashboard(capsys, data_path):
    cli.main(["add-employee", "Cara Crew", "--id", "c", "--email", "cara@example.com"])
    assert cli.main(["add-charge-code", "PROJ-001", "Duplicate"]) == 1
    cli.main(["add-charge-code", "MTG-001", "Meetings", "--id", "m1"])
    for day in range(11, 16):
        cli.main(["log-time", "c", "MTG-001", date(2024, 3, day).isoformat(), "7"])
    capsys.readouterr()

    cli.main(["dashboard", "--today", "2024-03-14"])

    out = capsys.readouterr().out
    assert "Current period 2024-03-11 - 2024-03-24 (70h expected)" in out
    assert "Complete timesheets: 0 of 3" in out
    assert "Average hours: 12" in out
    assert "Old incomplete: 3" in out


def test_expected_hours_command(capsys):
    cli.main(["expected-hours", "2024-03-01", "2024-03-15"])

    assert capsys.readouterr().out.strip() == "11 weekdays, 77 expected hours"


@pytest.mark.parametrize(
    "argv",
    [
        ["log-time", "a", "PROJ-001", "2024-13-04", "2"],
        ["remove-charge-code", "a", "PROJ-001", "2024-03-01", "someday"],
        ["expected-hours", "2024-03-10garbage", "2024-03-15"],
    ],
)
def test_bad_dates_are_reported_as_errors(capsys, data_path, argv):
    assert cli.main(argv) == 1
    assert "Invalid date" in capsys.readouterr().err


def test_calendar_rejects_bad_month(capsys, data_path):
    assert cli.main(["calendar", "a", "2024", "13"]) == 1
    assert "Invalid month" in capsys.readouterr().err
