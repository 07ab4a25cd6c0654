from __future__ import annotations
import argparse
import logging
import sys
from datetime import MAXYEAR, MINYEAR, date
from pathlib import Path
from uuid import uuid4

import structlog

from .clock import FixedClock, SystemClock, parse_day
from .errors import InvalidTimeEntryError, TimesheetError
from .hours import expected_hours, weekday_count
from .metrics import MetricsAggregator
from .models import ChargeCode, Employee
from .periods import POLICIES, PeriodCalculator, get_policy, month_end
from .storage import DataStore
from .time_tracking import delete_time_entry, remove_charge_code, upsert_time_entry
from .views import format_calendar, format_dashboard, format_metrics


DEFAULT_DATA_PATH = Path("data/timesheet.json")


def store_from_args(args: argparse.Namespace) -> DataStore:
    return DataStore(DEFAULT_DATA_PATH)


def parse_date(value: str) -> date:
    day = parse_day(value)
    if day is None:
        raise InvalidTimeEntryError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return day


def clock_from_args(args: argparse.Namespace):
    reference = parse_day(getattr(args, "today", None))
    return FixedClock(reference) if reference else SystemClock()


def resolve_charge_code(store: DataStore, value: str) -> ChargeCode:
    charge_code = store.charge_codes.get(value) or store.find_charge_code(value)
    if charge_code is None:
        raise TimesheetError(f"Unknown charge code {value}")
    return charge_code


def aggregator_from_store(store: DataStore, args: argparse.Namespace) -> MetricsAggregator:
    return MetricsAggregator(
        fetch_entries=store.entries_between,
        employees=store.list_employees(),
        charge_codes=store.list_charge_codes(include_inactive=True),
        clock=clock_from_args(args),
    )


def cmd_add_employee(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    employee = Employee(id=args.id or str(uuid4()), name=args.name, email=args.email)
    store.add_employee(employee)
    store.save()
    print(f"Added employee {employee.id} ({employee.name})")


def cmd_add_charge_code(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    if store.find_charge_code(args.code):
        raise TimesheetError(f"Charge code {args.code} already exists")
    charge_code = ChargeCode(
        id=args.id or str(uuid4()),
        code=args.code,
        description=args.description,
        is_active=not args.inactive,
    )
    store.add_charge_code(charge_code)
    store.save()
    print(f"Added charge code {charge_code.code} ({charge_code.description})")


def cmd_log_time(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    if args.employee not in store.employees:
        raise TimesheetError(f"Unknown employee {args.employee}")
    charge_code = resolve_charge_code(store, args.charge_code)
    if not charge_code.is_active:
        raise InvalidTimeEntryError(f"Charge code {charge_code.code} is inactive")
    entry = upsert_time_entry(
        store,
        employee_id=args.employee,
        charge_code_id=charge_code.id,
        work_date=parse_date(args.date),
        hours=args.hours,
    )
    print(f"Logged {entry.hours}h on {entry.work_date} against {charge_code.code} ({entry.id})")


def cmd_delete_time(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    entry = delete_time_entry(store, args.id)
    print(f"Deleted entry {entry.id}")


def cmd_remove_charge_code(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    charge_code = resolve_charge_code(store, args.charge_code)
    removed = remove_charge_code(store, args.employee, charge_code.id, parse_date(args.start), parse_date(args.end))
    print(f"Removed {len(removed)} entries for {charge_code.code}")


def cmd_period(args: argparse.Namespace) -> None:
    calculator = PeriodCalculator(get_policy(args.policy), clock_from_args(args))
    current = calculator.current(parse_day(args.date))
    previous = calculator.previous(current.start)
    following = calculator.next(current.start)
    for label, period in (("previous", previous), ("current", current), ("next", following)):
        print(f"{label:<8} {period.start.isoformat()} - {period.end.isoformat()}")


def cmd_expected_hours(args: argparse.Namespace) -> None:
    start, end = parse_date(args.start), parse_date(args.end)
    print(f"{weekday_count(start, end)} weekdays, {expected_hours(start, end)} expected hours")


def cmd_metrics(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    aggregator = aggregator_from_store(store, args)
    print(format_metrics(aggregator.aggregated_metrics(parse_day(args.start), parse_day(args.end))))


def cmd_dashboard(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    print(format_dashboard(aggregator_from_store(store, args).dashboard_metrics()))


def cmd_calendar(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    if not 1 <= args.month <= 12 or not MINYEAR <= args.year <= MAXYEAR:
        raise TimesheetError(f"Invalid month {args.year}-{args.month}")
    start = date(args.year, args.month, 1)
    entries = store.entries_between(start, month_end(args.year, args.month), args.employee)
    print(format_calendar(entries, args.year, args.month))


def cmd_list_employees(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    for employee in store.list_employees():
        print(f"{employee.id} {employee.name} <{employee.email or '-'}>")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Timesheet tracking CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine events to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    employee = sub.add_parser("add-employee", help="Add an employee")
    employee.add_argument("name")
    employee.add_argument("--email")
    employee.add_argument("--id")
    employee.set_defaults(func=cmd_add_employee)

    charge_code = sub.add_parser("add-charge-code", help="Add a charge code")
    charge_code.add_argument("code")
    charge_code.add_argument("description")
    charge_code.add_argument("--id")
    charge_code.add_argument("--inactive", action="store_true")
    charge_code.set_defaults(func=cmd_add_charge_code)

    log_time = sub.add_parser("log-time", help="Create or update a day's hours for a charge code")
    log_time.add_argument("employee")
    log_time.add_argument("charge_code", help="Charge code id or label")
    log_time.add_argument("date")
    log_time.add_argument("hours", type=int)
    log_time.set_defaults(func=cmd_log_time)

    delete_time = sub.add_parser("delete-time", help="Delete a time entry")
    delete_time.add_argument("id")
    delete_time.set_defaults(func=cmd_delete_time)

    remove = sub.add_parser("remove-charge-code", help="Delete an employee's entries for a charge code in a range")
    remove.add_argument("employee")
    remove.add_argument("charge_code")
    remove.add_argument("start")
    remove.add_argument("end")
    remove.set_defaults(func=cmd_remove_charge_code)

    period = sub.add_parser("period", help="Show previous, current and next pay periods")
    period.add_argument("date", nargs="?")
    period.add_argument("--policy", choices=sorted(POLICIES), default="semi-monthly")
    period.add_argument("--today", help="Override today's date")
    period.set_defaults(func=cmd_period)

    expected = sub.add_parser("expected-hours", help="Weekday count and expected hours for a range")
    expected.add_argument("start")
    expected.add_argument("end")
    expected.set_defaults(func=cmd_expected_hours)

    metrics = sub.add_parser("metrics", help="Aggregated semi-monthly metrics")
    metrics.add_argument("--start")
    metrics.add_argument("--end")
    metrics.add_argument("--today", help="Override today's date")
    metrics.set_defaults(func=cmd_metrics)

    dashboard = sub.add_parser("dashboard", help="Two-week dashboard metrics")
    dashboard.add_argument("--today", help="Override today's date")
    dashboard.set_defaults(func=cmd_dashboard)

    calendar = sub.add_parser("calendar", help="Render a month with day completion status")
    calendar.add_argument("employee")
    calendar.add_argument("year", type=int)
    calendar.add_argument("month", type=int)
    calendar.set_defaults(func=cmd_calendar)

    employees = sub.add_parser("list-employees", help="List employees")
    employees.set_defaults(func=cmd_list_employees)

    return parser


def configure_cli_logging(verbose: bool = False) -> None:
    # stdout carries command output; log events go to stderr
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.dev.ConsoleRenderer(colors=False)],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=lambda *_: structlog.PrintLogger(sys.stderr),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)
    try:
        args.func(args)
    except TimesheetError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
