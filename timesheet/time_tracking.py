from __future__ import annotations
from datetime import date
from typing import List
from uuid import uuid4

import structlog

from .errors import EntryNotFoundError, InvalidTimeEntryError
from .models import MAX_ENTRY_HOURS, MIN_ENTRY_HOURS, Identifier, TimeEntry
from .storage import DataStore

logger = structlog.get_logger(__name__)


def validate_hours(hours: int) -> int:
    if isinstance(hours, bool) or not isinstance(hours, int):
        raise InvalidTimeEntryError(f"Hours must be a whole number, got {hours!r}")
    if not MIN_ENTRY_HOURS <= hours <= MAX_ENTRY_HOURS:
        raise InvalidTimeEntryError(
            f"Hours must be between {MIN_ENTRY_HOURS} and {MAX_ENTRY_HOURS}, got {hours}"
        )
    return hours


def upsert_time_entry(
    store: DataStore,
    *,
    employee_id: Identifier,
    charge_code_id: Identifier,
    work_date: date,
    hours: int,
) -> TimeEntry:
    """Create or overwrite the single entry for (employee, charge code, day)."""

    validate_hours(hours)
    entry = store.find_entry(employee_id, charge_code_id, work_date)
    if entry is None:
        entry = TimeEntry(
            id=str(uuid4()),
            employee_id=employee_id,
            charge_code_id=charge_code_id,
            work_date=work_date,
            hours=hours,
        )
    else:
        entry.hours = hours
    store.put_time_entry(entry)
    store.save()
    logger.info("time_entry_upserted", entry_id=entry.id, employee_id=employee_id, hours=hours)
    return entry


def delete_time_entry(store: DataStore, entry_id: str) -> TimeEntry:
    entry = store.delete_time_entry(entry_id)
    store.save()
    logger.info("time_entry_deleted", entry_id=entry_id)
    return entry


def remove_charge_code(
    store: DataStore,
    employee_id: Identifier,
    charge_code_id: Identifier,
    start: date,
    end: date,
) -> List[TimeEntry]:
    """Delete each of an employee's entries for a charge code in a range.

    Deletes are independent; an entry that has vanished in the meantime is
    skipped and the others are still removed.
    """

    removed: List[TimeEntry] = []
    for entry in store.entries_between(start, end, employee_id):
        if entry.charge_code_id != charge_code_id:
            continue
        try:
            removed.append(store.delete_time_entry(entry.id))
        except EntryNotFoundError:
            logger.warning("time_entry_already_removed", entry_id=entry.id)
    store.save()
    logger.info("charge_code_removed", employee_id=employee_id, charge_code_id=charge_code_id, removed=len(removed))
    return removed
