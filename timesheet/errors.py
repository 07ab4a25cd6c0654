from __future__ import annotations


class TimesheetError(Exception):
    """Base class for domain errors raised by the timesheet package."""


class InvalidTimeEntryError(TimesheetError):
    pass


class EntryNotFoundError(TimesheetError):
    def __init__(self, entry_id) -> None:
        super().__init__(f"Time entry {entry_id} not found")
        self.entry_id = entry_id


class UnknownPolicyError(TimesheetError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown period policy: {name}")
        self.name = name
