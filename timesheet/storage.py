from __future__ import annotations
import json
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import EntryNotFoundError
from .models import ChargeCode, Employee, Identifier, TimeEntry


class DataStore:
    """JSON-file record store keyed the way the HTTP service keys its tables."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.employees: Dict[str, Employee] = {}
        self.charge_codes: Dict[str, ChargeCode] = {}
        self.time_entries: Dict[str, TimeEntry] = {}
        self._entry_index: Dict[Tuple[Identifier, Identifier, date], str] = {}
        if path.exists():
            self.load()

    def load(self) -> None:
        content = json.loads(self.path.read_text())
        self.employees = {e["id"]: Employee(**e) for e in content.get("employees", [])}
        self.charge_codes = {c["id"]: ChargeCode(**c) for c in content.get("charge_codes", [])}
        self.time_entries = {t["id"]: self._deserialize_time_entry(t) for t in content.get("time_entries", [])}
        self._entry_index = {entry.key: entry_id for entry_id, entry in self.time_entries.items()}

    def save(self) -> None:
        payload = {
            "employees": [asdict(e) for e in self.employees.values()],
            "charge_codes": [asdict(c) for c in self.charge_codes.values()],
            "time_entries": [self._serialize_time_entry(t) for t in self.time_entries.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, default=self._date_serializer, indent=2))

    def add_employee(self, employee: Employee) -> None:
        self.employees[employee.id] = employee

    def add_charge_code(self, charge_code: ChargeCode) -> None:
        self.charge_codes[charge_code.id] = charge_code

    def find_charge_code(self, code: str) -> Optional[ChargeCode]:
        for charge_code in self.charge_codes.values():
            if charge_code.code == code:
                return charge_code
        return None

    def find_entry(self, employee_id: Identifier, charge_code_id: Identifier, work_date: date) -> Optional[TimeEntry]:
        entry_id = self._entry_index.get((employee_id, charge_code_id, work_date))
        return None if entry_id is None else self.time_entries.get(entry_id)

    def put_time_entry(self, entry: TimeEntry) -> None:
        previous = self.time_entries.get(entry.id)
        if previous is not None and previous.key != entry.key:
            self._entry_index.pop(previous.key, None)
        self.time_entries[entry.id] = entry
        self._entry_index[entry.key] = entry.id

    def delete_time_entry(self, entry_id: str) -> TimeEntry:
        try:
            entry = self.time_entries.pop(entry_id)
        except KeyError:
            raise EntryNotFoundError(entry_id) from None
        self._entry_index.pop(entry.key, None)
        return entry

    def entries_between(self, start: date, end: date, employee_id: Optional[Identifier] = None) -> List[TimeEntry]:
        entries = [e for e in self.time_entries.values() if start <= e.work_date <= end]
        if employee_id is not None:
            entries = [e for e in entries if e.employee_id == employee_id]
        return sorted(entries, key=lambda e: (e.work_date, str(e.charge_code_id)))

    def list_employees(self) -> List[Employee]:
        """Return employees ordered by display name."""

        return sorted(self.employees.values(), key=lambda e: (e.name or "").lower())

    def list_charge_codes(self, include_inactive: bool = False) -> List[ChargeCode]:
        codes = [c for c in self.charge_codes.values() if include_inactive or c.is_active]
        return sorted(codes, key=lambda c: c.code)

    @staticmethod
    def _date_serializer(value):
        if isinstance(value, date):
            return value.isoformat()
        raise TypeError(f"Type {type(value)} not serializable")

    def _serialize_time_entry(self, entry: TimeEntry) -> dict:
        payload = asdict(entry)
        payload["work_date"] = entry.work_date.isoformat()
        return payload

    def _deserialize_time_entry(self, data: dict) -> TimeEntry:
        data["work_date"] = date.fromisoformat(data["work_date"])
        return TimeEntry(**data)
