from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)

DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}(T.*)?")


class Clock(Protocol):
    def today(self) -> date:
        ...


class SystemClock:
    """Wall-clock calendar day in local time."""

    def today(self) -> date:
        return date.today()


@dataclass
class FixedClock:
    day: date

    def today(self) -> date:
        return self.day


def parse_day(value: Optional[str]) -> Optional[date]:
    """Parse a ``yyyy-MM-dd`` string; unparseable input yields ``None``.

    A full ISO timestamp is accepted too and truncated to its calendar day,
    with no timezone conversion.
    """

    if not value:
        return None
    text = value.strip()
    if DAY_PATTERN.fullmatch(text):
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    logger.warning("invalid_reference_date", value=value)
    return None
