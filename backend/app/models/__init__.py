from .charge_code import ChargeCode
from .time_entry import TimeEntry
from .user import User

__all__ = ["User", "ChargeCode", "TimeEntry"]
