from .client import ClientModel
from .time_entry import TimeEntryModel

__all__ = [
    "ClientModel",
    "TimeEntryModel",
]
