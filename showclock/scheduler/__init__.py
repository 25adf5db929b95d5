"""Daily wall-clock scheduler."""
from .engine import SchedulerEngine
from .executor import CommandProjectLoader, LoggingErrorSink, Permissions
from .models import ScheduleDocument, ScheduledProject
from .notifier import ChangeNotifier, SchedulerListener
from .runner import ScheduleRunner
from .service import Preferences, ScheduleStore
from .types import (
    EntryAdded,
    EntryMoved,
    EntryRemoved,
    ScheduleChange,
    ScheduleChanged,
    SchedulerStatus,
)

__all__ = [
    "ChangeNotifier",
    "CommandProjectLoader",
    "EntryAdded",
    "EntryMoved",
    "EntryRemoved",
    "LoggingErrorSink",
    "Permissions",
    "Preferences",
    "ScheduleChange",
    "ScheduleChanged",
    "ScheduleDocument",
    "ScheduleRunner",
    "ScheduleStore",
    "ScheduledProject",
    "SchedulerEngine",
    "SchedulerListener",
    "SchedulerStatus",
]
