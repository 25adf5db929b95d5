"""Core type definitions for the scheduler.

This module defines:
- Schedule change kinds (try/new/save/open)
- Typed events broadcast to listeners
- Status and next-trigger result types
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import ScheduledProject


# ============== Schedule Changes ==============

class ScheduleChange(str, Enum):
    """Kind of change to the active schedule file."""
    TRY = "try"     # About to attempt opening a file
    NEW = "new"     # Reset to an empty schedule
    SAVE = "save"   # Saved to a file
    OPEN = "open"   # Opened from a file


# ============== Event Types ==============

@dataclass(frozen=True)
class ScheduleChanged:
    """The active schedule file changed."""
    file: Path | None
    change: ScheduleChange

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "schedule_changed",
            "file": str(self.file) if self.file else None,
            "change": self.change.value,
        }


@dataclass(frozen=True)
class EntryAdded:
    """An entry was appended to the schedule."""
    entry: "ScheduledProject"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "entry_added", "entry_id": self.entry.id, "index": self.entry.index}


@dataclass(frozen=True)
class EntryRemoved:
    """An entry was removed from the schedule and disposed."""
    entry: "ScheduledProject"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "entry_removed", "entry_id": self.entry.id}


@dataclass(frozen=True)
class EntryMoved:
    """An entry changed position."""
    entry: "ScheduledProject"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "entry_moved", "entry_id": self.entry.id, "index": self.entry.index}


# Union type for all scheduler events
SchedulerEvent = ScheduleChanged | EntryAdded | EntryRemoved | EntryMoved


# ============== Result Types ==============

@dataclass
class NextTrigger:
    """The next entry due to fire."""
    entry: "ScheduledProject"
    seconds_until: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry.id,
            "index": self.entry.index,
            "time": self.entry.time_text,
            "seconds_until": self.seconds_until,
        }


@dataclass
class SchedulerStatus:
    """Status of the scheduler engine."""
    active: bool
    entries_total: int
    entries_enabled: int
    file: Path | None = None
    next_trigger: NextTrigger | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "active": self.active,
            "entries_total": self.entries_total,
            "entries_enabled": self.entries_enabled,
            "file": str(self.file) if self.file else None,
            "next_trigger": self.next_trigger.to_dict() if self.next_trigger else None,
        }
