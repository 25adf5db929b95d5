"""Data models for scheduled entries and the schedule document."""
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from ..components.entity import Entity
from ..errors import ValidationError

# Bounds of the engine-level fade time, in seconds
FADE_TIME_MIN = 0.0
FADE_TIME_MAX = 60.0
FADE_TIME_DEFAULT = 5.0


# ============== Document Models ==============

class EntryDocument(BaseModel):
    """One serialized entry. Every key is optional."""
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    hours: int = Field(0, ge=0, le=23)
    minutes: int = Field(0, ge=0, le=59)
    seconds: int = Field(0, ge=0, le=59)
    project: str | None = None
    label: str | None = None


class ScheduleDocument(BaseModel):
    """The schedule file. Every key is optional so partial documents load."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: str | None = None
    timestamp: int | None = None
    entries: list[EntryDocument] = Field(default_factory=list)
    enabled: bool = False
    fade: bool = True
    fade_time_secs: float = Field(
        FADE_TIME_DEFAULT, ge=FADE_TIME_MIN, le=FADE_TIME_MAX, alias="fadeTimeSecs"
    )


# ============== Entry ==============

def _check_range(name: str, value: int, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > upper:
        raise ValidationError(
            f"{name} must be in [0, {upper}], got {value}",
            detail={name: value},
        )
    return value


class ScheduledProject(Entity):
    """A daily trigger time that opens a project when crossed.

    Entries are created by :meth:`SchedulerEngine.add_entry`, which binds
    ``on_open``. Calling :meth:`open` only invokes that callback; the
    actual project switching lives in the engine's project loader.
    """

    def __init__(
        self,
        on_open: Callable[["ScheduledProject"], None],
        label: str | None = None,
    ):
        super().__init__(label)
        self._on_open = on_open
        self.project: Path | None = None
        self.enabled = False
        self._hours = 0
        self._minutes = 0
        self._seconds = 0

    # ============== Time of day ==============

    @property
    def hours(self) -> int:
        return self._hours

    @hours.setter
    def hours(self, value: int) -> None:
        self.check_alive()
        self._hours = _check_range("hours", value, 23)

    @property
    def minutes(self) -> int:
        return self._minutes

    @minutes.setter
    def minutes(self, value: int) -> None:
        self.check_alive()
        self._minutes = _check_range("minutes", value, 59)

    @property
    def seconds(self) -> int:
        return self._seconds

    @seconds.setter
    def seconds(self, value: int) -> None:
        self.check_alive()
        self._seconds = _check_range("seconds", value, 59)

    def set_time(self, hours: int, minutes: int = 0, seconds: int = 0) -> "ScheduledProject":
        # Validate all three before assigning any
        _check_range("hours", hours, 23)
        _check_range("minutes", minutes, 59)
        _check_range("seconds", seconds, 59)
        self.hours = hours
        self.minutes = minutes
        self.seconds = seconds
        return self

    @property
    def threshold_seconds_of_day(self) -> int:
        return 3600 * self._hours + 60 * self._minutes + self._seconds

    @property
    def time_text(self) -> str:
        return f"{self._hours:02d}:{self._minutes:02d}:{self._seconds:02d}"

    def set_project(self, project: str | Path | None) -> "ScheduledProject":
        self.check_alive()
        self.project = Path(project) if project else None
        return self

    # ============== Trigger ==============

    def open(self) -> None:
        """Fire this entry."""
        self.check_alive()
        self._on_open(self)

    # ============== Serialization ==============

    def save(self) -> dict[str, Any]:
        """Convert to a document dict."""
        data: dict[str, Any] = {
            "enabled": self.enabled,
            "hours": self._hours,
            "minutes": self._minutes,
            "seconds": self._seconds,
            "project": str(self.project) if self.project else None,
        }
        if self.label:
            data["label"] = self.label
        return data

    def load(self, data: EntryDocument | dict[str, Any]) -> "ScheduledProject":
        """Apply the keys present in ``data``; missing keys are left as is."""
        self.check_alive()
        if isinstance(data, dict):
            data = EntryDocument.model_validate(data)
        present = data.model_dump(exclude_unset=True)

        if "enabled" in present:
            self.enabled = present["enabled"]
        if "hours" in present:
            self.hours = present["hours"]
        if "minutes" in present:
            self.minutes = present["minutes"]
        if "seconds" in present:
            self.seconds = present["seconds"]
        if "project" in present:
            self.set_project(present["project"])
        if "label" in present:
            self.label = present["label"]
        return self

    def __repr__(self) -> str:
        name = self.label or (self.project.name if self.project else self.id[:8])
        return f"ScheduledProject({name} @ {self.time_text}, index={self.index})"
