"""Scheduler engine: fires daily entries when the wall clock crosses them.

The engine is driven by :meth:`SchedulerEngine.advance`, called once per tick
with the current time and the time elapsed since the previous tick. No state
is carried between ticks; the previous frame is reconstructed from the delta.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger

from .. import __version__
from ..components.ordered import OrderedEntityList
from ..errors import NotFoundError, ValidationError
from .executor import ErrorSink, LoggingErrorSink, Permissions, ProjectLoader, SavePermission
from .models import (
    FADE_TIME_DEFAULT,
    FADE_TIME_MAX,
    FADE_TIME_MIN,
    EntryDocument,
    ScheduleDocument,
    ScheduledProject,
)
from .notifier import ChangeNotifier, Listener
from .schedule import (
    frame_window,
    is_crossing,
    now_ms,
    resolve_timezone,
    seconds_until,
    time_of_day_seconds,
)
from .service.preferences import Preferences
from .service.store import ScheduleStore
from .types import EntryAdded, EntryMoved, EntryRemoved, NextTrigger, SchedulerStatus

logger = logger.bind(module="scheduler.engine")


class SchedulerEngine:
    """Owns the schedule entries and runs the per-tick crossing detector.

    Collaborators are injected so the engine can run in isolation:

    Args:
        preferences: Process-wide switch and last-file pointer
        project_loader: Opens the project of a firing entry
        permissions: Save capability check used by the store
        error_sink: Receives file I/O and parse failures
        timezone: IANA zone for the wall clock, None for local time

    Raises:
        ValidationError: The timezone is unknown
    """

    def __init__(
        self,
        preferences: Preferences | None = None,
        project_loader: ProjectLoader | None = None,
        permissions: SavePermission | None = None,
        error_sink: ErrorSink | None = None,
        timezone: str | None = None,
    ):
        self.preferences = preferences or Preferences()
        self.project_loader = project_loader
        self.timezone = timezone
        self.tz = resolve_timezone(timezone)
        self.notifier = ChangeNotifier()
        self._entries: OrderedEntityList[ScheduledProject] = OrderedEntityList("schedule.entries")
        self._loading = False

        # Engine settings, persisted with the schedule
        self.enabled = False
        self.fade = True
        self._fade_time_secs = FADE_TIME_DEFAULT

        self.store = ScheduleStore(
            self,
            permissions=permissions or Permissions(),
            error_sink=error_sink or LoggingErrorSink(),
        )

    # ============== Properties ==============

    @property
    def entries(self) -> tuple[ScheduledProject, ...]:
        return self._entries.items

    @property
    def fade_time_secs(self) -> float:
        return self._fade_time_secs

    @fade_time_secs.setter
    def fade_time_secs(self, value: float) -> None:
        if not FADE_TIME_MIN <= value <= FADE_TIME_MAX:
            raise ValidationError(
                f"fade_time_secs must be in [{FADE_TIME_MIN}, {FADE_TIME_MAX}], got {value}"
            )
        self._fade_time_secs = float(value)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def active(self) -> bool:
        """Whether advance() will evaluate entries."""
        return self.preferences.scheduler_enabled and self.enabled and not self._loading

    @property
    def file(self) -> Path | None:
        return self.store.file

    @contextmanager
    def loading_schedule(self) -> Iterator[None]:
        """Mark the engine as loading, so ticks stay inert until the swap is done."""
        self._loading = True
        try:
            yield
        finally:
            self._loading = False

    # ============== Listeners ==============

    def register_listener(self, listener: Listener) -> "SchedulerEngine":
        self.notifier.register(listener)
        return self

    def unregister_listener(self, listener: Listener) -> "SchedulerEngine":
        self.notifier.unregister(listener)
        return self

    # ============== Structural Operations ==============

    def add_entry(self, project: str | Path | None = None, label: str | None = None) -> ScheduledProject:
        """Create an entry at the end of the schedule."""
        entry = ScheduledProject(self._open_entry, label)
        self._entries.add(entry)
        if project is not None:
            entry.set_project(project)
        logger.debug(f"Entry added: {entry!r}")
        self.notifier.publish(EntryAdded(entry))
        return entry

    def remove_entry(self, entry: ScheduledProject) -> ScheduledProject:
        """Remove and dispose an entry."""
        if entry not in self._entries:
            raise NotFoundError(f"Cannot remove non-existent entry: {entry!r}")
        self._entries.remove(entry)
        logger.debug(f"Entry removed: {entry!r}")
        self.notifier.publish(EntryRemoved(entry))
        return entry

    def move_entry(self, entry: ScheduledProject, index: int) -> ScheduledProject:
        """Move an entry; out-of-range indices are clamped and all entries reindexed."""
        if entry not in self._entries:
            raise NotFoundError(f"Cannot move non-existent entry: {entry!r}")
        self._entries.move(entry, index)
        logger.debug(f"Entry moved: {entry!r}")
        self.notifier.publish(EntryMoved(entry))
        return entry

    # ============== Tick ==============

    def advance(self, now_millis: int, delta_ms: float) -> list[ScheduledProject]:
        """Fire every enabled entry whose time was crossed during this tick.

        Args:
            now_millis: Current time in epoch ms, non-decreasing across calls
            delta_ms: Time since the previous tick

        Returns:
            Entries fired, in index order
        """
        if not self.active:
            return []

        prev_sec, cur_sec = frame_window(now_millis, delta_ms, self.tz)
        fired: list[ScheduledProject] = []

        def visit(entry: ScheduledProject) -> None:
            if entry.enabled and is_crossing(entry.threshold_seconds_of_day, prev_sec, cur_sec):
                logger.info(f"Firing {entry!r}")
                entry.open()
                fired.append(entry)

        self._entries.iterate(visit)
        return fired

    def _open_entry(self, entry: ScheduledProject) -> None:
        if entry.project is None:
            logger.warning(f"{entry!r} has no project to open")
            return
        if self.project_loader is None:
            logger.warning(f"No project loader configured, skipping {entry.project}")
            return
        fade_secs = self._fade_time_secs if self.fade else 0.0
        self.project_loader.open_project(entry.project, fade_secs)

    # ============== Status ==============

    def next_trigger(self, now_millis: int | None = None) -> NextTrigger | None:
        """The enabled entry that fires next, ties going to the lower index."""
        if now_millis is None:
            now_millis = now_ms()
        cur_sec = time_of_day_seconds(now_millis, self.tz)

        best: NextTrigger | None = None
        for entry in self._entries:
            if not entry.enabled:
                continue
            wait = seconds_until(entry.threshold_seconds_of_day, cur_sec)
            if best is None or wait < best.seconds_until:
                best = NextTrigger(entry=entry, seconds_until=wait)
        return best

    def get_status(self, now_millis: int | None = None) -> SchedulerStatus:
        return SchedulerStatus(
            active=self.active,
            entries_total=len(self._entries),
            entries_enabled=sum(1 for e in self._entries if e.enabled),
            file=self.file,
            next_trigger=self.next_trigger(now_millis),
        )

    # ============== Serialization ==============

    def to_document(self) -> dict:
        """Convert the schedule to a document dict."""
        return {
            "version": __version__,
            "timestamp": now_ms(),
            "entries": [entry.save() for entry in self._entries],
            "enabled": self.enabled,
            "fade": self.fade,
            "fadeTimeSecs": self._fade_time_secs,
        }

    def load_document(self, document: ScheduleDocument) -> None:
        """Replace all entries with the document's, then apply the settings it has."""
        for entry in reversed(self.entries):
            self.remove_entry(entry)
        for entry_doc in document.entries:
            self._add_loaded_entry(entry_doc)

        present = document.model_dump(exclude_unset=True, include={"enabled", "fade", "fade_time_secs"})
        if "enabled" in present:
            self.enabled = present["enabled"]
        if "fade" in present:
            self.fade = present["fade"]
        if "fade_time_secs" in present:
            self.fade_time_secs = present["fade_time_secs"]

    def _add_loaded_entry(self, entry_doc: EntryDocument) -> ScheduledProject:
        entry = ScheduledProject(self._open_entry)
        entry.load(entry_doc)
        self._entries.add(entry)
        self.notifier.publish(EntryAdded(entry))
        return entry

    # ============== Persistence ==============

    def save_schedule(self, file: str | Path | None = None) -> bool:
        return self.store.save(file)

    def open_schedule(self, file: str | Path) -> bool:
        return self.store.open(file)

    def new_schedule(self) -> None:
        self.store.new_schedule()
