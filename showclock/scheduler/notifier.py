"""Change notifier"""
from pathlib import Path
from typing import Callable, List

from loguru import logger

from ..errors import DuplicateMemberError, NotFoundError, ValidationError
from .models import ScheduledProject
from .types import (
    EntryAdded,
    EntryMoved,
    EntryRemoved,
    ScheduleChange,
    ScheduleChanged,
    SchedulerEvent,
)

logger = logger.bind(module="scheduler.notifier")

Listener = Callable[[SchedulerEvent], None]


class ChangeNotifier:
    """Change notifier

    Keeps listeners in registration order and delivers every event to all of
    them synchronously, inside the call that produced it.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def register(self, listener: Listener):
        """Register a listener

        Args:
            listener: Callable receiving each event
        """
        if listener is None:
            raise ValidationError("Cannot register None listener")
        if listener in self._listeners:
            raise DuplicateMemberError(f"Cannot register listener twice: {listener!r}")
        self._listeners.append(listener)
        logger.debug(f"Listener registered: {listener!r}")

    def unregister(self, listener: Listener):
        """Unregister a listener

        Args:
            listener: A previously registered listener
        """
        if listener not in self._listeners:
            raise NotFoundError(f"May not unregister non-registered listener: {listener!r}")
        self._listeners.remove(listener)

    def publish(self, event: SchedulerEvent):
        """Deliver an event to every listener"""
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


class SchedulerListener:
    """Listener base class with one method per event type

    Subclass and override the methods of interest, then register the
    instance itself, e.g. ``engine.register_listener(MyListener())``.
    """

    def __call__(self, event: SchedulerEvent):
        if isinstance(event, ScheduleChanged):
            self.schedule_changed(event.file, event.change)
        elif isinstance(event, EntryAdded):
            self.entry_added(event.entry)
        elif isinstance(event, EntryRemoved):
            self.entry_removed(event.entry)
        elif isinstance(event, EntryMoved):
            self.entry_moved(event.entry)

    def schedule_changed(self, file: Path | None, change: ScheduleChange):
        pass

    def entry_added(self, entry: ScheduledProject):
        pass

    def entry_removed(self, entry: ScheduledProject):
        pass

    def entry_moved(self, entry: ScheduledProject):
        pass
