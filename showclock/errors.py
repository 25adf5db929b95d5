"""Exception hierarchy for showclock.

All errors inherit from :class:`SchedulerError` so callers can catch a single
base class, yet still match on specific subclasses.

Hierarchy
---------
::

    SchedulerError
    ├── ValidationError        (bad argument or out-of-range value)
    ├── DuplicateMemberError   (entity or listener already registered)
    ├── NotFoundError          (entity or listener is not a member)
    ├── ReentrancyError        (structural change while iterating)
    ├── ScheduleIOError        (schedule file could not be read or written)
    └── ScheduleParseError     (schedule document is malformed)

The first four are contract violations and always propagate. The last two
are raised at the file boundary and handed to the error sink by the store.
"""
from typing import Any


class SchedulerError(Exception):
    """Base exception for all showclock errors.

    Args:
        message: Human-readable description
        detail: Optional context dict attached for structured logging
    """

    def __init__(self, message: str = "", *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class ValidationError(SchedulerError):
    """Caller supplied an invalid argument."""


class DuplicateMemberError(SchedulerError):
    """Entity is already a member of a container."""


class NotFoundError(SchedulerError):
    """Entity is not a member of the container."""


class ReentrancyError(SchedulerError):
    """Container was mutated from inside its own iteration."""


class ScheduleIOError(SchedulerError):
    """Schedule file could not be read or written."""


class ScheduleParseError(SchedulerError):
    """Schedule document could not be parsed or validated."""
