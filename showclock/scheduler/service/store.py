"""JSON schedule file store.

Reads and writes the schedule document for a :class:`SchedulerEngine`:
- open(): the whole file is read and validated before the engine is touched,
  so a missing or corrupt file leaves the active schedule as it was
- save(): written to a temp file and renamed over the target
- new_schedule(): resets the engine to an empty default schedule

File and parse failures never escape; they are wrapped, pushed to the error
sink, and the call returns False.
"""
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pydantic
from loguru import logger

from ...errors import ScheduleIOError, ScheduleParseError
from ..executor import ErrorSink, SavePermission
from ..models import FADE_TIME_DEFAULT, ScheduleDocument
from ..types import ScheduleChange, ScheduleChanged

if TYPE_CHECKING:
    from ..engine import SchedulerEngine

logger = logger.bind(module="scheduler.store")


def read_document(file: Path) -> ScheduleDocument:
    """Read and validate a schedule file.

    Raises:
        ScheduleIOError: The file could not be read
        ScheduleParseError: The content is not a valid schedule document
    """
    try:
        with open(file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ScheduleParseError(f"Invalid JSON in {file}: {e}", detail={"file": str(file)}) from e
    except OSError as e:
        raise ScheduleIOError(f"Could not read {file}: {e}", detail={"file": str(file)}) from e

    try:
        return ScheduleDocument.model_validate(data)
    except pydantic.ValidationError as e:
        raise ScheduleParseError(
            f"Invalid schedule document {file}: {e.error_count()} errors",
            detail={"file": str(file), "errors": e.errors()},
        ) from e


def write_document(file: Path, data: dict[str, Any]) -> None:
    """Write a schedule document as indented JSON (atomic).

    Raises:
        ScheduleIOError: The file could not be written
    """
    temp_path = file.with_suffix(file.suffix + ".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        temp_path.replace(file)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise ScheduleIOError(f"Could not write schedule to {file}: {e}", detail={"file": str(file)}) from e


class ScheduleStore:
    """Opens, saves and resets the schedule of one engine."""

    def __init__(
        self,
        engine: "SchedulerEngine",
        permissions: SavePermission,
        error_sink: ErrorSink,
    ):
        self.engine = engine
        self.permissions = permissions
        self.error_sink = error_sink
        self._file: Path | None = None

    @property
    def file(self) -> Path | None:
        """The schedule file currently active, if any."""
        return self._file

    # ============== Operations ==============

    def save(self, file: str | Path | None = None) -> bool:
        """Save the schedule, defaulting to the current file.

        Returns:
            True if the file was written
        """
        if file is None:
            if self._file is None:
                logger.debug("No schedule file to save to")
                return False
            file = self._file
        file = Path(file)

        if not self.permissions.can_save():
            logger.debug(f"Save not permitted, skipping {file}")
            return False

        try:
            write_document(file, self.engine.to_document())
        except ScheduleIOError as e:
            self.error_sink.push_error(e, str(e))
            return False

        logger.info(f"Schedule saved successfully to {file}")
        self._set_schedule(file, ScheduleChange.SAVE)
        return True

    def open(self, file: str | Path) -> bool:
        """Replace the active schedule with the content of a file.

        Returns:
            True if the file was loaded
        """
        file = Path(file)
        self.engine.notifier.publish(ScheduleChanged(file, ScheduleChange.TRY))

        try:
            document = read_document(file)
        except (ScheduleIOError, ScheduleParseError) as e:
            self.error_sink.push_error(e, f"Could not load schedule file: {e}")
            return False

        self._close_schedule()
        with self.engine.loading_schedule():
            self.engine.load_document(document)
        self._set_schedule(file, ScheduleChange.OPEN)
        logger.info(f"Schedule loaded successfully from {file} ({len(self.engine.entries)} entries)")
        return True

    def new_schedule(self) -> None:
        """Reset to an empty schedule with default settings."""
        self._close_schedule()
        document = ScheduleDocument(enabled=False, fade=True, fade_time_secs=FADE_TIME_DEFAULT)
        with self.engine.loading_schedule():
            self.engine.load_document(document)
        self._set_schedule(None, ScheduleChange.NEW)
        logger.info("New schedule created")

    def restore_last(self) -> bool:
        """Open the schedule file remembered in preferences, if any."""
        file = self.engine.preferences.schedule_file
        if file is None:
            return False
        logger.info(f"Restoring last schedule {file}")
        return self.open(file)

    # ============== Internals ==============

    def _close_schedule(self) -> None:
        if self._file is not None:
            logger.debug(f"Closing schedule {self._file}")

    def _set_schedule(self, file: Path | None, change: ScheduleChange) -> None:
        self._file = file
        self.engine.notifier.publish(ScheduleChanged(file, change))
        self.engine.preferences.set_schedule_file(file)
