"""Collaborators consumed at the scheduler boundary.

The engine never reaches for global state. Everything it needs from the
host application is injected through these protocols:
- ProjectLoader: opens the project of a firing entry
- SavePermission: decides whether schedule files may be written
- ErrorSink: receives (cause, message) for failures surfaced to the user
"""
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from loguru import logger

logger = logger.bind(module="scheduler.executor")

# Most recent records kept by the default collaborators
HISTORY_LIMIT = 100


# ============== Protocol Definitions ==============

class ProjectLoader(Protocol):
    """Protocol for switching the active project."""

    def open_project(self, project: Path, fade_secs: float) -> None:
        """Open a project, cross-fading over fade_secs (0 means cut)."""
        ...


class SavePermission(Protocol):
    """Protocol for the save capability check."""

    def can_save(self) -> bool:
        ...


class ErrorSink(Protocol):
    """Protocol for reporting errors to the user."""

    def push_error(self, cause: BaseException, message: str) -> None:
        ...


# ============== Default Implementations ==============

@dataclass
class Permissions:
    """Static save permission."""
    save_allowed: bool = True

    def can_save(self) -> bool:
        return self.save_allowed


@dataclass
class LoggingErrorSink:
    """Logs errors and keeps the most recent ones."""
    errors: list[tuple[BaseException, str]] = field(default_factory=list)
    limit: int = HISTORY_LIMIT

    def push_error(self, cause: BaseException, message: str) -> None:
        logger.opt(exception=cause).error(message)
        self.errors.append((cause, message))
        del self.errors[:-self.limit]


class CommandProjectLoader:
    """Opens projects by launching an external command.

    The command template may reference ``{project}`` and ``{fade}``, e.g.
    ``lxstudio --open {project} --fade {fade}``. The process is started and
    not waited on, so a slow application launch never stalls the tick.
    """

    def __init__(
        self,
        command: str | None = None,
        error_sink: ErrorSink | None = None,
        limit: int = HISTORY_LIMIT,
    ):
        self.command = command
        self.error_sink = error_sink
        self.limit = limit
        self.opened: list[tuple[Path, float]] = []

    def open_project(self, project: Path, fade_secs: float) -> None:
        self.opened.append((project, fade_secs))
        del self.opened[:-self.limit]
        if not self.command:
            logger.info(f"Open project {project} (fade {fade_secs}s), no open command configured")
            return

        args = shlex.split(self.command.format(project=shlex.quote(str(project)), fade=fade_secs))
        try:
            subprocess.Popen(args)
            logger.info(f"Launched {args[0]} for project {project}")
        except OSError as e:
            message = f"Could not open project {project}: {e}"
            if self.error_sink:
                self.error_sink.push_error(e, message)
            else:
                logger.error(message)
