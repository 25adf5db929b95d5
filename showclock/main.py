"""Command line entry point."""
import argparse
import json
import sys

from loguru import logger

from .config import Settings, settings
from .errors import ValidationError
from .scheduler import (
    CommandProjectLoader,
    LoggingErrorSink,
    Permissions,
    Preferences,
    ScheduleRunner,
    SchedulerEngine,
)
from .scheduler.schedule import parse_time_of_day, seconds_to_human


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "{extra[module]} - <level>{message}</level>",
    )
    logger.configure(extra={"module": "showclock"})


def build_engine(config: Settings) -> SchedulerEngine:
    """Wire an engine to the collaborators described by the settings."""
    preferences = Preferences(
        config.preferences_path,
        scheduler_enabled=config.scheduler_enabled,
    ).load()
    error_sink = LoggingErrorSink()
    return SchedulerEngine(
        preferences=preferences,
        project_loader=CommandProjectLoader(config.open_command, error_sink),
        permissions=Permissions(config.can_save),
        error_sink=error_sink,
        timezone=config.timezone,
    )


def _open(engine: SchedulerEngine, schedule: str | None) -> bool:
    if schedule:
        return engine.open_schedule(schedule)
    return engine.store.restore_last()


def _cmd_run(engine: SchedulerEngine, args: argparse.Namespace, config: Settings) -> int:
    if not _open(engine, args.schedule):
        logger.warning("No schedule loaded, running with an empty schedule")
    runner = ScheduleRunner(engine, tick_ms=config.tick_ms)
    logger.info("Scheduler running (press Ctrl+C to stop)")
    try:
        runner.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Stopping scheduler...")
    finally:
        runner.stop()
    return 0


def _cmd_status(engine: SchedulerEngine, args: argparse.Namespace, config: Settings) -> int:
    _open(engine, args.schedule)
    print(json.dumps(engine.get_status().to_dict(), indent=2))
    return 0


def _cmd_list(engine: SchedulerEngine, args: argparse.Namespace, config: Settings) -> int:
    if not engine.open_schedule(args.schedule):
        return 1
    for entry in engine.entries:
        state = "on " if entry.enabled else "off"
        print(f"{entry.index:3d}  {entry.time_text}  {state}  {entry.project or '-'}  {entry.label or ''}")
    trigger = engine.next_trigger()
    if trigger:
        print(f"next: #{trigger.entry.index} in {seconds_to_human(trigger.seconds_until)}")
    return 0


def _cmd_new(engine: SchedulerEngine, args: argparse.Namespace, config: Settings) -> int:
    engine.new_schedule()
    engine.enabled = args.enable
    return 0 if engine.save_schedule(args.schedule) else 1


def _cmd_add(engine: SchedulerEngine, args: argparse.Namespace, config: Settings) -> int:
    if not engine.open_schedule(args.schedule):
        return 1
    try:
        hours, minutes, seconds = parse_time_of_day(args.time)
    except ValidationError as e:
        print(e, file=sys.stderr)
        return 2
    entry = engine.add_entry(args.project, label=args.label)
    entry.set_time(hours, minutes, seconds)
    entry.enabled = not args.disabled
    return 0 if engine.save_schedule() else 1


COMMANDS = {
    "run": _cmd_run,
    "status": _cmd_status,
    "list": _cmd_list,
    "new": _cmd_new,
    "add": _cmd_add,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="showclock", description="Daily project scheduler")
    parser.add_argument("--log-level", default=None, help="Override SHOWCLOCK_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the scheduler loop")
    run.add_argument("schedule", nargs="?", help="Schedule file (defaults to the last one opened)")

    status = sub.add_parser("status", help="Print scheduler status as JSON")
    status.add_argument("schedule", nargs="?", help="Schedule file (defaults to the last one opened)")

    lst = sub.add_parser("list", help="List entries of a schedule file")
    lst.add_argument("schedule")

    new = sub.add_parser("new", help="Create an empty schedule file")
    new.add_argument("schedule")
    new.add_argument("--enable", action="store_true", help="Enable the new schedule")

    add = sub.add_parser("add", help="Append an entry to a schedule file")
    add.add_argument("schedule")
    add.add_argument("time", help="Time of day, HH:MM[:SS]")
    add.add_argument("project", help="Project file to open")
    add.add_argument("--label", default=None)
    add.add_argument("--disabled", action="store_true", help="Add the entry disabled")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or settings.log_level)
    try:
        engine = build_engine(settings)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    return COMMANDS[args.command](engine, args, settings)


if __name__ == "__main__":
    sys.exit(main())
