"""User preferences persisted to YAML.

Holds the process-wide scheduling switch and the last schedule file, so a
restarted process can reopen what was active before.
"""
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

logger = logger.bind(module="scheduler.preferences")


class Preferences:
    """Process-wide preferences.

    With ``path=None`` nothing is written to disk, which is what tests and
    embedded hosts use.
    """

    def __init__(self, path: str | Path | None = None, scheduler_enabled: bool = True):
        self.path = Path(path).expanduser() if path else None
        self.scheduler_enabled = scheduler_enabled
        self.schedule_file: Path | None = None

    # ============== YAML I/O ==============

    def load(self) -> "Preferences":
        """Load preferences from the YAML file, if it exists."""
        if self.path is None or not self.path.exists():
            return self

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load preferences from {self.path}: {e}")
            return self
        if not isinstance(data, dict):
            logger.error(f"Ignoring preferences in {self.path}: expected a mapping")
            return self

        if "scheduler_enabled" in data:
            self.scheduler_enabled = bool(data["scheduler_enabled"])
        if data.get("schedule_file"):
            self.schedule_file = Path(data["schedule_file"])
        logger.debug(f"Loaded preferences from {self.path}")
        return self

    def save(self) -> None:
        """Write preferences to the YAML file (atomic)."""
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write("# Showclock preferences\n\n")
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        temp_path.replace(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scheduler_enabled": self.scheduler_enabled,
            "schedule_file": str(self.schedule_file) if self.schedule_file else None,
        }

    # ============== Updates ==============

    def set_schedule_file(self, file: Path | None) -> None:
        """Remember the active schedule file."""
        self.schedule_file = file
        self._persist()

    def set_scheduler_enabled(self, enabled: bool) -> None:
        self.scheduler_enabled = enabled
        self._persist()

    def _persist(self) -> None:
        try:
            self.save()
        except OSError as e:
            logger.warning(f"Could not write preferences to {self.path}: {e}")
