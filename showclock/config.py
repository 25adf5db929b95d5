"""Configuration - showclock runtime settings"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
load_dotenv(override=True)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings"""

    # Storage
    data_dir: Path = field(default_factory=lambda: Path.home() / ".showclock")

    # Process-wide scheduling gate, used until preferences.yaml overrides it
    scheduler_enabled: bool = True

    # Timezone for time-of-day conversion, None means the local timezone
    timezone: Optional[str] = None

    # Tick interval of the runner
    tick_ms: int = 100

    # Save permission granted to the store
    can_save: bool = True

    # Command run when an entry fires, e.g. "lxstudio --open {project} --fade {fade}"
    open_command: Optional[str] = None

    log_level: str = "INFO"

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / "preferences.yaml"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables"""
        return cls(
            data_dir=Path(os.getenv(
                "SHOWCLOCK_DATA_DIR", str(Path.home() / ".showclock")
            )).expanduser(),
            scheduler_enabled=_env_bool("SHOWCLOCK_SCHEDULER_ENABLED", True),
            timezone=os.getenv("SHOWCLOCK_TIMEZONE") or None,
            tick_ms=int(os.getenv("SHOWCLOCK_TICK_MS", "100")),
            can_save=_env_bool("SHOWCLOCK_CAN_SAVE", True),
            open_command=os.getenv("SHOWCLOCK_OPEN_COMMAND") or None,
            log_level=os.getenv("SHOWCLOCK_LOG_LEVEL", "INFO").upper(),
        )


# Global settings instance
settings = Settings.from_env()
