"""Scheduler service package.

This package contains the persistence components of the scheduler:
- store.py: JSON schedule file open/save/new
- preferences.py: YAML preferences (scheduling switch, last schedule file)
"""
from .preferences import Preferences
from .store import ScheduleStore

__all__ = ["Preferences", "ScheduleStore"]
