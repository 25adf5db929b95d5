"""Showclock - daily wall-clock project scheduler.

Fires schedule entries when the wall clock crosses their time of day and
opens the project each entry points to. See :mod:`showclock.scheduler`.
"""

__version__ = "0.1.0"
