"""Errors raised by the SleepIQ bed position tool.

Every error is terminal for a run. The CLI turns them into a fatal log line
and a non-zero exit code. A timed-out movement is not an error: it is
reported as ``MovementState.TIMED_OUT``.
"""

from __future__ import annotations


class BedPositionError(Exception):
    """Base class for all bed position errors."""


class ConfigError(BedPositionError):
    """Configuration file unreadable, unparseable or invalid."""


class ValidationError(BedPositionError):
    """Missing or invalid command-line parameter."""


class AuthError(BedPositionError):
    """Login rejected by the SleepIQ service."""


class QueryError(BedPositionError):
    """Bed list unavailable."""


class NotFoundError(BedPositionError):
    """Named bed is not registered to the account."""

    def __init__(self, bed_name: str) -> None:
        super().__init__(f"failed to identify target bed {bed_name}")
        self.bed_name = bed_name


class CommandError(BedPositionError):
    """Preset command failed."""


class PollError(BedPositionError):
    """Status query failed while waiting for movement to stop."""
