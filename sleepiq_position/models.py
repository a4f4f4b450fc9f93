"""Data models for the SleepIQ bed position tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class Side(Enum):
    """Side of the bed a preset command is applied to."""

    LEFT = "Left"
    RIGHT = "Right"

    @property
    def code(self) -> str:
        """Return the single-letter side code used by the SleepIQ API."""
        return self.value[0]

    @classmethod
    def parse(cls, value: str) -> Side:
        """Parse a side name ("Left", "right") or code ("L", "r")."""
        normalized = value.strip().lower()
        for side in cls:
            if normalized in (side.value.lower(), side.code.lower()):
                return side
        raise ValueError(f"unknown side {value!r}")


class BedPreset(IntEnum):
    """Foundation preset positions, numbered as the SleepIQ API expects."""

    FAVORITE = 1
    READ = 2
    WATCH_TV = 3
    FLAT = 4
    ZERO_G = 5
    SNORE = 6


class MovementState(Enum):
    """States of a command-and-poll cycle."""

    IDLE = "idle"
    COMMAND_ISSUED = "command_issued"
    POLLING = "polling"
    SETTLED = "settled"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class Configuration:
    """Runtime configuration, loaded once per run."""

    username: str
    password: str
    poll_interval: float
    poll_max: float


@dataclass(frozen=True)
class SleepIQSession:
    """Authenticated SleepIQ session."""

    key: str
    user_id: str | None = None


@dataclass(frozen=True)
class BedDescriptor:
    """A bed registered to the SleepIQ account."""

    bed_id: str
    name: str


@dataclass(frozen=True)
class BedStatus:
    """Foundation status of a bed at one point in time.

    Attributes:
        is_moving: True while the foundation is still travelling
        raw: The full status payload as returned by the service
    """

    is_moving: bool
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class PositionRequest:
    """Target requested on the command line, before the bed is resolved."""

    bed_name: str
    side: Side
    preset: BedPreset


@dataclass(frozen=True)
class TargetSelection:
    """Fully resolved target of a preset command."""

    bed_id: str
    side: Side
    preset: BedPreset


@dataclass(frozen=True)
class MovementResult:
    """Outcome of a command-and-poll cycle.

    Attributes:
        state: Terminal state reached (SETTLED or TIMED_OUT)
        status: The most recently fetched bed status
        status_checks: Number of status queries made while polling
        elapsed: Seconds spent polling
    """

    state: MovementState
    status: BedStatus
    status_checks: int = 0
    elapsed: float = 0.0

    @property
    def settled(self) -> bool:
        return self.state is MovementState.SETTLED
