"""Command-and-poll controller for a bed foundation preset.

Issues exactly one preset command, then polls the foundation status until the
bed stops moving or the polling deadline passes:

    IDLE -> COMMAND_ISSUED -> POLLING -> SETTLED | TIMED_OUT
    IDLE | POLLING -> FAILED

The wait between polls is a plain awaited sleep: the run has nothing else to
do while the bed is travelling.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from .api import SleepIQError
from .exceptions import CommandError, PollError
from .models import BedStatus, MovementResult, MovementState, TargetSelection
from .validators import validate_selection

if TYPE_CHECKING:
    from .api import SleepIQClient

_LOGGER = logging.getLogger(__name__)


class BedPositionController:
    """Drive one side of a bed to a preset and wait for it to settle."""

    def __init__(
        self,
        client: SleepIQClient,
        poll_interval: float,
        poll_max: float,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            client: Logged-in SleepIQ client
            poll_interval: Seconds to wait between status checks
            poll_max: Seconds after which polling is abandoned
            sleep: Awaitable sleep, defaults to asyncio.sleep
            clock: Monotonic clock, defaults to time.monotonic
        """
        self._client = client
        self._poll_interval = poll_interval
        self._poll_max = poll_max
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic
        self._state = MovementState.IDLE

    @property
    def state(self) -> MovementState:
        """Return the current state of the cycle."""
        return self._state

    def _set_state(self, state: MovementState) -> None:
        _LOGGER.debug("Movement state %s -> %s", self._state.value, state.value)
        self._state = state

    async def async_move_to_preset(self, selection: TargetSelection) -> MovementResult:
        """Issue the preset command and wait for the foundation to stop moving.

        Returns:
            A SETTLED or TIMED_OUT result.

        Raises:
            ValidationError: The selection is invalid; nothing was sent.
            CommandError: The preset command failed.
            PollError: A status query failed while polling.
        """
        validate_selection(selection)

        _LOGGER.info(
            "Setting bed %s (%s side) to %s",
            selection.bed_id,
            selection.side.value,
            selection.preset.name,
        )
        try:
            status = await self._client.async_set_position(
                selection.bed_id, selection.side, selection.preset
            )
        except SleepIQError as err:
            self._set_state(MovementState.FAILED)
            raise CommandError(f"failed to set bed to target position: {err}") from err
        self._set_state(MovementState.COMMAND_ISSUED)

        if not status.is_moving:
            self._set_state(MovementState.SETTLED)
            _LOGGER.info("Movement has stopped")
            return MovementResult(state=MovementState.SETTLED, status=status)

        return await self._async_poll_until_settled(selection, status)

    async def _async_poll_until_settled(
        self, selection: TargetSelection, status: BedStatus
    ) -> MovementResult:
        self._set_state(MovementState.POLLING)
        started = self._clock()
        checks = 0
        elapsed = 0.0

        while status.is_moving:
            try:
                status = await self._client.async_get_foundation_status(selection.bed_id)
            except SleepIQError as err:
                self._set_state(MovementState.FAILED)
                raise PollError(
                    f"failed to query bed status to check whether movement has ended: {err}"
                ) from err
            checks += 1

            await self._sleep(self._poll_interval)
            elapsed = self._clock() - started

            if status.is_moving and elapsed >= self._poll_max:
                self._set_state(MovementState.TIMED_OUT)
                _LOGGER.warning(
                    "Reached maximum bed status polling time (%.1fs) after %d status checks, bed may still be moving",
                    self._poll_max,
                    checks,
                )
                return MovementResult(
                    state=MovementState.TIMED_OUT,
                    status=status,
                    status_checks=checks,
                    elapsed=elapsed,
                )

        self._set_state(MovementState.SETTLED)
        _LOGGER.info("Movement has stopped after %d status checks", checks)
        return MovementResult(
            state=MovementState.SETTLED,
            status=status,
            status_checks=checks,
            elapsed=elapsed,
        )
