"""Coordinator sequencing one bed position run."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from .api import SleepIQError
from .controller import BedPositionController
from .exceptions import AuthError, QueryError
from .models import Configuration, MovementResult, PositionRequest, TargetSelection
from .resolver import resolve_bed

if TYPE_CHECKING:
    from .api import SleepIQClient

_LOGGER = logging.getLogger(__name__)


class BedPositionCoordinator:
    """Authenticate, resolve the target bed and run the command-and-poll cycle."""

    def __init__(
        self,
        client: SleepIQClient,
        config: Configuration,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the coordinator."""
        self._client = client
        self._config = config
        self._controller = BedPositionController(
            client,
            config.poll_interval,
            config.poll_max,
            sleep=sleep,
            clock=clock,
        )

    @property
    def controller(self) -> BedPositionController:
        """Return the command-and-poll controller."""
        return self._controller

    async def async_run(self, request: PositionRequest) -> MovementResult:
        """Run the whole workflow for a validated request.

        Raises:
            AuthError: Login rejected.
            QueryError: Bed list unavailable.
            NotFoundError: The requested bed is not registered to the account.
            CommandError: The preset command failed.
            PollError: A status query failed while polling.
        """
        try:
            await self._client.async_login(self._config.username, self._config.password)
        except SleepIQError as err:
            raise AuthError(f"failed to log into SleepIQ account: {err}") from err

        try:
            beds = await self._client.async_get_beds()
        except SleepIQError as err:
            raise QueryError(f"failed to query beds: {err}") from err

        bed = resolve_bed(beds, request.bed_name)
        selection = TargetSelection(bed_id=bed.bed_id, side=request.side, preset=request.preset)
        return await self._controller.async_move_to_preset(selection)
