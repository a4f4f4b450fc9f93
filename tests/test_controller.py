"""Tests for the command-and-poll controller."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from sleepiq_position.api import SleepIQCommError, SleepIQServerError
from sleepiq_position.controller import BedPositionController
from sleepiq_position.exceptions import CommandError, PollError, ValidationError
from sleepiq_position.models import (
    BedPreset,
    MovementState,
    Side,
    TargetSelection,
)

from .conftest import MOVING, STOPPED, FakeClock


def _controller(
    client: MagicMock, clock: FakeClock, poll_interval: float = 1.0, poll_max: float = 10.0
) -> BedPositionController:
    return BedPositionController(
        client, poll_interval, poll_max, sleep=clock.sleep, clock=clock
    )


class TestCommandIssue:
    """Test the preset command step."""

    async def test_settled_without_polling(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """A command response that is not moving settles without any status call."""
        controller = _controller(mock_client, fake_clock)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.SETTLED
        assert result.settled is True
        assert result.status_checks == 0
        assert controller.state is MovementState.SETTLED
        mock_client.async_set_position.assert_awaited_once_with("B", Side.LEFT, BedPreset.FLAT)
        mock_client.async_get_foundation_status.assert_not_awaited()
        assert fake_clock.sleeps == []

    async def test_command_error_is_not_retried(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """A failing preset command raises CommandError and never polls."""
        mock_client.async_set_position.side_effect = SleepIQServerError("boom")
        controller = _controller(mock_client, fake_clock)

        with pytest.raises(CommandError) as exc_info:
            await controller.async_move_to_preset(target_selection)

        assert isinstance(exc_info.value.__cause__, SleepIQServerError)
        assert controller.state is MovementState.FAILED
        assert mock_client.async_set_position.await_count == 1
        mock_client.async_get_foundation_status.assert_not_awaited()

    @pytest.mark.parametrize(
        "selection",
        [
            TargetSelection(bed_id="", side=Side.LEFT, preset=BedPreset.FLAT),
            TargetSelection(bed_id="B", side="Middle", preset=BedPreset.FLAT),
            TargetSelection(bed_id="B", side=Side.RIGHT, preset=0),
        ],
        ids=["empty-bed-id", "unknown-side", "position-zero"],
    )
    async def test_invalid_selection_makes_no_calls(
        self, mock_client: MagicMock, fake_clock: FakeClock, selection: TargetSelection
    ):
        """Invalid selections are rejected before any network call."""
        controller = _controller(mock_client, fake_clock)

        with pytest.raises(ValidationError):
            await controller.async_move_to_preset(selection)

        assert controller.state is MovementState.IDLE
        mock_client.async_set_position.assert_not_awaited()
        mock_client.async_get_foundation_status.assert_not_awaited()


class TestPolling:
    """Test the polling loop."""

    async def test_polls_until_stopped(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """Status is re-read after each interval until the bed stops."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.side_effect = [MOVING, STOPPED]
        controller = _controller(mock_client, fake_clock)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.SETTLED
        assert result.status_checks == 2
        assert result.status is STOPPED
        assert result.elapsed == 2.0
        assert fake_clock.sleeps == [1.0, 1.0]
        mock_client.async_get_foundation_status.assert_awaited_with("B")
        mock_client.async_set_position.assert_awaited_once()

    async def test_timeout_after_exact_number_of_checks(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """An always-moving bed gets poll_max / poll_interval checks before timing out."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.return_value = MOVING
        controller = _controller(mock_client, fake_clock, poll_interval=1.0, poll_max=10.0)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.TIMED_OUT
        assert result.settled is False
        assert result.status_checks == 10
        assert mock_client.async_get_foundation_status.await_count == 10
        assert len(fake_clock.sleeps) == 10
        assert result.elapsed == 10.0
        assert controller.state is MovementState.TIMED_OUT

    async def test_timeout_rounds_partial_interval_up(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """A poll_max that is not a multiple of the interval needs one more check."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.return_value = MOVING
        controller = _controller(mock_client, fake_clock, poll_interval=1.0, poll_max=2.5)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.TIMED_OUT
        assert mock_client.async_get_foundation_status.await_count == 3

    async def test_interval_longer_than_max_checks_once(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """poll_interval >= poll_max allows one status check and one sleep."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.return_value = MOVING
        controller = _controller(mock_client, fake_clock, poll_interval=5.0, poll_max=2.0)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.TIMED_OUT
        assert mock_client.async_get_foundation_status.await_count == 1
        assert fake_clock.sleeps == [5.0]

    async def test_stop_reported_at_deadline_is_settled(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """A bed that stops on the last allowed check is settled, not timed out."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.side_effect = [MOVING, STOPPED]
        controller = _controller(mock_client, fake_clock, poll_interval=1.0, poll_max=2.0)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.SETTLED
        assert result.status_checks == 2

    async def test_poll_error_is_fatal(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """A failing status query raises PollError without retrying."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.side_effect = [
            MOVING,
            SleepIQCommError("connection reset"),
        ]
        controller = _controller(mock_client, fake_clock)

        with pytest.raises(PollError):
            await controller.async_move_to_preset(target_selection)

        assert controller.state is MovementState.FAILED
        assert mock_client.async_get_foundation_status.await_count == 2
        assert fake_clock.sleeps == [1.0]
        mock_client.async_set_position.assert_awaited_once()

    async def test_uses_freshest_status(
        self, mock_client: MagicMock, fake_clock: FakeClock, target_selection: TargetSelection
    ):
        """Loop continuation follows the latest status, not the command response."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.side_effect = [STOPPED]
        controller = _controller(mock_client, fake_clock)

        result = await controller.async_move_to_preset(target_selection)

        assert result.state is MovementState.SETTLED
        assert result.status is STOPPED
        assert result.status_checks == 1

    async def test_timeout_logged_as_warning(
        self,
        mock_client: MagicMock,
        fake_clock: FakeClock,
        target_selection: TargetSelection,
        caplog: pytest.LogCaptureFixture,
    ):
        """Reaching the deadline is a warning, not an error."""
        mock_client.async_set_position.return_value = MOVING
        mock_client.async_get_foundation_status.return_value = MOVING
        controller = _controller(mock_client, fake_clock, poll_interval=1.0, poll_max=1.0)

        with caplog.at_level("WARNING"):
            await controller.async_move_to_preset(target_selection)

        assert any(
            record.levelname == "WARNING" and "maximum bed status polling time" in record.getMessage()
            for record in caplog.records
        )
        assert mock_client.async_get_foundation_status.await_count == 1
        assert fake_clock.sleeps == [1.0]


class TestDefaults:
    """Test default sleep and clock wiring."""

    async def test_defaults_to_asyncio_sleep(self, mock_client: MagicMock):
        """Without injected callables the controller uses real time."""
        controller = BedPositionController(mock_client, 0.01, 1.0)
        mock_client.async_set_position = AsyncMock(return_value=MOVING)
        mock_client.async_get_foundation_status = AsyncMock(side_effect=[STOPPED])

        result = await controller.async_move_to_preset(
            TargetSelection(bed_id="B", side=Side.RIGHT, preset=BedPreset.ZERO_G)
        )

        assert result.state is MovementState.SETTLED
        assert result.elapsed >= 0.0
