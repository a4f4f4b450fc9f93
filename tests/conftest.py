"""Fixtures for SleepIQ bed position tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from sleepiq_position.api import SleepIQClient
from sleepiq_position.const import (
    CONF_PASSWORD,
    CONF_POLL_INTERVAL,
    CONF_POLL_MAX,
    CONF_USERNAME,
)
from sleepiq_position.models import (
    BedDescriptor,
    BedPreset,
    BedStatus,
    Configuration,
    Side,
    SleepIQSession,
    TargetSelection,
)

# Test constants
TEST_USERNAME = "sleeper@example.com"
TEST_PASSWORD = "hunter2"
TEST_BEDS = [
    BedDescriptor(bed_id="A", name="Guest"),
    BedDescriptor(bed_id="B", name="Main"),
]

MOVING = BedStatus(is_moving=True)
STOPPED = BedStatus(is_moving=False)


class FakeClock:
    """Monotonic clock that only advances when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Return a clock advanced only by its sleep coroutine."""
    return FakeClock()


@pytest.fixture
def test_config() -> Configuration:
    """Return a configuration polling every second for up to ten seconds."""
    return Configuration(
        username=TEST_USERNAME,
        password=TEST_PASSWORD,
        poll_interval=1.0,
        poll_max=10.0,
    )


@pytest.fixture
def target_selection() -> TargetSelection:
    """Return a valid selection for the Main bed, left side, flat."""
    return TargetSelection(bed_id="B", side=Side.LEFT, preset=BedPreset.FLAT)


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock SleepIQClient with a logged-in session and two beds."""
    client = MagicMock(spec=SleepIQClient)
    client.async_login = AsyncMock(return_value=SleepIQSession(key="session-key", user_id="42"))
    client.async_get_beds = AsyncMock(return_value=list(TEST_BEDS))
    client.async_set_position = AsyncMock(return_value=STOPPED)
    client.async_get_foundation_status = AsyncMock(return_value=STOPPED)
    return client


@pytest.fixture
def config_data() -> dict:
    """Return raw configuration file contents."""
    return {
        CONF_USERNAME: TEST_USERNAME,
        CONF_PASSWORD: TEST_PASSWORD,
        CONF_POLL_INTERVAL: 1,
        CONF_POLL_MAX: 10,
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: dict) -> Path:
    """Write the configuration to a YAML file and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config_data), encoding="utf-8")
    return path
