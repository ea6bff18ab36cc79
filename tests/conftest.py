"""Shared fixtures for g4s_alarm tests."""
import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock, AsyncMock, patch
import pytest

from homeassistant.config_entries import ConfigEntryState
from homeassistant.const import CONF_USERNAME, CONF_PASSWORD

from custom_components.g4s_alarm.const import CONF_PANEL_ID, CONF_FETCH_TIMEOUT
from custom_components.g4s_alarm.coordinator import G4SCoordinator
from custom_components.g4s_alarm.states import ArmState


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_hass():
    """Create a mock Home Assistant instance."""
    hass = MagicMock()
    hass.async_add_executor_job = AsyncMock(side_effect=lambda func, *args: func(*args))
    hass.is_stopping = False
    hass.data = {}
    return hass


@pytest.fixture(autouse=True)
def poll_scheduler():
    """Replace HA's time tracking so tests fire the poll handle by hand.

    ``call_later`` and ``track_interval`` record what the coordinator
    scheduled; ``resume()`` fires the pending delayed resume and ``tick()``
    runs one interval poll.
    """
    with patch(
        "custom_components.g4s_alarm.coordinator.async_call_later"
    ) as call_later, patch(
        "custom_components.g4s_alarm.coordinator.async_track_time_interval"
    ) as track_interval:
        call_later.side_effect = lambda hass, delay, action: MagicMock(name="cancel_resume")
        track_interval.side_effect = lambda hass, action, interval, **kw: MagicMock(name="cancel_interval")

        def resume():
            call_later.call_args.args[2](None)

        async def tick():
            await track_interval.call_args.args[1](None)

        yield SimpleNamespace(
            call_later=call_later,
            track_interval=track_interval,
            resume=resume,
            tick=tick,
        )


@pytest.fixture
def mock_config_entry():
    """Create a mock config entry."""
    entry = MagicMock()
    entry.entry_id = "test_entry_id"
    entry.title = "G4S Alarm"
    entry.state = ConfigEntryState.SETUP_IN_PROGRESS
    entry.data = {
        CONF_USERNAME: "user@example.com",
        CONF_PASSWORD: "password123",
        CONF_PANEL_ID: "panel-42",
    }
    entry.options = {}
    return entry


@pytest.fixture
def mock_client():
    """Create a mock G4SClient reporting a disarmed, quiet panel."""
    client = MagicMock()
    client.is_alarm_triggered.return_value = False
    client.get_arm_state.return_value = ArmState.DISARMED
    return client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def coordinator(mock_hass, mock_config_entry, mock_client, clock):
    """Coordinator with default timings and a fake clock."""
    return G4SCoordinator(mock_hass, mock_config_entry, mock_client, clock=clock)


@pytest.fixture
def quick_timeout_coordinator(mock_hass, mock_config_entry, mock_client, clock):
    """Coordinator whose on-demand reads give up after 50 ms."""
    mock_config_entry.options = {CONF_FETCH_TIMEOUT: 0.05}
    return G4SCoordinator(mock_hass, mock_config_entry, mock_client, clock=clock)


@pytest.fixture
def stalled_executor():
    """Executor replacement whose jobs never finish."""

    async def _stall(func, *args):
        await asyncio.Event().wait()

    return AsyncMock(side_effect=_stall)
