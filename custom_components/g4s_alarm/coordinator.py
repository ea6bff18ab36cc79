"""State reconciliation between Home Assistant and the G4S panel."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
import logging
import time
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_call_later, async_track_time_interval
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import (
    CONF_FETCH_TIMEOUT,
    CONF_PANEL_ID,
    CONF_RESUME_DELAY,
    CONF_SUPPRESSION_WINDOW,
    CONF_UPDATE_INTERVAL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_RESUME_DELAY,
    DEFAULT_SUPPRESSION_WINDOW,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
)
from .dispatcher import CommandDispatcher
from .exceptions import G4SError
from .g4s_client import G4SClient
from .states import (
    ArmState,
    CurrentState,
    ObservedState,
    PanelActivity,
    TargetState,
    arm_state_to_target,
)

_LOGGER = logging.getLogger(__name__)


class G4SCoordinator(DataUpdateCoordinator[CurrentState | None]):
    """Keeps the cached target state and the panel's current state consistent.

    ``data`` holds the current state last observed by a poll. The target
    state is what the user last asked for (or what was last observed when
    nobody asked). Polls realign the target with the panel, except for a
    suppression window after each user action so a command the panel has
    not applied yet is not reverted in the UI.

    Polling runs off one handle, ``_unsub_poll``: either a delayed resume
    or the interval tracker, never both.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        client: G4SClient,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.entry = entry
        self.client = client
        self._clock = clock

        opts = entry.options
        self.poll_interval = timedelta(
            seconds=float(opts.get(CONF_UPDATE_INTERVAL, DEFAULT_UPDATE_INTERVAL))
        )
        self.suppression_window = float(
            opts.get(CONF_SUPPRESSION_WINDOW, DEFAULT_SUPPRESSION_WINDOW)
        )
        self.fetch_timeout = float(opts.get(CONF_FETCH_TIMEOUT, DEFAULT_FETCH_TIMEOUT))

        self.target_state = TargetState.DISARM
        self.observed: ObservedState | None = None
        self.last_user_action: float | None = None
        self.activity = PanelActivity.IDLE
        self._unsub_poll: CALLBACK_TYPE | None = None

        self.dispatcher = CommandDispatcher(
            self,
            entry.data.get(CONF_PANEL_ID),
            resume_delay=float(opts.get(CONF_RESUME_DELAY, DEFAULT_RESUME_DELAY)),
        )

        # update_interval stays None: the poll handle drives refreshes.
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=DOMAIN,
            update_interval=None,
        )

    @property
    def panel_id(self) -> str | None:
        return self.dispatcher.panel_id

    @property
    def current_state(self) -> CurrentState | None:
        return self.data

    def _set_target_state(self, value: TargetState) -> None:
        if value == self.target_state:
            return
        self.target_state = value
        self.async_update_listeners()

    # ------------------------------------------------------------------ #
    # Suppression window
    # ------------------------------------------------------------------ #

    def within_suppression_window(self) -> bool:
        if self.last_user_action is None:
            return False
        return self._clock() - self.last_user_action < self.suppression_window

    def record_user_action(self, target: TargetState) -> None:
        """Optimistically adopt a requested target and open the window."""
        self.last_user_action = self._clock()
        self._set_target_state(target)

    # ------------------------------------------------------------------ #
    # Poll handle
    # ------------------------------------------------------------------ #

    @callback
    def async_start(self) -> None:
        """Start polling at the configured interval."""
        self.resume_polling()

    async def async_shutdown(self) -> None:
        """Stop polling for good (entry unload)."""
        self._cancel_poll()
        self.activity = PanelActivity.IDLE
        await super().async_shutdown()

    def _cancel_poll(self) -> None:
        if self._unsub_poll is not None:
            self._unsub_poll()
            self._unsub_poll = None

    @callback
    def pause_polling(self) -> None:
        _LOGGER.debug("Pausing panel polling")
        self._cancel_poll()
        self.activity = PanelActivity.COMMAND_IN_FLIGHT

    @callback
    def resume_polling(self, delay: float = 0.0) -> None:
        """Replace whatever the poll handle holds with polling from delay on."""
        self._cancel_poll()
        if delay > 0:
            _LOGGER.debug("Resuming panel polling in %.1f seconds", delay)
            self._unsub_poll = async_call_later(
                self.hass, delay, self._async_begin_polling
            )
        else:
            self._async_begin_polling()

    @callback
    def _async_begin_polling(self, _now: datetime | None = None) -> None:
        self.activity = PanelActivity.POLLING
        self._unsub_poll = async_track_time_interval(
            self.hass,
            self._async_poll_tick,
            self.poll_interval,
            name=f"{DOMAIN} poll {self.panel_id}",
        )

    async def _async_poll_tick(self, _now: datetime) -> None:
        await self.async_refresh()

    # ------------------------------------------------------------------ #
    # Remote reads
    # ------------------------------------------------------------------ #

    async def async_run_job(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking client call in the executor."""
        return await self.hass.async_add_executor_job(func, *args)

    async def _async_update_data(self) -> CurrentState | None:
        """Run one poll cycle.

        Every completed refresh pushes to the listeners, unchanged or not.
        A skipped or failed cycle hands back the previous data untouched.
        """
        if self.within_suppression_window():
            _LOGGER.debug(
                "Skipping polling update to avoid overriding a recent user action"
            )
            return self.data

        try:
            if await self.async_run_job(self.client.is_alarm_triggered):
                self.observed = ObservedState(ArmState.TRIGGERED, self._clock())
                return CurrentState.TRIGGERED
            arm_state = await self.async_run_job(self.client.get_arm_state)
            target = arm_state_to_target(arm_state)
        except G4SError as err:
            _LOGGER.error("Polling error: %s", err)
            return self.data

        self.observed = ObservedState(ArmState(arm_state), self._clock())
        # Time has passed while waiting on the panel.
        if not self.within_suppression_window():
            # The refresh notifies listeners once data is stored.
            self.target_state = target
        return CurrentState.from_target(target)

    async def async_get_current_state(self) -> CurrentState:
        """Read the arm state now, falling back to the cached target.

        The read is bounded by fetch_timeout. A slow, failing or unmapped
        read never raises; the panel is reported as what we last believed.
        """
        _LOGGER.debug("Fetching current state from G4S")
        try:
            async with asyncio.timeout(self.fetch_timeout):
                arm_state = await self.async_run_job(self.client.get_arm_state)
            target = arm_state_to_target(arm_state)
        except TimeoutError:
            _LOGGER.warning(
                "G4S did not answer within %.1f seconds, using cached state",
                self.fetch_timeout,
            )
        except G4SError as err:
            _LOGGER.warning("Error fetching current state: %s", err)
        else:
            self.observed = ObservedState(ArmState(arm_state), self._clock())
            return CurrentState.from_target(target)
        return CurrentState.from_target(self.target_state)

    async def async_get_target_state(self) -> TargetState:
        """Return the target state, refreshing it from the panel when idle."""
        if self.within_suppression_window():
            return self.target_state

        current = await self.async_get_current_state()
        if not self.within_suppression_window():
            self._set_target_state(current.to_target())
        return self.target_state

    async def async_set_target_state(self, value: TargetState | str) -> None:
        await self.dispatcher.async_set_target_state(value)
