"""Turns set-target requests into G4S panel commands."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import G4SError, MissingPanelIdentifier
from .states import PanelActivity, TargetState, coerce_target

if TYPE_CHECKING:
    from .coordinator import G4SCoordinator

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Executes exactly one remote command per set-target request.

    Polling is paused while a command is in flight. After a successful
    command it resumes only once resume_delay has passed so the next poll
    does not observe the panel mid-transition; after a failure it resumes
    immediately.
    """

    def __init__(
        self, coordinator: G4SCoordinator, panel_id: str | None, *, resume_delay: float
    ) -> None:
        self.coordinator = coordinator
        self.panel_id = panel_id
        self.resume_delay = resume_delay
        self._latest: object | None = None

    def _command_for(self, target: TargetState):
        client = self.coordinator.client
        return {
            TargetState.AWAY_ARM: client.arm_panel,
            TargetState.NIGHT_ARM: client.night_arm_panel,
            TargetState.DISARM: client.disarm_panel,
        }[target]

    async def async_set_target_state(self, value: TargetState | str) -> None:
        """Command the panel into value.

        Raises InvalidTarget or MissingPanelIdentifier before touching any
        state, and re-raises remote failures after resuming polling. The
        optimistic target is kept when the command fails.
        """
        target = coerce_target(value)
        if not self.panel_id:
            raise MissingPanelIdentifier("No G4S panel id configured for this entry")

        _LOGGER.info("SET: target state %s", target.value)
        coordinator = self.coordinator
        coordinator.pause_polling()
        coordinator.record_user_action(target)

        # Only the most recent request may resume polling.
        token = self._latest = object()
        succeeded = False
        try:
            await coordinator.async_run_job(self._command_for(target), self.panel_id)
            succeeded = True
        except G4SError as err:
            _LOGGER.error("Failed to set G4S panel to %s: %s", target.value, err)
            raise
        finally:
            if self._latest is token and coordinator.activity is not PanelActivity.IDLE:
                coordinator.resume_polling(self.resume_delay if succeeded else 0.0)

        _LOGGER.info("G4S panel accepted %s", target.value)
