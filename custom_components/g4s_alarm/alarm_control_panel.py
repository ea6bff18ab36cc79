from homeassistant.components.alarm_control_panel import (
    AlarmControlPanelEntity,
    AlarmControlPanelEntityFeature,
    AlarmControlPanelState,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .exceptions import G4SError
from .helpers import get_device_info
from .states import CurrentState, PanelActivity, TargetState

STATE_MAP = {
    CurrentState.AWAY_ARM: AlarmControlPanelState.ARMED_AWAY,
    CurrentState.NIGHT_ARM: AlarmControlPanelState.ARMED_NIGHT,
    CurrentState.DISARMED: AlarmControlPanelState.DISARMED,
    CurrentState.TRIGGERED: AlarmControlPanelState.TRIGGERED,
}


async def async_setup_entry(hass, entry, async_add_entities):
    """Set up the G4S alarm control panel entity."""
    coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    async_add_entities([G4SAlarmPanel(coordinator, entry)])


class G4SAlarmPanel(CoordinatorEntity, AlarmControlPanelEntity):
    """Representation of the G4S alarm panel in Home Assistant."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_features = (
        AlarmControlPanelEntityFeature.ARM_AWAY
        | AlarmControlPanelEntityFeature.ARM_NIGHT
    )
    _attr_code_format = None
    _attr_code_arm_required = False

    def __init__(self, coordinator, entry):
        super().__init__(coordinator)
        self.entry = entry
        self._attr_unique_id = f"{DOMAIN}_{entry.entry_id}_panel"
        self._attr_device_info = get_device_info(entry)

    @property
    def alarm_state(self):
        """Map the coordinator's current state to HA AlarmControlPanelState."""
        coordinator = self.coordinator
        current = coordinator.current_state
        if coordinator.activity is PanelActivity.COMMAND_IN_FLIGHT:
            if CurrentState.from_target(coordinator.target_state) != current:
                if coordinator.target_state is TargetState.DISARM:
                    return AlarmControlPanelState.DISARMING
                return AlarmControlPanelState.ARMING
        return STATE_MAP.get(current)

    @property
    def extra_state_attributes(self):
        observed = self.coordinator.observed
        return {
            "target_state": self.coordinator.target_state.value,
            "last_observed": observed.arm_state.value if observed else None,
        }

    async def async_update(self) -> None:
        """Run a poll cycle now; its result reaches us through the listener."""
        await self.coordinator.async_refresh()

    async def _async_set_target(self, target: TargetState) -> None:
        try:
            await self.coordinator.async_set_target_state(target)
        except G4SError as err:
            raise HomeAssistantError(
                f"G4S alarm could not switch to {target.value}: {err}"
            ) from err
        finally:
            self.async_write_ha_state()

    async def async_alarm_disarm(self, code=None):
        await self._async_set_target(TargetState.DISARM)

    async def async_alarm_arm_away(self, code=None):
        await self._async_set_target(TargetState.AWAY_ARM)

    async def async_alarm_arm_night(self, code=None):
        await self._async_set_target(TargetState.NIGHT_ARM)
