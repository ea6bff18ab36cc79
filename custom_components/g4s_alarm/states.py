"""Arm states as seen by the G4S service and by Home Assistant."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidTarget, UnmappedRemoteValue


class ArmState(str, Enum):
    """Arm condition reported by the panel."""

    FULL_ARM = "full_arm"
    NIGHT_ARM = "night_arm"
    DISARMED = "disarmed"
    TRIGGERED = "triggered"


class TargetState(str, Enum):
    """States a user can request."""

    AWAY_ARM = "away_arm"
    NIGHT_ARM = "night_arm"
    DISARM = "disarm"


class CurrentState(str, Enum):
    """States the panel can be observed in."""

    AWAY_ARM = "away_arm"
    NIGHT_ARM = "night_arm"
    DISARMED = "disarmed"
    TRIGGERED = "triggered"

    @classmethod
    def from_target(cls, target: TargetState) -> CurrentState:
        return _TARGET_TO_CURRENT[target]

    def to_target(self) -> TargetState:
        try:
            return _CURRENT_TO_TARGET[self]
        except KeyError as err:
            raise InvalidTarget(f"{self.value} is not a target state") from err


class PanelActivity(str, Enum):
    """What the engine is doing with the poll task."""

    IDLE = "idle"
    POLLING = "polling"
    COMMAND_IN_FLIGHT = "command_in_flight"


@dataclass(frozen=True)
class ObservedState:
    """Last arm state fetched from the panel and when (monotonic seconds)."""

    arm_state: ArmState
    fetched_at: float


_ARM_TO_TARGET = {
    ArmState.FULL_ARM: TargetState.AWAY_ARM,
    ArmState.NIGHT_ARM: TargetState.NIGHT_ARM,
    ArmState.DISARMED: TargetState.DISARM,
}

_TARGET_TO_CURRENT = {
    TargetState.AWAY_ARM: CurrentState.AWAY_ARM,
    TargetState.NIGHT_ARM: CurrentState.NIGHT_ARM,
    TargetState.DISARM: CurrentState.DISARMED,
}

_CURRENT_TO_TARGET = {current: target for target, current in _TARGET_TO_CURRENT.items()}


def arm_state_to_target(arm_state) -> TargetState:
    """Map a panel arm state into the target-state space.

    Triggered and anything unrecognised raise UnmappedRemoteValue; the
    caller must not guess a value.
    """
    try:
        return _ARM_TO_TARGET[ArmState(arm_state)]
    except (KeyError, ValueError) as err:
        raise UnmappedRemoteValue(f"Unsupported arm state: {arm_state!r}") from err


def coerce_target(value) -> TargetState:
    """Validate a requested target state."""
    if isinstance(value, TargetState):
        return value
    try:
        return TargetState(value)
    except ValueError as err:
        raise InvalidTarget(f"Unsupported target state: {value!r}") from err
