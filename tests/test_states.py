"""Tests for states.py."""
import pytest

from custom_components.g4s_alarm.exceptions import InvalidTarget, UnmappedRemoteValue
from custom_components.g4s_alarm.states import (
    ArmState,
    CurrentState,
    TargetState,
    arm_state_to_target,
    coerce_target,
)


class TestArmStateMapping:
    """Tests for panel to Home Assistant mapping."""

    def test_full_arm_maps_to_away(self):
        assert arm_state_to_target(ArmState.FULL_ARM) is TargetState.AWAY_ARM

    def test_night_arm_maps_to_night(self):
        assert arm_state_to_target(ArmState.NIGHT_ARM) is TargetState.NIGHT_ARM

    def test_disarmed_maps_to_disarm(self):
        assert arm_state_to_target(ArmState.DISARMED) is TargetState.DISARM

    def test_raw_value_is_accepted(self):
        assert arm_state_to_target("night_arm") is TargetState.NIGHT_ARM

    def test_each_target_has_exactly_one_arm_state(self):
        targets = [arm_state_to_target(arm) for arm in (ArmState.FULL_ARM, ArmState.NIGHT_ARM, ArmState.DISARMED)]
        assert sorted(targets) == sorted(TargetState)

    def test_triggered_has_no_target(self):
        with pytest.raises(UnmappedRemoteValue):
            arm_state_to_target(ArmState.TRIGGERED)

    def test_unknown_value_is_not_guessed(self):
        with pytest.raises(UnmappedRemoteValue, match="PARTIAL"):
            arm_state_to_target("PARTIAL")


class TestCurrentState:
    """Tests for CurrentState conversions."""

    @pytest.mark.parametrize("target", list(TargetState))
    def test_target_round_trip(self, target):
        assert CurrentState.from_target(target).to_target() is target

    def test_disarm_becomes_disarmed(self):
        assert CurrentState.from_target(TargetState.DISARM) is CurrentState.DISARMED

    def test_triggered_is_not_a_target(self):
        with pytest.raises(InvalidTarget):
            CurrentState.TRIGGERED.to_target()


class TestCoerceTarget:
    """Tests for set-request validation."""

    def test_target_passes_through(self):
        assert coerce_target(TargetState.AWAY_ARM) is TargetState.AWAY_ARM

    def test_string_value_is_parsed(self):
        assert coerce_target("disarm") is TargetState.DISARM

    def test_triggered_is_rejected(self):
        with pytest.raises(InvalidTarget):
            coerce_target(CurrentState.TRIGGERED)

    def test_unknown_value_is_rejected(self):
        with pytest.raises(InvalidTarget):
            coerce_target(7)

    def test_invalid_target_is_a_value_error(self):
        with pytest.raises(ValueError):
            coerce_target("stay_arm")
