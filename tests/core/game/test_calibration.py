"""Tests for the calibration step and its permission handling."""

from __future__ import annotations

import pytest

from core.game.calibration import (
    PERMISSION_DENIED_MESSAGE,
    CalibrationError,
    CalibrationNotReadyError,
    CalibrationStep,
)
from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from core.imu.permission_gate import CapabilityStatus, PermissionGate, StaticPermissionGate


class ScriptedGate(PermissionGate):
    def __init__(self, answers) -> None:
        self.answers = list(answers)
        self.queries = 0

    def query(self) -> CapabilityStatus:
        self.queries += 1
        return self.answers.pop(0)


class ExplodingGate(PermissionGate):
    def query(self) -> CapabilityStatus:
        raise OSError("sensor service unavailable")


def test_confirm_disabled_until_first_sample():
    sampler = OrientationSampler()
    step = CalibrationStep(sampler, StaticPermissionGate(CapabilityStatus.AVAILABLE))

    assert step.request_access() is CapabilityStatus.AVAILABLE
    assert sampler.is_listening
    assert step.current_reading is None
    assert step.can_confirm is False
    with pytest.raises(CalibrationNotReadyError):
        step.confirm()

    sampler.on_orientation_event({"alpha": 15.0, "beta": 75.0, "gamma": 2.0})
    assert step.current_reading == OrientationSample(15.0, 75.0, 2.0)
    assert step.can_confirm is True

    baseline = step.confirm()
    assert baseline == OrientationSample(15.0, 75.0, 2.0)
    assert step.baseline == baseline
    assert step.confirmed
    assert step.can_confirm is False


def test_baseline_is_frozen_after_confirm():
    sampler = OrientationSampler()
    step = CalibrationStep(sampler, StaticPermissionGate())
    step.request_access()
    sampler.on_orientation_event({"alpha": 15.0, "beta": 75.0})
    step.confirm()

    sampler.on_orientation_event({"alpha": 200.0, "beta": 10.0})

    assert step.baseline.alpha == 15.0
    with pytest.raises(CalibrationError):
        step.confirm()


def test_denied_access_blocks_and_can_be_retried():
    sampler = OrientationSampler()
    gate = ScriptedGate([CapabilityStatus.DENIED, CapabilityStatus.GRANTED])
    step = CalibrationStep(sampler, gate)

    assert step.request_access() is CapabilityStatus.DENIED
    assert step.error == PERMISSION_DENIED_MESSAGE
    assert not sampler.is_listening
    with pytest.raises(CalibrationNotReadyError):
        step.confirm()

    assert step.request_access() is CapabilityStatus.GRANTED
    assert step.error == ""
    assert sampler.is_listening

    # A usable answer is cached
    assert step.request_access() is CapabilityStatus.GRANTED
    assert gate.queries == 2


def test_denied_access_hides_reading():
    sampler = OrientationSampler()
    sampler.attach()
    sampler.on_orientation_event({"alpha": 1.0, "beta": 2.0})
    step = CalibrationStep(sampler, StaticPermissionGate(CapabilityStatus.DENIED))

    step.request_access()

    assert step.current_reading is None
    assert step.can_confirm is False


def test_failing_gate_counts_as_denied():
    step = CalibrationStep(OrientationSampler(), ExplodingGate())

    assert step.request_access() is CapabilityStatus.DENIED
    assert step.error == PERMISSION_DENIED_MESSAGE
