"""Tests for component wiring."""

from __future__ import annotations

import pytest

from communication.orientation_receiver import OrientationReceiver
from core.builder import Builder
from core.game.frame_loop import FrameLoop
from core.imu.mock_orientation_source import MockOrientationSource
from core.imu.orientation_sample import OrientationSample
from core.imu.permission_gate import CapabilityStatus, PromptPermissionGate, StaticPermissionGate
from utils.config import Config


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.value = start

    def time(self) -> float:
        return self.value


@pytest.fixture()
def builder():
    return Builder(seed=42)


def test_permission_gate_per_source(builder):
    assert isinstance(builder.build_permission_gate("udp"), PromptPermissionGate)
    gate = builder.build_permission_gate("mock")
    assert isinstance(gate, StaticPermissionGate)
    assert gate.query() is CapabilityStatus.AVAILABLE


def test_mute_disables_speech_and_tones(builder):
    audio = builder.build_audio_system(mute=True)
    assert audio.speech_config.enabled is False
    assert audio.tone_config.enabled is False
    assert audio.tones_available is False


def test_unknown_source_rejected(builder):
    sampler = builder.build_sampler()
    session = builder.build_session(sampler, builder.build_permission_gate("mock"), builder.build_frame_loop(), None)
    with pytest.raises(ValueError):
        builder.build_orientation_source("bluetooth", sampler, session)


def test_udp_source_port_override(builder):
    sampler = builder.build_sampler()
    session = builder.build_session(sampler, builder.build_permission_gate("udp"), builder.build_frame_loop(), None)

    receiver = builder.build_orientation_source("udp", sampler, session, port=6000)

    assert isinstance(receiver, OrientationReceiver)
    assert receiver.config.port == 6000


def test_mock_player_follows_session_target(builder):
    clock = FakeClock()
    sampler = builder.build_sampler()
    loop = FrameLoop(clock=clock.time)
    session = builder.build_session(sampler, builder.build_permission_gate("mock"), loop, None)
    source = builder.build_orientation_source("mock", sampler, session, mock_accuracy=1.0)
    assert isinstance(source, MockOrientationSource)
    assert source.config.accuracy == 1.0

    # No machine yet: the player holds the rest pose
    assert source.target_provider() is None

    session.enter_calibration()
    sampler.on_orientation_event({"alpha": 10.0, "beta": 80.0})
    session.confirm_calibration()
    assert source.target_provider() is None

    # Off every direction band so the first round stays open
    sampler.on_orientation_event({"alpha": 55.0, "beta": 80.0})
    clock.value += 1.0
    loop.step()

    baseline, target = source.target_provider()
    assert baseline == OrientationSample(10.0, 80.0, 0.0)
    assert target is session.machine.target

    session.teardown()


def test_session_formatter_uses_speech_labels(builder, monkeypatch):
    labels = dict(Config.COMMAND_LABELS, left="Go left")
    monkeypatch.setattr(Config, "COMMAND_LABELS", labels)

    session = builder.build_session(
        builder.build_sampler(), builder.build_permission_gate("mock"), builder.build_frame_loop(), None
    )

    assert session.formatter.command_labels == labels
    assert session.formatter.command_labels is not labels
