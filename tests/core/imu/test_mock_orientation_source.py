"""Tests for the simulated orientation feed."""

from __future__ import annotations

import pytest

from core.game.direction import ALL_DIRECTIONS, Direction
from core.game.direction_classifier import DirectionClassifier
from core.imu.mock_orientation_source import (
    DEFAULT_REST_POSE,
    MockOrientationSource,
    pose_for_direction,
)
from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from utils.config_sections import ClassifierConfig, MockSourceConfig


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.value = start

    def time(self) -> float:
        return self.value

    def advance(self, delta: float) -> None:
        self.value += delta


def quiet_config(**overrides) -> MockSourceConfig:
    values = dict(noise_deg=0.0, reaction_seconds=0.5, accuracy=1.0, dropout_rate=0.0)
    values.update(overrides)
    return MockSourceConfig(**values)


@pytest.fixture()
def sampler():
    sampler = OrientationSampler()
    sampler.attach()
    return sampler


@pytest.mark.parametrize("direction", ALL_DIRECTIONS)
@pytest.mark.parametrize("baseline_alpha", [0.0, 120.0, 350.0])
def test_pose_for_direction_satisfies_classifier(direction, baseline_alpha):
    baseline = OrientationSample(alpha=baseline_alpha, beta=10.0)
    classifier = DirectionClassifier(ClassifierConfig())

    pose = pose_for_direction(baseline, direction)

    assert classifier.matches(baseline, pose, direction)
    assert 0.0 <= pose.alpha < 360.0


def test_invalid_modes_rejected(sampler):
    with pytest.raises(ValueError):
        MockOrientationSource(sampler, mode="spin")
    with pytest.raises(ValueError):
        MockOrientationSource(sampler, mode="player")


def test_static_mode_emits_rest_pose(sampler):
    source = MockOrientationSource(sampler, mode="static", config=quiet_config(), seed=1)

    source.emit_once()

    assert sampler.current == DEFAULT_REST_POSE
    assert source.event_count == 1


def test_noise_stays_close_to_rest_pose(sampler):
    source = MockOrientationSource(sampler, mode="static", config=quiet_config(noise_deg=2.0), seed=7)

    for _ in range(50):
        source.emit_once()
        heading, tilt = DirectionClassifier.deltas(DEFAULT_REST_POSE, sampler.current)
        assert abs(heading) < 20.0
        assert abs(tilt) < 20.0


def test_dropout_produces_malformed_events(sampler):
    source = MockOrientationSource(sampler, mode="static", config=quiet_config(dropout_rate=1.0), seed=3)

    source.emit_once()
    source.emit_once()

    assert sampler.current is None
    assert sampler.samples_dropped == 2


def test_player_reacts_after_delay(sampler):
    clock = FakeClock()
    baseline = OrientationSample(alpha=0.0, beta=0.0)
    target = {"value": (baseline, Direction.LEFT)}
    source = MockOrientationSource(
        sampler,
        mode="player",
        target_provider=lambda: target["value"],
        config=quiet_config(),
        seed=5,
        clock=clock.time,
    )

    assert source.next_pose() == baseline
    clock.advance(0.4)
    assert source.next_pose() == baseline
    clock.advance(0.2)
    assert source.next_pose() == pose_for_direction(baseline, Direction.LEFT)


def test_player_detects_repeated_target_after_gap(sampler):
    clock = FakeClock()
    baseline = OrientationSample(alpha=0.0, beta=0.0)
    target = {"value": (baseline, Direction.UP)}
    source = MockOrientationSource(
        sampler,
        mode="player",
        target_provider=lambda: target["value"],
        config=quiet_config(),
        seed=5,
        clock=clock.time,
    )

    source.next_pose()
    clock.advance(1.0)
    assert source.next_pose() == pose_for_direction(baseline, Direction.UP)

    # Settle pause, then the same direction comes up again
    target["value"] = None
    assert source.next_pose() == baseline
    target["value"] = (baseline, Direction.UP)
    assert source.next_pose() == baseline
    clock.advance(1.0)
    assert source.next_pose() == pose_for_direction(baseline, Direction.UP)


@pytest.mark.parametrize("direction", ALL_DIRECTIONS)
def test_inaccurate_player_misses(sampler, direction):
    clock = FakeClock()
    baseline = OrientationSample(alpha=30.0, beta=0.0)
    classifier = DirectionClassifier(ClassifierConfig())
    source = MockOrientationSource(
        sampler,
        mode="player",
        target_provider=lambda: (baseline, direction),
        config=quiet_config(accuracy=0.0),
        seed=11,
        clock=clock.time,
    )

    source.next_pose()
    clock.advance(1.0)
    pose = source.next_pose()

    assert not classifier.matches(baseline, pose, direction)
