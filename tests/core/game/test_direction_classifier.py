"""Tests for direction matching against a calibrated baseline."""

from __future__ import annotations

import pytest

from core.game.direction import ALL_DIRECTIONS, Direction
from core.game.direction_classifier import DirectionClassifier
from core.imu.orientation_sample import OrientationSample
from utils.config_sections import ClassifierConfig


@pytest.fixture()
def classifier() -> DirectionClassifier:
    return DirectionClassifier(ClassifierConfig(tolerance_deg=40.0, tilt_threshold_deg=30.0))


def sample(alpha: float, beta: float = 0.0) -> OrientationSample:
    return OrientationSample(alpha=alpha, beta=beta)


def test_left_across_north(classifier):
    baseline = sample(350.0)
    assert classifier.matches(baseline, sample(80.0), Direction.LEFT)
    assert not classifier.matches(baseline, sample(80.0), Direction.RIGHT)


def test_back_within_tolerance(classifier):
    assert classifier.matches(sample(0.0), sample(170.0), Direction.BACK)
    assert classifier.matches(sample(0.0), sample(200.0), Direction.BACK)
    assert not classifier.matches(sample(0.0), sample(130.0), Direction.BACK)


def test_front_rejects_tilt_at_tolerance(classifier):
    baseline = sample(0.0, 0.0)
    assert not classifier.matches(baseline, sample(0.0, 40.0), Direction.FRONT)
    assert classifier.matches(baseline, sample(0.0, 39.0), Direction.FRONT)
    assert not classifier.matches(baseline, sample(40.0, 0.0), Direction.FRONT)


def test_up_and_down_use_tilt_threshold(classifier):
    baseline = sample(0.0, 10.0)
    assert classifier.matches(baseline, sample(0.0, 45.0), Direction.UP)
    assert not classifier.matches(baseline, sample(0.0, 40.0), Direction.UP)
    assert classifier.matches(baseline, sample(0.0, -21.0), Direction.DOWN)
    assert not classifier.matches(baseline, sample(0.0, -20.0), Direction.DOWN)


def test_up_and_down_ignore_heading(classifier):
    baseline = sample(0.0, 0.0)
    assert classifier.matches(baseline, sample(200.0, 60.0), Direction.UP)
    assert classifier.matches(baseline, sample(90.0, -60.0), Direction.DOWN)


def test_right_band_is_exclusive(classifier):
    baseline = sample(0.0)
    assert classifier.matches(baseline, sample(270.0), Direction.RIGHT)
    assert classifier.matches(baseline, sample(309.0), Direction.RIGHT)
    assert not classifier.matches(baseline, sample(310.0), Direction.RIGHT)
    assert not classifier.matches(baseline, sample(230.0), Direction.RIGHT)


def test_left_band_is_exclusive(classifier):
    baseline = sample(0.0)
    assert classifier.matches(baseline, sample(51.0), Direction.LEFT)
    assert not classifier.matches(baseline, sample(50.0), Direction.LEFT)
    assert not classifier.matches(baseline, sample(130.0), Direction.LEFT)


def test_heading_dead_zone_matches_nothing(classifier):
    baseline = sample(0.0)
    current = sample(45.0)
    assert [d for d in ALL_DIRECTIONS if classifier.matches(baseline, current, d)] == []


def test_deltas_wrap_heading_only():
    heading, tilt = DirectionClassifier.deltas(sample(350.0, 170.0), sample(10.0, -170.0))
    assert heading == pytest.approx(20.0)
    assert tilt == pytest.approx(-340.0)


def test_tolerance_is_configurable():
    narrow = DirectionClassifier(ClassifierConfig(tolerance_deg=10.0, tilt_threshold_deg=30.0))
    assert not narrow.matches(sample(0.0), sample(75.0), Direction.LEFT)
    assert narrow.matches(sample(0.0), sample(85.0), Direction.LEFT)
    assert narrow.tolerance == 10.0
    assert narrow.tilt_threshold == 30.0


def test_identical_pose_is_front_not_back(classifier):
    baseline = sample(0.0, 0.0)
    current = sample(0.0, 0.0)
    assert classifier.matches(baseline, current, Direction.FRONT)
    assert not classifier.matches(baseline, current, Direction.BACK)


def test_exact_half_turn_is_back(classifier):
    baseline = sample(0.0, 0.0)
    assert DirectionClassifier.deltas(baseline, sample(180.0))[0] == -180.0
    assert classifier.matches(baseline, sample(180.0), Direction.BACK)
    assert classifier.matches(sample(90.0), sample(270.0), Direction.BACK)
