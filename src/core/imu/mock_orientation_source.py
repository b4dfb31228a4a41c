#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Mock orientation source for playing and testing without a phone.

Pushes synthetic orientation events into an OrientationSampler from a
background thread, standing in for the device sensor feed.

Operating modes:
- 'static': Holds a resting pose with small gaussian jitter
- 'player': Simulates a player. When a new target appears it waits a
            reaction delay, then turns to that target's pose with
            probability ``accuracy`` (otherwise to another direction's pose)

Optionally emits malformed events (``dropout_rate``) so the sampler's
drop path gets exercised in demos.

Usage:
    # Static pose
    source = MockOrientationSource(sampler, mode='static')

    # Simulated player following the round targets
    source = MockOrientationSource(sampler, mode='player', target_provider=provider)
    source.start()
    ...
    source.stop()
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

import numpy as np

from core.game.direction import ALL_DIRECTIONS, Direction
from core.imu.angle_math import normalize_angle
from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from utils.config_sections import MockSourceConfig, load_mock_source_config

log = logging.getLogger("game.sensor")

# Returns (baseline, target) while a round is waiting for a match, else None
TargetProvider = Callable[[], Optional[Tuple[OrientationSample, Direction]]]

DEFAULT_REST_POSE = OrientationSample(alpha=0.0, beta=80.0, gamma=0.0)


def pose_for_direction(
    baseline: OrientationSample,
    direction: Direction,
    turn_deg: float = 90.0,
    tilt_deg: float = 45.0,
) -> OrientationSample:
    """Pose a player would hold to satisfy ``direction`` from ``baseline``."""
    alpha, beta = baseline.alpha, baseline.beta
    if direction is Direction.BACK:
        alpha += 180.0
    elif direction is Direction.LEFT:
        alpha += turn_deg
    elif direction is Direction.RIGHT:
        alpha -= turn_deg
    elif direction is Direction.UP:
        beta += tilt_deg
    elif direction is Direction.DOWN:
        beta -= tilt_deg
    return OrientationSample(alpha=normalize_angle(alpha), beta=beta, gamma=baseline.gamma)


class MockOrientationSource:
    """Synthetic sensor feed on a daemon thread."""

    def __init__(
        self,
        sampler: OrientationSampler,
        mode: str = "static",
        rest_pose: OrientationSample = DEFAULT_REST_POSE,
        target_provider: Optional[TargetProvider] = None,
        config: Optional[MockSourceConfig] = None,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if mode not in ("static", "player"):
            raise ValueError(f"Unknown mode: {mode}")
        if mode == "player" and target_provider is None:
            raise ValueError("'player' mode requires a target_provider")

        self.sampler = sampler
        self.mode = mode
        self.rest_pose = rest_pose
        self.target_provider = target_provider
        self.config = config or load_mock_source_config()
        self.rng = np.random.default_rng(seed)
        self.clock = clock

        self.running = False
        self.event_count = 0
        self._thread: Optional[threading.Thread] = None

        # Player state
        self._seen_target: Optional[Tuple[OrientationSample, Direction]] = None
        self._target_seen_at = 0.0
        self._intended: Optional[Direction] = None

    def start(self) -> None:
        if self.running:
            log.debug("MockOrientationSource already running")
            return
        self.running = True
        self.event_count = 0
        self._thread = threading.Thread(target=self._generate_events, daemon=True)
        self._thread.start()
        log.info("MockOrientationSource started in '%s' mode @ %d Hz", self.mode, self.config.rate_hz)

    def stop(self) -> None:
        self.running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        log.info("MockOrientationSource stopped (emitted %d events)", self.event_count)

    def _generate_events(self) -> None:
        interval = 1.0 / self.config.rate_hz
        while self.running:
            loop_start = time.monotonic()
            self.emit_once()
            elapsed = time.monotonic() - loop_start
            sleep_time = max(0.0, interval - elapsed)
            if sleep_time > 0:
                time.sleep(sleep_time)

    def emit_once(self) -> None:
        """Push one event into the sampler."""
        self.event_count += 1
        if self.config.dropout_rate > 0 and self.rng.random() < self.config.dropout_rate:
            self.sampler.on_orientation_event({"alpha": None, "beta": None, "gamma": None})
            return

        pose = self.next_pose()
        noise = self.rng.normal(0.0, self.config.noise_deg, size=3) if self.config.noise_deg > 0 else np.zeros(3)
        self.sampler.on_orientation_event({
            "alpha": normalize_angle(pose.alpha + noise[0]),
            "beta": float(np.clip(pose.beta + noise[1], -180.0, 180.0)),
            "gamma": float(np.clip(pose.gamma + noise[2], -90.0, 90.0)),
        })

    def next_pose(self) -> OrientationSample:
        """Noise-free pose for the current moment."""
        if self.mode == "static":
            return self.rest_pose

        current = self.target_provider()
        if current is None:
            # Between rounds the player drifts back to the baseline
            self._intended = None
            if self._seen_target is not None:
                return self._seen_target[0]
            return self.rest_pose

        baseline, _ = current
        if self._intended is None or current != self._seen_target:
            self._on_new_target(current)

        if self.clock() - self._target_seen_at < self.config.reaction_seconds:
            return baseline
        return pose_for_direction(baseline, self._intended, self.config.turn_deg, self.config.tilt_deg)

    def _on_new_target(self, current: Tuple[OrientationSample, Direction]) -> None:
        _, target = current
        self._seen_target = current
        self._target_seen_at = self.clock()
        if self.rng.random() < self.config.accuracy:
            self._intended = target
        else:
            others = [d for d in ALL_DIRECTIONS if d is not target and d is not Direction.FRONT]
            self._intended = others[int(self.rng.integers(len(others)))]
