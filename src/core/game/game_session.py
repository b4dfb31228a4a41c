"""
Session orchestrator: settings -> calibration -> playing -> result.

Owns one round of play end to end: the SessionConfig chosen in settings,
the CalibrationStep, the RoundStateMachine and its registration on the
frame loop. The sampler, permission gate, audio handle and frame loop are
injected so the same session runs against a phone, the mock source or
test doubles.
"""

import logging
import random
from enum import Enum
from typing import Callable, Optional

from core.audio.message_formatter import MessageFormatter
from core.game.calibration import CalibrationStep
from core.game.direction_classifier import DirectionClassifier
from core.game.frame_loop import FrameLoop
from core.game.result_aggregator import SessionResult
from core.game.round_state_machine import RoundStateMachine
from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from core.imu.permission_gate import CapabilityStatus, PermissionGate
from utils.config_sections import (
    RoundTimingConfig,
    SessionConfig,
    load_round_timing_config,
    load_session_config,
)

log = logging.getLogger("game.rounds")


class GamePhase(Enum):
    SETTINGS = "settings"
    CALIBRATION = "calibration"
    PLAYING = "playing"
    RESULT = "result"


class GameSession:
    """Phase machine wiring calibration, rounds and the result together."""

    def __init__(
        self,
        sampler: OrientationSampler,
        permission_gate: PermissionGate,
        loop: FrameLoop,
        audio=None,
        classifier: Optional[DirectionClassifier] = None,
        formatter: Optional[MessageFormatter] = None,
        timing: Optional[RoundTimingConfig] = None,
        session_config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        on_result: Optional[Callable[[SessionResult], None]] = None,
    ) -> None:
        self.sampler = sampler
        self.permission_gate = permission_gate
        self.loop = loop
        self.audio = audio
        self.classifier = classifier or DirectionClassifier()
        self.formatter = formatter or MessageFormatter()
        self.timing = timing or load_round_timing_config()
        self.session_config = session_config or load_session_config()
        self.rng = rng or random.Random()
        self.on_result = on_result

        self.phase = GamePhase.SETTINGS
        self.calibration: Optional[CalibrationStep] = None
        self.machine: Optional[RoundStateMachine] = None
        self.result: Optional[SessionResult] = None

    def configure(self, seconds_per_round: float, total_rounds: int) -> SessionConfig:
        self._require_phase(GamePhase.SETTINGS)
        self.session_config = load_session_config(seconds_per_round, total_rounds)
        return self.session_config

    def enter_calibration(self) -> CapabilityStatus:
        """SETTINGS -> CALIBRATION; resolve the permission gate."""
        if self.phase is GamePhase.SETTINGS:
            self.calibration = CalibrationStep(self.sampler, self.permission_gate)
            self.phase = GamePhase.CALIBRATION
        self._require_phase(GamePhase.CALIBRATION)
        return self.calibration.request_access()

    def confirm_calibration(self) -> OrientationSample:
        """CALIBRATION -> PLAYING; freeze the baseline and start round one."""
        self._require_phase(GamePhase.CALIBRATION)
        baseline = self.calibration.confirm()

        # Calibration confirm is the user gesture that unlocks audio
        if self.audio is not None:
            try:
                self.audio.initialize()
            except Exception as e:
                log.warning("Audio initialization failed: %s", e)

        self.machine = RoundStateMachine(
            session_config=self.session_config,
            baseline=baseline,
            sampler=self.sampler,
            classifier=self.classifier,
            scheduler=self.loop,
            audio=self.audio,
            formatter=self.formatter,
            timing=self.timing,
            rng=self.rng,
            on_finish=self._on_finish,
        )
        self.phase = GamePhase.PLAYING
        self.loop.add_tick(self.machine.tick)
        self.machine.start()
        return baseline

    def _on_finish(self, result: SessionResult) -> None:
        self.loop.remove_tick(self.machine.tick)
        self.result = result
        self.phase = GamePhase.RESULT
        if self.on_result is not None:
            self.on_result(result)

    @property
    def finished(self) -> bool:
        return self.phase is GamePhase.RESULT

    def restart(self) -> None:
        """Back to SETTINGS with a fresh calibration for the next session."""
        self._stop_machine()
        self.calibration = None
        self.result = None
        self.phase = GamePhase.SETTINGS

    def teardown(self) -> None:
        """Stop listening to the feed and cancel anything still scheduled."""
        self._stop_machine()
        self.sampler.detach()

    def _stop_machine(self) -> None:
        if self.machine is not None:
            self.machine.teardown()
            self.loop.remove_tick(self.machine.tick)
            self.machine = None

    def _require_phase(self, phase: GamePhase) -> None:
        if self.phase is not phase:
            raise RuntimeError(f"Expected phase {phase.value}, session is in {self.phase.value}")
