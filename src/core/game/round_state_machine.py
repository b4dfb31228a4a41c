"""
Round-based state machine for the orientation drill.

States:
    IDLE -> AWAITING_MATCH -> RESOLVING -> AWAITING_MATCH (next round)
                                        -> FINISHED       (last round)

Flow per round:
1. Pick a target uniformly at random from the six directions (repeats allowed)
2. Record the start time, reset the remaining time, speak the command
3. Every frame (``tick``): recompute remaining time, then
   a. classifier says aligned -> resolve(success=True)
   b. elapsed >= seconds_per_round -> resolve(success=False)
4. resolve(): append the RoundOutcome, play feedback, schedule the settle
   callback. A second resolve in the same round is ignored.
5. After the settle period: finish or start the next round

Collaborators (audio, scheduler, sampler) are injected. Audio calls are
best effort and never raise into the machine. ``teardown()`` clears the
liveness flag and cancels the pending delayed call, so nothing mutates the
machine after the session ends.

Usage:
    machine = RoundStateMachine(session_config, baseline, sampler, classifier, loop, audio=audio)
    loop.add_tick(machine.tick)
    machine.start()
    loop.run(until=lambda: machine.finished)
"""

import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Tuple

from core.audio.audio_system import ToneKind
from core.audio.message_formatter import MessageFormatter
from core.game.direction import ALL_DIRECTIONS, Direction
from core.game.direction_classifier import DirectionClassifier
from core.game.result_aggregator import RoundOutcome, SessionResult, aggregate
from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from utils.config_sections import RoundTimingConfig, SessionConfig, load_round_timing_config

log = logging.getLogger("game.rounds")


class RoundState(Enum):
    IDLE = "idle"
    AWAITING_MATCH = "awaiting_match"
    RESOLVING = "resolving"
    FINISHED = "finished"


class Feedback(Enum):
    NONE = "none"
    CORRECT = "correct"
    WRONG = "wrong"


class RoundStateMachine:
    """Drives rounds from the first command to the final SessionResult."""

    def __init__(
        self,
        session_config: SessionConfig,
        baseline: OrientationSample,
        sampler: OrientationSampler,
        classifier: DirectionClassifier,
        scheduler,
        audio=None,
        formatter: Optional[MessageFormatter] = None,
        timing: Optional[RoundTimingConfig] = None,
        rng: Optional[random.Random] = None,
        on_finish: Optional[Callable[[SessionResult], None]] = None,
    ) -> None:
        if baseline is None:
            raise ValueError("A calibrated baseline is required before play")

        self.session_config = session_config
        self.baseline = baseline
        self.sampler = sampler
        self.classifier = classifier
        self.scheduler = scheduler
        self.audio = audio
        self.formatter = formatter or MessageFormatter()
        self.timing = timing or load_round_timing_config()
        self.rng = rng or random.Random()
        self.on_finish = on_finish

        self._state = RoundState.IDLE
        self._alive = True
        self._pending_call = None

        self._round_index = 0
        self._target: Optional[Direction] = None
        self._round_started_at = 0.0
        self._remaining = float(session_config.seconds_per_round)
        self._low_time_warned = False
        self._feedback = Feedback.NONE
        self._history: List[RoundOutcome] = []
        self._result: Optional[SessionResult] = None

    # ------------------------------------------------------------------
    # Read-only state for display
    # ------------------------------------------------------------------

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def finished(self) -> bool:
        return self._state is RoundState.FINISHED

    @property
    def target(self) -> Optional[Direction]:
        return self._target

    @property
    def round_index(self) -> int:
        return self._round_index

    @property
    def remaining_seconds(self) -> float:
        return self._remaining

    @property
    def feedback(self) -> Feedback:
        return self._feedback

    @property
    def history(self) -> Tuple[RoundOutcome, ...]:
        return tuple(self._history)

    @property
    def correct_so_far(self) -> int:
        return sum(1 for outcome in self._history if outcome.success)

    @property
    def result(self) -> Optional[SessionResult]:
        return self._result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """IDLE -> first round, after the start tone and start delay."""
        if self._state is not RoundState.IDLE or self._pending_call is not None:
            raise RuntimeError(f"Cannot start from state {self._state.value}")
        if not self._alive:
            raise RuntimeError("Cannot start a torn-down session")

        log.info(
            "Session start: %d rounds x %.1fs",
            self.session_config.total_rounds, self.session_config.seconds_per_round,
        )
        self._play(ToneKind.START)

        if self.timing.start_delay > 0:
            self._pending_call = self.scheduler.call_later(self.timing.start_delay, self._on_start_delay)
        else:
            self._begin_round()

    def _on_start_delay(self) -> None:
        self._pending_call = None
        if not self._alive:
            return
        self._begin_round()

    def _begin_round(self) -> None:
        self._target = self.rng.choice(ALL_DIRECTIONS)
        self._round_started_at = self.scheduler.now()
        self._remaining = float(self.session_config.seconds_per_round)
        self._low_time_warned = False
        self._feedback = Feedback.NONE
        self._state = RoundState.AWAITING_MATCH

        log.info(
            "Round %d/%d: target=%s",
            self._round_index + 1, self.session_config.total_rounds, self._target.value,
        )
        self._announce(self.formatter.format_command(self._target))

    def tick(self) -> None:
        """Frame callback: poll the classifier and the deadline."""
        if not self._alive or self._state is not RoundState.AWAITING_MATCH:
            return

        elapsed = self.scheduler.now() - self._round_started_at
        limit = self.session_config.seconds_per_round
        self._remaining = max(0.0, limit - elapsed)

        current = self.sampler.current
        if current is not None and self.classifier.matches(self.baseline, current, self._target):
            self.resolve(True)
            return

        if elapsed >= limit:
            self.resolve(False)
            return

        if (
            self.timing.low_time_tick_enabled
            and not self._low_time_warned
            and self._remaining < self.timing.low_time_warning_seconds
        ):
            self._low_time_warned = True
            self._play(ToneKind.TICK)

    def resolve(self, success: bool) -> bool:
        """
        Conclude the current round. At most once per round.

        Returns:
            False if the request was ignored (already resolving, not in play,
            or torn down)
        """
        if not self._alive or self._state is not RoundState.AWAITING_MATCH:
            log.debug("Ignored resolve(%s) in state %s", success, self._state.value)
            return False

        self._state = RoundState.RESOLVING
        if not success:
            self._remaining = 0.0
        outcome = RoundOutcome(direction=self._target, success=bool(success))
        self._history.append(outcome)

        if success:
            self._feedback = Feedback.CORRECT
            self._play(ToneKind.SUCCESS)
        else:
            self._feedback = Feedback.WRONG
            self._play(ToneKind.FAILURE)

        log.info(
            "Round %d/%d resolved: target=%s success=%s",
            self._round_index + 1, self.session_config.total_rounds,
            outcome.direction.value, outcome.success,
        )
        self._pending_call = self.scheduler.call_later(self.timing.settle_seconds, self._on_settled)
        return True

    def _on_settled(self) -> None:
        self._pending_call = None
        if not self._alive or self._state is not RoundState.RESOLVING:
            return

        if len(self._history) >= self.session_config.total_rounds:
            self._finish()
        else:
            self._round_index += 1
            self._begin_round()

    def _finish(self) -> None:
        self._state = RoundState.FINISHED
        self._target = None
        self._feedback = Feedback.NONE
        self._result = aggregate(self._history)
        log.info(
            "Session finished: %d/%d correct",
            self._result.correct_count, self._result.total_count,
        )
        if self.on_finish is not None:
            self.on_finish(self._result)

    def teardown(self) -> None:
        """Stop the machine; pending delayed calls become no-ops."""
        if not self._alive:
            return
        self._alive = False
        if self._pending_call is not None:
            self._pending_call.cancel()
            self._pending_call = None
        log.debug("Round state machine torn down in state %s", self._state.value)

    # ------------------------------------------------------------------
    # Collaborators (best effort)
    # ------------------------------------------------------------------

    def _announce(self, text: str) -> None:
        if self.audio is None:
            return
        try:
            self.audio.speak(text)
        except Exception as e:
            log.warning("Command announcement failed: %s", e)

    def _play(self, kind: ToneKind) -> None:
        if self.audio is None:
            return
        try:
            self.audio.play_tone(kind)
        except Exception as e:
            log.warning("Feedback tone %s failed: %s", kind.value, e)
