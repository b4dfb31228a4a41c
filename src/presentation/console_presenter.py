"""
Console presentation for the orientation drill.

Renders each phase as plain terminal text:
- Calibration: live alpha/beta/gamma readout
- Playing: progress, score, target, remaining-time bar, feedback flag
- Result: score, percentage, rating and per-round history
"""

import sys
import time
from typing import Callable, Optional, TextIO

from core.audio.message_formatter import MessageFormatter
from core.game.result_aggregator import SessionResult
from core.game.round_state_machine import Feedback, RoundState, RoundStateMachine
from core.imu.orientation_sample import OrientationSample
from utils.config import Config

BAR_WIDTH = 30


class ConsolePresenter:
    """Throttled single-line renderer plus full-screen result summary."""

    def __init__(
        self,
        formatter: Optional[MessageFormatter] = None,
        stream: TextIO = sys.stdout,
        refresh_seconds: float = Config.CONSOLE_REFRESH_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.formatter = formatter or MessageFormatter()
        self.stream = stream
        self.refresh_seconds = refresh_seconds
        self.clock = clock
        self._last_render = float("-inf")
        self._last_key = None

    def _write_line(self, text: str) -> None:
        self.stream.write("\r" + text.ljust(72))
        self.stream.flush()

    def _newline(self) -> None:
        self.stream.write("\n")
        self.stream.flush()

    def render_calibration(self, sample: Optional[OrientationSample]) -> str:
        if sample is None:
            line = "ALPHA --°  BETA --°  GAMMA --°   (waiting for sensor...)"
        else:
            line = f"ALPHA {sample.alpha:4.0f}°  BETA {sample.beta:4.0f}°  GAMMA {sample.gamma:4.0f}°"
        self._write_line(line)
        return line

    def render_round(self, machine: RoundStateMachine, force: bool = False) -> Optional[str]:
        """Render the play line; throttled unless the round or feedback changed."""
        key = (machine.round_index, machine.state, machine.feedback)
        now = self.clock()
        if not force and key == self._last_key and now - self._last_render < self.refresh_seconds:
            return None
        if key != self._last_key and self._last_key is not None and self._last_key[0] != key[0]:
            self._newline()
        self._last_key = key
        self._last_render = now

        if machine.state is RoundState.IDLE:
            line = "Get ready..."
            self._write_line(line)
            return line

        total = machine.session_config.total_rounds
        seconds = machine.session_config.seconds_per_round
        filled = int(round(BAR_WIDTH * machine.remaining_seconds / seconds)) if seconds else 0
        bar = "#" * filled + "-" * (BAR_WIDTH - filled)

        flag = ""
        if machine.feedback is Feedback.CORRECT:
            flag = "CORRECT!"
        elif machine.feedback is Feedback.WRONG:
            flag = "TIME UP!"

        line = (
            f"{self.formatter.format_progress(machine.round_index, total)}  "
            f"Score {machine.correct_so_far}  "
            f"{self.formatter.format_direction(machine.target):>5}  "
            f"[{bar}] {self.formatter.format_remaining(machine.remaining_seconds)} {flag}"
        )
        self._write_line(line)
        return line

    def render_result(self, result: SessionResult) -> str:
        lines = [
            "",
            "=" * 40,
            f"Score: {result.correct_count}/{result.total_count} ({result.percentage}%)",
            result.rating,
            "-" * 40,
        ]
        for index, outcome in enumerate(result.history, start=1):
            mark = "OK " if outcome.success else "MISS"
            lines.append(f"  {index:2d}. {self.formatter.format_direction(outcome.direction):<5}  {mark}")
        lines.append("=" * 40)

        text = "\n".join(lines)
        self.stream.write(text + "\n")
        self.stream.flush()
        self._last_key = None
        return text

    def message(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()
