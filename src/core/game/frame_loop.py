"""
Cooperative frame loop driving the game on a single thread.

Plays the role of the display refresh signal: tick callbacks run once per
frame, and one-shot delayed callbacks (the settle pause between rounds,
the start delay) are fired by the same loop. Nothing here runs in
parallel, so tick handlers never overlap each other or a delayed call.

Time is read from an injected clock so tests can drive the loop by
advancing a fake clock and calling ``step()``.

Architecture:
    run() -> step() -> due ScheduledCalls (by due time, then insertion order)
                    -> every tick callback
          -> sleep until next frame
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

log = logging.getLogger("game.rounds")


class ScheduledCall:
    """Handle for a delayed callback; ``cancel()`` before it fires to drop it."""

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class FrameLoop:
    """Per-frame ticks plus one-shot timers on the calling thread."""

    def __init__(
        self,
        fps: int = 60,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self.fps = fps
        self.clock = clock
        self.sleep = sleep

        self._timers: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()
        self._ticks: List[Callable[[], None]] = []
        self._running = False
        self.frames = 0

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.fps

    @property
    def running(self) -> bool:
        return self._running

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self.clock() + max(0.0, delay), callback)
        heapq.heappush(self._timers, (call.due, next(self._counter), call))
        return call

    def add_tick(self, callback: Callable[[], None]) -> None:
        if callback not in self._ticks:
            self._ticks.append(callback)

    def remove_tick(self, callback: Callable[[], None]) -> None:
        try:
            self._ticks.remove(callback)
        except ValueError:
            pass

    def pending_calls(self) -> int:
        return sum(1 for _, _, call in self._timers if call.pending)

    def step(self) -> None:
        """Run one frame: due timers first, then tick callbacks."""
        now = self.clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, call = heapq.heappop(self._timers)
            if call.cancelled:
                continue
            call.fired = True
            call.callback()

        # Copy: a tick may register or remove ticks
        for tick in list(self._ticks):
            tick()
        self.frames += 1

    def run(self, until: Optional[Callable[[], bool]] = None) -> None:
        """Step at ``fps`` until ``stop()`` is called or ``until()`` is true."""
        self._running = True
        frame_interval = self.frame_interval
        try:
            while self._running:
                loop_start = self.clock()
                self.step()
                if until is not None and until():
                    break

                # Sleep to maintain target FPS
                elapsed = self.clock() - loop_start
                sleep_time = max(0.0, frame_interval - elapsed)
                if sleep_time > 0:
                    self.sleep(sleep_time)
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False
