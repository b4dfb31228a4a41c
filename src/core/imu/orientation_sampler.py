"""
Latest-value cell for the device orientation feed.

The sensor feed is push-based: producers (mock source, UDP receiver)
call ``on_orientation_event`` from their own threads and the game loop
reads ``current`` whenever it needs it. Only the most recent well-formed
sample is kept; there is no history and no queue.

Malformed events (alpha or beta missing, None or not a finite number)
are dropped silently and the previous sample stays current.

Usage:
    sampler = OrientationSampler()
    sampler.attach()
    sampler.on_orientation_event({"alpha": 12.0, "beta": 80.0, "gamma": 1.5})
    if sampler.has_sample:
        sample = sampler.current
"""

import logging
import threading
from typing import Any, Optional

from core.imu.orientation_sample import OrientationSample

log = logging.getLogger("game.sensor")


class OrientationSampler:
    """Hold the single most recent OrientationSample."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Optional[OrientationSample] = None
        self._listening = False

        self.samples_received = 0
        self.samples_dropped = 0

    @property
    def current(self) -> Optional[OrientationSample]:
        """Latest valid sample, or None if none has arrived yet."""
        with self._lock:
            return self._current

    @property
    def has_sample(self) -> bool:
        return self.current is not None

    @property
    def is_listening(self) -> bool:
        return self._listening

    def attach(self) -> None:
        """Start accepting events from the feed."""
        self._listening = True
        log.debug("Orientation feed attached")

    def detach(self) -> None:
        """Stop accepting events; the last sample stays readable."""
        self._listening = False
        log.debug(
            "Orientation feed detached (received=%d, dropped=%d)",
            self.samples_received, self.samples_dropped,
        )

    def on_orientation_event(self, event: Any) -> bool:
        """
        Feed callback for one sensor event.

        Returns:
            True if the event replaced the current sample
        """
        if not self._listening:
            return False

        sample = OrientationSample.from_event(event)
        if sample is None:
            self.samples_dropped += 1
            if self.samples_dropped % 100 == 1:
                log.debug("Dropped malformed orientation event: %r", event)
            return False

        with self._lock:
            self._current = sample
            self.samples_received += 1
        return True
