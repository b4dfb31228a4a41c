"""
Sensor permission gate.

Some platforms need explicit consent before the orientation feed can be
read. The gate is queried once when calibration starts and answers with a
tri-state result instead of letting callers probe platform objects:

- 'available': no consent needed, the feed can be used directly
- 'granted':   consent was requested and given
- 'denied':    consent was refused; calibration is blocked until a retry
"""

import logging
from enum import Enum
from typing import Callable

log = logging.getLogger("game.sensor")


class CapabilityStatus(Enum):
    AVAILABLE = "available"
    GRANTED = "granted"
    DENIED = "denied"

    @property
    def usable(self) -> bool:
        return self is not CapabilityStatus.DENIED


class PermissionGate:
    """Base gate. Subclasses implement ``query``."""

    def query(self) -> CapabilityStatus:
        raise NotImplementedError


class StaticPermissionGate(PermissionGate):
    """Gate with a fixed answer (mock and network feeds need no consent)."""

    def __init__(self, status: CapabilityStatus = CapabilityStatus.AVAILABLE) -> None:
        self.status = status

    def query(self) -> CapabilityStatus:
        return self.status


class PromptPermissionGate(PermissionGate):
    """Ask the user through an injected yes/no prompt (``input`` in the CLI)."""

    def __init__(
        self,
        prompt: Callable[[str], str] = input,
        question: str = "Allow the game to read your phone's motion sensor? (y/n): ",
    ) -> None:
        self.prompt = prompt
        self.question = question

    def query(self) -> CapabilityStatus:
        try:
            answer = self.prompt(self.question)
        except EOFError:
            log.warning("Permission prompt closed without an answer")
            return CapabilityStatus.DENIED

        if str(answer).strip().lower() in ("y", "yes"):
            return CapabilityStatus.GRANTED
        return CapabilityStatus.DENIED
