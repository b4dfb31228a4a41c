"""
Message formatter for spoken commands and on-screen labels.

Centralizes the text produced for each direction so the round state
machine, the console presenter and the speech backend agree on wording.
"""

import logging
from typing import Dict, Optional

from core.game.direction import Direction
from utils.config import Config

log = logging.getLogger(__name__)


class MessageFormatter:
    """
    Formats game messages.

    Handles:
    - Direction -> spoken command ("Turn left")
    - Direction -> short display label ("LEFT")
    - Round progress and remaining time strings
    """

    def __init__(
        self,
        command_labels: Optional[Dict[str, str]] = None,
        display_labels: Optional[Dict[str, str]] = None,
    ):
        """Initialize formatter with config-based label mappings."""
        self.command_labels = command_labels or Config.COMMAND_LABELS
        self.display_labels = display_labels or Config.DIRECTION_DISPLAY_LABELS

    def format_command(self, direction: Direction) -> str:
        """
        Spoken command for a target direction.

        Examples:
            >>> formatter.format_command(Direction.LEFT)
            "Turn left"  # From Config.COMMAND_LABELS
        """
        return self.command_labels.get(direction.value, f"Turn {direction.value}")

    def format_direction(self, direction: Optional[Direction]) -> str:
        if direction is None:
            return "--"
        return self.display_labels.get(direction.value, direction.value.upper())

    def format_progress(self, round_index: int, total_rounds: int) -> str:
        return f"Round {round_index + 1}/{total_rounds}"

    def format_remaining(self, seconds: float) -> str:
        return f"{max(0.0, seconds):.1f}s"
