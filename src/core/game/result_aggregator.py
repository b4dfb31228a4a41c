import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from core.game.direction import Direction


@dataclass(frozen=True)
class RoundOutcome:
    """Outcome of one round, recorded once when it concludes."""
    direction: Direction
    success: bool


# (minimum percentage, comment) checked top to bottom
RATING_TIERS = (
    (100, "Perfect! Flawless sense of direction!"),
    (80, "Excellent! Sharp reactions!"),
    (60, "Nice work!"),
    (0, "Keep practicing!"),
)


@dataclass(frozen=True)
class SessionResult:
    """Summary handed to the presentation layer at the end of a session."""
    correct_count: int
    total_count: int
    history: Tuple[RoundOutcome, ...]

    @property
    def percentage(self) -> int:
        if self.total_count == 0:
            return 0
        # Halves round up
        return int(math.floor(100.0 * self.correct_count / self.total_count + 0.5))

    @property
    def rating(self) -> str:
        percentage = self.percentage
        for minimum, comment in RATING_TIERS:
            if percentage >= minimum:
                return comment
        return RATING_TIERS[-1][1]


def aggregate(history: Iterable[RoundOutcome]) -> SessionResult:
    """Fold an ordered round history into a SessionResult."""
    outcomes = tuple(history)
    return SessionResult(
        correct_count=sum(1 for outcome in outcomes if outcome.success),
        total_count=len(outcomes),
        history=outcomes,
    )
