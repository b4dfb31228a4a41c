"""Angle helpers for compass headings expressed in degrees."""


def angle_difference(target: float, current: float) -> float:
    """
    Signed shortest angular distance from ``target`` to ``current``.

    Result is in [-180, 180). The half-turn edge is always reported
    as -180, so ``abs()`` of the result is symmetric for both turn senses.

    Examples:
        >>> angle_difference(350, 10)
        20.0
        >>> angle_difference(10, 350)
        -20.0
    """
    diff = float((current - target + 180.0) % 360.0 - 180.0)
    # Float modulo of a tiny negative value rounds up to 360.0
    if diff >= 180.0:
        diff -= 360.0
    return diff


def normalize_angle(angle: float) -> float:
    """Map any real angle to [0, 360)."""
    normalized = float(angle % 360.0)
    if normalized >= 360.0:
        normalized -= 360.0
    return normalized
