import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.imu.angle_math import normalize_angle


@dataclass(frozen=True)
class OrientationSample:
    """Device orientation reading in degrees"""
    alpha: float           # Compass heading [0, 360)
    beta: float            # Front-back tilt [-180, 180]
    gamma: float = 0.0     # Left-right tilt [-90, 90]

    @classmethod
    def from_event(cls, event: Any) -> Optional["OrientationSample"]:
        """
        Build a sample from a sensor event.

        The event may be a mapping or any object exposing ``alpha``,
        ``beta`` and ``gamma`` attributes. Alpha and beta are required,
        gamma defaults to 0. Returns None for malformed events.
        """
        alpha = _read_axis(event, "alpha")
        beta = _read_axis(event, "beta")
        if alpha is None or beta is None:
            return None

        gamma = _read_axis(event, "gamma")
        return cls(
            alpha=normalize_angle(alpha),
            beta=beta,
            gamma=gamma if gamma is not None else 0.0,
        )


def _read_axis(event: Any, name: str) -> Optional[float]:
    if isinstance(event, Mapping):
        value = event.get(name)
    else:
        value = getattr(event, name, None)

    if value is None or isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value
