"""
Direction matching against a calibrated baseline.

Decides whether the device pose satisfies a target direction using two
deltas measured from the baseline:

- heading delta: signed shortest difference of compass angle (wrapped)
- tilt delta:    plain difference of front-back tilt (not wrapped; tilt is
                 assumed not to cross the +/-180 edge during play)

Rules (T = heading tolerance, default 40 deg; K = tilt threshold, default 30 deg):
- FRONT: |heading| < T and |tilt| < T
- BACK:  ||heading| - 180| < T
- LEFT:  90 - T < heading < 90 + T
- RIGHT: -90 - T < heading < -90 + T
- UP:    tilt > K
- DOWN:  tilt < -K

Up/Down use their own threshold. Both values come from ClassifierConfig.
"""

from typing import Optional, Tuple

from core.game.direction import Direction
from core.imu.angle_math import angle_difference
from core.imu.orientation_sample import OrientationSample
from utils.config_sections import ClassifierConfig, load_classifier_config


class DirectionClassifier:
    """Boolean alignment check for one target direction."""

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        self.config = config or load_classifier_config()

    @property
    def tolerance(self) -> float:
        return self.config.tolerance_deg

    @property
    def tilt_threshold(self) -> float:
        return self.config.tilt_threshold_deg

    @staticmethod
    def deltas(baseline: OrientationSample, current: OrientationSample) -> Tuple[float, float]:
        """Return (heading_delta, tilt_delta) of current relative to baseline."""
        heading_delta = angle_difference(baseline.alpha, current.alpha)
        tilt_delta = current.beta - baseline.beta
        return heading_delta, tilt_delta

    def matches(
        self,
        baseline: OrientationSample,
        current: OrientationSample,
        target: Direction,
    ) -> bool:
        heading_delta, tilt_delta = self.deltas(baseline, current)
        tol = self.tolerance

        if target is Direction.FRONT:
            return abs(heading_delta) < tol and abs(tilt_delta) < tol
        if target is Direction.BACK:
            return abs(abs(heading_delta) - 180.0) < tol
        if target is Direction.LEFT:
            return (90.0 - tol) < heading_delta < (90.0 + tol)
        if target is Direction.RIGHT:
            return (-90.0 - tol) < heading_delta < (-90.0 + tol)
        if target is Direction.UP:
            return tilt_delta > self.tilt_threshold
        if target is Direction.DOWN:
            return tilt_delta < -self.tilt_threshold
        return False
