"""
Calibration: capture the baseline orientation for a session.

Flow:
1. ``request_access()`` resolves the permission gate once and attaches the
   sampler to the feed (unless denied)
2. The presenter shows ``current_reading`` so the player can line up
3. ``confirm()`` freezes the latest sample as the baseline

Confirmation stays disabled until access is usable and at least one valid
sample has arrived. A denial is surfaced through ``error`` and can be
retried by calling ``request_access()`` again.
"""

import logging
from typing import Optional

from core.imu.orientation_sample import OrientationSample
from core.imu.orientation_sampler import OrientationSampler
from core.imu.permission_gate import CapabilityStatus, PermissionGate

log = logging.getLogger("game.sensor")

PERMISSION_DENIED_MESSAGE = "Motion sensor permission is required to play"


class CalibrationError(Exception):
    """Calibration used out of order."""


class CalibrationNotReadyError(CalibrationError):
    """Confirmation requested before access and a first sample exist."""


class CalibrationStep:
    """Permission gate + baseline capture."""

    def __init__(self, sampler: OrientationSampler, permission_gate: PermissionGate) -> None:
        self.sampler = sampler
        self.permission_gate = permission_gate
        self.access: Optional[CapabilityStatus] = None
        self.error = ""
        self._baseline: Optional[OrientationSample] = None

    @property
    def baseline(self) -> Optional[OrientationSample]:
        return self._baseline

    @property
    def confirmed(self) -> bool:
        return self._baseline is not None

    @property
    def access_usable(self) -> bool:
        return self.access is not None and self.access.usable

    @property
    def current_reading(self) -> Optional[OrientationSample]:
        """Latest sample for live display (None until the first one)."""
        if not self.access_usable:
            return None
        return self.sampler.current

    @property
    def can_confirm(self) -> bool:
        return self.access_usable and not self.confirmed and self.sampler.has_sample

    def request_access(self) -> CapabilityStatus:
        """Resolve the permission gate; attach the sampler when allowed."""
        if self.access_usable:
            return self.access

        try:
            status = self.permission_gate.query()
        except Exception as e:
            log.warning("Permission query failed: %s", e)
            status = CapabilityStatus.DENIED

        self.access = status
        if status.usable:
            self.error = ""
            self.sampler.attach()
            log.info("Sensor access %s", status.value)
        else:
            self.error = PERMISSION_DENIED_MESSAGE
            log.warning("Sensor access denied")
        return status

    def confirm(self) -> OrientationSample:
        """Freeze the current sample as the session baseline."""
        if self.confirmed:
            raise CalibrationError("Baseline already set for this session")
        if not self.access_usable:
            raise CalibrationNotReadyError("Sensor access has not been granted")

        sample = self.sampler.current
        if sample is None:
            raise CalibrationNotReadyError("No orientation sample received yet")

        self._baseline = sample
        log.info(
            "Baseline set: alpha=%.1f beta=%.1f gamma=%.1f",
            sample.alpha, sample.beta, sample.gamma,
        )
        return sample
