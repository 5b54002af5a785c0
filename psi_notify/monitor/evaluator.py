"""
Threshold Evaluator

Compares pressure samples against per-window thresholds and produces a
Verdict for one resource per poll.

SPDX-License-Identifier: BUSL-1.1
"""

import logging
from dataclasses import dataclass
from enum import Enum

from psi_notify.monitor.models import PressureSample, PressureThresholds, ResourceConfig
from psi_notify.monitor.parser import PressureReadError, read_pressure

logger = logging.getLogger(__name__)


class VerdictStatus(Enum):
    ALERT = "alert"
    NORMAL = "normal"
    ERROR = "error"


@dataclass(frozen=True)
class Verdict:
    """Outcome of evaluating one resource. ``reason`` is set for errors only."""

    status: VerdictStatus
    reason: str | None = None

    @classmethod
    def alert(cls) -> "Verdict":
        return cls(VerdictStatus.ALERT)

    @classmethod
    def normal(cls) -> "Verdict":
        return cls(VerdictStatus.NORMAL)

    @classmethod
    def error(cls, reason: str) -> "Verdict":
        return cls(VerdictStatus.ERROR, reason)

    @property
    def is_alert(self) -> bool:
        return self.status is VerdictStatus.ALERT

    @property
    def is_error(self) -> bool:
        return self.status is VerdictStatus.ERROR


def _is_set(threshold: float | None) -> bool:
    # Zero keeps its historical meaning of "disabled".
    return threshold is not None and threshold != 0


def exceeds(sample: PressureSample, thresholds: PressureThresholds, pressure_type: str) -> bool:
    """
    Check whether any configured window is strictly exceeded.

    Args:
        sample: Averages from one pressure line
        thresholds: Per-window thresholds for the resource
        pressure_type: "some" or "full"

    Returns:
        True if a set, non-zero threshold is below the sample value
    """
    for window, value in zip(thresholds.windows(), sample.values()):
        limit = window.get(pressure_type)
        if _is_set(limit) and value > limit:
            return True
    return False


def evaluate(
    thresholds: PressureThresholds,
    some: PressureSample,
    full: PressureSample | None = None,
) -> Verdict:
    """Evaluate the ``some`` sample, then ``full`` if one was read."""
    if exceeds(some, thresholds, "some"):
        return Verdict.alert()
    if full is not None and exceeds(full, thresholds, "full"):
        return Verdict.alert()
    return Verdict.normal()


def check_resource(resource: ResourceConfig) -> Verdict:
    """
    Read and evaluate one resource.

    Unmonitored resources are always NORMAL. Read and parse failures are
    logged and returned as an ERROR verdict; they never raise.
    """
    if resource.path is None:
        return Verdict.normal()

    try:
        reading = read_pressure(resource.path, resource.has_full)
    except PressureReadError as e:
        logger.error(f"{resource.kind.value} pressure check failed: {e}")
        return Verdict.error(str(e))

    return evaluate(resource.thresholds, reading.some, reading.full)
