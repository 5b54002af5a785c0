"""
psi-notify Monitor Module

Pressure source resolution, PSI record parsing and threshold evaluation.
"""

from psi_notify.monitor.evaluator import Verdict, VerdictStatus, check_resource, evaluate
from psi_notify.monitor.models import (
    MonitorConfig,
    PressureReading,
    PressureSample,
    PressureThresholds,
    ResourceConfig,
    ResourceKind,
    TimeWindowThreshold,
)
from psi_notify.monitor.parser import (
    PrematureEOFError,
    PressureOpenError,
    PressureReadError,
    UnparseableLineError,
    read_pressure,
)
from psi_notify.monitor.resolver import resolve_pressure_file

__all__ = [
    "MonitorConfig",
    "PrematureEOFError",
    "PressureOpenError",
    "PressureReadError",
    "PressureReading",
    "PressureSample",
    "PressureThresholds",
    "ResourceConfig",
    "ResourceKind",
    "TimeWindowThreshold",
    "UnparseableLineError",
    "Verdict",
    "VerdictStatus",
    "check_resource",
    "evaluate",
    "read_pressure",
    "resolve_pressure_file",
]
