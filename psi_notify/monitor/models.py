"""
Data model for the PSI monitor.

Thresholds and resource bindings are built once at startup and never mutated.
Samples and readings are produced fresh by every poll.

SPDX-License-Identifier: BUSL-1.1
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ResourceKind(Enum):
    """Resources exposed by the kernel's pressure stall accounting."""

    CPU = "cpu"
    MEMORY = "memory"
    IO = "io"

    @property
    def has_full(self) -> bool:
        """Whether the pressure record carries a second ``full`` line."""
        return self is not ResourceKind.CPU

    @property
    def label(self) -> str:
        """Human-readable alert text for this resource."""
        return _LABELS[self]


_LABELS = {
    ResourceKind.CPU: "CPU pressure high",
    ResourceKind.MEMORY: "Memory pressure high",
    ResourceKind.IO: "I/O pressure high",
}

PRESSURE_TYPES = ("some", "full")


def _check_percentage(name: str, value: float | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} threshold must be a number, got {value!r}")
    if not 0 <= value <= 100:
        raise ValueError(f"{name} threshold must be within [0, 100], got {value}")


@dataclass(frozen=True)
class TimeWindowThreshold:
    """Percentage ceilings for one averaging window. None means unset."""

    some: float | None = None
    full: float | None = None

    def __post_init__(self):
        _check_percentage("some", self.some)
        _check_percentage("full", self.full)

    def get(self, pressure_type: str) -> float | None:
        if pressure_type not in PRESSURE_TYPES:
            raise ValueError(f"Unknown pressure type: {pressure_type}")
        return getattr(self, pressure_type)


@dataclass(frozen=True)
class PressureThresholds:
    """Thresholds keyed by the 10s, 60s and 300s averaging windows."""

    ten: TimeWindowThreshold = field(default_factory=TimeWindowThreshold)
    sixty: TimeWindowThreshold = field(default_factory=TimeWindowThreshold)
    three_hundred: TimeWindowThreshold = field(default_factory=TimeWindowThreshold)

    def windows(self) -> tuple[TimeWindowThreshold, TimeWindowThreshold, TimeWindowThreshold]:
        return (self.ten, self.sixty, self.three_hundred)


@dataclass(frozen=True)
class ResourceConfig:
    """A monitored resource with its bound metrics source, if any."""

    kind: ResourceKind
    path: Path | None = None
    thresholds: PressureThresholds = field(default_factory=PressureThresholds)

    @property
    def has_full(self) -> bool:
        return self.kind.has_full

    @property
    def is_monitored(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class MonitorConfig:
    """The full set of monitored resources, checked in cpu, memory, io order."""

    cpu: ResourceConfig
    memory: ResourceConfig
    io: ResourceConfig

    def __post_init__(self):
        for kind in ResourceKind:
            resource = getattr(self, kind.value)
            if resource.kind is not kind:
                raise ValueError(f"{kind.value} slot holds a {resource.kind.value} resource")

    def __iter__(self) -> Iterator[ResourceConfig]:
        return iter((self.cpu, self.memory, self.io))

    def get(self, kind: ResourceKind) -> ResourceConfig:
        return getattr(self, kind.value)


@dataclass(frozen=True)
class PressureSample:
    """Stall percentages over the 10s, 60s and 300s windows."""

    ten: float
    sixty: float
    three_hundred: float

    def __post_init__(self):
        for value in self.values():
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Pressure values must be finite and non-negative, got {value}")

    def values(self) -> tuple[float, float, float]:
        return (self.ten, self.sixty, self.three_hundred)


@dataclass(frozen=True)
class PressureReading:
    """One read of a pressure file: the ``some`` line and, when requested, ``full``."""

    some: PressureSample
    full: PressureSample | None = None
