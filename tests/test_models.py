"""Tests for the psi-notify data model."""

from pathlib import Path

import pytest

from psi_notify.monitor.models import (
    MonitorConfig,
    PressureSample,
    PressureThresholds,
    ResourceConfig,
    ResourceKind,
    TimeWindowThreshold,
)


class TestResourceKind:
    """Tests for ResourceKind."""

    def test_only_cpu_lacks_full(self):
        assert not ResourceKind.CPU.has_full
        assert ResourceKind.MEMORY.has_full
        assert ResourceKind.IO.has_full

    def test_labels(self):
        assert ResourceKind.CPU.label == "CPU pressure high"
        assert ResourceKind.MEMORY.label == "Memory pressure high"
        assert ResourceKind.IO.label == "I/O pressure high"


class TestTimeWindowThreshold:
    """Tests for TimeWindowThreshold."""

    def test_defaults_unset(self):
        window = TimeWindowThreshold()
        assert window.some is None
        assert window.full is None

    def test_get(self):
        window = TimeWindowThreshold(some=1.5, full=2.5)
        assert window.get("some") == pytest.approx(1.5)
        assert window.get("full") == pytest.approx(2.5)

    def test_get_unknown_type(self):
        with pytest.raises(ValueError):
            TimeWindowThreshold().get("partial")

    @pytest.mark.parametrize("value", [-0.1, 100.1, "10", True])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(ValueError):
            TimeWindowThreshold(some=value)

    def test_accepts_bounds(self):
        window = TimeWindowThreshold(some=0, full=100)
        assert window.some == 0
        assert window.full == 100

    def test_immutable(self):
        window = TimeWindowThreshold(some=1.0)
        with pytest.raises(AttributeError):
            window.some = 2.0


class TestPressureSample:
    """Tests for PressureSample."""

    def test_values_order(self):
        sample = PressureSample(ten=1.0, sixty=2.0, three_hundred=3.0)
        assert sample.values() == (1.0, 2.0, 3.0)

    def test_may_exceed_100(self):
        sample = PressureSample(ten=100.5, sixty=0.0, three_hundred=0.0)
        assert sample.ten == pytest.approx(100.5)

    @pytest.mark.parametrize("value", [-1.0, float("nan"), float("inf")])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            PressureSample(ten=value, sixty=0.0, three_hundred=0.0)


class TestMonitorConfig:
    """Tests for MonitorConfig."""

    def _config(self) -> MonitorConfig:
        return MonitorConfig(
            cpu=ResourceConfig(ResourceKind.CPU, Path("/proc/pressure/cpu")),
            memory=ResourceConfig(ResourceKind.MEMORY),
            io=ResourceConfig(ResourceKind.IO),
        )

    def test_iterates_in_order(self):
        kinds = [r.kind for r in self._config()]
        assert kinds == [ResourceKind.CPU, ResourceKind.MEMORY, ResourceKind.IO]

    def test_get(self):
        config = self._config()
        assert config.get(ResourceKind.CPU).path == Path("/proc/pressure/cpu")
        assert not config.get(ResourceKind.MEMORY).is_monitored

    def test_rejects_mismatched_slot(self):
        with pytest.raises(ValueError):
            MonitorConfig(
                cpu=ResourceConfig(ResourceKind.MEMORY),
                memory=ResourceConfig(ResourceKind.MEMORY),
                io=ResourceConfig(ResourceKind.IO),
            )

    def test_resource_defaults(self):
        resource = ResourceConfig(ResourceKind.IO)
        assert resource.path is None
        assert resource.thresholds == PressureThresholds()
        assert resource.has_full
