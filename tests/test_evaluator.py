"""Tests for threshold evaluation."""

import itertools
from pathlib import Path

import pytest

from psi_notify.monitor.evaluator import (
    Verdict,
    VerdictStatus,
    check_resource,
    evaluate,
    exceeds,
)
from psi_notify.monitor.models import (
    PressureSample,
    PressureThresholds,
    ResourceConfig,
    ResourceKind,
    TimeWindowThreshold,
)

ZERO = PressureSample(ten=0.0, sixty=0.0, three_hundred=0.0)


def _sample(ten=0.0, sixty=0.0, three_hundred=0.0) -> PressureSample:
    return PressureSample(ten=ten, sixty=sixty, three_hundred=three_hundred)


class TestVerdict:
    """Tests for Verdict constructors."""

    def test_alert(self):
        verdict = Verdict.alert()
        assert verdict.is_alert
        assert verdict.reason is None

    def test_normal(self):
        verdict = Verdict.normal()
        assert verdict.status is VerdictStatus.NORMAL
        assert not verdict.is_alert
        assert not verdict.is_error

    def test_error_carries_reason(self):
        verdict = Verdict.error("boom")
        assert verdict.is_error
        assert verdict.reason == "boom"


class TestExceeds:
    """Tests for exceeds."""

    def test_unset_never_triggers(self):
        sample = _sample(100.0, 100.0, 100.0)
        assert not exceeds(sample, PressureThresholds(), "some")
        assert not exceeds(sample, PressureThresholds(), "full")

    def test_zero_is_disabled(self):
        thresholds = PressureThresholds(ten=TimeWindowThreshold(some=0))
        assert not exceeds(_sample(ten=50.0), thresholds, "some")

    def test_equal_does_not_trigger(self):
        thresholds = PressureThresholds(sixty=TimeWindowThreshold(some=3.0))
        assert not exceeds(_sample(sixty=3.0), thresholds, "some")

    def test_strictly_greater_triggers(self):
        thresholds = PressureThresholds(three_hundred=TimeWindowThreshold(full=1.0))
        assert exceeds(_sample(three_hundred=1.01), thresholds, "full")

    def test_windows_are_independent(self):
        thresholds = PressureThresholds(ten=TimeWindowThreshold(some=10.0))
        # A high 60s value does not count against the 10s threshold.
        assert not exceeds(_sample(ten=5.0, sixty=50.0), thresholds, "some")

    def test_type_is_selected(self):
        thresholds = PressureThresholds(ten=TimeWindowThreshold(some=10.0))
        assert not exceeds(_sample(ten=50.0), thresholds, "full")

    @pytest.mark.parametrize("window", ["ten", "sixty", "three_hundred"])
    def test_each_window(self, window):
        thresholds = PressureThresholds(**{window: TimeWindowThreshold(some=1.0)})
        assert exceeds(_sample(**{window: 2.0}), thresholds, "some")
        assert not exceeds(_sample(**{window: 0.5}), thresholds, "some")


class TestEvaluate:
    """Tests for evaluate."""

    def test_memory_scenario(self):
        thresholds = PressureThresholds(ten=TimeWindowThreshold(some=0.1))

        assert evaluate(thresholds, _sample(ten=50.0)).is_alert
        assert evaluate(thresholds, _sample(ten=0.05)) == Verdict.normal()

    def test_full_checked_when_some_is_calm(self):
        thresholds = PressureThresholds(sixty=TimeWindowThreshold(some=10.0, full=1.0))

        assert evaluate(thresholds, ZERO, _sample(sixty=2.0)).is_alert

    def test_full_ignored_when_absent(self):
        thresholds = PressureThresholds(sixty=TimeWindowThreshold(full=1.0))

        assert evaluate(thresholds, _sample(sixty=50.0)) == Verdict.normal()

    def test_nothing_triggers(self):
        thresholds = PressureThresholds(
            ten=TimeWindowThreshold(some=10.0, full=10.0),
            sixty=TimeWindowThreshold(some=10.0, full=10.0),
            three_hundred=TimeWindowThreshold(some=10.0, full=10.0),
        )
        assert evaluate(thresholds, _sample(10.0, 10.0, 10.0), _sample(9.0, 9.0, 9.0)) == Verdict.normal()

    def test_alert_iff_any_window_exceeded(self):
        thresholds = PressureThresholds(
            ten=TimeWindowThreshold(some=5.0, full=2.0),
            sixty=TimeWindowThreshold(some=3.0),
            three_hundred=TimeWindowThreshold(full=1.0),
        )
        values = (0.0, 1.0, 2.0, 3.0, 5.0, 6.0)
        for ten, sixty, three_hundred in itertools.product(values, repeat=3):
            some = _sample(ten, sixty, three_hundred)
            full = _sample(three_hundred, sixty, ten)
            expected = ten > 5.0 or sixty > 3.0 or three_hundred > 2.0 or ten > 1.0
            assert evaluate(thresholds, some, full).is_alert == expected


class TestCheckResource:
    """Tests for check_resource."""

    def test_unbound_is_normal(self):
        resource = ResourceConfig(
            ResourceKind.MEMORY,
            path=None,
            thresholds=PressureThresholds(ten=TimeWindowThreshold(some=0.1)),
        )
        assert check_resource(resource) == Verdict.normal()

    def test_alert_from_file(self, pressure_file):
        path = pressure_file(
            "some avg10=50.00 avg60=0.00 avg300=0.00 total=0\n",
            "full avg10=0.00 avg60=0.00 avg300=0.00 total=0\n",
        )
        resource = ResourceConfig(
            ResourceKind.MEMORY, path, PressureThresholds(ten=TimeWindowThreshold(some=0.1))
        )

        assert check_resource(resource).is_alert

    def test_full_alert_from_file(self, pressure_file):
        path = pressure_file(
            "some avg10=0.00 avg60=0.00 avg300=0.00 total=0\n",
            "full avg10=0.00 avg60=4.00 avg300=0.00 total=0\n",
            name="io",
        )
        resource = ResourceConfig(ResourceKind.IO, path, PressureThresholds(sixty=TimeWindowThreshold(full=2.0)))

        assert check_resource(resource).is_alert

    def test_cpu_reads_only_some(self, pressure_file):
        path = pressure_file("some avg10=0.00 avg60=0.00 avg300=0.00 total=0\n", name="cpu")
        resource = ResourceConfig(ResourceKind.CPU, path, PressureThresholds(ten=TimeWindowThreshold(some=0.1)))

        assert check_resource(resource) == Verdict.normal()

    def test_missing_full_line_is_error(self, pressure_file):
        path = pressure_file("some avg10=0.00 avg60=0.00 avg300=0.00 total=0\n")
        resource = ResourceConfig(ResourceKind.MEMORY, path)

        verdict = check_resource(resource)

        assert verdict.is_error
        assert "premature end of input" in verdict.reason

    def test_vanished_file_is_error(self, tmp_path):
        resource = ResourceConfig(ResourceKind.IO, Path(tmp_path / "io.pressure"))

        verdict = check_resource(resource)

        assert verdict.is_error
        assert "open failed" in verdict.reason

    def test_malformed_full_line_is_error_even_if_some_alerts(self, pressure_file):
        # The whole record is parsed before evaluation, so a required full
        # line that is broken always wins over an alerting some line.
        path = pressure_file("some avg10=50.00 avg60=0.00 avg300=0.00 total=0\n", "full junk\n")
        resource = ResourceConfig(
            ResourceKind.MEMORY, path, PressureThresholds(ten=TimeWindowThreshold(some=0.1))
        )

        assert check_resource(resource).is_error
