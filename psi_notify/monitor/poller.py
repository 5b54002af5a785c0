"""
Pressure Poll Loop

Checks every monitored resource once per interval and forwards alerts to
an AlertSink. Per-resource failures are contained to that resource and that
cycle; the next cycle is the retry.

SPDX-License-Identifier: BUSL-1.1
"""

import logging
import signal
import threading

from psi_notify.monitor.evaluator import Verdict, check_resource
from psi_notify.monitor.models import MonitorConfig, ResourceKind
from psi_notify.notify import AlertSink

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
MIN_INTERVAL = 0.1


class PressureMonitor:
    """
    Polls pressure files and raises alerts.

    Example:
        monitor = PressureMonitor(build_config(), DesktopNotifier())
        monitor.install_signal_handlers()
        monitor.run()
    """

    def __init__(
        self,
        config: MonitorConfig,
        sink: AlertSink,
        interval: float = DEFAULT_INTERVAL,
    ):
        """
        Initialize the monitor.

        Args:
            config: Resolved resources and thresholds, fixed for the lifetime
            sink: Receives one label per alert
            interval: Seconds between cycles (default: 1.0, min: 0.1)
        """
        self.config = config
        self.sink = sink
        self.interval = max(MIN_INTERVAL, interval)

        self._stop_event = threading.Event()

        self.cycles = 0
        self.alerts_raised = 0
        self.errors = 0

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request the loop to stop after the current cycle."""
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        """Stop cleanly on SIGTERM and SIGINT. Must be called from the main thread."""

        def _handle(signum, _frame):
            logger.info(f"Received {signal.Signals(signum).name}, stopping")
            self.stop()

        signal.signal(signal.SIGTERM, _handle)
        signal.signal(signal.SIGINT, _handle)

    def _dispatch(self, label: str) -> None:
        """Hand an alert to the sink with error handling."""
        try:
            self.sink.raise_alert(label)
            self.alerts_raised += 1
        except Exception as e:
            logger.warning(f"Alert sink error: {e}")

    def run_cycle(self) -> dict[ResourceKind, Verdict]:
        """Check each resource once, in cpu, memory, io order."""
        verdicts = {}
        for resource in self.config:
            verdict = check_resource(resource)
            verdicts[resource.kind] = verdict

            if verdict.is_alert:
                logger.info(f"Alert for {resource.kind.value}: {resource.kind.label}")
                self._dispatch(resource.kind.label)
            elif verdict.is_error:
                self.errors += 1

        self.cycles += 1
        return verdicts

    def run(self, max_cycles: int | None = None) -> None:
        """
        Run cycles until stopped.

        Args:
            max_cycles: Stop after this many cycles (None = until stop())
        """
        monitored = [r.kind.value for r in self.config if r.is_monitored]
        logger.info(
            f"Monitoring {', '.join(monitored) or 'nothing'} every {self.interval}s"
        )

        completed = 0
        while not self._stop_event.is_set():
            self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            self._stop_event.wait(timeout=self.interval)

        logger.debug(f"Poll loop finished after {completed} cycles")
