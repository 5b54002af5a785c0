"""
psi-notify Alert Sinks.
Delivers pressure alerts to the desktop, with Smart DND (Do Not Disturb) mode.
"""
import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# Configuration
APP_NAME = "psi-notify"
CONFIG_DIR = Path.home() / ".psi-notify"
CONFIG_FILE = CONFIG_DIR / "notify_config.json"


class AlertSink(Protocol):
    """Anything that can raise an alert with a plain-text label."""

    def raise_alert(self, label: str) -> None:
        ...


class LoggingAlertSink:
    """Reports alerts on the log instead of the desktop."""

    def raise_alert(self, label: str) -> None:
        logger.warning(label)


@dataclass
class NotifyConfig:
    enabled: bool = True
    dnd_enabled: bool = False
    dnd_start: str = "22:00"
    dnd_end: str = "08:00"


class DesktopNotifier:
    """Sends alerts through notify-send. Delivery is best effort and never retried."""

    def __init__(self, config: NotifyConfig | None = None):
        self.config = config or self._load_config()

    def _load_config(self) -> NotifyConfig:
        if not CONFIG_FILE.exists():
            return NotifyConfig()
        try:
            with open(CONFIG_FILE) as f:
                data = json.load(f)
                return NotifyConfig(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable {CONFIG_FILE}: {e}")
            return NotifyConfig()

    def _is_dnd_active(self) -> bool:
        if not self.config.dnd_enabled:
            return False

        now = datetime.now().time()
        try:
            start = datetime.strptime(self.config.dnd_start, "%H:%M").time()
            end = datetime.strptime(self.config.dnd_end, "%H:%M").time()
        except ValueError:
            return False  # Invalid config, disable DND logic

        if start < end:
            return start <= now <= end
        else:  # Over midnight (e.g. 22:00 to 08:00)
            return now >= start or now <= end

    def send(self, message: str) -> bool:
        """
        Send a desktop notification via notify-send.
        Returns True if sent, False if suppressed or failed.
        """
        if not self.config.enabled:
            return False

        if self._is_dnd_active():
            logger.debug(f"DND active, suppressed: {message}")
            return False

        notify_bin = shutil.which('notify-send')
        if not notify_bin:
            # Fallback to console if binary missing
            print(f"[{APP_NAME}] {message}")
            return True

        try:
            subprocess.run(
                [notify_bin, message, "-u", "normal", "-a", APP_NAME],
                check=True,
                capture_output=True,
            )
            return True
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning(f"notify-send failed: {e}")
            return False

    def raise_alert(self, label: str) -> None:
        self.send(label)
