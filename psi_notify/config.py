"""Configuration for psi-notify.

Thresholds come from built-in defaults, optionally overridden by a YAML file.
Runtime settings (poll interval, config path, log level) come from the
environment, with ``.env`` files loaded through python-dotenv.

Example thresholds file::

    cpu:
      avg10: {some: 0.1}
    memory:
      avg60: {some: 0.1, full: 5}
    io:
      avg300: {full: 10}
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from psi_notify.monitor.models import (
    PRESSURE_TYPES,
    MonitorConfig,
    PressureThresholds,
    ResourceConfig,
    ResourceKind,
    TimeWindowThreshold,
)
from psi_notify.monitor.resolver import resolve_pressure_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "psi-notify" / "config.yaml"

DEFAULT_THRESHOLDS: dict[ResourceKind, PressureThresholds] = {
    ResourceKind.CPU: PressureThresholds(ten=TimeWindowThreshold(some=0.1)),
    ResourceKind.MEMORY: PressureThresholds(sixty=TimeWindowThreshold(some=0.1)),
    ResourceKind.IO: PressureThresholds(),
}

# YAML window keys match the field names in the kernel's records.
WINDOW_KEYS = {"avg10": "ten", "avg60": "sixty", "avg300": "three_hundred"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Invalid configuration file or environment setting."""


def _parse_window(kind: str, window: str, data: Any) -> TimeWindowThreshold:
    where = f"{kind}.{window}"
    if data is None:
        return TimeWindowThreshold()
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected a mapping of some/full, got {data!r}")

    unknown = set(data) - set(PRESSURE_TYPES)
    if unknown:
        raise ConfigError(f"{where}: unknown keys {sorted(map(str, unknown))}")
    if kind == ResourceKind.CPU.value and data.get("full") is not None:
        raise ConfigError(f"{where}: cpu pressure has no 'full' line")

    try:
        return TimeWindowThreshold(some=data.get("some"), full=data.get("full"))
    except ValueError as e:
        raise ConfigError(f"{where}: {e}") from e


def parse_thresholds(data: Any) -> dict[ResourceKind, PressureThresholds]:
    """
    Build per-resource thresholds from a parsed document.

    Resources missing from ``data`` keep their defaults; windows missing
    from a listed resource are unset.

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping of resources, got {type(data).__name__}")

    kinds = {kind.value: kind for kind in ResourceKind}
    unknown = set(data) - set(kinds)
    if unknown:
        raise ConfigError(f"Unknown resources {sorted(map(str, unknown))}; expected {sorted(kinds)}")

    thresholds = dict(DEFAULT_THRESHOLDS)
    for name, windows in data.items():
        if windows is None:
            windows = {}
        if not isinstance(windows, dict):
            raise ConfigError(f"{name}: expected a mapping of windows, got {windows!r}")
        unknown = set(windows) - set(WINDOW_KEYS)
        if unknown:
            raise ConfigError(f"{name}: unknown windows {sorted(map(str, unknown))}")

        thresholds[kinds[name]] = PressureThresholds(
            **{
                field_name: _parse_window(name, key, windows.get(key))
                for key, field_name in WINDOW_KEYS.items()
            }
        )
    return thresholds


def load_thresholds(path: Path | str) -> dict[ResourceKind, PressureThresholds]:
    """Load thresholds from a YAML file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    logger.debug(f"Loaded thresholds from {path}")
    return parse_thresholds(data)


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        interval: Seconds between poll cycles
        config_path: Thresholds file; used only if it exists unless set explicitly
        log_level: Name of the root log level
    """
    interval: float = 1.0
    config_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read PSI_NOTIFY_* variables, loading a .env file first if present."""
        load_dotenv()

        settings = cls()
        raw_interval = os.environ.get("PSI_NOTIFY_INTERVAL")
        if raw_interval:
            try:
                settings.interval = float(raw_interval)
            except ValueError:
                raise ConfigError(f"PSI_NOTIFY_INTERVAL must be a number, got {raw_interval!r}") from None
            if settings.interval <= 0:
                raise ConfigError("PSI_NOTIFY_INTERVAL must be positive")

        raw_path = os.environ.get("PSI_NOTIFY_CONFIG")
        if raw_path:
            settings.config_path = Path(raw_path).expanduser()

        log_level = os.environ.get("PSI_NOTIFY_LOG_LEVEL", settings.log_level).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"PSI_NOTIFY_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        settings.log_level = log_level
        return settings


def build_config(
    thresholds: dict[ResourceKind, PressureThresholds] | None = None,
    resolve: Callable[[ResourceKind], Path | None] | None = None,
) -> MonitorConfig:
    """
    Resolve every resource's source once and bind its thresholds.

    Args:
        thresholds: Per-resource thresholds (default: DEFAULT_THRESHOLDS);
                    resources not listed get the defaults
        resolve: Source resolver (default: resolve_pressure_file)

    Returns:
        A fully populated MonitorConfig
    """
    resolve = resolve or resolve_pressure_file
    merged = dict(DEFAULT_THRESHOLDS)
    if thresholds:
        merged.update(thresholds)

    resources = {
        kind.value: ResourceConfig(kind=kind, path=resolve(kind), thresholds=merged[kind])
        for kind in ResourceKind
    }
    return MonitorConfig(**resources)
