import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from psi_notify import __version__
from psi_notify.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    Settings,
    build_config,
    load_thresholds,
)
from psi_notify.monitor.evaluator import Verdict, VerdictStatus
from psi_notify.monitor.models import MonitorConfig, ResourceKind
from psi_notify.monitor.poller import PressureMonitor
from psi_notify.notify import AlertSink, DesktopNotifier, LoggingAlertSink

console = Console()
logger = logging.getLogger(__name__)

VERDICT_STYLES = {
    VerdictStatus.ALERT: "bold red",
    VerdictStatus.NORMAL: "green",
    VerdictStatus.ERROR: "yellow",
}


def setup_logging(level: str) -> None:
    """Send diagnostics to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _thresholds_path(args: argparse.Namespace, settings: Settings) -> Path | None:
    # An explicitly named file must exist; the default location is optional.
    if args.config:
        return Path(args.config).expanduser()
    if settings.config_path:
        return settings.config_path
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def print_status(config: MonitorConfig, verdicts: dict[ResourceKind, Verdict]) -> None:
    """Print one row per resource with its source and verdict."""
    table = Table(title="Pressure status", show_header=True, header_style="bold cyan")
    table.add_column("Resource")
    table.add_column("Source")
    table.add_column("Verdict")

    for resource in config:
        verdict = verdicts[resource.kind]
        source = str(resource.path) if resource.path else "[dim]unmonitored[/dim]"
        text = verdict.status.value
        if verdict.reason:
            text = f"{text}: {verdict.reason}"
        style = VERDICT_STYLES[verdict.status]
        table.add_row(resource.kind.value, source, f"[{style}]{text}[/{style}]")

    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="psi-notify",
        description="Alert when CPU, memory or I/O pressure crosses a threshold",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  psi-notify                          # Run until terminated
  psi-notify --once                   # Check once and print a status table
  psi-notify --config thresholds.yaml --interval 5

Environment Variables:
  PSI_NOTIFY_INTERVAL   Seconds between checks (default: 1)
  PSI_NOTIFY_CONFIG     Thresholds file (default: ~/.config/psi-notify/config.yaml)
  PSI_NOTIFY_LOG_LEVEL  Log level (default: INFO)
        """,
    )
    parser.add_argument("--version", "-V", action="version", version=f"psi-notify {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    parser.add_argument("--config", "-c", metavar="PATH", help="YAML thresholds file")
    parser.add_argument("--interval", "-i", type=float, metavar="SECONDS", help="Seconds between checks")
    parser.add_argument(
        "--no-desktop", action="store_true", help="Log alerts instead of sending desktop notifications"
    )
    parser.add_argument("--once", action="store_true", help="Run a single check and print the result")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        setup_logging("INFO")
        logger.error(str(e))
        return 1

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.interval is not None:
        if args.interval <= 0:
            parser.error("--interval must be positive")
        settings.interval = args.interval

    thresholds = None
    path = _thresholds_path(args, settings)
    try:
        if path is not None:
            thresholds = load_thresholds(path)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    config = build_config(thresholds)
    sink: AlertSink = LoggingAlertSink() if args.no_desktop else DesktopNotifier()
    monitor = PressureMonitor(config, sink, interval=settings.interval)

    if args.once:
        print_status(config, monitor.run_cycle())
        return 0

    monitor.install_signal_handlers()
    monitor.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
