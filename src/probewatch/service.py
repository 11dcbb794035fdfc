"""Probewatch service entry point."""

import argparse
import signal
import sys
import types
from pathlib import Path

from probewatch.checks.loader import HealthChecker
from probewatch.exceptions import ConfigurationError, ListenerStartupError
from probewatch.lifecycle import LifecycleCoordinator
from probewatch.logging import LoggingConfig, configure_logging
from probewatch.notifier import LogSink, NotificationHub, StatusSink
from probewatch.scheduler import DEFAULT_INTERVAL, PollingLoop, parse_interval
from probewatch.web import StatusServer, create_app
from probewatch.web.server import DEFAULT_LISTEN_ADDRESS, DEFAULT_SHUTDOWN_GRACE_PERIOD


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Periodic TLS and SMTP health checks with a status page",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="checks.yaml",
        help="Path to the check definitions YAML file (default: checks.yaml)",
    )
    parser.add_argument(
        "--interval",
        type=str,
        default=DEFAULT_INTERVAL,
        help=f"Interval to run checks in, e.g. 90s or 1h30m (default: {DEFAULT_INTERVAL})",
    )
    parser.add_argument(
        "--listen",
        type=str,
        default=DEFAULT_LISTEN_ADDRESS,
        help=f"Address of the status server (default: {DEFAULT_LISTEN_ADDRESS})",
    )
    parser.add_argument(
        "--shutdown-grace",
        type=float,
        default=DEFAULT_SHUTDOWN_GRACE_PERIOD,
        help="Seconds in-flight status requests may take on shutdown, rounded up to whole seconds (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Also write a rotating log file to this directory",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """Run the service until SIGINT or SIGTERM and return the exit code."""
    logger = configure_logging(
        LoggingConfig(
            log_name="probewatch",
            log_level=args.log_level,
            log_dir=args.log_dir,
            enable_file=args.log_dir is not None,
        ),
    )

    try:
        interval = parse_interval(args.interval)

        hub = NotificationHub(logger)
        hub.register(LogSink(logger))
        status_sink = StatusSink()
        hub.register(status_sink)

        checker = HealthChecker.from_file(Path(args.config), hub, logger)

        coordinator = LifecycleCoordinator(logger)
        polling_loop = PollingLoop(checker, interval, logger)
        server = StatusServer(
            create_app(status_sink),
            args.listen,
            coordinator,
            logger,
            shutdown_grace_period=args.shutdown_grace,
            on_failure=polling_loop.stop,
        )
    except (ConfigurationError, ValueError):
        logger.exception("Configuration error")
        return 1

    try:
        server.start()
    except ListenerStartupError:
        logger.exception("Cannot start web listener")
        return 1

    def handle_signal(signum: int, frame: types.FrameType | None) -> None:  # noqa: ARG001
        logger.info(f"Received {signal.Signals(signum).name}")
        polling_loop.stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    failed = False
    try:
        polling_loop.run()
    except Exception:
        logger.exception("Unexpected error in polling loop")
        failed = True
    finally:
        coordinator.shutdown(timeout=server.shutdown_deadline)

    if failed:
        return 2
    return 1 if server.failed else 0


def main() -> None:
    """Execute the main entry point for the probewatch service."""
    args = build_parser().parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
