"""CLI entry point for the deepmail backend."""

import argparse
import logging
import sys

import structlog

from deepmail.accounts.config import ServerProtocol, derive_ports
from deepmail.exceptions import ConfigError


def _configure_logging(level: str) -> None:
    """Route stdlib logging and structlog output to the console at ``level``."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deepmail",
        description="DeepMail backend - form engines and auto-reply generation",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    daemon_parser = subparsers.add_parser(
        "daemon",
        help="Manage the backend daemon",
    )
    daemon_parser.add_argument(
        "action",
        choices=["start", "stop", "status", "run"],
        help="Daemon action (run = foreground mode for debugging)",
    )

    ports_parser = subparsers.add_parser(
        "ports",
        help="Show the standard ports for a server protocol",
    )
    ports_parser.add_argument(
        "--protocol",
        type=ServerProtocol,
        default=ServerProtocol.IMAP,
        help="Incoming server protocol: IMAP, POP3 or Exchange (default: IMAP)",
    )
    ports_parser.add_argument(
        "--no-ssl",
        dest="ssl_enabled",
        action="store_false",
        help="Use the ports for connections without SSL",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "ports":
        ports = derive_ports(args.protocol, args.ssl_enabled)
        print(f"Incoming port: {ports.incoming_port}")
        print(f"Outgoing port: {ports.outgoing_port}")
        return 0

    if args.command == "daemon":
        try:
            return _handle_daemon(args.action)
        except ConfigError as e:
            print(f"✗ {e}", file=sys.stderr)
            return 1

    return 0


def _handle_daemon(action: str) -> int:
    """Handle daemon subcommand."""
    from deepmail.daemon import daemon_status, start_daemon, stop_daemon
    from deepmail.service import get_settings

    if action in ("start", "run"):
        _configure_logging(get_settings().log_level)

    if action == "start":
        print("Starting daemon...")
        import os

        pid = os.fork()
        if pid > 0:
            # Parent: wait a moment and check status
            import time

            time.sleep(2)
            status = daemon_status()
            if status["running"]:
                print(f"✓ Daemon started (PID: {status['pid']})")
                return 0
            print("✗ Daemon failed to start")
            return 1

        start_daemon(foreground=False)
        return 0

    if action == "stop":
        if stop_daemon():
            print("✓ Daemon stopped")
        else:
            print("Daemon was not running")
        return 0

    if action == "status":
        status = daemon_status()
        if status["running"]:
            responsive = "✓ responsive" if status["responsive"] else "✗ not responding"
            started = status["started_at"].astimezone().strftime("%Y-%m-%d %H:%M:%S")
            print(f"Daemon is running (PID: {status['pid']}, since {started}) - {responsive}")
        else:
            print("Daemon is not running")
        return 0

    if action == "run":
        print("Running daemon in foreground (Ctrl+C to stop)...")
        start_daemon(foreground=True)
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
