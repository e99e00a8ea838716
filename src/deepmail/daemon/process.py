"""Lifecycle of the background daemon.

A running daemon is described by a JSON record in the runtime directory
holding its PID, socket path and start time. The record is the single source
of truth for start, stop and status:

- no record, or a record whose process is gone: not running, and start
  cleans up the leftover record and socket;
- live process answering a ping on the recorded socket: running;
- live process that does not answer: start terminates it and takes over.
"""

import os
import signal
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from deepmail.daemon.client import DaemonClient
from deepmail.daemon.paths import get_pid_path, get_socket_path
from deepmail.daemon.server import run_server

logger = structlog.get_logger()

STOP_TIMEOUT = 10.0  # seconds
_POLL_INTERVAL = 0.1


class DaemonRecord(BaseModel):
    """What a running daemon writes about itself."""

    pid: int
    socket_path: Path
    started_at: datetime

    def process_alive(self) -> bool:
        try:
            os.kill(self.pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Another user's process reused the PID
            return False
        return True

    def responsive(self) -> bool:
        return DaemonClient(self.socket_path).ping()


def read_record() -> DaemonRecord | None:
    """Load the daemon record.

    Returns:
        The record, or None if there is none or it cannot be parsed.
    """
    path = get_pid_path()
    try:
        return DaemonRecord.model_validate_json(path.read_text())
    except FileNotFoundError:
        return None
    except (OSError, ValidationError) as e:
        logger.warning("Ignoring unreadable daemon record", path=str(path), error=str(e))
        return None


def _write_record(record: DaemonRecord) -> None:
    path = get_pid_path()
    path.write_text(record.model_dump_json())
    path.chmod(0o600)


def _clear_runtime_files(record: DaemonRecord | None) -> None:
    get_pid_path().unlink(missing_ok=True)
    socket_path = record.socket_path if record is not None else get_socket_path()
    socket_path.unlink(missing_ok=True)


def _terminate(pid: int, timeout: float = STOP_TIMEOUT) -> None:
    """Send SIGTERM and wait for the process to exit, then SIGKILL."""
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        return

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return
        time.sleep(_POLL_INTERVAL)

    logger.warning("Daemon did not stop in time, killing", pid=pid, timeout=timeout)
    try:
        os.kill(pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _detach() -> None:
    """Detach from the controlling terminal (double fork)."""
    sys.stdout.flush()
    sys.stderr.flush()

    if os.fork() > 0:
        os._exit(0)
    os.setsid()
    if os.fork() > 0:
        os._exit(0)

    devnull = os.open(os.devnull, os.O_RDWR)
    for fd in (sys.stdin.fileno(), sys.stdout.fileno(), sys.stderr.fileno()):
        os.dup2(devnull, fd)
    os.close(devnull)


def start_daemon(foreground: bool = False) -> bool:
    """Run the daemon until it is stopped.

    Args:
        foreground: If True, stay attached to the terminal (for debugging).

    Returns:
        True once the daemon has run and shut down, False if a responsive
        daemon was already running.
    """
    existing = read_record()
    if existing is not None:
        if existing.process_alive():
            if existing.responsive():
                logger.warning("Daemon already running", pid=existing.pid)
                return False
            logger.warning("Daemon is not responding, replacing it", pid=existing.pid)
            _terminate(existing.pid)
        else:
            logger.info("Removing stale daemon files", pid=existing.pid)
        _clear_runtime_files(existing)

    if not foreground:
        _detach()

    record = DaemonRecord(
        pid=os.getpid(),
        socket_path=get_socket_path(),
        started_at=datetime.now(timezone.utc),
    )
    _write_record(record)
    try:
        run_server(record.socket_path)
    finally:
        _clear_runtime_files(record)
    return True


def stop_daemon() -> bool:
    """Stop the running daemon.

    The daemon cancels outstanding generations before it exits.

    Returns:
        True if a daemon was stopped, False if none was running.
    """
    record = read_record()
    if record is None:
        return False
    if not record.process_alive():
        _clear_runtime_files(record)
        return False

    logger.info("Stopping daemon", pid=record.pid)
    _terminate(record.pid)
    _clear_runtime_files(record)
    logger.info("Daemon stopped", pid=record.pid)
    return True


def daemon_status() -> dict[str, Any]:
    """Describe the daemon.

    Returns:
        Dict with running, pid, socket, started_at and responsive keys.
    """
    record = read_record()
    if record is None or not record.process_alive():
        return {
            "running": False,
            "pid": None,
            "socket": None,
            "started_at": None,
            "responsive": False,
        }

    return {
        "running": True,
        "pid": record.pid,
        "socket": str(record.socket_path),
        "started_at": record.started_at,
        "responsive": record.responsive(),
    }
