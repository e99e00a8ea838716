"""Backend daemon for the desktop front-end.

Serves the form engines and reply generation over a Unix socket using
newline-delimited JSON, so the front-end can call the backend without
starting a Python process per request.
"""

from deepmail.daemon.client import DaemonClient
from deepmail.daemon.paths import get_pid_path, get_runtime_dir, get_socket_path
from deepmail.daemon.process import (
    DaemonRecord,
    daemon_status,
    read_record,
    start_daemon,
    stop_daemon,
)
from deepmail.daemon.server import DaemonServer

__all__ = [
    "DaemonClient",
    "DaemonRecord",
    "DaemonServer",
    "daemon_status",
    "get_pid_path",
    "get_runtime_dir",
    "get_socket_path",
    "read_record",
    "start_daemon",
    "stop_daemon",
]
