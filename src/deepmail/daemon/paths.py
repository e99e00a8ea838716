"""Runtime path helpers for the backend daemon."""

import os
from pathlib import Path

import platformdirs

APP_NAME = "deepmail"


def get_runtime_dir() -> Path:
    """Get the runtime directory for daemon files.

    Uses XDG_RUNTIME_DIR on Linux, falls back to platformdirs.
    """
    xdg_runtime = os.environ.get("XDG_RUNTIME_DIR")
    if xdg_runtime:
        runtime_dir = Path(xdg_runtime) / APP_NAME
    else:
        runtime_dir = Path(platformdirs.user_runtime_dir(APP_NAME))

    runtime_dir.mkdir(parents=True, exist_ok=True)
    return runtime_dir


def get_socket_path() -> Path:
    """Get the Unix socket path the front-end connects to."""
    return get_runtime_dir() / "backend.sock"


def get_pid_path() -> Path:
    """Get the PID file path for daemon process tracking."""
    return get_runtime_dir() / "daemon.pid"
