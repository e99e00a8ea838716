"""Daemon client for talking to the backend daemon."""

import json
import socket
from pathlib import Path
from typing import Any

import structlog

from deepmail.accounts.config import ServerPorts, ServerProtocol
from deepmail.daemon.paths import get_socket_path
from deepmail.exceptions import GenerationFailedError

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 5.0  # seconds
# Added to the server-side generation timeout so the server answers first
GENERATE_TIMEOUT_MARGIN = 5.0  # seconds


class DaemonClient:
    """Sync client for communicating with the daemon over Unix socket."""

    def __init__(
        self,
        socket_path: Path | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        generate_timeout: float | None = None,
    ) -> None:
        """Initialize the daemon client.

        Args:
            socket_path: Path to Unix socket. Defaults to standard location.
            timeout: Socket timeout in seconds.
            generate_timeout: Socket timeout for generate requests. Defaults
                to the configured generation timeout plus a margin.
        """
        self._socket_path = socket_path or get_socket_path()
        self._timeout = timeout
        self._generate_timeout = generate_timeout

    def _send_request(
        self,
        request: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any] | None:
        """Send a request to the daemon and return the response.

        Returns None on any transport error (connection failed, timeout, etc).
        """
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(timeout or self._timeout)
                sock.connect(str(self._socket_path))

                sock.sendall((json.dumps(request) + "\n").encode())

                # Read response (line-delimited)
                response_bytes = b""
                while True:
                    chunk = sock.recv(4096)
                    if not chunk:
                        break
                    response_bytes += chunk
                    if b"\n" in response_bytes:
                        break

            if not response_bytes:
                return None

            result: dict[str, Any] = json.loads(response_bytes.decode().strip())
            return result
        except (OSError, ValueError) as e:
            logger.debug("Daemon request failed", method=request.get("method"), error=str(e))
            return None

    def is_available(self) -> bool:
        """Check if the daemon is available and responding."""
        return self.ping()

    def ping(self) -> bool:
        """Ping the daemon to check if it's alive."""
        response = self._send_request({"method": "ping"})
        return response is not None and response.get("status") == "ok"

    def constrain_text(self, current: str, proposed: str, max_lines: int) -> str | None:
        """Ask the daemon which content a bounded field accepts.

        Returns:
            The accepted content, or None if the daemon is unavailable.
        """
        response = self._send_request(
            {
                "method": "constrain_text",
                "current": current,
                "proposed": proposed,
                "max_lines": max_lines,
            }
        )
        if response is None or "error" in response:
            return None
        content: str = response["content"]
        return content

    def derive_ports(self, protocol: ServerProtocol, ssl_enabled: bool) -> ServerPorts | None:
        """Ask the daemon for the ports of a protocol and SSL setting.

        Returns:
            ServerPorts, or None if the daemon is unavailable.
        """
        response = self._send_request(
            {
                "method": "derive_ports",
                "protocol": ServerProtocol(protocol).value,
                "ssl_enabled": ssl_enabled,
            }
        )
        if response is None or "error" in response:
            return None
        return ServerPorts.model_validate(response)

    def _get_generate_timeout(self) -> float:
        if self._generate_timeout is not None:
            return self._generate_timeout
        from deepmail.service import get_settings

        return get_settings().autoreply.timeout + GENERATE_TIMEOUT_MARGIN

    def generate(self, email_content: str, specifications: str = "") -> str:
        """Generate a reply through the daemon.

        Returns:
            The generated reply text.

        Raises:
            GenerationFailedError: If the daemon is unavailable or generation failed.
        """
        response = self._send_request(
            {
                "method": "generate",
                "email_content": email_content,
                "specifications": specifications,
            },
            timeout=self._get_generate_timeout(),
        )
        if response is None:
            raise GenerationFailedError("Daemon is not available")
        if "error" in response:
            raise GenerationFailedError(response["error"])
        text: str = response["generated_text"]
        return text
