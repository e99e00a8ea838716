"""Daemon server for the desktop front-end.

Runs as a background process and answers form requests (text limits, port
derivation, provider catalog) and reply generation over a Unix socket.
"""

import asyncio
import json
import signal
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from deepmail.accounts.config import ServerProtocol, derive_ports
from deepmail.accounts.providers import list_providers
from deepmail.autoreply.generator import BaseReplyGenerator, generate_with_timeout
from deepmail.autoreply.models import AutoreplyRequest, AutoreplyResponse
from deepmail.daemon.paths import get_socket_path
from deepmail.defaults import DEFAULT_GENERATION_TIMEOUT
from deepmail.exceptions import DeepMailError
from deepmail.text.bounded import apply_line_limit

logger = structlog.get_logger()

MAX_REQUEST_SIZE = 1024 * 1024  # 1MB


class DaemonServer:
    """Async Unix socket server for the front-end.

    Requests on one connection are answered in order, so a connection has at
    most one generation outstanding.
    """

    def __init__(
        self,
        socket_path: Path | None = None,
        generator: BaseReplyGenerator | None = None,
        timeout: float | None = DEFAULT_GENERATION_TIMEOUT,
    ) -> None:
        """Initialize the daemon server.

        Args:
            socket_path: Path to Unix socket. Defaults to standard location.
            generator: Reply generator. Defaults to the configured one.
            timeout: Seconds to wait for a generated reply.
        """
        self._socket_path = socket_path or get_socket_path()
        self._generator = generator
        self._timeout = timeout
        self._server: asyncio.Server | None = None
        self._writers: set[asyncio.StreamWriter] = set()
        self._generations: set[asyncio.Task[Any]] = set()
        self._stopping = False

    @property
    def socket_path(self) -> Path:
        return self._socket_path

    def _get_generator(self) -> BaseReplyGenerator:
        """Get or create the reply generator."""
        if self._generator is None:
            from deepmail.service import get_reply_generator

            self._generator = get_reply_generator()
            logger.info("Reply generator created")
        return self._generator

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle a single client connection."""
        self._writers.add(writer)
        try:
            while True:
                # Read line (newline-delimited JSON)
                try:
                    line = await reader.readline()
                except ValueError:
                    # Line exceeded the stream limit
                    response: dict[str, Any] = {"error": "Request too large"}
                    writer.write((json.dumps(response) + "\n").encode())
                    await writer.drain()
                    break
                if not line:
                    break

                if len(line) > MAX_REQUEST_SIZE:
                    response = {"error": "Request too large"}
                else:
                    response = await self._handle_request(line.decode().strip())

                writer.write((json.dumps(response) + "\n").encode())
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError) as e:
            logger.debug("Client disconnected", error=str(e))
        except Exception as e:
            logger.error("Client handler error", error=str(e))
        finally:
            self._writers.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def _handle_request(self, request_str: str) -> dict[str, Any]:
        """Handle a JSON request and return response."""
        try:
            request = json.loads(request_str)
        except json.JSONDecodeError:
            return {"error": "Invalid JSON"}

        if not isinstance(request, dict):
            return {"error": "Request must be a JSON object"}

        method = request.get("method")

        if method == "ping":
            return {"status": "ok"}

        if method == "constrain_text":
            return self._constrain_text(request)

        if method == "derive_ports":
            return self._derive_ports(request)

        if method == "list_providers":
            return {"providers": [p.model_dump() for p in list_providers()]}

        if method == "generate":
            return await self._generate(request)

        return {"error": f"Unknown method: {method}"}

    def _constrain_text(self, request: dict[str, Any]) -> dict[str, Any]:
        current = request.get("current", "")
        proposed = request.get("proposed")
        max_lines = request.get("max_lines")

        if not isinstance(current, str) or not isinstance(proposed, str):
            return {"error": "current and proposed must be strings"}
        if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 0:
            return {"error": "max_lines must be a non-negative integer"}

        return {"content": apply_line_limit(current, proposed, max_lines)}

    def _derive_ports(self, request: dict[str, Any]) -> dict[str, Any]:
        ssl_enabled = request.get("ssl_enabled", True)
        if not isinstance(ssl_enabled, bool):
            return {"error": "ssl_enabled must be a boolean"}

        try:
            protocol = ServerProtocol(request.get("protocol", ServerProtocol.IMAP.value))
        except ValueError:
            choices = ", ".join(p.value for p in ServerProtocol)
            return {"error": f"protocol must be one of {choices}"}

        return derive_ports(protocol, ssl_enabled).model_dump()

    async def _generate(self, request: dict[str, Any]) -> dict[str, Any]:
        try:
            autoreply_request = AutoreplyRequest(
                email_content=request.get("email_content", ""),
                specifications=request.get("specifications", ""),
            )
        except ValidationError as e:
            return {"error": f"Invalid request: {e.errors()[0]['msg']}"}

        task = asyncio.ensure_future(self._run_generation(autoreply_request))
        self._generations.add(task)
        try:
            response = await task
        except asyncio.CancelledError:
            if not self._stopping:
                raise
            return {"error": "Generation cancelled, daemon is shutting down"}
        except DeepMailError as e:
            return {"error": str(e)}
        except Exception as e:
            logger.exception("Reply generation failed")
            return {"error": f"Generation failed: {e}"}
        finally:
            self._generations.discard(task)

        return {"generated_text": response.generated_text}

    async def _run_generation(self, request: AutoreplyRequest) -> AutoreplyResponse:
        return await generate_with_timeout(self._get_generator(), request, self._timeout)

    async def start(self) -> None:
        """Bind the socket and start accepting connections."""
        # Remove stale socket file
        if self._socket_path.exists():
            self._socket_path.unlink()

        self._server = await asyncio.start_unix_server(
            self._handle_client,
            path=str(self._socket_path),
            limit=MAX_REQUEST_SIZE + 1,
        )

        # Set socket permissions (owner only)
        self._socket_path.chmod(0o600)

        logger.info("Daemon server started", socket=str(self._socket_path))

    async def serve_forever(self) -> None:
        """Start the server if needed and serve until stopped."""
        if self._server is None:
            await self.start()
        assert self._server is not None

        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            pass

    async def stop(self) -> None:
        """Stop the daemon server.

        Outstanding generations are cancelled and their clients get an error
        reply, then every client connection is closed.
        """
        self._stopping = True
        pending = [task for task in self._generations if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.info("Cancelling outstanding generations", count=len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
            # Let handlers send their cancellation replies
            await asyncio.sleep(0)

        for writer in list(self._writers):
            writer.close()

        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

        # Clean up socket file
        if self._socket_path.exists():
            self._socket_path.unlink()

        logger.info("Daemon server stopped")


def run_server(socket_path: Path | None = None) -> None:
    """Run the daemon server (blocking).

    Args:
        socket_path: Optional custom socket path.
    """
    from deepmail.service import get_settings

    server = DaemonServer(socket_path, timeout=get_settings().autoreply.timeout)

    async def _run() -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, _request_stop, sig)
        await server.serve_forever()

    def _request_stop(sig: int) -> None:
        logger.info("Received shutdown signal", signal=sig)
        asyncio.ensure_future(server.stop())

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass
