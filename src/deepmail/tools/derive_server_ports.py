"""Derive server ports MCP tool."""

from deepmail.accounts.config import ServerProtocol, derive_ports
from deepmail.tools._app import mcp
from deepmail.tools._error_handler import handle_tool_errors


@mcp.tool
@handle_tool_errors
def derive_server_ports(protocol: str = "IMAP", ssl_enabled: bool = True) -> str:
    """Get the standard incoming and outgoing ports for a mail server setup.

    Args:
        protocol: Incoming server protocol: IMAP, POP3 or Exchange.
        ssl_enabled: Whether the connection uses SSL.
    """
    ports = derive_ports(ServerProtocol(protocol), ssl_enabled)
    return f"Incoming port: {ports.incoming_port}\nOutgoing port: {ports.outgoing_port}"
