"""List providers MCP tool."""

from deepmail.accounts.providers import list_providers as _list_providers
from deepmail.tools._app import mcp


@mcp.tool
def list_providers() -> str:
    """List the email providers that can be connected.

    Returns:
        A newline-separated list of provider ids and names.
    """
    return "\n".join(f"- {p.id}: {p.name}" for p in _list_providers())
