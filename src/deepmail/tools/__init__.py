"""MCP tools exposing the backend to agents."""

# isort: skip_file

from deepmail.tools._app import mcp

# Import tool modules to register them on the shared app
from deepmail.tools import derive_server_ports as _derive_server_ports  # noqa: F401
from deepmail.tools import generate_autoreply as _generate_autoreply  # noqa: F401
from deepmail.tools import list_providers as _list_providers  # noqa: F401

__all__ = ["mcp"]
