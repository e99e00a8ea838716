"""MCP server entry point for deepmail."""

from deepmail.tools import mcp


def main() -> None:
    """Run the MCP server over stdio."""
    mcp.run()


if __name__ == "__main__":
    main()
