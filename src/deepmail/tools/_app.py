"""Shared FastMCP application instance."""

from fastmcp import FastMCP

mcp = FastMCP(name="deepmail")
