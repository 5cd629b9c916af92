"""Petstores MCP Server - pet food shop with a shopping cart exposed as MCP tools."""

__version__ = "0.1.0"
