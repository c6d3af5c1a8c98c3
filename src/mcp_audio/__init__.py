"""
Audio device MCP server.

This package implements a small MCP-style JSON-RPC protocol over HTTP that
lets clients discover and invoke tools against audio devices.
"""

__version__ = "0.1.0"
