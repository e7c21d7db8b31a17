"""MCP tool and resource handlers built on the HackerNews client."""

from hn_mcp.tools.errors import InvalidIdentifierError, NotFoundError

__all__ = [
    "InvalidIdentifierError",
    "NotFoundError",
]
