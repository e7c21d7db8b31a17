"""HackerNews API exposed to AI assistants over the Model Context Protocol."""

from hn_mcp.api.client import ErrorKind, HackerNewsClient, HackerNewsClientError
from hn_mcp.utils.cache import ExpiringCache

__all__ = [
    "ErrorKind",
    "ExpiringCache",
    "HackerNewsClient",
    "HackerNewsClientError",
]
