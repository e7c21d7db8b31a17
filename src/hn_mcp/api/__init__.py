"""HackerNews API client and record types."""

from hn_mcp.api.client import ErrorKind, HackerNewsClient, HackerNewsClientError
from hn_mcp.api.models import (
    HackerNewsItem,
    HackerNewsUpdates,
    HackerNewsUser,
    SearchParams,
    StoryWithMetadata,
    UserWithStats,
)

__all__ = [
    "ErrorKind",
    "HackerNewsClient",
    "HackerNewsClientError",
    "HackerNewsItem",
    "HackerNewsUpdates",
    "HackerNewsUser",
    "SearchParams",
    "StoryWithMetadata",
    "UserWithStats",
]
