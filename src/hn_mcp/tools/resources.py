"""Resource handlers.

Resource URIs carry identifiers as strings; handlers validate them, call the
client and return JSON-ready dicts. Unlike the composite client lookups, a
missing item or user is an error here.
"""

from datetime import datetime, timezone
from typing import Any, Final

from hn_mcp.api.client import HackerNewsClient
from hn_mcp.tools.errors import InvalidIdentifierError, NotFoundError

# Number of IDs returned by each story collection resource
COLLECTION_SIZE: Final[int] = 30

STORY_COLLECTIONS: Final[dict[str, str]] = {
    "top": "Top Stories",
    "new": "New Stories",
    "best": "Best Stories",
    "ask": "Ask HN Stories",
    "show": "Show HN Stories",
    "jobs": "Job Stories",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_item_id(raw: str, label: str = "item") -> int:
    """Parse a URI path segment as an item ID.

    Raises:
        InvalidIdentifierError: If ``raw`` is not a base-10 integer
    """
    try:
        return int(raw, 10)
    except (TypeError, ValueError):
        raise InvalidIdentifierError(f"Invalid {label} ID: {raw}") from None


async def read_item(client: HackerNewsClient, raw_id: str) -> dict[str, Any]:
    item_id = parse_item_id(raw_id)
    item = await client.get_item(item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found")
    return item.to_dict()


async def read_story(client: HackerNewsClient, raw_id: str) -> dict[str, Any]:
    item_id = parse_item_id(raw_id, "story")
    story = await client.get_story_with_metadata(item_id)
    if story is None:
        raise NotFoundError(f"Story {item_id} not found or is not a story")
    return story.to_dict()


async def read_user(client: HackerNewsClient, username: str) -> dict[str, Any]:
    user = await client.get_user(username)
    if user is None:
        raise NotFoundError(f"User {username} not found")
    return user.to_dict()


async def read_user_stats(client: HackerNewsClient, username: str) -> dict[str, Any]:
    user = await client.get_user_with_stats(username)
    if user is None:
        raise NotFoundError(f"User {username} not found")
    return user.to_dict()


async def read_story_collection(client: HackerNewsClient, collection: str) -> dict[str, Any]:
    """Return the first IDs of one of the ranked story lists.

    Args:
        collection: One of the keys of STORY_COLLECTIONS
    """
    fetchers = {
        "top": client.get_top_stories,
        "new": client.get_new_stories,
        "best": client.get_best_stories,
        "ask": client.get_ask_stories,
        "show": client.get_show_stories,
        "jobs": client.get_job_stories,
    }
    if collection not in fetchers:
        raise ValueError(f"Unknown story collection: {collection}")

    story_ids = (await fetchers[collection]())[:COLLECTION_SIZE]
    return {
        "type": "story_collection",
        "title": STORY_COLLECTIONS[collection],
        "count": len(story_ids),
        "story_ids": story_ids,
        "last_updated": _now_iso(),
    }


async def read_comments(client: HackerNewsClient, raw_id: str) -> dict[str, Any]:
    item_id = parse_item_id(raw_id)
    comments = await client.get_comment_tree(item_id)
    return {
        "type": "comment_tree",
        "item_id": item_id,
        "comment_count": len(comments),
        "comments": [comment.to_dict() for comment in comments],
        "last_updated": _now_iso(),
    }


async def read_updates(client: HackerNewsClient) -> dict[str, Any]:
    updates = await client.get_updates()
    return {
        "type": "live_updates",
        "changed_items": list(updates.items),
        "changed_profiles": list(updates.profiles),
        "last_updated": _now_iso(),
    }


async def read_max_item(client: HackerNewsClient) -> dict[str, Any]:
    return {
        "type": "max_item_id",
        "max_id": await client.get_max_item_id(),
        "last_updated": _now_iso(),
    }


def read_cache_stats(client: HackerNewsClient) -> dict[str, Any]:
    stats = client.get_cache_stats()
    return {
        "type": "cache_statistics",
        "cache_stats": stats,
        "total_cached_items": sum(stats.values()),
        "last_updated": _now_iso(),
    }
