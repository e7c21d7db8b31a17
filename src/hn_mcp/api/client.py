"""Caching HackerNews API client.

Fetches items, users and story-ID lists from the HackerNews Firebase API,
reusing recent results from per-kind caches, and assembles composite views
(enriched stories, user statistics, comment trees, filtered searches) from
many individual fetches.

Every request is bounded by the configured timeout. Failures surface as
HackerNewsClientError; the client never retries.

Example:
    >>> client = HackerNewsClient("https://hacker-news.firebaseio.com/v0", timeout_ms=10000)
    >>> story = await client.get_story_with_metadata(8863)
    >>> story.domain
    'www.getdropbox.com'
"""

import asyncio
import time
from enum import Enum
from typing import Any, Final
from urllib.parse import urlparse

import httpx

from hn_mcp.api.models import (
    HackerNewsItem,
    HackerNewsUpdates,
    HackerNewsUser,
    SearchParams,
    StoryWithMetadata,
    UserWithStats,
)
from hn_mcp.utils.cache import ExpiringCache
from hn_mcp.utils.logging_config import get_logger

MULTI_ITEM_BATCH_SIZE: Final[int] = 10
COMMENT_BATCH_SIZE: Final[int] = 5
USER_STATS_SUBMISSIONS: Final[int] = 10
USER_STATS_PREVIEW: Final[int] = 5
SEARCH_DEFAULT_LIMIT: Final[int] = 50
SEARCH_MAX_LIMIT: Final[int] = 100
# Candidates fetched per requested result, to make up for filtered-out items
SEARCH_OVERFETCH_FACTOR: Final[int] = 2


def _get_logger():
    """Get logger instance lazily to avoid module-level import issues."""
    return get_logger(__name__)


class ErrorKind(str, Enum):
    """Failure category of a HackerNewsClientError."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    DECODE = "decode"


class HackerNewsClientError(Exception):
    """Raised when an upstream request fails.

    The original exception, if any, is attached as the cause via exception
    chaining.
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: int | None = None):
        """Initialize client error.

        Args:
            message: Human-readable description
            kind: Failure category
            status_code: HTTP status code for ErrorKind.HTTP_STATUS
        """
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class HackerNewsClient:
    """Async client for the HackerNews API with per-kind expiring caches."""

    def __init__(
        self,
        base_url: str,
        timeout_ms: int,
        ttl_seconds: float = 300,
        max_size: int = 1000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client and its caches.

        Args:
            base_url: API root, e.g. ``https://hacker-news.firebaseio.com/v0``
            timeout_ms: Per-request timeout in milliseconds
            ttl_seconds: Lifetime of cached entries
            max_size: Capacity of the item and user caches; the list cache
                holds a tenth of that since there are only a handful of lists
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self._transport = transport
        self._item_cache: ExpiringCache[HackerNewsItem] = ExpiringCache(ttl_seconds, max_size)
        self._user_cache: ExpiringCache[HackerNewsUser] = ExpiringCache(ttl_seconds, max_size)
        self._list_cache: ExpiringCache[list[int]] = ExpiringCache(ttl_seconds, max_size // 10)

    # Primitive fetches

    async def get_item(self, item_id: int) -> HackerNewsItem | None:
        """Fetch an item, or None if it does not exist.

        Raises:
            HackerNewsClientError: If the request fails
        """
        cache_key = f"item:{item_id}"
        cached = self._item_cache.get(cache_key)
        if cached is not None:
            _get_logger().debug(f"Cache hit for item {item_id}")
            return cached

        data = await self._fetch_object(f"/item/{item_id}.json", f"item {item_id}")
        if data is None:
            return None

        item = self._coerce(HackerNewsItem, data, f"item {item_id}")
        self._item_cache.set(cache_key, item)
        return item

    async def get_user(self, user_id: str) -> HackerNewsUser | None:
        """Fetch a user profile, or None if it does not exist.

        Raises:
            HackerNewsClientError: If the request fails
        """
        cache_key = f"user:{user_id}"
        cached = self._user_cache.get(cache_key)
        if cached is not None:
            _get_logger().debug(f"Cache hit for user {user_id}")
            return cached

        data = await self._fetch_object(f"/user/{user_id}.json", f"user {user_id}")
        if data is None:
            return None

        user = self._coerce(HackerNewsUser, data, f"user {user_id}")
        self._user_cache.set(cache_key, user)
        return user

    async def get_max_item_id(self) -> int:
        """Fetch the current largest item ID. Never cached."""
        data = await self._fetch_with_context("/maxitem.json", "max item ID")
        if isinstance(data, bool) or not isinstance(data, int):
            raise HackerNewsClientError(
                f"Failed to fetch max item ID: unexpected payload {data!r}",
                ErrorKind.DECODE,
            )
        return data

    async def get_top_stories(self) -> list[int]:
        return await self._get_story_list("topstories")

    async def get_new_stories(self) -> list[int]:
        return await self._get_story_list("newstories")

    async def get_best_stories(self) -> list[int]:
        return await self._get_story_list("beststories")

    async def get_ask_stories(self) -> list[int]:
        return await self._get_story_list("askstories")

    async def get_show_stories(self) -> list[int]:
        return await self._get_story_list("showstories")

    async def get_job_stories(self) -> list[int]:
        return await self._get_story_list("jobstories")

    async def get_updates(self) -> HackerNewsUpdates:
        """Fetch recently changed items and profiles. Never cached."""
        data = await self._fetch_object("/updates.json", "updates")
        if data is None:
            return HackerNewsUpdates()
        return HackerNewsUpdates.from_dict(data)

    # Composite operations

    async def get_story_with_metadata(self, item_id: int) -> StoryWithMetadata | None:
        """Fetch a story and derive comment count, age and domain.

        Returns:
            The enriched story, or None if the item is missing or not a story
        """
        item = await self.get_item(item_id)
        if item is None or item.type != "story":
            return None

        age_hours = (time.time() - item.time) / 3600 if item.time else 0.0
        return StoryWithMetadata(
            **vars(item),
            comment_count=item.descendants or 0,
            age_hours=age_hours,
            domain=_extract_domain(item.url) if item.url else None,
        )

    async def get_user_with_stats(self, user_id: str) -> UserWithStats | None:
        """Fetch a user and summarize their most recent submissions.

        The first ten submissions are fetched concurrently; failed or missing
        ones are skipped. ``top_stories`` is the first five fetched stories in
        submission order, not a ranking by score.

        Returns:
            The user with statistics, or None if the user does not exist
        """
        user = await self.get_user(user_id)
        if user is None:
            return None

        recent_ids = (user.submitted or ())[:USER_STATS_SUBMISSIONS]
        fetched = await asyncio.gather(*(self._get_item_or_none(i) for i in recent_ids))

        items = [item for item in fetched if item is not None]
        stories = [item for item in items if item.type == "story"]
        average_score = (
            sum(story.score or 0 for story in stories) / len(stories) if stories else None
        )

        return UserWithStats(
            **vars(user),
            average_score=average_score,
            top_stories=tuple(stories[:USER_STATS_PREVIEW]),
            recent_activity=tuple(items[:USER_STATS_PREVIEW]),
        )

    async def search_stories(self, params: SearchParams) -> list[HackerNewsItem]:
        """Filter the current top stories.

        Only the first ``2 * limit`` top stories are considered, so this is a
        best-effort search rather than an index lookup.

        Raises:
            HackerNewsClientError: If any fetch fails
        """
        top_ids = await self.get_top_stories()
        limit = min(params.limit or SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT)
        candidates = top_ids[: limit * SEARCH_OVERFETCH_FACTOR]

        fetched = await asyncio.gather(*(self.get_item(i) for i in candidates))
        stories = [item for item in fetched if item is not None and item.type == "story"]

        return [story for story in stories if _matches(story, params)][:limit]

    async def get_comment_tree(self, item_id: int) -> list[HackerNewsItem]:
        """Collect every descendant comment of an item as a flat list.

        Children are fetched in batches of five. A batch and all of its
        descendants are collected before the next batch starts, so the result
        is in depth-first order within sibling batches. Non-comment nodes are
        skipped along with their subtrees.

        Raises:
            HackerNewsClientError: If any fetch fails
        """
        item = await self.get_item(item_id)
        if item is None or not item.kids:
            return []
        return await self._collect_comments(item.kids)

    async def get_multiple_items(self, item_ids: list[int]) -> list[HackerNewsItem | None]:
        """Fetch items in batches of ten, preserving input order.

        A failed or missing item yields None in its slot instead of failing
        the whole call.
        """
        results: list[HackerNewsItem | None] = []
        for start in range(0, len(item_ids), MULTI_ITEM_BATCH_SIZE):
            batch = item_ids[start:start + MULTI_ITEM_BATCH_SIZE]
            results.extend(await asyncio.gather(*(self._get_item_or_none(i) for i in batch)))
        return results

    # Cache management

    def get_cache_stats(self) -> dict[str, int]:
        """Live entry counts per cache."""
        return {
            "items": self._item_cache.size(),
            "users": self._user_cache.size(),
            "lists": self._list_cache.size(),
        }

    def clear_cache(self) -> None:
        self._item_cache.clear()
        self._user_cache.clear()
        self._list_cache.clear()
        _get_logger().info("Cache cleared")

    # Internals

    async def _get_story_list(self, endpoint: str) -> list[int]:
        cache_key = f"list:{endpoint}"
        cached = self._list_cache.get(cache_key)
        if cached is not None:
            _get_logger().debug(f"Cache hit for {endpoint}")
            return list(cached)

        data = await self._fetch_with_context(f"/{endpoint}.json", endpoint)
        if data is None:
            return []
        if not isinstance(data, list):
            raise HackerNewsClientError(
                f"Failed to fetch {endpoint}: expected a list, got {type(data).__name__}",
                ErrorKind.DECODE,
            )

        story_ids = [i for i in data if isinstance(i, int) and not isinstance(i, bool)]
        self._list_cache.set(cache_key, story_ids)
        return list(story_ids)

    async def _collect_comments(self, kid_ids: tuple[int, ...]) -> list[HackerNewsItem]:
        comments: list[HackerNewsItem] = []
        for start in range(0, len(kid_ids), COMMENT_BATCH_SIZE):
            batch = kid_ids[start:start + COMMENT_BATCH_SIZE]
            fetched = await asyncio.gather(*(self.get_item(i) for i in batch))

            for comment in fetched:
                if comment is None or comment.type != "comment":
                    continue
                comments.append(comment)
                if comment.kids:
                    comments.extend(await self._collect_comments(comment.kids))
        return comments

    async def _get_item_or_none(self, item_id: int) -> HackerNewsItem | None:
        try:
            return await self.get_item(item_id)
        except HackerNewsClientError as e:
            _get_logger().warning(f"Skipping item {item_id}: {e}")
            return None

    async def _fetch_object(self, path: str, what: str) -> dict[str, Any] | None:
        data = await self._fetch_with_context(path, what)
        if data is not None and not isinstance(data, dict):
            raise HackerNewsClientError(
                f"Failed to fetch {what}: expected an object, got {type(data).__name__}",
                ErrorKind.DECODE,
            )
        return data

    async def _fetch_with_context(self, path: str, what: str) -> Any:
        """Fetch JSON, prefixing any error message with what was being fetched."""
        try:
            return await self._fetch_json(path)
        except HackerNewsClientError as e:
            _get_logger().error(f"Failed to fetch {what}: {e}")
            raise HackerNewsClientError(
                f"Failed to fetch {what}: {e}", e.kind, e.status_code
            ) from e

    async def _fetch_json(self, path: str) -> Any:
        """GET ``path`` under the base URL and decode the JSON body.

        Raises:
            HackerNewsClientError: On timeout, transport failure, non-2xx
                status or an undecodable body
        """
        url = f"{self.base_url}{path}"
        timeout = self.timeout_ms / 1000

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(client.get(url), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise HackerNewsClientError(
                f"Request timeout after {self.timeout_ms}ms", ErrorKind.TIMEOUT
            ) from e
        except httpx.HTTPError as e:
            raise HackerNewsClientError(str(e) or type(e).__name__, ErrorKind.NETWORK) from e

        if not response.is_success:
            raise HackerNewsClientError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                ErrorKind.HTTP_STATUS,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise HackerNewsClientError(f"Invalid JSON: {e}", ErrorKind.DECODE) from e

    def _coerce(self, record_type, data: dict[str, Any], what: str):
        try:
            return record_type.from_dict(data)
        except ValueError as e:
            raise HackerNewsClientError(f"Failed to fetch {what}: {e}", ErrorKind.DECODE) from e


def _extract_domain(url: str) -> str | None:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def _matches(story: HackerNewsItem, params: SearchParams) -> bool:
    """Apply every provided filter. Fields the story lacks do not exclude it,
    except ``score`` which counts as 0."""
    if params.query and story.title is not None:
        if params.query.lower() not in story.title.lower():
            return False

    if params.author and story.by != params.author:
        return False

    if params.min_score is not None and (story.score or 0) < params.min_score:
        return False

    if params.start_time is not None and story.time is not None and story.time < params.start_time:
        return False

    if params.end_time is not None and story.time is not None and story.time > params.end_time:
        return False

    if params.item_type and story.type != params.item_type:
        return False

    return True
