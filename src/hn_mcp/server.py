"""MCP server exposing HackerNews tools, resources and prompts over stdio.

Handlers live in hn_mcp.tools; this module only registers them with FastMCP
and serializes their results to JSON text. Exceptions raised by handlers are
reported to the MCP client as errors by FastMCP.
"""

import json
import sys
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from hn_mcp.api.client import HackerNewsClient
from hn_mcp.tools import handlers, prompts, resources
from hn_mcp.utils.config import Settings, get_settings
from hn_mcp.utils.logging_config import get_logger, setup_logging

JSON_MIME = "application/json"


def _dump(data: Any) -> str:
    return data if isinstance(data, str) else json.dumps(data, indent=2)


def build_client(settings: Settings) -> HackerNewsClient:
    """Create a client configured from settings."""
    return HackerNewsClient(
        base_url=settings.HACKERNEWS_API_BASE_URL,
        timeout_ms=settings.HACKERNEWS_API_TIMEOUT,
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        max_size=settings.CACHE_MAX_SIZE,
    )


def create_server(client: HackerNewsClient | None = None) -> FastMCP:
    """Build a FastMCP server with all tools, resources and prompts registered.

    Args:
        client: Client to serve from; built from settings when omitted
    """
    settings = get_settings()
    logger = get_logger(__name__)
    hn = client or build_client(settings)
    mcp = FastMCP(settings.SERVER_NAME)

    logger.info("Registering HackerNews tools")

    @mcp.tool()
    async def search_posts(
        query: str | None = None,
        author: str | None = None,
        min_score: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: Annotated[int, Field(ge=1, le=100)] = 20,
    ) -> str:
        """Search and filter HackerNews posts by keywords, author, score, and date range."""
        return _dump(await handlers.search_posts(
            hn, query, author, min_score, start_time, end_time, limit
        ))

    @mcp.tool()
    async def get_post(id: int, include_comments: bool = False) -> str:
        """Get comprehensive details about a HackerNews post including metadata and comments."""
        return _dump(await handlers.get_post(hn, id, include_comments))

    @mcp.tool()
    async def search_user(username: str, include_recent_items: bool = True) -> str:
        """Get a HackerNews user's profile, activity, statistics, and contribution patterns."""
        return _dump(await handlers.search_user(hn, username, include_recent_items))

    @mcp.tool()
    async def search_trending(
        post_count: Annotated[int, Field(ge=10, le=100)] = 50,
        min_word_length: Annotated[int, Field(ge=3, le=10)] = 4,
    ) -> str:
        """Find current trending topics and keywords from top HackerNews posts."""
        return _dump(await handlers.search_trending(hn, post_count, min_word_length))

    @mcp.tool()
    async def search_comments(post_id: int) -> str:
        """Analyze the comment tree of a post for engagement patterns and statistics."""
        return _dump(await handlers.search_comments(hn, post_id))

    logger.info("Registering HackerNews resources")

    @mcp.resource("hackernews://item/{item_id}", mime_type=JSON_MIME)
    async def item(item_id: str) -> str:
        """Individual HackerNews items (stories, comments, jobs, polls) by ID."""
        return _dump(await resources.read_item(hn, item_id))

    @mcp.resource("hackernews://story/{item_id}", mime_type=JSON_MIME)
    async def story(item_id: str) -> str:
        """HackerNews stories with age, domain and comment count."""
        return _dump(await resources.read_story(hn, item_id))

    @mcp.resource("hackernews://user/{username}", mime_type=JSON_MIME)
    async def user(username: str) -> str:
        """HackerNews user profiles."""
        return _dump(await resources.read_user(hn, username))

    @mcp.resource("hackernews://user-stats/{username}", mime_type=JSON_MIME)
    async def user_stats(username: str) -> str:
        """HackerNews user profiles with statistics and recent activity."""
        return _dump(await resources.read_user_stats(hn, username))

    @mcp.resource("hackernews://comments/{item_id}", mime_type=JSON_MIME)
    async def comments(item_id: str) -> str:
        """Flattened comment tree for a HackerNews story or item."""
        return _dump(await resources.read_comments(hn, item_id))

    for collection, title in resources.STORY_COLLECTIONS.items():
        _register_collection(mcp, hn, collection, title)

    @mcp.resource("hackernews://updates", mime_type=JSON_MIME)
    async def updates() -> str:
        """Recently changed items and user profiles on HackerNews."""
        return _dump(await resources.read_updates(hn))

    @mcp.resource("hackernews://max-item", mime_type=JSON_MIME)
    async def max_item() -> str:
        """The current maximum item ID on HackerNews."""
        return _dump(await resources.read_max_item(hn))

    @mcp.resource("hackernews://cache/stats", mime_type=JSON_MIME)
    def cache_stats() -> str:
        """Current cache statistics."""
        return _dump(resources.read_cache_stats(hn))

    logger.info("Registering HackerNews prompts")

    @mcp.prompt(
        name="analyze-story",
        description="Analyze a HackerNews story with metadata and discussion context",
    )
    async def analyze_story(
        story_id: int,
        include_comments: bool = True,
        analysis_depth: str = "detailed",
    ) -> str:
        return await prompts.analyze_story(hn, story_id, include_comments, analysis_depth)

    @mcp.prompt(
        name="analyze-user-profile",
        description="Analyze a HackerNews user's profile, activity and contribution patterns",
    )
    async def analyze_user_profile(
        username: str,
        include_recent_activity: bool = True,
        focus_area: str = "general",
    ) -> str:
        return await prompts.analyze_user_profile(hn, username, include_recent_activity, focus_area)

    @mcp.prompt(
        name="summarize-trending-topics",
        description="Summarize trending topics across the current top stories",
    )
    async def summarize_trending_topics(
        timeframe: str = "current",
        story_count: int = 30,
        include_analysis: bool = True,
    ) -> str:
        return await prompts.summarize_trending_topics(hn, timeframe, story_count, include_analysis)

    return mcp


def _register_collection(mcp: FastMCP, hn: HackerNewsClient, collection: str, title: str) -> None:
    async def read() -> str:
        return _dump(await resources.read_story_collection(hn, collection))

    mcp.resource(
        f"hackernews://stories/{collection}",
        name=f"{collection}-stories",
        description=f"HackerNews {title}",
        mime_type=JSON_MIME,
    )(read)


def main() -> None:
    """Console entry point: serve over stdio until the client disconnects."""
    setup_logging()
    logger = get_logger(__name__)
    settings = get_settings()

    try:
        server = create_server()
        logger.info(f"Starting {settings.SERVER_NAME} v{settings.SERVER_VERSION}")
        server.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("Failed to start server")
        sys.exit(1)


if __name__ == "__main__":
    main()
