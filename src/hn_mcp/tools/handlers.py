"""Tool handlers.

Each handler takes a HackerNewsClient plus tool arguments and returns a
JSON-ready dict. Client errors propagate unchanged; a missing post or user
raises NotFoundError.
"""

import math
import re
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Final

from hn_mcp.api.client import HackerNewsClient
from hn_mcp.api.models import HackerNewsItem, SearchParams
from hn_mcp.tools.errors import NotFoundError
from hn_mcp.utils.logging_config import get_logger

# Short, frequent title words that carry no topic
STOP_WORDS: Final[frozenset[str]] = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
    "how", "its", "may", "new", "now", "old", "see", "two", "way", "who",
    "boy", "did", "man", "end", "why", "let", "put", "say", "she", "too",
    "use",
})

TRENDING_TOPIC_COUNT: Final[int] = 20
TOP_COMMENTER_COUNT: Final[int] = 10

_PUNCTUATION = re.compile(r"[^\w\s]")
_NUMBER = re.compile(r"^\d+$")


def _get_logger():
    """Get logger instance lazily to avoid module-level import issues."""
    return get_logger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def search_posts(
    client: HackerNewsClient,
    query: str | None = None,
    author: str | None = None,
    min_score: int | None = None,
    start_time: int | None = None,
    end_time: int | None = None,
    limit: int = 20,
) -> dict[str, Any]:
    """Search the top stories and summarize each match."""
    params = SearchParams(
        query=query,
        author=author,
        min_score=min_score,
        start_time=start_time,
        end_time=end_time,
        limit=limit or 20,
    )

    posts = await client.search_stories(params)
    _get_logger().debug(f"search_posts matched {len(posts)} stories")

    return {
        "search_params": params.to_dict(),
        "result_count": len(posts),
        "posts": [
            {
                "id": post.id,
                "title": post.title,
                "by": post.by,
                "score": post.score,
                "time": post.time,
                "url": post.url,
                "descendants": post.descendants,
            }
            for post in posts
        ],
    }


async def get_post(
    client: HackerNewsClient, post_id: int, include_comments: bool = False
) -> dict[str, Any]:
    """Return a story with metadata, optionally with its flattened comment tree.

    Raises:
        NotFoundError: If the item is missing or not a story
    """
    post = await client.get_story_with_metadata(post_id)
    if post is None:
        raise NotFoundError(f"Post {post_id} not found or is not a post")

    result: dict[str, Any] = {"post": post.to_dict()}
    if include_comments:
        comments = await client.get_comment_tree(post_id)
        result["comments"] = {
            "count": len(comments),
            "tree": [comment.to_dict() for comment in comments],
        }
    return result


async def search_user(
    client: HackerNewsClient, username: str, include_recent_items: bool = True
) -> dict[str, Any]:
    """Profile a user: account age, karma rate and recent submission stats.

    Raises:
        NotFoundError: If the user does not exist
    """
    user = await client.get_user_with_stats(username)
    if user is None:
        raise NotFoundError(f"User {username} not found")

    account_age_days = math.floor((time.time() - user.created) / 3600 / 24)
    karma_per_day = round(user.karma / account_age_days, 2) if account_age_days > 0 else 0

    result: dict[str, Any] = {
        "user_profile": {
            "username": user.id,
            "karma": user.karma,
            "created": datetime.fromtimestamp(user.created, tz=timezone.utc).isoformat(),
            "account_age_days": account_age_days,
            "karma_per_day": karma_per_day,
            "about": user.about,
        },
        "statistics": {
            "average_story_score": user.average_score,
            "total_submissions": len(user.submitted or ()),
            "top_stories_count": len(user.top_stories),
            "recent_activity_count": len(user.recent_activity),
        },
    }
    if include_recent_items:
        result["recent_items"] = {
            "top_stories": [item.to_dict() for item in user.top_stories],
            "recent_activity": [item.to_dict() for item in user.recent_activity],
        }
    return result


def count_title_words(posts: list[HackerNewsItem], min_word_length: int) -> Counter:
    """Count topic words across story titles.

    Punctuation is treated as whitespace; stop words and bare numbers are
    dropped.
    """
    counts: Counter = Counter()
    for post in posts:
        if not post.title:
            continue
        words = _PUNCTUATION.sub(" ", post.title.lower()).split()
        counts.update(
            word for word in words
            if len(word) >= min_word_length
            and word not in STOP_WORDS
            and not _NUMBER.match(word)
        )
    return counts


async def search_trending(
    client: HackerNewsClient, post_count: int = 50, min_word_length: int = 4
) -> dict[str, Any]:
    """Find the most frequent title words among the current top stories."""
    top_ids = await client.get_top_stories()
    fetched = await client.get_multiple_items(top_ids[:post_count])
    posts = [p for p in fetched if p is not None and p.title and p.type == "story"]

    counts = count_title_words(posts, min_word_length)
    trending = [
        {
            "word": word,
            "count": count,
            "percentage": round(count / len(posts) * 100, 1),
        }
        for word, count in counts.most_common(TRENDING_TOPIC_COUNT)
    ]

    return {
        "analysis_summary": {
            "posts_analyzed": len(posts),
            "total_unique_words": len(counts),
            "min_word_length": min_word_length,
        },
        "trending_topics": trending,
        "timestamp": _now_iso(),
    }


async def search_comments(client: HackerNewsClient, post_id: int) -> dict[str, Any] | str:
    """Summarize engagement in a post's comment tree.

    Returns a plain message instead of statistics when there are no comments.
    """
    comments = await client.get_comment_tree(post_id)
    if not comments:
        return f"No comments found for post {post_id}"

    authors = Counter(c.by for c in comments if c.by)
    replies = sum(1 for c in comments if c.parent)
    top_level = len(comments) - replies

    return {
        "post_id": post_id,
        "comment_statistics": {
            "total_comments": len(comments),
            "authors": len(authors),
            "avg_comment_length": sum(len(c.text or "") for c in comments) / len(comments),
            "deleted_comments": sum(1 for c in comments if c.deleted),
            "dead_comments": sum(1 for c in comments if c.dead),
        },
        "engagement_metrics": {
            "top_level_comments": top_level,
            "reply_comments": replies,
            "reply_ratio": round(replies / top_level, 2) if top_level > 0 else 0,
        },
        "top_commenters": [
            {"author": author, "comment_count": count}
            for author, count in authors.most_common(TOP_COMMENTER_COUNT)
        ],
        "analysis_timestamp": _now_iso(),
    }
