"""Prompt builders.

Each builder gathers data through the HackerNewsClient and renders it into a
single prompt text asking the assistant for an analysis. A missing story or
user raises NotFoundError.
"""

import math
import time
from typing import Final

from hn_mcp.api.client import HackerNewsClient
from hn_mcp.api.models import HackerNewsItem
from hn_mcp.tools.errors import NotFoundError
from hn_mcp.tools.handlers import count_title_words
from hn_mcp.utils.logging_config import get_logger

ANALYSIS_DEPTHS: Final[tuple[str, ...]] = ("basic", "detailed", "comprehensive")

STORY_TASKS: Final[dict[str, list[str]]] = {
    "basic": [
        "Summarize the main topic and key points",
        "Assess the story's relevance and newsworthiness",
        "Evaluate the engagement level (score vs. comments ratio)",
        "Identify the target audience and community interest",
    ],
    "detailed": [
        "Analyze the posting timing and its impact",
        "Compare with typical HackerNews content patterns",
        "Predict potential discussion themes",
    ],
    "comprehensive": [
        "Provide strategic insights for content creators",
        "Suggest follow-up topics or related stories",
        "Assess long-term discussion potential",
    ],
}

FOCUS_TASKS: Final[dict[str, list[str]]] = {
    "general": [
        "Provide an overall assessment of their HackerNews presence",
        "Identify their primary contribution patterns",
        "Evaluate their community standing and reputation",
        "Assess their activity level and engagement quality",
        "Note any distinctive characteristics or specializations",
    ],
    "expertise": [
        "Identify the user's areas of expertise based on submissions",
        "Analyze the technical depth of their contributions",
        "Assess their knowledge sharing patterns",
        "Evaluate their reputation in specific domains",
        "Note any recurring themes or specializations",
    ],
    "engagement": [
        "Evaluate their community engagement level",
        "Analyze their posting frequency and consistency",
        "Assess the quality vs. quantity of their contributions",
        "Review their interaction patterns with other users",
        "Measure their influence on discussions",
    ],
    "influence": [
        "Assess their influence within the HackerNews community",
        "Analyze the reach and impact of their submissions",
        "Evaluate their ability to drive meaningful discussions",
        "Review their thought leadership indicators",
        "Measure their contribution to community knowledge",
    ],
}

TREND_TASKS: Final[list[str]] = [
    "Identify the main themes and topics dominating HackerNews today",
    "Analyze the technology trends and emerging technologies being discussed",
    "Note any significant news events or industry developments",
    "Assess the community's current interests and concerns",
    "Highlight any recurring patterns or ongoing discussions",
    "Provide insights into the tech community's mindset and priorities",
    "Suggest what these trends might indicate for the near future",
    "Compare with typical HackerNews discussion patterns",
]

COMMENT_EXCERPT_LENGTH: Final[int] = 200
TITLE_EXCERPT_LENGTH: Final[int] = 100
TRENDING_KEYWORD_COUNT: Final[int] = 15
FEATURED_STORY_COUNT: Final[int] = 10


def _get_logger():
    """Get logger instance lazily to avoid module-level import issues."""
    return get_logger(__name__)


def _numbered(lines: list[str], start: int = 1) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start))


def _excerpt(text: str | None, length: int) -> str:
    if not text:
        return ""
    return text[:length] + ("..." if len(text) > length else "")


async def analyze_story(
    client: HackerNewsClient,
    story_id: int,
    include_comments: bool = True,
    analysis_depth: str = "detailed",
) -> str:
    """Render a story analysis prompt.

    Args:
        story_id: Story to analyze
        include_comments: Append up to five comments when the story has any
        analysis_depth: basic, detailed or comprehensive; each level adds tasks

    Raises:
        NotFoundError: If the story is missing or not a story
    """
    story = await client.get_story_with_metadata(story_id)
    if story is None:
        raise NotFoundError(f"Story {story_id} not found")

    depth_index = ANALYSIS_DEPTHS.index(analysis_depth) if analysis_depth in ANALYSIS_DEPTHS else 1
    tasks = [task for depth in ANALYSIS_DEPTHS[:depth_index + 1] for task in STORY_TASKS[depth]]
    content = f'"{story.text}"' if story.text else "No additional content (link post)"

    prompt = (
        "Please analyze this HackerNews story in detail:\n\n"
        "**Story Information:**\n"
        f"- Title: {story.title}\n"
        f"- Author: {story.by}\n"
        f"- Score: {story.score} points\n"
        f"- Comments: {story.comment_count} comments\n"
        f"- Age: {round(story.age_hours)} hours old\n"
        f"- URL: {story.url or 'No external URL'}\n"
        f"- Domain: {story.domain or 'Self post'}\n\n"
        "**Story Content:**\n"
        f"{content}\n\n"
        "**Analysis Tasks:**\n"
        f"{_numbered(tasks)}\n"
    )

    if include_comments and story.comment_count > 0:
        comments = (await client.get_comment_tree(story_id))[:5]
        excerpts = [
            f'By {c.by}: "{_excerpt(c.text, COMMENT_EXCERPT_LENGTH)}"' for c in comments
        ]
        prompt += (
            "\n\n**Top Comments for Context:**\n"
            f"{_numbered(excerpts)}\n\n"
            "**Comment Analysis Tasks:**\n"
            "- Identify main discussion themes\n"
            "- Assess comment quality and engagement\n"
            "- Note any expert opinions or insider knowledge\n"
            "- Evaluate community sentiment\n"
        )

    _get_logger().debug(f"Built story analysis prompt for {story_id}")
    return prompt


def _activity_line(item: HackerNewsItem) -> str:
    if item.title:
        label = _excerpt(item.title, TITLE_EXCERPT_LENGTH)
    else:
        label = (item.text or "")[:TITLE_EXCERPT_LENGTH] or "No title"
    return f'{item.type}: "{label}" (Score: {item.score or 0})'


async def analyze_user_profile(
    client: HackerNewsClient,
    username: str,
    include_recent_activity: bool = True,
    focus_area: str = "general",
) -> str:
    """Render a user profile analysis prompt.

    Args:
        focus_area: general, expertise, engagement or influence; unknown
            values fall back to general

    Raises:
        ValueError: If username is empty
        NotFoundError: If the user does not exist
    """
    if not username:
        raise ValueError("Username is required")

    user = await client.get_user_with_stats(username)
    if user is None:
        raise NotFoundError(f"User {username} not found")

    account_age_hours = (time.time() - user.created) / 3600
    account_age_days = math.floor(account_age_hours / 24)
    karma_per_day = f"{user.karma / account_age_days:.2f}" if account_age_days > 0 else "0"

    prompt = (
        "Please analyze this HackerNews user profile:\n\n"
        "**User Information:**\n"
        f"- Username: {user.id}\n"
        f"- Karma: {user.karma} points\n"
        f"- Account Age: {account_age_days} days ({round(account_age_hours / 24 / 365, 1)} years)\n"
        f"- Karma per Day: {karma_per_day}\n"
        f"- Total Submissions: {len(user.submitted or ())}\n"
        f"- About: {user.about or 'No bio provided'}\n\n"
        "**Activity Statistics:**\n"
        f"- Average Story Score: {user.average_score or 'N/A'}\n"
        f"- Top Stories: {len(user.top_stories)}\n"
        f"- Recent Activity Items: {len(user.recent_activity)}\n"
    )

    if include_recent_activity and user.recent_activity:
        activity = [_activity_line(item) for item in user.recent_activity[:3]]
        prompt += f"\n\n**Recent Activity Sample:**\n{_numbered(activity)}\n"

    if user.top_stories:
        top = [
            f'"{s.title}" (Score: {s.score}, Comments: {s.descendants or 0})'
            for s in user.top_stories[:3]
        ]
        prompt += f"\n\n**Top Performing Stories:**\n{_numbered(top)}\n"

    focus = focus_area if focus_area in FOCUS_TASKS else "general"
    prompt += f"\n\n**Analysis Tasks based on {focus_area} focus:**\n{_numbered(FOCUS_TASKS[focus])}"
    return prompt


async def summarize_trending_topics(
    client: HackerNewsClient,
    timeframe: str = "current",
    story_count: int = 30,
    include_analysis: bool = True,
) -> str:
    """Render a trending-topics summary prompt from the top stories."""
    top_ids = await client.get_top_stories()
    fetched = await client.get_multiple_items(top_ids[:story_count])
    stories = [s for s in fetched if s is not None and s.title]

    keywords = count_title_words(stories, min_word_length=4).most_common(TRENDING_KEYWORD_COUNT)
    keyword_lines = [f'"{word}" (mentioned {count} times)' for word, count in keywords]
    featured = [
        f'"{s.title}" by {s.by} ({s.score} points, {s.descendants or 0} comments)'
        for s in stories[:FEATURED_STORY_COUNT]
    ]

    prompt = (
        "Please provide a comprehensive summary of current HackerNews trending topics "
        "and discussions:\n\n"
        "**Analysis Scope:**\n"
        f"- Timeframe: {timeframe}\n"
        f"- Stories Analyzed: {len(stories)}\n"
        "- Data Source: HackerNews front page\n\n"
        "**Top Trending Keywords:**\n"
        f"{_numbered(keyword_lines)}\n\n"
        "**Featured Stories Sample:**\n"
        f"{_numbered(featured)}\n"
    )

    if include_analysis:
        prompt += (
            "\n\n**Analysis Tasks:**\n"
            f"{_numbered(TREND_TASKS)}\n\n"
            "**Summary Requirements:**\n"
            "- Provide a concise executive summary (2-3 paragraphs)\n"
            "- List 5-7 key trending topics with brief explanations\n"
            "- Note any surprising or unexpected trends\n"
            "- Offer perspective on the significance of these trends for the tech community"
        )

    return prompt
