"""HackerNews record types.

Immutable snapshots of upstream API payloads. Raw JSON is coerced into these
records once, at the client boundary; everything downstream treats every
upstream field except the identifier as possibly absent.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Final, Literal

ItemType = Literal["job", "story", "comment", "poll", "pollopt", "ask", "show"]

ITEM_TYPES: Final[frozenset[str]] = frozenset(
    {"job", "story", "comment", "poll", "pollopt", "ask", "show"}
)


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _opt_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _opt_ids(value: Any) -> tuple[int, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(i for i in (_opt_int(v) for v in value) if i is not None)


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in data.items()
        if value is not None
    }


@dataclass(frozen=True)
class HackerNewsItem:
    """A story, comment, job, poll or poll option.

    Attributes:
        id: Item identifier
        type: Item kind, None if upstream sent an unknown value
        by: Author username
        time: Creation time, unix seconds
        kids: Child item IDs in display order
        descendants: Total comment count (stories and polls)
    """

    id: int
    type: ItemType | None = None
    by: str | None = None
    time: int | None = None
    text: str | None = None
    deleted: bool | None = None
    dead: bool | None = None
    parent: int | None = None
    poll: int | None = None
    kids: tuple[int, ...] | None = None
    url: str | None = None
    score: int | None = None
    title: str | None = None
    parts: tuple[int, ...] | None = None
    descendants: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HackerNewsItem":
        """Build an item from a raw API payload.

        Raises:
            ValueError: If the payload has no usable ``id``
        """
        item_id = _opt_int(data.get("id"))
        if item_id is None:
            raise ValueError(f"Item payload has no valid id: {data.get('id')!r}")

        item_type = data.get("type")
        return cls(
            id=item_id,
            type=item_type if item_type in ITEM_TYPES else None,
            by=_opt_str(data.get("by")),
            time=_opt_int(data.get("time")),
            text=_opt_str(data.get("text")),
            deleted=_opt_bool(data.get("deleted")),
            dead=_opt_bool(data.get("dead")),
            parent=_opt_int(data.get("parent")),
            poll=_opt_int(data.get("poll")),
            kids=_opt_ids(data.get("kids")),
            url=_opt_str(data.get("url")),
            score=_opt_int(data.get("score")),
            title=_opt_str(data.get("title")),
            parts=_opt_ids(data.get("parts")),
            descendants=_opt_int(data.get("descendants")),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict, omitting absent fields."""
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class HackerNewsUser:
    """A user profile.

    ``submitted`` is ordered most recent first.
    """

    id: str
    created: int
    karma: int
    about: str | None = None
    delay: int | None = None
    submitted: tuple[int, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HackerNewsUser":
        """Build a user from a raw API payload.

        Raises:
            ValueError: If the payload has no username
        """
        user_id = _opt_str(data.get("id"))
        if not user_id:
            raise ValueError(f"User payload has no valid id: {data.get('id')!r}")

        return cls(
            id=user_id,
            created=_opt_int(data.get("created")) or 0,
            karma=_opt_int(data.get("karma")) or 0,
            about=_opt_str(data.get("about")),
            delay=_opt_int(data.get("delay")),
            submitted=_opt_ids(data.get("submitted")),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict, omitting absent fields."""
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class HackerNewsUpdates:
    """Recently changed item IDs and usernames."""

    items: tuple[int, ...] = ()
    profiles: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HackerNewsUpdates":
        profiles = data.get("profiles")
        return cls(
            items=_opt_ids(data.get("items")) or (),
            profiles=tuple(p for p in profiles if isinstance(p, str))
            if isinstance(profiles, list)
            else (),
        )


@dataclass(frozen=True)
class StoryWithMetadata(HackerNewsItem):
    """A story with derived fields.

    Attributes:
        comment_count: ``descendants``, or 0
        age_hours: Hours since ``time`` at the moment of enrichment
        domain: Hostname of ``url``, None when missing or unparseable
    """

    comment_count: int = 0
    age_hours: float = 0.0
    domain: str | None = None


@dataclass(frozen=True)
class UserWithStats(HackerNewsUser):
    """A user profile with statistics over their most recent submissions.

    ``top_stories`` and ``recent_activity`` keep upstream submission order;
    neither is ranked by score.
    """

    average_score: float | None = None
    top_stories: tuple[HackerNewsItem, ...] = field(default_factory=tuple)
    recent_activity: tuple[HackerNewsItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["top_stories"] = [item.to_dict() for item in self.top_stories]
        data["recent_activity"] = [item.to_dict() for item in self.recent_activity]
        return data


@dataclass(frozen=True)
class SearchParams:
    """Filters for a best-effort search over the top stories.

    Every field is optional; absent fields do not filter.
    """

    query: str | None = None
    author: str | None = None
    start_time: int | None = None
    end_time: int | None = None
    min_score: int | None = None
    item_type: ItemType | None = None
    limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(asdict(self))
