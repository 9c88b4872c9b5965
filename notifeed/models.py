"""
Notification entities.

A notification is an immutable value: the envelope (type tag, owner, time)
plus the display attributes of whoever acted and whatever was acted upon,
flattened to primitives when the notification is built so the stored payload
never has to look anything up again.

Each variant can be built two ways:

* ``Variant.build(...)`` from resolved references (``ActorRef``, ``PostRef``,
  ``CommentRef``), deriving every attribute and the owner;
* ``Variant(**fields)`` with the fields already known. The codec uses this to
  restore stored payloads; nothing is recomputed.
"""

from __future__ import annotations

import enum
import logging
import time as _time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

import redis

from . import settings

if TYPE_CHECKING:
    from .watermark import ReadWatermark

logger = logging.getLogger(__name__)


class PostType(str, enum.Enum):
    STATUS = "Status"
    PHOTO = "Photo"
    VIDEO = "Video"


# ============================================================================
# RESOLVED REFERENCES
# ============================================================================


@dataclass(frozen=True)
class ActorRef:
    """A user as shown in a notification."""

    id: int | str
    name: str
    pic_url: str | None = None


@dataclass(frozen=True)
class PostRef:
    """A post and its author."""

    id: int | str
    post_type: PostType
    user: ActorRef
    thumbnail_url: str | None = None


@dataclass(frozen=True)
class CommentRef:
    """A comment and its author."""

    id: int | str
    body: str
    user: ActorRef


def truncate(text: str, length: int, omission: str = "...") -> str:
    """Cut text to at most ``length`` characters, omission marker included."""
    if len(text) <= length:
        return text
    return text[: max(length - len(omission), 0)] + omission


def _require(value, name: str):
    if value is None:
        raise ValueError(f"{name} is required to build this notification")
    return value


def _post_thumbnail(post: PostRef) -> str | None:
    # Status posts have no picture to show.
    if PostType(post.post_type) is PostType.STATUS:
        return None
    return post.thumbnail_url


# ============================================================================
# VARIANT REGISTRY
# ============================================================================

VARIANTS: dict[str, type[Notification]] = {}


def register_variant(cls: type[Notification]) -> type[Notification]:
    """Add a notification class to the dispatch table used by the codec."""
    tag = getattr(cls, "type", None)
    if not isinstance(tag, str) or not tag:
        raise TypeError(f"{cls.__name__} must define a non-empty 'type' tag")
    if not (isinstance(cls, type) and issubclass(cls, Notification)):
        raise TypeError(f"{cls!r} is not a Notification subclass")
    existing = VARIANTS.get(tag)
    if existing is not None and existing is not cls:
        raise TypeError(f"Notification type '{tag}' already registered by {existing.__name__}")
    VARIANTS[tag] = cls
    return cls


# ============================================================================
# NOTIFICATIONS
# ============================================================================


@dataclass(frozen=True)
class Notification:
    """Envelope shared by every notification; usable on its own for generic entries."""

    type: ClassVar[str] = "Notification"

    user_id: int | str | None = None
    time: float = field(default_factory=_time.time)

    def save(self, client: redis.Redis) -> bool:
        """
        Append this notification to its owner's feed, scored by its time.

        Returns False if the store already held an identical entry. Never retried.
        """
        from .codec import encode
        from .feed_store import FeedStore

        if self.user_id is None:
            raise ValueError("Cannot save a notification without a user_id")
        saved = FeedStore(client, self.user_id).append(encode(self), self.time)
        logger.debug(f"Saved {self.type} notification for user {self.user_id} at {self.time}")
        return saved

    def delete(self, client: redis.Redis) -> int:
        """Remove this notification from its owner's feed.

        Removal is by score: other entries with the same time go too.
        """
        from .feed_store import FeedStore

        if self.user_id is None:
            raise ValueError("Cannot delete a notification without a user_id")
        return FeedStore(client, self.user_id).remove_score(self.time)

    def is_new(self, watermark: ReadWatermark) -> bool:
        return self.time > watermark.last_read()


register_variant(Notification)


@dataclass(frozen=True)
class ActorFields:
    actor_id: int | str | None = None
    actor_name: str | None = None
    actor_pic_url: str | None = None

    @staticmethod
    def _actor_fields(actor: ActorRef) -> dict:
        return {
            "actor_id": actor.id,
            "actor_name": actor.name,
            "actor_pic_url": actor.pic_url,
        }


@dataclass(frozen=True)
class PostFields:
    post_id: int | str | None = None
    post_type: str | None = None
    post_thumbnail_url: str | None = None
    post_user_id: int | str | None = None
    post_user_name: str | None = None

    @staticmethod
    def _post_fields(post: PostRef) -> dict:
        return {
            "post_id": post.id,
            "post_type": PostType(post.post_type).value,
            "post_thumbnail_url": _post_thumbnail(post),
            "post_user_id": post.user.id,
            "post_user_name": post.user.name,
        }


@register_variant
@dataclass(frozen=True)
class FollowerNotification(ActorFields, Notification):
    """Someone started following the owner."""

    type: ClassVar[str] = "Follower"

    @classmethod
    def build(
        cls,
        follower: ActorRef,
        followed_id: int | str,
        time: float | None = None,
    ) -> FollowerNotification:
        _require(follower, "follower")
        _require(followed_id, "followed_id")
        return cls(
            user_id=followed_id,
            time=_time.time() if time is None else float(time),
            **cls._actor_fields(follower),
        )


@register_variant
@dataclass(frozen=True)
class LikeNotification(ActorFields, PostFields, Notification):
    """Someone liked a post."""

    type: ClassVar[str] = "Like"

    @classmethod
    def build(
        cls,
        liker: ActorRef,
        post: PostRef,
        owner_id: int | str | None = None,
        time: float | None = None,
    ) -> LikeNotification:
        _require(liker, "liker")
        _require(post, "post")
        _require(post.user, "post author")
        return cls(
            user_id=post.user.id if owner_id is None else owner_id,
            time=_time.time() if time is None else float(time),
            **cls._post_fields(post),
            **cls._actor_fields(liker),
        )


@register_variant
@dataclass(frozen=True)
class CommentNotification(ActorFields, PostFields, Notification):
    """Someone commented on a post the owner wrote or follows."""

    type: ClassVar[str] = "Comment"

    comment_id: int | str | None = None
    comment_preview: str | None = None

    @classmethod
    def build(
        cls,
        comment: CommentRef,
        post: PostRef,
        owner_id: int | str | None = None,
        time: float | None = None,
    ) -> CommentNotification:
        _require(comment, "comment")
        _require(comment.user, "comment author")
        _require(comment.body, "comment body")
        _require(post, "post")
        _require(post.user, "post author")
        return cls(
            user_id=post.user.id if owner_id is None else owner_id,
            time=_time.time() if time is None else float(time),
            comment_id=comment.id,
            comment_preview=truncate(comment.body, settings.COMMENT_PREVIEW_LENGTH),
            **cls._post_fields(post),
            **cls._actor_fields(comment.user),
        )

