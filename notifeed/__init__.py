"""Per-user notification feeds stored in Redis."""

from .errors import (
    DecodeError,
    InvalidRetentionConfig,
    MalformedPayload,
    NotificationError,
    StoreUnavailable,
    UnknownVariant,
)
from .models import (
    ActorRef,
    CommentNotification,
    CommentRef,
    FollowerNotification,
    LikeNotification,
    Notification,
    PostRef,
    PostType,
)
from .services.notification_feed import FeedEntry, FeedPage, NotificationFeed

__all__ = [
    "ActorRef",
    "CommentNotification",
    "CommentRef",
    "DecodeError",
    "FeedEntry",
    "FeedPage",
    "FollowerNotification",
    "InvalidRetentionConfig",
    "LikeNotification",
    "MalformedPayload",
    "Notification",
    "NotificationError",
    "NotificationFeed",
    "PostRef",
    "PostType",
    "StoreUnavailable",
    "UnknownVariant",
]
