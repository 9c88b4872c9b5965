"""Notification feed error types."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for every error raised by the feed layer."""


class StoreUnavailable(NotificationError):
    """Redis could not be reached or did not answer in time."""


class DecodeError(NotificationError):
    """A stored payload could not be turned back into a notification."""

    def __init__(self, message: str, payload: str | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class UnknownVariant(DecodeError):
    """The payload's type tag has no registered notification class."""

    def __init__(self, tag: str, payload: str | None = None) -> None:
        super().__init__(f"Unknown notification type '{tag}'", payload)
        self.tag = tag


class MalformedPayload(DecodeError):
    """The payload is not a JSON object or lacks an envelope field."""


class InvalidRetentionConfig(NotificationError, ValueError):
    """A retention configuration is empty, ambiguous or ill-typed."""


__all__ = [
    "DecodeError",
    "InvalidRetentionConfig",
    "MalformedPayload",
    "NotificationError",
    "StoreUnavailable",
    "UnknownVariant",
]
