"""
Wire format for stored notifications.

A payload is a flat JSON object: the ``type`` tag plus every populated field.
Decoding looks the tag up in ``models.VARIANTS`` and hands the known fields to
the variant's constructor as-is. Fields the running code does not know about
are dropped, so feeds written by newer code stay readable.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Iterable

from .errors import DecodeError, MalformedPayload, UnknownVariant
from .models import VARIANTS, Notification

logger = logging.getLogger(__name__)

TYPE_FIELD = "type"


def to_fields(notification: Notification) -> dict[str, Any]:
    """Flat mapping of the type tag and every non-None field."""
    data: dict[str, Any] = {TYPE_FIELD: notification.type}
    for f in fields(notification):
        value = getattr(notification, f.name)
        if value is not None:
            data[f.name] = value
    return data


def encode(notification: Notification) -> str:
    return json.dumps(to_fields(notification), sort_keys=True, separators=(",", ":"))


def from_fields(data: dict[str, Any], payload: str | None = None) -> Notification:
    """Build the registered variant for ``data[TYPE_FIELD]`` from its stored fields."""
    tag = data.get(TYPE_FIELD)
    if tag is None:
        raise MalformedPayload("Payload has no 'type' field", payload)
    if not isinstance(tag, str):
        raise MalformedPayload(f"Payload 'type' must be a string, got {tag!r}", payload)

    cls = VARIANTS.get(tag)
    if cls is None:
        raise UnknownVariant(tag, payload)

    if data.get("time") is None:
        raise MalformedPayload("Payload has no 'time' field", payload)

    known = {f.name for f in fields(cls)}
    values = {name: value for name, value in data.items() if name in known}
    values["time"] = float(values["time"])

    ignored = set(data) - known - {TYPE_FIELD}
    if ignored:
        logger.debug(f"Ignoring unknown fields {sorted(ignored)} for {tag} notification")

    return cls(**values)


def decode(payload: str) -> Notification:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedPayload(f"Payload is not valid JSON: {e}", payload) from e

    if not isinstance(data, dict):
        raise MalformedPayload("Payload is not a JSON object", payload)

    try:
        return from_fields(data, payload)
    except (TypeError, ValueError) as e:
        # e.g. a non-numeric time
        raise MalformedPayload(f"Payload fields are invalid: {e}", payload) from e


@dataclass(frozen=True)
class DecodeFailure:
    """A payload in a window that could not be decoded."""

    index: int
    payload: str
    error: DecodeError


def decode_many(payloads: Iterable[str]) -> tuple[list[Notification], list[DecodeFailure]]:
    """
    Decode a window of payloads without stopping at the first bad one.

    Returns:
        Tuple of (notifications in input order, failures)
    """
    notifications: list[Notification] = []
    failures: list[DecodeFailure] = []
    for index, payload in enumerate(payloads):
        try:
            notifications.append(decode(payload))
        except DecodeError as e:
            failures.append(DecodeFailure(index=index, payload=payload, error=e))
    return notifications, failures
