"""Centralized environment-driven settings.

Keep this module lightweight: stdlib only, no package imports, to avoid circular deps.
"""

from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Redis holding the feeds and watermarks.
# Configured via .env: REDIS_URL=redis://cache:6379/0
REDIS_URL: str = os.getenv("REDIS_URL") or "redis://cache:6379/0"

# Upper bound (seconds) for a single Redis round trip.
REDIS_SOCKET_TIMEOUT: float = _float_env("REDIS_SOCKET_TIMEOUT", 2.0)

# Feed size kept by the notifications page cleanup.
NOTIFICATIONS_MAX_NUM: int = _int_env("NOTIFICATIONS_MAX_NUM", 30)

# New-count badge shows "<cap>+" above this value.
NEW_COUNT_DISPLAY_CAP: int = _int_env("NEW_COUNT_DISPLAY_CAP", 30)

# Maximum length of a stored comment preview, ellipsis included.
COMMENT_PREVIEW_LENGTH: int = _int_env("COMMENT_PREVIEW_LENGTH", 100)
