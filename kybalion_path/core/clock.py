"""
Clock helpers. The current time is always passed in; nothing here reads it.
"""

from __future__ import annotations

from datetime import UTC, datetime


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def day_key(now: datetime) -> str:
    """UTC calendar date as YYYY-MM-DD."""
    return as_utc(now).strftime("%Y-%m-%d")
