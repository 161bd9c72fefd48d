"""Utility functions for SQLite adapter."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def generate_uuid() -> str:
    """Generate a new UUID as string.

    Returns:
        UUID string (e.g., "123e4567-e89b-12d3-a456-426614174000")
    """
    return str(uuid.uuid4())


def now_utc() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime for storage.

    Always UTC with microseconds, so the text sorts in time order.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a stored timestamp back into an aware UTC datetime.

    Args:
        value: String, datetime object, or None

    Returns:
        datetime object or None
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def contains_casefold(haystack: str | None, needle: str | None) -> int:
    """Case-insensitive substring test, registered as an SQL function.

    Unlike LIKE, this folds non-ASCII text too. Returns 0/1 for SQLite.
    """
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())
