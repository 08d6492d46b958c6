"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_cursor(cursor: str | None) -> datetime | None:
    """Parse an ISO-8601 pagination cursor. Naive values are taken as UTC.

    Raises ValueError on malformed input.
    """
    if cursor is None or cursor == "":
        return None
    # fromisoformat on 3.11+ accepts the trailing "Z" JS clients send
    parsed = datetime.fromisoformat(cursor)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
