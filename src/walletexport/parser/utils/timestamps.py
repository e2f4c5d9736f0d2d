"""Timestamp parsing. Every result is timezone-aware UTC; failures yield None."""

import re
from datetime import UTC, datetime

_FRACTION = re.compile(r"\.(\d+)")


def parse_iso(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().replace("Z", "+00:00")
    # Cosmos nodes emit nanosecond precision; datetime takes microseconds
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def from_unix(value: object, unit: str = "s") -> datetime | None:
    """Parse a unix timestamp given in seconds ("s") or nanoseconds ("ns")."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if number <= 0:
        return None
    seconds, remainder = (number, 0) if unit == "s" else divmod(number, 1_000_000_000)
    try:
        ts = datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None
    return ts.replace(microsecond=remainder // 1000)
