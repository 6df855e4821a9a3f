"""Time utilities."""
from datetime import datetime, timezone


def utc_now() -> str:
    """Get current UTC timestamp as ISO string, second precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def parse_iso_timestamp(value: object) -> datetime | None:
    """Parse ISO timestamp string to an aware datetime (naive values are UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp_sort_key(value: object) -> float:
    """Sort key for stored timestamps; unparseable values sort first."""
    parsed = parse_iso_timestamp(value)
    return parsed.timestamp() if parsed else 0.0
