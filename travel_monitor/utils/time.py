"""
Time helpers.

Fix timestamps reported by the location subsystem are authoritative for
region change events; wall-clock time is only used when a fix carries none
and for operational records such as outcomes.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(ts: Optional[datetime]) -> datetime:
    """
    Normalize a timestamp to aware UTC.

    Naive datetimes are assumed to already be UTC. A missing timestamp falls
    back to wall-clock time.
    """
    if ts is None:
        return utc_now()
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """Format a timestamp as ISO 8601 with a trailing Z."""
    return ensure_utc(ts).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing Z."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))
