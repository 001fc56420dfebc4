"""Timestamp helpers for API payloads."""

from datetime import datetime


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with a ``Z`` suffix."""
    return datetime.utcnow().isoformat(timespec="milliseconds") + "Z"
