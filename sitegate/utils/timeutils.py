"""Helpers de data/hora em UTC."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Naive UTC timestamp, the form SQLite hands back from ``DateTime`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
