"""Default clock adapter."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current instant as an aware UTC ``datetime``."""

    return datetime.now(timezone.utc)
