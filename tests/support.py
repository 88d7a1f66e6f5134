"""Constants shared by fixtures and test modules."""

from __future__ import annotations

from datetime import datetime, timezone

FIXED_INSTANT = datetime(2020, 5, 11, 15, 1, 1, tzinfo=timezone.utc)
FIXED_TIMESTAMP = "2020-05-11T15:01:01.000Z"
