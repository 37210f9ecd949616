"""Epoch-second helpers. Storage keeps integer epochs, entities carry datetimes."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def now_epoch() -> int:
    """Current time as whole epoch seconds."""
    return int(time.time())


def epoch_to_datetime(epoch: int | str | None) -> datetime | None:
    """Decode a stored epoch column into an aware UTC datetime. None passes through."""
    if epoch is None or epoch == "":
        return None
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc)


def datetime_to_epoch(value: datetime) -> int:
    """Encode a datetime for storage."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())
