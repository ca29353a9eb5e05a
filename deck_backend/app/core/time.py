"""Time utilities for timezone-aware UTC datetimes and local wall-clock reads."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def local_now() -> datetime:
    """Wall-clock time of the presenting machine, used when a pacing request omits ``now``."""
    return datetime.now()
