"""Clock helpers shared by the blocklist sources and the in-memory caches.

Sources and caches compare plain epoch seconds so snapshots can be swapped
and expired without timezone bookkeeping. Tests patch ``epoch_seconds`` to
move time forward.

Usage:
    from burner_validator.core.datetime_utils import epoch_seconds, is_stale

    if is_stale(snapshot.fetched_at, interval_seconds=24 * 3600):
        schedule_refresh()
"""

import time


def epoch_seconds() -> float:
    """Current wall-clock time as epoch seconds."""
    return time.time()


def epoch_millis() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(epoch_seconds() * 1000)


def is_stale(fetched_at: float, interval_seconds: float) -> bool:
    """Check whether data fetched at ``fetched_at`` is older than the interval.

    Args:
        fetched_at: Epoch seconds of the last successful fetch
        interval_seconds: Maximum allowed age

    Returns:
        True if the data is older than interval_seconds
    """
    return epoch_seconds() - fetched_at > interval_seconds


def age_hours(fetched_at: float) -> float:
    """Age of a timestamp in hours."""
    return (epoch_seconds() - fetched_at) / 3600
