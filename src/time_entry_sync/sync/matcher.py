"""Content-based matching of time entries across services.

The two services never share an identifier, so an entry is considered the
same real-world entry when its content matches.
"""

from time_entry_sync.adapters.models import TimeEntry

# Each service rounds durations independently.
DURATION_TOLERANCE_SECONDS = 60


def are_similar(a: TimeEntry, b: TimeEntry) -> bool:
    """Check whether two entries from different services describe the same work.

    Args:
        a: Entry from one service.
        b: Entry from the other service.

    Returns:
        True if the trimmed descriptions are equal, both fall on the same
        calendar day and the durations differ by less than a minute.
    """
    return (
        a.description.strip() == b.description.strip()
        and a.date == b.date
        and abs(a.duration_in_seconds - b.duration_in_seconds) < DURATION_TOLERANCE_SECONDS
    )


def has_counterpart(entry: TimeEntry, candidates: list[TimeEntry]) -> bool:
    """Check whether any candidate is similar to the entry."""
    return any(are_similar(entry, candidate) for candidate in candidates)
