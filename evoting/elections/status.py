# evoting/elections/status.py

from datetime import datetime, timezone
from enum import Enum


class ElectionStatus(Enum):
    UPCOMING = "Upcoming"
    ACTIVE = "Active"
    COMPLETED = "Completed"


def utcnow():
    """Current server time as a naive UTC datetime, matching stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def derive_status(now, start, end):
    """Status of a voting window at ``now``. Active includes both boundary instants."""
    if now < start:
        return ElectionStatus.UPCOMING
    if now <= end:
        return ElectionStatus.ACTIVE
    return ElectionStatus.COMPLETED
