import pytest
from datetime import datetime, timedelta

from evoting.elections.status import ElectionStatus, derive_status, utcnow

START = datetime(2025, 1, 1, 0, 0, 0)
END = datetime(2025, 1, 2, 0, 0, 0)


def test_active_inside_window():
    assert derive_status(datetime(2025, 1, 1, 12, 0), START, END) is ElectionStatus.ACTIVE


@pytest.mark.parametrize("now, expected", [
    (START - timedelta(seconds=1), ElectionStatus.UPCOMING),
    (START, ElectionStatus.ACTIVE),
    (END, ElectionStatus.ACTIVE),
    (END + timedelta(microseconds=1), ElectionStatus.COMPLETED),
])
def test_boundaries_are_inclusive(now, expected):
    assert derive_status(now, START, END) is expected


def test_status_is_monotonic_in_now():
    order = [ElectionStatus.UPCOMING, ElectionStatus.ACTIVE, ElectionStatus.COMPLETED]
    now = START - timedelta(hours=6)
    seen = []
    while now <= END + timedelta(hours=6):
        seen.append(order.index(derive_status(now, START, END)))
        now += timedelta(minutes=30)
    assert seen == sorted(seen)
    assert set(seen) == {0, 1, 2}


def test_zero_length_window_is_active_at_its_instant():
    assert derive_status(START, START, START) is ElectionStatus.ACTIVE


def test_status_values_match_stored_labels():
    assert [s.value for s in ElectionStatus] == ["Upcoming", "Active", "Completed"]


def test_utcnow_is_naive():
    assert utcnow().tzinfo is None
