"""Half-open interval and overlap predicate tests."""

from datetime import datetime, timedelta

import pytest

from tablebook.services.errors import InvalidInterval
from tablebook.services.intervals import BoundedInterval, OpenEndedInterval, duration, interval_from, overlaps


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute)


def test_overlap_is_symmetric() -> None:
    pairs = [
        (BoundedInterval(_at(10), _at(12)), BoundedInterval(_at(11), _at(13))),
        (BoundedInterval(_at(10), _at(12)), BoundedInterval(_at(12), _at(14))),
        (BoundedInterval(_at(10), _at(12)), OpenEndedInterval(_at(11))),
        (BoundedInterval(_at(10), _at(12)), OpenEndedInterval(_at(12))),
        (OpenEndedInterval(_at(9)), OpenEndedInterval(_at(20))),
    ]
    for a, b in pairs:
        assert overlaps(a, b) == overlaps(b, a)


def test_touching_endpoints_do_not_overlap() -> None:
    assert overlaps(BoundedInterval(_at(10), _at(12)), BoundedInterval(_at(12), _at(14))) is False
    assert overlaps(BoundedInterval(_at(12), _at(14)), BoundedInterval(_at(10), _at(12))) is False


def test_interval_overlaps_itself() -> None:
    span = BoundedInterval(_at(18), _at(18, 30))
    assert overlaps(span, span) is True


def test_contained_interval_overlaps() -> None:
    assert overlaps(BoundedInterval(_at(10), _at(14)), BoundedInterval(_at(11), _at(12))) is True


def test_open_ended_interval_blocks_everything_after_its_start() -> None:
    open_span = OpenEndedInterval(_at(12))
    assert overlaps(open_span, BoundedInterval(_at(23), _at(23, 30))) is True
    assert overlaps(open_span, BoundedInterval(_at(11), _at(12, 1))) is True
    assert overlaps(open_span, BoundedInterval(_at(10), _at(12))) is False


def test_end_not_after_start_is_rejected() -> None:
    with pytest.raises(InvalidInterval):
        BoundedInterval(_at(12), _at(12))
    with pytest.raises(InvalidInterval):
        BoundedInterval(_at(12), _at(11))
    with pytest.raises(InvalidInterval):
        interval_from(_at(12), 0)


def test_duration_of_bounded_and_open_intervals() -> None:
    assert duration(interval_from(_at(19), 90)) == timedelta(minutes=90)
    assert duration(OpenEndedInterval(_at(19))) is None
