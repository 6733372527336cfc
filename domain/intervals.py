"""Half-open date interval helpers.

Every range is ``[start, end)``: the start day is occupied, the end day is
not. A stay ending on the 5th and a stay starting on the 5th therefore do
not overlap, which is what lets a room turn over on checkout day.
"""
from datetime import date, datetime, timezone
from typing import Union

from domain.errors import InvalidRange

DateLike = Union[date, datetime]


def to_day(value: DateLike) -> date:
    """Drop the time-of-day component. Aware datetimes are read in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def overlaps(a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike) -> bool:
    """Overlap iff a_start < b_end AND b_start < a_end."""
    return to_day(a_start) < to_day(b_end) and to_day(b_start) < to_day(a_end)


def contains(start: DateLike, end: DateLike, day: DateLike) -> bool:
    return to_day(start) <= to_day(day) < to_day(end)


def nights(check_in: DateLike, check_out: DateLike) -> int:
    """Number of nights between two days; check_out must be after check_in."""
    start, end = to_day(check_in), to_day(check_out)
    if end <= start:
        raise InvalidRange(start, end)
    return (end - start).days
