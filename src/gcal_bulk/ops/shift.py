"""
Time-shifting of events for copy.
"""

from dataclasses import replace
from datetime import timedelta

from ..models import Event
from ..models import EventTime


def is_all_day(event: Event) -> bool:
    return event.start.is_date_only


def is_whole_days(delta: timedelta) -> bool:
    return delta.seconds == 0 and delta.microseconds == 0


def shift_event(event: Event, delta: timedelta, default_time_zone: str | None = None) -> Event:
    """
    Return an insertable copy of ``event`` moved by ``delta``.

    All-day events move by whole days only; ``delta.days`` floors any
    fractional part (so -1.5 days moves back two days). The exclusive end
    date moves by the same amount, keeping the length.

    Timed events move both instants by the exact delta. The start keeps its
    own time zone; the end keeps its own or falls back to
    ``default_time_zone``.

    The copy has no id and carries no recurrence; every other attribute is
    taken over unchanged.
    """
    if is_all_day(event):
        days = timedelta(days=delta.days)
        start = EventTime(date=event.start.date + days)
        end_date = event.end.date
        if end_date is None:
            end_date = event.start.date + timedelta(days=1)
        end = EventTime(date=end_date + days)
    else:
        start = EventTime(
            date_time=event.start.date_time + delta,
            time_zone=event.start.time_zone,
        )
        end = EventTime(
            date_time=event.end.date_time + delta,
            time_zone=event.end.time_zone or default_time_zone,
        )

    return replace(event, id="", start=start, end=end)
