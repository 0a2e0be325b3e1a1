"""
Window scanning and destination duplicate indexing.
"""

import logging
from collections.abc import Iterator
from datetime import datetime
from datetime import timezone
from typing import TYPE_CHECKING

from ..models import Event

if TYPE_CHECKING:
    from ..google_client import GoogleCalendarStore

_logger = logging.getLogger(__name__)

ALLDAY_TAG = "|ALLDAY|"
TIMED_TAG = "|TIMED|"


def scan_window(
    store: "GoogleCalendarStore",
    calendar_id: str,
    window_start: datetime,
    window_end: datetime,
) -> Iterator[Event]:
    """Yield every event overlapping ``[window_start, window_end)`` in start order.

    Pages are fetched lazily as the caller consumes the sequence. A failed
    page fetch propagates to the caller; there is no retry. To start over,
    call this again.
    """
    page_token = None
    page_no = 0
    while True:
        page_no += 1
        feed = store.list_events(calendar_id, window_start, window_end, page_token)
        items = feed.get("items") or []
        _logger.debug("Fetched page %d (%d events) from %s", page_no, len(items), calendar_id)
        for item in items:
            yield Event.from_api(item)
        page_token = feed.get("nextPageToken")
        if not page_token:
            return


def identity_key(event: Event) -> str:
    """Derive the duplicate-detection key for an event.

    ``summary|ALLDAY|YYYY-MM-DD`` for all-day events and
    ``summary|TIMED|<UTC ISO-8601 start>`` for timed ones. The instant is
    normalised to UTC so one moment has one spelling regardless of the offset
    the API reports it in. Keys are case-folded, so lookups are
    case-insensitive.
    """
    summary = event.summary or ""
    if event.start.is_date_only:
        key = f"{summary}{ALLDAY_TAG}{event.start.date.isoformat()}"
    else:
        start = event.start.date_time
        rendered = (
            start.astimezone(timezone.utc).isoformat(timespec="microseconds") if start else ""
        )
        key = f"{summary}{TIMED_TAG}{rendered}"
    return key.casefold()


def build_duplicate_index(
    store: "GoogleCalendarStore",
    calendar_id: str,
    window_start: datetime,
    window_end: datetime,
) -> set[str]:
    """Identity keys of every event already present in the window."""
    index: set[str] = set()
    for event in scan_window(store, calendar_id, window_start, window_end):
        index.add(identity_key(event))
    _logger.debug("Indexed %d existing event key(s) in target window", len(index))
    return index
