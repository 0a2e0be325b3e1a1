"""
Rule-driven deletion.
"""

from datetime import datetime

from ..google_client import GoogleCalendarStore
from ..matching import any_match
from ..matching import validate_rules
from ..models import BulkConfig
from ..models import CalendarStoreError
from ..models import RunStats
from .scan import scan_window


def run_delete(
    config: BulkConfig,
    stats: RunStats,
    logger,
    store: GoogleCalendarStore,
    window_start: datetime,
    window_end: datetime,
):
    """Delete every event whose title matches any delete rule."""
    validate_rules(config.delete_rules, strict_types=not config.lenient_match_types)
    logger.info(f"[DELETE] {window_start}..{window_end} on '{config.calendar_id}'")

    try:
        for event in scan_window(store, config.calendar_id, window_start, window_end):
            summary = event.summary or ""
            if not any_match(summary, config.delete_rules):
                logger.debug(f"Keeping {event.start.display()}  {summary}")
                continue

            store.delete_event(config.calendar_id, event.id)
            stats.deleted += 1
            logger.info(f"[DEL] {event.start.display()}  {summary}")
    except CalendarStoreError as e:
        logger.error(f"Delete aborted after {stats.deleted} deletion(s): {e}")
        raise
