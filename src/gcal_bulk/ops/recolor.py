"""
Rule-driven recoloring.
"""

from datetime import datetime

from ..google_client import GoogleCalendarStore
from ..matching import select_first_match
from ..matching import validate_rules
from ..models import BulkConfig
from ..models import CalendarStoreError
from ..models import RunStats
from .scan import scan_window


def run_recolor(
    config: BulkConfig,
    stats: RunStats,
    logger,
    store: GoogleCalendarStore,
    window_start: datetime,
    window_end: datetime,
):
    """Set each event's color from the first color rule its title matches."""
    validate_rules(config.color_rules, strict_types=not config.lenient_match_types)
    logger.info(f"[COLOR] {window_start}..{window_end} on '{config.calendar_id}'")

    try:
        for event in scan_window(store, config.calendar_id, window_start, window_end):
            summary = event.summary or ""
            when = event.start.display()
            rule = select_first_match(summary, config.color_rules)

            if rule is None or not rule.color_id:
                stats.unmatched += 1
                logger.info(f"[NO RULE] {when}  {summary}")
                continue

            if event.color_id == rule.color_id:
                stats.unchanged += 1
                logger.info(f"[SKIP] {when}  {summary} (already {rule.color_id})")
                continue

            store.update_event(config.calendar_id, event.id, {"colorId": rule.color_id})
            stats.updated += 1
            logger.info(f"[UPD] {when}  {summary}  -> colorId={rule.color_id}")
    except CalendarStoreError as e:
        logger.error(f"Recolor aborted after {stats.updated} update(s): {e}")
        raise
