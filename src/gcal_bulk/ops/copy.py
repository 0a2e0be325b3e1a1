"""
Window-to-window copy with duplicate suppression.
"""

from datetime import datetime
from datetime import timedelta
from datetime import timezone

from ..google_client import GoogleCalendarStore
from ..models import BulkConfig
from ..models import CalendarStoreError
from ..models import RunStats
from .scan import build_duplicate_index
from .scan import identity_key
from .scan import scan_window
from .shift import is_all_day
from .shift import is_whole_days
from .shift import shift_event


def copy_offsets(source_start: datetime, target_start: datetime) -> tuple[timedelta, timedelta]:
    """Return ``(elapsed, wall_clock)`` offsets from source to target start.

    Timed events move by the elapsed (UTC) difference; all-day events move by
    the wall-clock difference, which is unaffected by DST changes.
    """
    elapsed = target_start.astimezone(timezone.utc) - source_start.astimezone(timezone.utc)
    wall_clock = target_start.replace(tzinfo=None) - source_start.replace(tzinfo=None)
    return elapsed, wall_clock


def run_copy(
    config: BulkConfig,
    stats: RunStats,
    logger,
    store: GoogleCalendarStore,
    source_start: datetime,
    source_end: datetime,
    target_start: datetime,
):
    """Copy every event in the source window to the same offset from ``target_start``.

    The target window (same width as the source) is indexed once before any
    insert. Events whose shifted identity key is already there are skipped.
    Events inserted by this run are not added to the index.
    """
    tz_label = config.time_zone or "calendar default"
    logger.info(
        f"[COPY] {source_start}..{source_end}  ->  starts at {target_start}  (tz={tz_label})"
    )

    delta, day_delta = copy_offsets(source_start, target_start)
    if not delta:
        logger.warning("Target start equals source start; nothing to shift. Aborting.")
        return

    source_start = source_start.astimezone(timezone.utc)
    source_end = source_end.astimezone(timezone.utc)
    target_start = target_start.astimezone(timezone.utc)
    target_end = target_start + (source_end - source_start)

    try:
        target_index = build_duplicate_index(store, config.calendar_id, target_start, target_end)

        warned_truncation = False
        for src in scan_window(store, config.calendar_id, source_start, source_end):
            offset = delta
            if is_all_day(src):
                offset = day_delta
                if not is_whole_days(offset) and not warned_truncation:
                    logger.warning(
                        f"Offset {offset} is not a whole number of days; "
                        f"all-day events move by {offset.days} day(s)"
                    )
                    warned_truncation = True

            candidate = shift_event(src, offset, config.time_zone)
            when = candidate.start.display()

            if identity_key(candidate) in target_index:
                stats.skipped += 1
                logger.info(f"[SKIP-EXISTS] {when} {candidate.summary}")
                continue

            store.insert_event(config.calendar_id, candidate.to_api())
            stats.created += 1
            logger.info(f"[NEW] {when}  {candidate.summary}")
    except CalendarStoreError as e:
        logger.error(f"Copy aborted after {stats.created} created / {stats.skipped} skipped: {e}")
        raise

    logger.info(f"Copy finished. Created: {stats.created}, Skipped (duplicates): {stats.skipped}")
