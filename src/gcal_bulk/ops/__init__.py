"""
BulkOperationRunner — thin orchestrator that delegates to ops submodules.
"""

import logging
from datetime import datetime

from gcal_bulk.google_client import GoogleCalendarStore
from gcal_bulk.models import BulkConfig
from gcal_bulk.models import BulkOperationError
from gcal_bulk.models import CalendarStoreError
from gcal_bulk.models import RunStats
from gcal_bulk.ops.copy import run_copy
from gcal_bulk.ops.delete import run_delete
from gcal_bulk.ops.recolor import run_recolor


class BulkOperationRunner:
    """Runs one recolor, delete or copy pass over a calendar."""

    def __init__(self, config: BulkConfig, store: GoogleCalendarStore):
        self.config = config
        self.store = store
        self.logger = logging.getLogger(__name__)
        self.stats = RunStats()

    def _run(self, label: str, func, *window) -> RunStats:
        self.stats = RunStats()
        try:
            func(self.config, self.stats, self.logger, self.store, *window)
        except CalendarStoreError as e:
            raise BulkOperationError(f"{label} failed: {e}", self.stats) from e
        return self.stats

    def recolor(self, window_start: datetime, window_end: datetime) -> RunStats:
        return self._run("Recolor", run_recolor, window_start, window_end)

    def delete(self, window_start: datetime, window_end: datetime) -> RunStats:
        return self._run("Delete", run_delete, window_start, window_end)

    def copy(
        self, source_start: datetime, source_end: datetime, target_start: datetime
    ) -> RunStats:
        return self._run("Copy", run_copy, source_start, source_end, target_start)
