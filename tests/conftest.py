"""
Shared pytest fixtures and event-resource helpers.
"""

import logging

import pytest

from gcal_bulk.models import BulkConfig
from gcal_bulk.models import Rule
from gcal_bulk.models import RunStats

CALENDAR_ID = "test-calendar"


def make_timed_event(
    summary: str | None,
    start: str,
    end: str,
    event_id: str | None = None,
    time_zone: str | None = None,
    end_time_zone: str | None = None,
    **extra,
) -> dict:
    """Return a Google API event resource with dateTime start/end."""
    item = {
        "summary": summary,
        "start": {"dateTime": start},
        "end": {"dateTime": end},
    }
    if time_zone:
        item["start"]["timeZone"] = time_zone
    if end_time_zone:
        item["end"]["timeZone"] = end_time_zone
    if event_id:
        item["id"] = event_id
    if summary is None:
        del item["summary"]
    item.update(extra)
    return item


def make_all_day_event(
    summary: str, start: str, end: str, event_id: str | None = None, **extra
) -> dict:
    """Return a Google API event resource with date-only start/end (end exclusive)."""
    item = {
        "summary": summary,
        "start": {"date": start},
        "end": {"date": end},
    }
    if event_id:
        item["id"] = event_id
    item.update(extra)
    return item


@pytest.fixture
def run_config():
    return BulkConfig(
        calendar_id=CALENDAR_ID,
        time_zone="Europe/Berlin",
        color_rules=[Rule("contains", "Gym", "5", name="gym")],
        delete_rules=[Rule("equals", "Cancelled", name="cancelled")],
    )


@pytest.fixture
def run_logger():
    return logging.getLogger("test_bulk")


@pytest.fixture
def run_stats():
    return RunStats()
