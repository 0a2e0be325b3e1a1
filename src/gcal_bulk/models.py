"""
Pure data models — no Google API imports.
"""

import datetime as dt
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from pathlib import Path
from typing import Any

from dateutil.parser import isoparse

DEFAULT_CONFIG = Path.home() / ".config/gcal-bulk.conf"
DEFAULT_CLIENT_SECRETS = Path.home() / ".config/gcal-bulk-credentials.json"
DEFAULT_TOKEN_FILE = Path.home() / ".local/share/gcal-bulk-token.json"
DEFAULT_CALENDAR_ID = "primary"

# Attributes copied verbatim from a source event onto its shifted copy.
PASSTHROUGH_FIELDS = ("description", "location", "reminders", "visibility", "source")


class CalendarBulkError(Exception):
    """Base exception for bulk calendar operations."""

    pass


class ConfigError(CalendarBulkError):
    """Invalid configuration or arguments, detected before any API call."""

    pass


class CalendarStoreError(CalendarBulkError):
    """A Google Calendar API call failed."""

    pass


class BulkOperationError(CalendarBulkError):
    """A run was aborted part-way; ``stats`` holds the counters collected so far."""

    def __init__(self, message: str, stats: "RunStats"):
        super().__init__(message)
        self.stats = stats


class MatchType(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    REGEX = "regex"

    @classmethod
    def parse(cls, value: str | None) -> "MatchType | None":
        """Return the member for a case-insensitive tag, or None if unknown."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Rule:
    """One title-matching rule from the config file."""

    match_type: str
    pattern: str
    color_id: str | None = None
    name: str = ""

    @property
    def kind(self) -> MatchType | None:
        return MatchType.parse(self.match_type)

    def describe(self) -> str:
        label = self.name or self.pattern
        return f"{label} ({self.match_type}: {self.pattern!r})"


@dataclass(frozen=True)
class EventTime:
    """Either a calendar day (``date``) or an instant (``date_time``) plus zone."""

    date: dt.date | None = None
    date_time: dt.datetime | None = None
    time_zone: str | None = None

    @property
    def is_date_only(self) -> bool:
        return self.date is not None and self.date_time is None

    @classmethod
    def from_api(cls, value: dict | None) -> "EventTime":
        if not value:
            return cls()
        raw_date = value.get("date")
        raw_dt = value.get("dateTime")
        return cls(
            date=dt.date.fromisoformat(raw_date) if raw_date else None,
            date_time=isoparse(raw_dt) if raw_dt else None,
            time_zone=value.get("timeZone"),
        )

    def to_api(self) -> dict[str, str]:
        if self.date_time is not None:
            body = {"dateTime": self.date_time.isoformat()}
            if self.time_zone:
                body["timeZone"] = self.time_zone
            return body
        if self.date is not None:
            return {"date": self.date.isoformat()}
        return {}

    def display(self) -> str:
        if self.date_time is not None:
            return self.date_time.isoformat()
        if self.date is not None:
            return self.date.isoformat()
        return "?"


@dataclass(frozen=True)
class Event:
    """A single (already expanded) calendar event instance."""

    id: str = ""
    summary: str | None = None
    start: EventTime = field(default_factory=EventTime)
    end: EventTime = field(default_factory=EventTime)
    color_id: str | None = None
    description: str | None = None
    location: str | None = None
    reminders: dict[str, Any] | None = None
    visibility: str | None = None
    source: dict[str, Any] | None = None

    @classmethod
    def from_api(cls, item: dict) -> "Event":
        """Build an Event from a Google Calendar v3 event resource."""
        return cls(
            id=item.get("id") or "",
            summary=item.get("summary"),
            start=EventTime.from_api(item.get("start")),
            end=EventTime.from_api(item.get("end")),
            color_id=item.get("colorId"),
            description=item.get("description"),
            location=item.get("location"),
            reminders=item.get("reminders"),
            visibility=item.get("visibility"),
            source=item.get("source"),
        )

    def to_api(self) -> dict[str, Any]:
        """Insertable resource body: absent fields omitted, never ``id``."""
        body: dict[str, Any] = {
            "start": self.start.to_api(),
            "end": self.end.to_api(),
        }
        if self.summary is not None:
            body["summary"] = self.summary
        if self.color_id is not None:
            body["colorId"] = self.color_id
        for name in PASSTHROUGH_FIELDS:
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


@dataclass
class BulkConfig:
    """Configuration for one bulk run."""

    calendar_id: str = DEFAULT_CALENDAR_ID
    time_zone: str | None = None
    color_rules: list[Rule] = field(default_factory=list)
    delete_rules: list[Rule] = field(default_factory=list)
    client_secrets: Path = DEFAULT_CLIENT_SECRETS
    token_file: Path = DEFAULT_TOKEN_FILE
    client_id: str | None = None
    client_secret: str | None = None
    lenient_match_types: bool = False
    verbose: bool = False


@dataclass
class RunStats:
    """Counters for one bulk run."""

    updated: int = 0
    deleted: int = 0
    created: int = 0
    skipped: int = 0
    unchanged: int = 0
    unmatched: int = 0
