"""
Google Calendar v3 connectivity wrapper.
"""

import logging
from datetime import datetime
from pathlib import Path

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .models import BulkConfig
from .models import CalendarStoreError
from .models import ConfigError

logger = logging.getLogger(__name__)

# Full calendar scope: list, patch, delete and insert.
SCOPES = ["https://www.googleapis.com/auth/calendar"]
APPLICATION_NAME = "gcal-bulk"
MAX_RESULTS_PER_PAGE = 2500

# Errors that mean "the API call did not go through".
_STORE_ERRORS = (HttpError, GoogleAuthError, OSError)


def _client_config(cfg: BulkConfig) -> dict:
    return {
        "installed": {
            "client_id": cfg.client_id,
            "client_secret": cfg.client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }


def load_credentials(cfg: BulkConfig) -> Credentials:
    """Return valid user credentials, running the browser flow if needed.

    The authorized-user token is cached at ``cfg.token_file`` and refreshed
    in place when it has expired.
    """
    creds = None
    token_file: Path = cfg.token_file

    if token_file.exists():
        creds = Credentials.from_authorized_user_file(str(token_file), SCOPES)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            logger.warning("Token refresh failed, re-authorizing: %s", e)
            creds = None

    if not creds or not creds.valid:
        if cfg.client_id and cfg.client_secret:
            flow = InstalledAppFlow.from_client_config(_client_config(cfg), SCOPES)
        elif cfg.client_secrets.exists():
            flow = InstalledAppFlow.from_client_secrets_file(str(cfg.client_secrets), SCOPES)
        else:
            raise ConfigError(
                f"No OAuth client configured: set client_id/client_secret or "
                f"provide {cfg.client_secrets}"
            )
        creds = flow.run_local_server(port=0)

    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text(creds.to_json(), encoding="utf-8")
    logger.debug("Saved OAuth token to %s", token_file)
    return creds


class GoogleCalendarStore:
    """Thin wrapper over the events/calendars resources of the v3 API."""

    def __init__(self, service):
        self.service = service

    @classmethod
    def connect(cls, cfg: BulkConfig) -> "GoogleCalendarStore":
        creds = load_credentials(cfg)
        try:
            service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to build Calendar service: {e}") from e
        return cls(service)

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        page_token: str | None = None,
    ) -> dict:
        """One page of expanded, non-deleted events overlapping the window."""
        try:
            return (
                self.service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    singleEvents=True,
                    showDeleted=False,
                    orderBy="startTime",
                    maxResults=MAX_RESULTS_PER_PAGE,
                    pageToken=page_token,
                )
                .execute()
            )
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to list events on {calendar_id}: {e}") from e

    def update_event(self, calendar_id: str, event_id: str, partial: dict) -> dict:
        """Patch only the given fields of an event."""
        try:
            return (
                self.service.events()
                .patch(calendarId=calendar_id, eventId=event_id, body=partial)
                .execute()
            )
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to update event {event_id}: {e}") from e

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            self.service.events().delete(calendarId=calendar_id, eventId=event_id).execute()
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to delete event {event_id}: {e}") from e

    def insert_event(self, calendar_id: str, body: dict) -> dict:
        try:
            return self.service.events().insert(calendarId=calendar_id, body=body).execute()
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to create event: {e}") from e

    def get_calendar(self, calendar_id: str) -> dict:
        try:
            return self.service.calendars().get(calendarId=calendar_id).execute()
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Calendar {calendar_id!r} not accessible: {e}") from e

    def list_calendars(self) -> list[dict]:
        """All calendar-list entries visible to the authorized account."""
        entries = []
        page_token = None
        try:
            while True:
                result = self.service.calendarList().list(pageToken=page_token).execute()
                entries.extend(result.get("items", []))
                page_token = result.get("nextPageToken")
                if not page_token:
                    break
        except _STORE_ERRORS as e:
            raise CalendarStoreError(f"Failed to list calendars: {e}") from e
        return entries


def get_calendar_display_info(store: GoogleCalendarStore, calendar_id: str) -> tuple[str, str]:
    """
    Get human-readable information about a calendar.

    Returns:
        Tuple of (display_name, time_zone)
    """
    try:
        cal = store.get_calendar(calendar_id)
    except CalendarStoreError as e:
        return (f"Error: {e}", "")
    return (cal.get("summary") or "Unnamed Calendar", cal.get("timeZone") or "")
