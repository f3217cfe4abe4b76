"""Google Calendar API wrapper.

Handles OAuth token loading, API client initialization, and the handful of
calendar and event calls the transfer needs. This module isolates all
Google-specific code so the transfer logic stays clean.
"""

import logging
from pathlib import Path
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from transfer.errors import CalendarAccessDeniedError

logger = logging.getLogger(__name__)

# Read/write: transfers create and delete events.
SCOPES = ["https://www.googleapis.com/auth/calendar"]


def load_credentials(credentials_path: str, token_path: str) -> Credentials:
    """Load or refresh Google OAuth credentials.

    Args:
        credentials_path: Path to the OAuth client credentials JSON file.
        token_path: Path to the saved token JSON file.

    Returns:
        Valid Credentials object.

    Raises:
        CalendarAccessDeniedError: If the token file doesn't exist, is invalid,
            or can't be refreshed. The user needs to run setup_calendar.py.
    """
    token_file = Path(token_path)
    if not token_file.exists():
        raise CalendarAccessDeniedError(
            f"Token file not found at {token_path}. "
            f"Run 'python setup_calendar.py' with client credentials from {credentials_path} "
            "to grant calendar access."
        )

    try:
        creds = Credentials.from_authorized_user_file(str(token_file), SCOPES)
    except ValueError as e:
        raise CalendarAccessDeniedError(
            f"Token file {token_path} is malformed: {e}. "
            "Run 'python setup_calendar.py' to re-authenticate."
        ) from e

    if creds and creds.expired and creds.refresh_token:
        logger.info("Refreshing expired token...")
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise CalendarAccessDeniedError(
                f"Calendar access was revoked or expired: {e}. "
                "Run 'python setup_calendar.py' to re-authenticate."
            ) from e
        token_file.write_text(creds.to_json())
        logger.info("Token refreshed and saved.")
    elif not creds or not creds.valid:
        raise CalendarAccessDeniedError(
            "Token is invalid and cannot be refreshed. "
            "Run 'python setup_calendar.py' to re-authenticate."
        )

    return creds


def build_service(creds: Credentials) -> Any:
    """Build a Calendar v3 API client."""
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def list_calendars(service: Any) -> list[dict[str, Any]]:
    """List every calendar on the account.

    Args:
        service: Calendar v3 API client.

    Returns:
        List of raw calendar list entries.
    """
    calendars: list[dict[str, Any]] = []
    page_token = None

    while True:
        result = service.calendarList().list(pageToken=page_token).execute()
        calendars.extend(result.get("items", []))
        page_token = result.get("nextPageToken")
        if not page_token:
            break

    logger.info("Found %d calendars", len(calendars))
    return calendars


def find_calendar(calendars: list[dict[str, Any]], name: str) -> dict[str, Any] | None:
    """Find the first calendar whose title is exactly `name`."""
    for cal in calendars:
        if cal.get("summary") == name:
            return cal
    return None


def fetch_events(
    service: Any,
    calendar_id: str,
    time_min: str,
    time_max: str,
) -> list[dict[str, Any]]:
    """Fetch events overlapping a time window.

    Args:
        service: Calendar v3 API client.
        calendar_id: Calendar ID to query.
        time_min: Window start as an RFC 3339 timestamp.
        time_max: Window end as an RFC 3339 timestamp.

    Returns:
        List of raw event dicts from the Google Calendar API.
    """
    logger.info("Fetching events from calendar '%s' (%s to %s)", calendar_id, time_min, time_max)

    events: list[dict[str, Any]] = []
    page_token = None

    while True:
        result = (
            service.events()
            .list(
                calendarId=calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                singleEvents=True,
                pageToken=page_token,
            )
            .execute()
        )
        events.extend(result.get("items", []))
        page_token = result.get("nextPageToken")
        if not page_token:
            break

    logger.info("Retrieved %d events from calendar '%s'", len(events), calendar_id)
    return events


def insert_event(service: Any, calendar_id: str, body: dict[str, Any]) -> dict[str, Any]:
    """Create an event and return it as stored by the provider."""
    event = service.events().insert(calendarId=calendar_id, body=body).execute()
    logger.info("Created event '%s' (%s)", event.get("summary"), event.get("id"))
    return event


def delete_event(service: Any, calendar_id: str, event_id: str) -> None:
    """Delete an event by ID."""
    service.events().delete(calendarId=calendar_id, eventId=event_id).execute()
    logger.info("Deleted event %s", event_id)
