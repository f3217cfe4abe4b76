"""Calendar File Transfer - Core logic.

Stores files as events in a dedicated calendar. Every transfer event sits in
the same one-hour slot on a fixed date, so a single window query finds them
all. The calendar provider's own sync carries the events to the other machine.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config.settings import Settings
from transfer.errors import ConfigurationError, NoFilesCalendarError, TransferFileNotFoundError
from transfer.google_client import (
    build_service,
    delete_event,
    fetch_events,
    find_calendar,
    insert_event,
    list_calendars,
    load_credentials,
)
from transfer.history import log_transfer
from transfer.payload import (
    FIELD_COUNT,
    TransferFile,
    decode_payload,
    encode_notes,
    parse_notes,
    parse_size,
    split_notes,
)

logger = logging.getLogger(__name__)

SLOT_HOUR = 12
SLOT_DURATION = timedelta(hours=1)


class CalendarFileTransfer:
    """Uploads, downloads and lists files stored in calendar events."""

    def __init__(self, settings: Settings, service: Any = None) -> None:
        """Connect to the account and select the transfer calendar.

        Args:
            settings: Application settings.
            service: Calendar v3 API client. Built from the saved OAuth token
                when omitted.

        Raises:
            ConfigurationError: If the transfer date or timezone is invalid.
            CalendarAccessDeniedError: If no usable token is available.
            NoFilesCalendarError: If no calendar is titled settings.calendar_name.
        """
        self.settings = settings
        self.prefix = settings.event_prefix
        self.slot_start = transfer_slot_start(settings)
        self.slot_end = self.slot_start + SLOT_DURATION

        if service is None:
            creds = load_credentials(settings.google_credentials_path, settings.google_token_path)
            service = build_service(creds)
        self.service = service

        calendars = list_calendars(self.service)
        for cal in calendars:
            logger.debug(
                "Available calendar: %s (id=%s, access=%s)",
                cal.get("summary"),
                cal.get("id"),
                cal.get("accessRole"),
            )

        calendar = find_calendar(calendars, settings.calendar_name)
        if calendar is None:
            raise NoFilesCalendarError(
                f"No calendar named '{settings.calendar_name}' found. "
                "Create it on the shared account first."
            )

        self.calendar_id: str = calendar["id"]
        self.calendar_name: str = calendar.get("summary", settings.calendar_name)
        logger.info("Using calendar: %s", self.calendar_name)

    # -----------------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------------

    def upload_file(self, path: str | Path) -> TransferFile:
        """Store a local file in the transfer calendar.

        Replaces an earlier upload of a file with the same name.

        Raises:
            TransferFileNotFoundError: If path is not an existing file.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise TransferFileNotFoundError(f"File not found: {file_path}")

        content = file_path.read_bytes()
        file_name = file_path.name

        self.cleanup_existing(file_name)

        body = {
            "summary": self.prefix + file_name,
            "start": self._slot_time(self.slot_start),
            "end": self._slot_time(self.slot_end),
            "description": encode_notes(file_name, content),
        }
        insert_event(self.service, self.calendar_id, body)

        log_transfer("upload", file_name, len(content), calendar=self.calendar_name)
        return TransferFile(name=file_name, size=len(content))

    def download_file(self, file_name: str, save_dir: str | Path) -> Path:
        """Decode a transfer event and write the file into save_dir.

        Returns:
            Path of the written file.

        Raises:
            TransferFileNotFoundError: If no event holds file_name.
            InvalidEventFormatError: If the event's notes aren't a payload.
            InvalidFileDataError: If the payload data is corrupt.
        """
        event = self._find_event(file_name)
        if event is None:
            raise TransferFileNotFoundError(f"No uploaded file named '{file_name}'.")

        payload = parse_notes(event.get("description"))
        content = decode_payload(payload)

        target = Path(save_dir) / file_name
        target.write_bytes(content)
        logger.info("Wrote %d bytes to %s", len(content), target)

        log_transfer("download", file_name, len(content), calendar=self.calendar_name)
        return target

    def list_available_files(self) -> list[TransferFile]:
        """List files stored in the transfer calendar, sorted by name.

        Events whose notes don't split into a full payload are skipped.
        """
        files = []
        for event in self._slot_events():
            title = event.get("summary", "")
            if not title.startswith(self.prefix):
                continue
            fields = split_notes(event.get("description"))
            if len(fields) != FIELD_COUNT:
                logger.debug("Skipping event '%s': malformed notes", title)
                continue
            files.append(TransferFile(name=title.replace(self.prefix, ""), size=parse_size(fields[2])))

        return sorted(files, key=lambda f: f.name)

    def cleanup_existing(self, file_name: str) -> bool:
        """Delete the event holding file_name, if any.

        Returns:
            True if an event was deleted.
        """
        title = self.prefix + file_name
        for event in self._slot_events():
            if event.get("summary") == title:
                delete_event(self.service, self.calendar_id, event["id"])
                return True
        return False

    def delete_file(self, file_name: str) -> None:
        """Remove an uploaded file from the transfer calendar.

        Raises:
            TransferFileNotFoundError: If no event holds file_name.
        """
        if not self.cleanup_existing(file_name):
            raise TransferFileNotFoundError(f"No uploaded file named '{file_name}'.")
        log_transfer("delete", file_name, 0, calendar=self.calendar_name)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _slot_events(self) -> list[dict[str, Any]]:
        """Fetch every event in the transfer slot."""
        return fetch_events(
            self.service,
            self.calendar_id,
            self.slot_start.isoformat(),
            self.slot_end.isoformat(),
        )

    def _find_event(self, file_name: str) -> dict[str, Any] | None:
        """Find the first event holding file_name.

        Matches the full prefixed title, or a title that equals file_name
        once every occurrence of the prefix is removed.
        """
        title = self.prefix + file_name
        for event in self._slot_events():
            summary = event.get("summary", "")
            if summary == title or summary.replace(self.prefix, "") == file_name:
                return event
        return None

    def _slot_time(self, moment: datetime) -> dict[str, str]:
        """Build an event start/end dict for the Calendar API."""
        return {"dateTime": moment.isoformat(), "timeZone": self.settings.transfer_timezone}


def transfer_slot_start(settings: Settings) -> datetime:
    """Start of the transfer slot: noon on the configured date and timezone.

    Raises:
        ConfigurationError: If TRANSFER_DATE or TRANSFER_TIMEZONE is invalid.
    """
    try:
        tz = ZoneInfo(settings.transfer_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown TRANSFER_TIMEZONE '{settings.transfer_timezone}'. "
            "Use an IANA name such as 'UTC' or 'Europe/Berlin'."
        ) from e

    try:
        day = datetime.strptime(settings.transfer_date, "%Y-%m-%d")
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid TRANSFER_DATE '{settings.transfer_date}'. Use YYYY-MM-DD."
        ) from e

    return day.replace(hour=SLOT_HOUR, tzinfo=tz)
