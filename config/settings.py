"""Global Settings - Loads configuration from environment variables.

Centralizes all configuration so the transfer code doesn't read env vars
directly. Both machines sharing a calendar must agree on the calendar name,
event prefix, transfer date and timezone.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Application-wide settings loaded from environment variables."""

    # Google Calendar
    google_credentials_path: str = "credentials.json"
    google_token_path: str = "token.json"

    # Transfer slot
    calendar_name: str = "files"
    event_prefix: str = "FileTransfer_"
    transfer_date: str = "2024-01-01"
    transfer_timezone: str = "UTC"


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults.

    Environment variables:
        GOOGLE_CALENDAR_CREDENTIALS_PATH: Path to Google OAuth credentials.json
        GOOGLE_CALENDAR_TOKEN_PATH: Path to saved OAuth token.json
        TRANSFER_CALENDAR_NAME: Title of the calendar holding transfer events
        TRANSFER_EVENT_PREFIX: Prefix of transfer event titles
        TRANSFER_DATE: Date of the transfer slot (YYYY-MM-DD)
        TRANSFER_TIMEZONE: IANA timezone the slot's noon is anchored in

    Returns:
        A populated Settings instance.
    """
    return Settings(
        google_credentials_path=os.getenv("GOOGLE_CALENDAR_CREDENTIALS_PATH", "credentials.json"),
        google_token_path=os.getenv("GOOGLE_CALENDAR_TOKEN_PATH", "token.json"),
        calendar_name=os.getenv("TRANSFER_CALENDAR_NAME", "files"),
        event_prefix=os.getenv("TRANSFER_EVENT_PREFIX", "FileTransfer_"),
        transfer_date=os.getenv("TRANSFER_DATE", "2024-01-01"),
        transfer_timezone=os.getenv("TRANSFER_TIMEZONE", "UTC"),
    )
