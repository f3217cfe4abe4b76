"""Google Calendar OAuth Setup.

Run this once on each machine to grant calendar access and save a token.
Opens your browser for the OAuth consent flow, then saves the token for
future use by calendar-transfer.

Usage:
    python setup_calendar.py
"""

from google_auth_oauthlib.flow import InstalledAppFlow

from config.settings import load_settings
from transfer.google_client import SCOPES


def main() -> None:
    """Run the OAuth flow and save the token."""
    settings = load_settings()

    print("Starting Google Calendar authentication...")
    print(f"Using credentials from: {settings.google_credentials_path}")
    print()

    flow = InstalledAppFlow.from_client_secrets_file(settings.google_credentials_path, SCOPES)
    creds = flow.run_local_server(port=0)

    with open(settings.google_token_path, "w") as f:
        f.write(creds.to_json())

    print()
    print(f"Token saved to: {settings.google_token_path}")
    print(f"Make sure a calendar named '{settings.calendar_name}' exists on this account.")
    print("You can now run: python main.py list")


if __name__ == "__main__":
    main()
