"""Calendar Transfer - Entry Point.

Moves files between machines that share a Google Calendar account by storing
them in calendar events.

Usage:
    python main.py upload <path>
    python main.py download <name> <save-directory>
    python main.py list
    python main.py delete <name>
"""

import argparse
import logging
import sys
from pathlib import Path

from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from config.settings import load_settings
from transfer.calendar_transfer import CalendarFileTransfer
from transfer.errors import TransferError

logger = logging.getLogger("main")

RULE = "------------------------"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="calendar-transfer",
        description="Transfer files using Calendar events.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log calendar API activity, including every available calendar.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload a file to Calendar")
    upload.add_argument("file_path", help="Path to the file to upload")

    download = subparsers.add_parser("download", help="Download a file from Calendar")
    download.add_argument("file_name", help="Name of the file to download")
    download.add_argument("save_directory", help="Directory to save the downloaded file")

    subparsers.add_parser("list", help="List all available files for transfer")

    delete = subparsers.add_parser("delete", help="Remove an uploaded file from Calendar")
    delete.add_argument("file_name", help="Name of the file to remove")

    return parser


def run_list(transfer: CalendarFileTransfer) -> None:
    files = transfer.list_available_files()

    if not files:
        print("No files available for transfer")
        return

    print()
    print("Available files:")
    print(RULE)
    for f in files:
        print(f"File: {f.name}")
        print(f"Size: {f.size} bytes")
        print(RULE)


def run_upload(transfer: CalendarFileTransfer, file_path: str) -> None:
    uploaded = transfer.upload_file(file_path)
    print("Success! File uploaded successfully")
    print(f"Stored {uploaded.name} ({uploaded.size} bytes)")
    print("Use 'calendar-transfer list' to see all available files")
    print("Use 'calendar-transfer download <filename> <save-directory>' to download")


def run_download(transfer: CalendarFileTransfer, file_name: str, save_directory: str) -> None:
    transfer.download_file(file_name, save_directory)
    print(f"File downloaded successfully to: {save_directory}")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the requested transfer command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    settings = load_settings()

    if args.command == "upload":
        print(f"Uploading file: {Path(args.file_path).name}")
    elif args.command == "download":
        print(f"Downloading file: {args.file_name}")

    try:
        transfer = CalendarFileTransfer(settings)

        if args.command == "list":
            run_list(transfer)
        elif args.command == "upload":
            run_upload(transfer, args.file_path)
        elif args.command == "download":
            run_download(transfer, args.file_name, args.save_directory)
        elif args.command == "delete":
            transfer.delete_file(args.file_name)
            print(f"Deleted file: {args.file_name}")

    except TransferError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except HttpError as e:
        logger.debug("Calendar API error", exc_info=True)
        print(f"Error: Calendar API request failed: {e.reason}", file=sys.stderr)
        return 1
    except (TransportError, HttpLib2Error) as e:
        # Raised when Google can't be reached, e.g. while offline
        logger.debug("Calendar API connection error", exc_info=True)
        print(f"Error: Calendar API request failed: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
