"""Transfer history.

Logs every completed upload, download and delete to daily log files as
newline-delimited JSON (NDJSON). Running the tool on both machines gives two
histories; an upload with no matching download on the other side usually
means the calendar provider has not synced yet.
"""

import json
import logging
import socket
from datetime import datetime, timezone
from pathlib import Path

# Directory for transfer history logs
LOG_DIR = Path(__file__).parent.parent / "logs" / "transfers"

_error_logger = logging.getLogger("transfer.history")


def _ensure_log_dir() -> None:
    """Create the log directory if it doesn't exist."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def log_transfer(
    action: str,
    file_name: str,
    size: int,
    calendar: str | None = None,
) -> None:
    """Append a transfer to the daily history file.

    Each entry is a JSON object on its own line, which makes it easy to
    filter with jq.

    Args:
        action: "upload", "download" or "delete".
        file_name: Name of the transferred file.
        size: File size in bytes.
        calendar: Title of the calendar used.
    """
    now = datetime.now(timezone.utc)
    entry = {
        "logged_at": now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "action": action,
        "file_name": file_name,
        "size": size,
        "calendar": calendar,
        "host": socket.gethostname(),
    }

    try:
        _ensure_log_dir()
        log_file = LOG_DIR / f"{now.strftime('%Y-%m-%d')}.log"
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as e:
        _error_logger.error("Failed to write transfer history: %s", e)
