"""Transfer errors.

Every failure the CLI reports to the user is one of these. The message
attached to each instance is printed verbatim.
"""


class TransferError(Exception):
    """Base exception for calendar transfer errors."""


class CalendarAccessDeniedError(TransferError):
    """Raised when the calendar account cannot be accessed."""


class NoFilesCalendarError(TransferError):
    """Raised when the transfer calendar does not exist on the account."""


class TransferFileNotFoundError(TransferError):
    """Raised when a local file or a transfer event cannot be found."""


class InvalidEventFormatError(TransferError):
    """Raised when an event's notes are not a transfer payload."""


class InvalidFileDataError(TransferError):
    """Raised when payload data is corrupt or truncated."""


class ConfigurationError(TransferError):
    """Raised when transfer settings are invalid."""
