"""Transfer payload codec.

A file travels inside an event's notes as four pipe-delimited fields:

    FILE_TRANSFER_DATA|<file name>|<size in bytes>|<base64 data>

The marker lets the receiver reject events that were not written by this
tool. The size field lets it detect truncation by the calendar provider.
"""

import base64
import binascii
from dataclasses import dataclass

from transfer.errors import InvalidEventFormatError, InvalidFileDataError

PAYLOAD_MARKER = "FILE_TRANSFER_DATA"
FIELD_SEPARATOR = "|"
FIELD_COUNT = 4


@dataclass(frozen=True)
class TransferFile:
    """A file available for download."""

    name: str
    size: int


@dataclass(frozen=True)
class Payload:
    """The decoded fields of a transfer event's notes."""

    file_name: str
    size: int
    data: str


def encode_notes(file_name: str, content: bytes) -> str:
    """Encode a file into event notes.

    Args:
        file_name: Name the receiver will save the file under.
        content: Raw file bytes.

    Returns:
        The notes string.
    """
    encoded = base64.b64encode(content).decode("ascii")
    return FIELD_SEPARATOR.join([PAYLOAD_MARKER, file_name, str(len(content)), encoded])


def split_notes(notes: str | None) -> list[str]:
    """Split notes into fields. Missing notes give no fields."""
    if notes is None:
        return []
    return notes.split(FIELD_SEPARATOR)


def parse_size(field: str) -> int:
    """Parse the size field, treating anything unparsable as 0.

    Only an optional sign followed by ASCII digits is accepted; int() alone
    would also take whitespace and underscores.
    """
    digits = field[1:] if field[:1] in ("+", "-") else field
    if not (digits.isascii() and digits.isdigit()):
        return 0
    return int(field)


def validate_notes(notes: str | None) -> tuple[bool, str]:
    """Check that notes hold a transfer payload.

    Args:
        notes: The event notes, possibly None.

    Returns:
        (is_valid, error_description).
    """
    if not isinstance(notes, str):
        return False, "Event has no notes."

    if not notes.startswith(PAYLOAD_MARKER):
        return False, f"Event notes do not start with {PAYLOAD_MARKER}."

    fields = split_notes(notes)
    if len(fields) != FIELD_COUNT:
        return False, f"Event notes must have {FIELD_COUNT} fields, got {len(fields)}."

    return True, ""


def parse_notes(notes: str | None) -> Payload:
    """Parse event notes into a Payload.

    Raises:
        InvalidEventFormatError: If the notes are not a transfer payload.
    """
    is_valid, err = validate_notes(notes)
    if not is_valid:
        raise InvalidEventFormatError(err)

    _, file_name, size, data = split_notes(notes)
    return Payload(file_name=file_name, size=parse_size(size), data=data)


def decode_payload(payload: Payload) -> bytes:
    """Decode the base64 data of a payload and check its size.

    Raises:
        InvalidFileDataError: If the data is not valid base64 or its decoded
            length differs from the declared size.
    """
    try:
        content = base64.b64decode(payload.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFileDataError(f"File data is not valid base64: {e}") from e

    if len(content) != payload.size:
        raise InvalidFileDataError(
            f"File data is {len(content)} bytes, expected {payload.size} bytes."
        )
    return content
