"""Text form of a Record: `<timestamp> [<status code> [<elapsed microseconds>]]`."""

import re
from datetime import datetime, timezone
from typing import Optional
from pydantic import ValidationError
from models.record import Record
from services.errors import MalformedRecord

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
TIMESTAMP_SIZE = 20
_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")
_UINT_RE = re.compile(r"^\d+$")

MAX_STATUS_CODE = 65535

# digit positions are 0, everything else is literal
_TIMESTAMP_TEMPLATE = "0000-00-00T00:00:00Z"
_DIGITS = "0123456789"


def format_timestamp(unix_time: int) -> str:
    return datetime.fromtimestamp(unix_time, tz=timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(token: str) -> int:
    if len(token) != TIMESTAMP_SIZE or not _TIMESTAMP_RE.match(token):
        raise MalformedRecord(f"timestamp {token!r} is not of the form YYYY-MM-DDTHH:MM:SSZ", token)
    try:
        parsed = datetime.strptime(token, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise MalformedRecord(f"invalid timestamp {token!r}: {e}", token) from e
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def is_truncated_timestamp(line: str) -> bool:
    """True when the line is a proper prefix of a timestamp, as left by a torn write."""
    token = line.strip()
    if not 0 < len(token) < TIMESTAMP_SIZE:
        return False
    return all(
        c in _DIGITS if expected == "0" else c == expected
        for c, expected in zip(token, _TIMESTAMP_TEMPLATE)
    )


def _parse_uint(token: str, upper: Optional[int] = None) -> Optional[int]:
    if not _UINT_RE.match(token):
        return None
    value = int(token)
    if upper is not None and value > upper:
        return None
    return value


def encode(record: Record) -> str:
    """Encode a record as one log line, without the trailing newline."""
    parts = [format_timestamp(record.timestamp)]
    if record.status_code is not None:
        parts.append(str(record.status_code))
        if record.elapsed_us is not None:
            parts.append(str(record.elapsed_us))
    return " ".join(parts)


def decode(line: str) -> Record:
    """Decode one log line.

    Raises MalformedRecord when the timestamp is missing or unparsable.
    Trailing fields are read in strict prefix order: an unparsable status code
    leaves both optional fields absent, an unparsable elapsed time leaves only
    the elapsed time absent.
    """
    tokens = line.split()
    if not tokens:
        raise MalformedRecord("empty line", line)
    timestamp = parse_timestamp(tokens[0])
    status_code = None
    elapsed_us = None
    if len(tokens) > 1:
        status_code = _parse_uint(tokens[1], MAX_STATUS_CODE)
        if status_code is not None and len(tokens) > 2:
            elapsed_us = _parse_uint(tokens[2])
    try:
        return Record(timestamp=timestamp, status_code=status_code, elapsed_us=elapsed_us)
    except ValidationError as e:
        raise MalformedRecord(str(e), line) from e
