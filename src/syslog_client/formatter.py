"""
RFC 3164 / RFC 5424 message rendering
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from .errors import InvalidArgument

NILVALUE = "-"

# Fixed English names, strftime("%b") follows the process locale
MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def calculate_priority(facility: int, severity: int) -> int:
    """Calculate syslog priority (facility * 8 + severity)"""
    return int(facility) * 8 + int(severity)


def format_rfc3164_timestamp(timestamp: Optional[datetime] = None) -> str:
    """BSD syslog timestamp, day of month padded with a space"""
    if timestamp is None:
        timestamp = datetime.now()
    elif timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    month = MONTHS[timestamp.month - 1]
    return f"{month} {timestamp.day:>2} {timestamp:%H:%M:%S}"


def format_rfc5424_timestamp(timestamp: Optional[datetime] = None) -> str:
    """ISO 8601 instant in UTC with millisecond precision"""
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def _nil(value: Any) -> str:
    if value is None or value == "":
        return NILVALUE
    return str(value)


def format_message(
    text: str,
    *,
    facility: int,
    severity: int,
    hostname: str,
    rfc3164: bool = True,
    app_name: Optional[str] = None,
    msgid: Optional[Any] = None,
    timestamp: Optional[datetime] = None,
    date_formatter: Optional[Callable[[datetime], str]] = None,
) -> bytes:
    """Render ``text`` as a framed syslog payload.

    RFC 3164: ``<PRI> Mmm dd hh:mm:ss HOSTNAME MESSAGE``
    RFC 5424: ``<PRI>1 TIMESTAMP HOSTNAME APP-NAME - MSGID - MESSAGE``

    Exactly one newline terminates the payload. Facility and severity are
    not range checked.
    """
    if not isinstance(text, str):
        raise InvalidArgument(
            f"message must be a string, got {type(text).__name__}"
        )

    priority = calculate_priority(facility, severity)
    newline = "" if text.endswith("\n") else "\n"

    if rfc3164:
        stamp = format_rfc3164_timestamp(timestamp)
        line = f"<{priority}> {stamp} {hostname} {text}{newline}"
    else:
        if date_formatter is not None:
            stamp = date_formatter(timestamp or datetime.now(timezone.utc))
        else:
            stamp = format_rfc5424_timestamp(timestamp)
        header = (
            f"<{priority}>1 {stamp} {hostname} {_nil(app_name)} "
            f"{NILVALUE} {_nil(msgid)} {NILVALUE}"
        )
        line = f"{header} {text}{newline}"

    return line.encode("utf-8")
