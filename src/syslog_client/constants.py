"""
Syslog facility, severity and transport tables
"""

import logging
from enum import Enum, IntEnum
from typing import Union

logger = logging.getLogger(__name__)


class Facility(IntEnum):
    """Syslog facilities (RFC 5424, section 6.2.1)"""

    KERNEL = 0
    USER = 1
    MAIL = 2
    SYSTEM = 3
    DAEMON = 3
    AUTH = 4
    SYSLOG = 5
    LPR = 6
    NEWS = 7
    UUCP = 8
    CRON = 9
    AUTHPRIV = 10
    FTP = 11
    NTP = 12
    AUDIT = 13
    ALERT = 14
    CLOCK = 15
    LOCAL0 = 16
    LOCAL1 = 17
    LOCAL2 = 18
    LOCAL3 = 19
    LOCAL4 = 20
    LOCAL5 = 21
    LOCAL6 = 22
    LOCAL7 = 23


class Severity(IntEnum):
    """Syslog severities, 0 (most urgent) through 7"""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7


class Transport(Enum):
    """Supported transport kinds"""

    TCP = 1
    UDP = 2
    TLS = 3

    @property
    def is_stream(self) -> bool:
        return self is not Transport.UDP

    @classmethod
    def coerce(cls, value: Union["Transport", int, str, None]) -> "Transport":
        """Map a transport given as member, value or name; unknown kinds become UDP"""
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, str):
                value = value.strip()
                if value.isdigit():
                    return cls(int(value))
                return cls[value.upper()]
            return cls(value)
        except (KeyError, ValueError):
            logger.warning("Unknown transport %r, falling back to UDP", value)
            return cls.UDP


# Standard logging levels to syslog severities
LEVEL_TO_SEVERITY = {
    logging.CRITICAL: Severity.CRITICAL,
    logging.ERROR: Severity.ERROR,
    logging.WARNING: Severity.WARNING,
    logging.INFO: Severity.INFORMATIONAL,
    logging.DEBUG: Severity.DEBUG,
}


def _parse_code(table, value: Union[int, str]) -> int:
    if isinstance(value, str) and not value.strip().isdigit():
        try:
            return table[value.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown {table.__name__.lower()} {value!r}") from None
    return int(value)


def parse_facility(value: Union[int, str]) -> int:
    """Accept a facility as number or name (``"local0"``)"""
    return _parse_code(Facility, value)


def parse_severity(value: Union[int, str]) -> int:
    """Accept a severity as number or name (``"warning"``)"""
    return _parse_code(Severity, value)
