"""
Syslog Client

Asynchronous RFC 3164 / RFC 5424 syslog sender over UDP, TCP and TLS with
lazy connection, connection reuse and transparent reconnection.
"""

__version__ = "1.0.0"

from .client import SyslogClient, create_client
from .config import (
    ClientConfig,
    MessageOptions,
    get_default_config,
    set_default_config,
)
from .constants import Facility, Severity, Transport
from .errors import (
    ConnectFailed,
    ConnectTimeout,
    InvalidArgument,
    RemoteClosed,
    SendFailed,
    SyslogClientError,
    TlsValidationFailed,
    UnsupportedTransport,
)
from .events import EventBus, Subscription
from .formatter import calculate_priority, format_message
from .handler import SyslogHandler
from .transport import ConnectionState, TransportManager

__all__ = [
    # Client
    "SyslogClient",
    "create_client",
    "SyslogHandler",
    # Configuration
    "ClientConfig",
    "MessageOptions",
    "get_default_config",
    "set_default_config",
    # Constants
    "Facility",
    "Severity",
    "Transport",
    # Formatting
    "format_message",
    "calculate_priority",
    # Events and state
    "EventBus",
    "Subscription",
    "ConnectionState",
    "TransportManager",
    # Errors
    "SyslogClientError",
    "InvalidArgument",
    "UnsupportedTransport",
    "ConnectFailed",
    "ConnectTimeout",
    "TlsValidationFailed",
    "RemoteClosed",
    "SendFailed",
]
