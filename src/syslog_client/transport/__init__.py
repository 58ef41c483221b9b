"""
Transport handles and the connection manager

One handle class per transport kind; the manager picks the class once, when
the client is constructed.
"""

from .base import TransportHandle, resolve_address
from .manager import TRANSPORT_HANDLES, ConnectionState, TransportManager
from .tcp import StreamHandle, TlsStreamHandle, build_ssl_context
from .udp import DatagramHandle

__all__ = [
    # Base
    "TransportHandle",
    "resolve_address",
    # Handles
    "DatagramHandle",
    "StreamHandle",
    "TlsStreamHandle",
    "build_ssl_context",
    # Manager
    "TRANSPORT_HANDLES",
    "ConnectionState",
    "TransportManager",
]
