"""
Base class for transport handles
"""

import asyncio
import ipaddress
import socket
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Tuple

from ..config import ClientConfig
from ..constants import Transport
from ..errors import ConnectFailed, SyslogClientError

if TYPE_CHECKING:
    from .manager import TransportManager

Address = Tuple[Any, ...]


async def resolve_address(host: str, port: int, socket_type: int) -> Tuple[int, Address]:
    """Resolve the address family and socket address of the collector"""
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        pass
    else:
        if ip.version == 4:
            return socket.AF_INET, (host, port)
        return socket.AF_INET6, (host, port, 0, 0)

    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(host, port, type=socket_type)
    except OSError as exc:
        raise ConnectFailed(f"could not resolve {host!r}: {exc}") from exc
    if not infos:
        raise ConnectFailed(f"could not resolve {host!r}: no addresses")
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


class TransportHandle(ABC):
    """One live socket owned by a ``TransportManager``.

    Subclasses are also asyncio protocols; the event loop reports close and
    error conditions through them, and they forward those to the manager.
    """

    kind: Transport
    socket_type: int

    def __init__(
        self,
        config: ClientConfig,
        family: int,
        address: Address,
        listener: "TransportManager",
    ):
        self.config = config
        self.family = family
        self.address = address
        self._listener = listener
        self._transport: Optional[asyncio.BaseTransport] = None
        self._lost = asyncio.get_running_loop().create_future()

    @classmethod
    @abstractmethod
    async def open(
        cls,
        config: ClientConfig,
        family: int,
        address: Address,
        listener: "TransportManager",
    ) -> "TransportHandle":
        """Create the socket and return a ready handle"""

    @abstractmethod
    async def send(self, data: bytes) -> None:
        """Send one formatted message"""

    @abstractmethod
    def _connection_error(self, exc: Exception) -> SyslogClientError:
        """Translate a socket-level failure into a client error"""

    @property
    def is_open(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def close(self) -> None:
        """Start teardown; ``close`` is reported once the socket is gone"""
        if self._transport is not None and not self._transport.is_closing():
            self._transport.close()

    def abort(self) -> None:
        if self._transport is not None:
            self._transport.abort()

    async def wait_closed(self) -> None:
        if self._transport is None:
            return
        await asyncio.shield(self._lost)

    # asyncio protocol callbacks

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            self._listener.handle_error(self, self._connection_error(exc))
        if not self._lost.done():
            self._lost.set_result(None)
        self._listener.handle_closed(self)

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<{type(self).__name__} {self.address!r} {state}>"
