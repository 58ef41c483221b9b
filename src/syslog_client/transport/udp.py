"""
UDP transport handle
"""

import asyncio
import logging
import socket
from typing import Optional

from ..config import ClientConfig
from ..constants import Transport
from ..errors import ConnectFailed, SendFailed, SyslogClientError
from .base import Address, TransportHandle

logger = logging.getLogger(__name__)


class DatagramHandle(TransportHandle, asyncio.DatagramProtocol):
    """Fire-and-forget datagram socket, ready as soon as it exists"""

    kind = Transport.UDP
    socket_type = socket.SOCK_DGRAM

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._sending = False
        self._dispatch_error: Optional[Exception] = None

    @classmethod
    async def open(cls, config: ClientConfig, family: int, address: Address, listener):
        loop = asyncio.get_running_loop()
        handle = cls(config, family, address, listener)
        local_addr = None
        if config.udp_bind_address:
            local_addr = (config.udp_bind_address, 0)
        try:
            await loop.create_datagram_endpoint(
                lambda: handle, local_addr=local_addr, family=family
            )
        except OSError as exc:
            raise ConnectFailed(f"could not create UDP socket: {exc}") from exc
        logger.debug("UDP socket ready for %s", address)
        return handle

    async def send(self, data: bytes) -> None:
        if not self.is_open:
            raise SendFailed("UDP socket is closed")
        self._sending = True
        self._dispatch_error = None
        try:
            self._transport.sendto(data, self.address)
        finally:
            self._sending = False
        if self._dispatch_error is not None:
            raise self._dispatch_error
        if self._transport.is_closing():
            raise SendFailed("UDP socket closed while sending")

    def error_received(self, exc: Exception) -> None:
        # Raised inside sendto() belongs to that send call
        if self._sending:
            self._dispatch_error = exc
            return
        self._listener.handle_error(self, self._connection_error(exc))

    def _connection_error(self, exc: Exception) -> SyslogClientError:
        error = SendFailed(f"UDP socket error: {exc}")
        error.__cause__ = exc
        return error
