"""
TCP and TLS transport handles
"""

import asyncio
import logging
import socket
import ssl
from collections import deque
from typing import Deque, Optional

from ..config import ClientConfig
from ..constants import Transport
from ..errors import (
    ConnectFailed,
    ConnectTimeout,
    RemoteClosed,
    SendFailed,
    SyslogClientError,
    TlsValidationFailed,
)
from .base import Address, TransportHandle

logger = logging.getLogger(__name__)


def build_ssl_context(config: ClientConfig) -> ssl.SSLContext:
    """Create a client SSL context trusting the configured anchors"""
    context = ssl.create_default_context(
        cafile=config.tls_ca_file, cadata=config.tls_ca
    )
    if config.tls_cert_file:
        context.load_cert_chain(config.tls_cert_file, config.tls_key_file)
    if not config.tls_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class StreamHandle(TransportHandle, asyncio.Protocol):
    """Plain TCP stream connection"""

    kind = Transport.TCP
    socket_type = socket.SOCK_STREAM

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._paused = False
        self._drain_waiters: Deque[asyncio.Future] = deque()

    @classmethod
    def ssl_context(cls, config: ClientConfig) -> Optional[ssl.SSLContext]:
        return None

    @classmethod
    async def open(cls, config: ClientConfig, family: int, address: Address, listener):
        loop = asyncio.get_running_loop()
        handle = cls(config, family, address, listener)
        target = f"{config.target}:{config.port}"
        try:
            context = cls.ssl_context(config)
            extra = {}
            if context is not None:
                extra = {"ssl": context, "server_hostname": config.target}
            await asyncio.wait_for(
                loop.create_connection(
                    lambda: handle, address[0], address[1], family=family, **extra
                ),
                timeout=config.tcp_timeout,
            )
        except asyncio.TimeoutError as exc:
            handle.abort()
            raise ConnectTimeout(
                f"connection to {target} timed out after {config.tcp_timeout}s"
            ) from exc
        except ssl.SSLCertVerificationError as exc:
            raise TlsValidationFailed(
                f"certificate of {target} rejected: "
                f"{getattr(exc, 'verify_message', None) or exc}"
            ) from exc
        except OSError as exc:
            raise ConnectFailed(f"connection to {target} failed: {exc}") from exc
        logger.debug("%s connection established to %s", cls.kind.name, target)
        return handle

    async def send(self, data: bytes) -> None:
        if not self.is_open:
            raise SendFailed("connection is closed")
        self._transport.write(data)
        if self._paused:
            waiter = asyncio.get_running_loop().create_future()
            self._drain_waiters.append(waiter)
            await waiter

    # asyncio protocol callbacks

    def data_received(self, data: bytes) -> None:
        # Collectors do not answer; anything received is discarded
        pass

    def eof_received(self) -> bool:
        self._listener.handle_error(self, RemoteClosed("connection closed by peer"))
        return False

    def pause_writing(self) -> None:
        self._paused = True

    def resume_writing(self) -> None:
        self._paused = False
        self._wake_writers()

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._wake_writers(SendFailed("connection lost before the write completed"))
        super().connection_lost(exc)

    def _wake_writers(self, error: Optional[Exception] = None) -> None:
        while self._drain_waiters:
            waiter = self._drain_waiters.popleft()
            if waiter.done():
                continue
            if error is None:
                waiter.set_result(None)
            else:
                waiter.set_exception(error)

    def _connection_error(self, exc: Exception) -> SyslogClientError:
        error = RemoteClosed(f"connection lost: {exc}")
        error.__cause__ = exc
        return error


class TlsStreamHandle(StreamHandle):
    """TCP stream wrapped in TLS, the peer certificate is verified"""

    kind = Transport.TLS

    @classmethod
    def ssl_context(cls, config: ClientConfig) -> Optional[ssl.SSLContext]:
        return build_ssl_context(config)
