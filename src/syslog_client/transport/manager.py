"""
Connection lifecycle for a single client: Idle -> Connecting -> Ready -> Idle
"""

import asyncio
import logging
from collections import deque
from enum import Enum
from typing import Deque, Dict, Optional, Type

from ..config import ClientConfig
from ..constants import Transport
from ..errors import ConnectFailed, SyslogClientError, UnsupportedTransport
from ..events import EventBus
from .base import TransportHandle, resolve_address
from .tcp import StreamHandle, TlsStreamHandle
from .udp import DatagramHandle

logger = logging.getLogger(__name__)

TRANSPORT_HANDLES: Dict[Transport, Type[TransportHandle]] = {
    Transport.UDP: DatagramHandle,
    Transport.TCP: StreamHandle,
    Transport.TLS: TlsStreamHandle,
}


class ConnectionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"


class TransportManager:
    """Owns at most one live handle and coalesces concurrent connection attempts.

    Callers that arrive while an attempt is in flight wait in a FIFO queue
    and all of them receive the outcome of that one attempt, in the order
    they asked. Every state change happens on the event loop thread, so no
    locking is involved.
    """

    def __init__(
        self,
        config: ClientConfig,
        events: EventBus,
        handles: Optional[Dict[Transport, Type[TransportHandle]]] = None,
    ):
        self.config = config
        self.events = events
        registry = TRANSPORT_HANDLES if handles is None else handles
        self._handle_class = registry.get(config.transport)
        self.handle: Optional[TransportHandle] = None
        self._state = ConnectionState.IDLE
        self._pending: Deque[asyncio.Future] = deque()
        self._connect_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    async def acquire(self) -> TransportHandle:
        """Return the live handle, connecting first if there is none"""
        handle = self.handle
        if handle is not None and handle.is_open:
            return handle
        if self._handle_class is None:
            error = UnsupportedTransport(
                f"unknown transport {self.config.transport!r} specified to client"
            )
            self.events.emit("error", error)
            raise error

        if handle is not None:
            self.handle = None
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._pending.append(waiter)
        if self._state is not ConnectionState.CONNECTING:
            self._state = ConnectionState.CONNECTING
            self._connect_task = loop.create_task(self._connect())
        return await waiter

    async def _connect(self) -> None:
        handle_class = self._handle_class
        config = self.config
        logger.debug(
            "Connecting to %s:%d over %s",
            config.target,
            config.port,
            handle_class.kind.name,
        )
        try:
            family, address = await resolve_address(
                config.target, config.port, handle_class.socket_type
            )
            handle = await handle_class.open(config, family, address, self)
        except asyncio.CancelledError:
            # close() already failed the waiters
            raise
        except Exception as exc:
            error = exc
            if not isinstance(exc, SyslogClientError):
                error = ConnectFailed(str(exc))
                error.__cause__ = exc
            logger.warning("Connection to %s:%d failed: %s", config.target, config.port, error)
            self._drain(error=error)
            self.events.emit("error", error)
            return

        self.handle = handle
        self._drain(handle=handle)

    def _drain(
        self,
        handle: Optional[TransportHandle] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """Resolve every queued waiter, oldest first, with the same outcome"""
        self._connect_task = None
        self._state = ConnectionState.READY if handle is not None else ConnectionState.IDLE
        while self._pending:
            waiter = self._pending.popleft()
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(handle)

    def _forget(self, handle: TransportHandle) -> None:
        if handle is self.handle:
            self.handle = None
            if self._state is ConnectionState.READY:
                self._state = ConnectionState.IDLE

    # Notifications from handles

    def handle_error(self, handle: TransportHandle, error: SyslogClientError) -> None:
        """A live handle failed; drop it so the next acquire reconnects"""
        logger.info("%s transport error: %s", handle.kind.name, error)
        self._forget(handle)
        self.events.emit("error", error)
        handle.close()

    def handle_closed(self, handle: TransportHandle) -> None:
        logger.debug("%s transport closed", handle.kind.name)
        self._forget(handle)
        self.events.emit("close")

    # Teardown

    def close(self) -> None:
        """Tear down the handle, or report ``close`` right away if there is none"""
        if self._connect_task is not None:
            self._connect_task.cancel()
            error = ConnectFailed("connection attempt aborted by close()")
            waiting = bool(self._pending)
            self._drain(error=error)
            if waiting:
                self.events.emit("error", error)

        handle = self.handle
        if handle is None:
            self.events.emit("close")
            return
        self.handle = None
        self._state = ConnectionState.IDLE
        handle.close()

    async def aclose(self) -> None:
        handle = self.handle
        self.close()
        if handle is not None:
            await handle.wait_closed()
