"""
Syslog client: formats messages and delivers them over the managed transport
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Set

from .config import ClientConfig, MessageOptions, get_default_config
from .errors import InvalidArgument, SendFailed, SyslogClientError
from .events import EventBus, Subscription
from .formatter import format_message
from .transport import ConnectionState, TransportManager

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[Exception]], Any]


class SyslogClient:
    """Sends syslog messages to one collector, reconnecting as needed"""

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or get_default_config()
        self.events = EventBus()
        self.transport = TransportManager(self.config, self.events)
        self._deliveries: Set[asyncio.Task] = set()
        # Bumped by close(); deliveries queued before it must not reconnect
        self._generation = 0

    @property
    def state(self) -> ConnectionState:
        return self.transport.state

    def subscribe(self, kind: str, handler: Callable[..., Any]) -> Subscription:
        """Observe ``"error"`` (called with the exception) or ``"close"`` events"""
        return self.events.subscribe(kind, handler)

    def unsubscribe(self, subscription: Subscription) -> bool:
        return self.events.unsubscribe(subscription)

    def build_formatted_message(
        self, text: str, options: Optional[MessageOptions] = None
    ) -> bytes:
        """Render ``text`` with ``options`` applied over the client defaults"""
        if not isinstance(text, str):
            raise InvalidArgument(
                f"first argument must be a string, got {type(text).__name__}"
            )
        if options is not None and not isinstance(options, MessageOptions):
            raise InvalidArgument("options must be a MessageOptions instance")
        resolved = (options or MessageOptions()).merged_with(self.config)
        return format_message(
            text,
            facility=resolved["facility"],
            severity=resolved["severity"],
            hostname=resolved["syslog_hostname"],
            rfc3164=resolved["rfc3164"],
            app_name=resolved["app_name"],
            msgid=resolved["msgid"],
            timestamp=resolved["timestamp"],
            date_formatter=self.config.date_formatter,
        )

    def log(
        self,
        text: str,
        options: Optional[MessageOptions] = None,
        callback: Optional[Callback] = None,
    ) -> "SyslogClient":
        """Queue ``text`` for delivery and return immediately.

        Must be called from a running event loop. The message is formatted
        before this returns; ``callback`` later receives ``None`` on success
        or the error on failure.
        """
        if callback is not None and not callable(callback):
            raise InvalidArgument("callback must be callable")
        message = self.build_formatted_message(text, options)
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._deliver(message, callback, self._generation))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)
        return self

    async def alog(self, text: str, options: Optional[MessageOptions] = None) -> None:
        """Send ``text`` and wait for the transport to accept it"""
        message = self.build_formatted_message(text, options)
        await self._send(message)

    async def _deliver(
        self, message: bytes, callback: Optional[Callback], generation: int
    ) -> None:
        error: Optional[Exception] = None
        if generation != self._generation:
            error = SendFailed("client was closed before the message was sent")
            self.events.emit("error", error)
        else:
            try:
                await self._send(message)
            except SyslogClientError as exc:
                error = exc
        if callback is not None:
            callback(error)

    async def _send(self, message: bytes) -> None:
        # The manager reports connection failures on the event bus itself
        handle = await self.transport.acquire()
        try:
            await handle.send(message)
        except Exception as exc:
            error = exc
            if not isinstance(exc, SendFailed):
                error = SendFailed(f"{handle.kind.name} send failed: {exc}")
                error.__cause__ = exc
            logger.debug("Send over %s failed: %s", handle.kind.name, error)
            self.events.emit("error", error)
            raise error

    def close(self) -> "SyslogClient":
        """Tear down the transport; ``close`` is emitted even with none open.

        Messages queued by ``log`` that have not reached the transport yet
        fail with ``SendFailed`` instead of opening a new connection.
        """
        self._generation += 1
        self.transport.close()
        return self

    async def aclose(self) -> None:
        """Close and wait until the socket is released"""
        self._generation += 1
        await self.transport.aclose()

    async def flush(self) -> None:
        """Wait for every delivery queued by ``log`` so far"""
        if self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)

    async def __aenter__(self) -> "SyslogClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.flush()
        await self.aclose()


def create_client(target: str = "127.0.0.1", **options: Any) -> SyslogClient:
    """Create a client for ``target`` with ``ClientConfig`` keyword options"""
    return SyslogClient(ClientConfig(target=target, **options))
