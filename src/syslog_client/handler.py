"""
Standard library logging handler backed by a SyslogClient
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from .client import SyslogClient
from .config import MessageOptions
from .constants import LEVEL_TO_SEVERITY, Severity


class SyslogHandler(logging.Handler):
    """Forward log records to a syslog collector.

    The record level picks the syslog severity and ``record.created`` becomes
    the message timestamp. When ``loop`` is given, records may be emitted
    from any thread and delivery is scheduled onto that loop; otherwise
    ``emit`` must run on the loop thread.

    Example:
        >>> client = create_client("10.0.0.5", transport=Transport.TCP)
        >>> logging.getLogger("app").addHandler(SyslogHandler(client))
    """

    def __init__(
        self,
        client: SyslogClient,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.client = client
        self.loop = loop

    def get_severity(self, record: logging.LogRecord) -> int:
        """Map a logging level onto a syslog severity"""
        return LEVEL_TO_SEVERITY.get(record.levelno, Severity.DEBUG)

    def emit(self, record: logging.LogRecord) -> None:
        # The client's own diagnostics would feed back into the client
        if record.name.split(".", 1)[0] == __package__:
            return
        try:
            message = self.format(record)
            options = MessageOptions(
                severity=self.get_severity(record),
                timestamp=datetime.fromtimestamp(record.created),
            )
            if self.loop is not None:
                self.loop.call_soon_threadsafe(self._log, message, options, record)
            else:
                self.client.log(message, options)
        except Exception:
            self.handleError(record)

    def _log(self, message: str, options: MessageOptions, record: logging.LogRecord) -> None:
        try:
            self.client.log(message, options)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            if self.loop is not None and not self.loop.is_closed():
                self.loop.call_soon_threadsafe(self.client.close)
            else:
                self.client.close()
        finally:
            super().close()
