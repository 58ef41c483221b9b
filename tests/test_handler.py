"""
Tests for the logging handler
"""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

from collectors import udp_collector
from syslog_client import (
    MessageOptions,
    Severity,
    SyslogClient,
    SyslogHandler,
    Transport,
    create_client,
)


def _record(level=logging.INFO, msg="Test message", name="app"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="app.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSyslogHandler:
    def test_emit_forwards_record_to_client(self):
        client = Mock(spec=SyslogClient)
        handler = SyslogHandler(client)
        record = _record(logging.WARNING, "disk almost full")

        handler.emit(record)

        client.log.assert_called_once()
        message, options = client.log.call_args[0]
        assert message == "disk almost full"
        assert isinstance(options, MessageOptions)
        assert options.severity == Severity.WARNING
        assert options.timestamp == datetime.fromtimestamp(record.created)

    def test_formatter_is_applied(self):
        client = Mock(spec=SyslogClient)
        handler = SyslogHandler(client)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

        handler.emit(_record(msg="hello"))

        assert client.log.call_args[0][0] == "app: hello"

    @pytest.mark.parametrize(
        "level, severity",
        [
            (logging.CRITICAL, Severity.CRITICAL),
            (logging.ERROR, Severity.ERROR),
            (logging.WARNING, Severity.WARNING),
            (logging.INFO, Severity.INFORMATIONAL),
            (logging.DEBUG, Severity.DEBUG),
            (25, Severity.DEBUG),
        ],
    )
    def test_level_to_severity(self, level, severity):
        handler = SyslogHandler(Mock(spec=SyslogClient))
        assert handler.get_severity(_record(level)) == severity

    def test_own_records_are_skipped(self):
        client = Mock(spec=SyslogClient)
        handler = SyslogHandler(client)

        handler.emit(_record(name="syslog_client.transport.manager"))

        client.log.assert_not_called()

    def test_loop_delivery_is_thread_safe(self):
        client = Mock(spec=SyslogClient)
        loop = Mock()
        handler = SyslogHandler(client, loop=loop)

        handler.emit(_record())

        loop.call_soon_threadsafe.assert_called_once()
        client.log.assert_not_called()
        callback, message, options, _ = loop.call_soon_threadsafe.call_args[0]
        callback(message, options, _)
        client.log.assert_called_once_with(message, options)

    def test_client_errors_go_to_handle_error(self):
        client = Mock(spec=SyslogClient)
        client.log.side_effect = RuntimeError("no running event loop")
        handler = SyslogHandler(client)
        handler.handleError = Mock()
        record = _record()

        handler.emit(record)

        handler.handleError.assert_called_once_with(record)

    def test_close_closes_client(self):
        client = Mock(spec=SyslogClient)
        SyslogHandler(client).close()
        client.close.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_records_reach_collector(self):
        async with udp_collector() as collector:
            client = create_client(
                "127.0.0.1",
                port=collector.port,
                transport=Transport.UDP,
                syslog_hostname="testhost",
            )
            handler = SyslogHandler(client)
            logger = logging.getLogger("test_handler.integration")
            logger.addHandler(handler)
            logger.propagate = False
            try:
                logger.error("payment failed")
                await client.flush()
                line = await collector.next_message()
            finally:
                logger.removeHandler(handler)
                await client.aclose()

            # local0 (16) * 8 + error (3)
            assert line.startswith(b"<131> ")
            assert line.endswith(b" testhost payment failed\n")
