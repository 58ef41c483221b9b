"""
In-process syslog collectors used by the integration tests
"""

import asyncio
from contextlib import asynccontextmanager


class UdpCollector(asyncio.DatagramProtocol):
    """Records every datagram it receives"""

    def __init__(self):
        self.messages = asyncio.Queue()
        self.port = None

    def datagram_received(self, data, addr):
        self.messages.put_nowait(data)

    async def next_message(self, timeout: float = 2.0) -> bytes:
        return await asyncio.wait_for(self.messages.get(), timeout)


class TcpCollector:
    """Line oriented stream collector that counts connections"""

    def __init__(self):
        self.messages = asyncio.Queue()
        self.connections = 0
        self.writers = []
        self.port = None

    async def handle(self, reader, writer):
        self.connections += 1
        self.writers.append(writer)
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                self.messages.put_nowait(line)
        except ConnectionError:
            pass
        finally:
            writer.close()

    async def next_message(self, timeout: float = 2.0) -> bytes:
        return await asyncio.wait_for(self.messages.get(), timeout)

    def drop_connections(self) -> None:
        """Close every accepted connection from the collector side"""
        for writer in self.writers:
            writer.close()
        self.writers.clear()


@asynccontextmanager
async def udp_collector(host: str = "127.0.0.1"):
    loop = asyncio.get_running_loop()
    transport, collector = await loop.create_datagram_endpoint(
        UdpCollector, local_addr=(host, 0)
    )
    collector.port = transport.get_extra_info("sockname")[1]
    try:
        yield collector
    finally:
        transport.close()


@asynccontextmanager
async def tcp_collector(host: str = "127.0.0.1"):
    collector = TcpCollector()
    server = await asyncio.start_server(collector.handle, host, 0)
    collector.port = server.sockets[0].getsockname()[1]
    try:
        yield collector
    finally:
        collector.drop_connections()
        server.close()


class EventRecorder:
    """Subscribes to a client's events and lets tests wait for them"""

    def __init__(self, client):
        self.errors = []
        self.closes = 0
        self._closed = asyncio.Event()
        self._failed = asyncio.Event()
        client.subscribe("error", self._on_error)
        client.subscribe("close", self._on_close)

    def _on_error(self, error):
        self.errors.append(error)
        self._failed.set()

    def _on_close(self):
        self.closes += 1
        self._closed.set()

    async def wait_closed(self, timeout: float = 2.0) -> None:
        await asyncio.wait_for(self._closed.wait(), timeout)
        self._closed.clear()

    async def wait_error(self, timeout: float = 2.0) -> None:
        await asyncio.wait_for(self._failed.wait(), timeout)
        self._failed.clear()


def completion(loop=None):
    """Return (callback, future) where the future resolves with the callback argument"""
    future = (loop or asyncio.get_running_loop()).create_future()

    def callback(error):
        if not future.done():
            future.set_result(error)

    return callback, future
