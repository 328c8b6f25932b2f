"""
pytest configuration and fixtures.
"""

import io
import socket
import threading
from typing import Callable, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rawhttp import HTTPClient


class StubStream:
    """In-memory stream: reads come from ``incoming``, writes are captured."""

    def __init__(self, incoming: bytes = b""):
        self._incoming = io.BytesIO(incoming)
        self.written = bytearray()
        self.closed = False
        self.read_sizes: list[int] = []

    def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        return self._incoming.read(size)

    def write(self, data: bytes) -> int:
        self.written += data
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def remaining(self) -> bytes:
        """Bytes not consumed yet (does not advance the stream)."""
        position = self._incoming.tell()
        rest = self._incoming.read()
        self._incoming.seek(position)
        return rest


class FailingStream(StubStream):
    """Stream whose reads raise ``error``."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    def read(self, size: int) -> bytes:
        raise self.error


class StubTransport:
    """Transport double handing out a fresh StubStream per connect()."""

    def __init__(self, response: bytes = b"", host: str = "example.com", port: int = 80):
        self.host = host
        self.port = port
        self.response = response
        self.streams: list[StubStream] = []
        self.connect_error: Optional[Exception] = None
        self.stream_factory = None

    def connect(self) -> StubStream:
        if self.connect_error is not None:
            raise self.connect_error
        if self.stream_factory is not None:
            stream = self.stream_factory()
        else:
            stream = StubStream(self.response)
        self.streams.append(stream)
        return stream

    @property
    def last_stream(self) -> StubStream:
        return self.streams[-1]

    @property
    def last_request(self) -> bytes:
        return bytes(self.last_stream.written)


@pytest.fixture
def make_stream() -> type[StubStream]:
    """``make_stream(incoming_bytes)`` → StubStream."""
    return StubStream


@pytest.fixture
def make_failing_stream() -> type[FailingStream]:
    """``make_failing_stream(error)`` → stream whose reads raise ``error``."""
    return FailingStream


@pytest.fixture
def make_transport() -> type[StubTransport]:
    """``make_transport(response_bytes)`` → StubTransport."""
    return StubTransport


@pytest.fixture
def ok_response() -> bytes:
    """Minimal 200 response with a two-byte body."""
    return b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n\r\nOK"


@pytest.fixture
def stub_transport(ok_response: bytes) -> StubTransport:
    return StubTransport(ok_response)


@pytest.fixture
def client(stub_transport: StubTransport) -> HTTPClient:
    """Client talking to example.com through the stub transport."""
    return HTTPClient("example.com", user_agent="pytest", transport=stub_transport)


@pytest.fixture
def png_bytes() -> bytes:
    """PNG signature plus some bytes that are not valid UTF-8."""
    return bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0xFF, 0xFE])


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing (nothing listens on it)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class OneShotServer:
    """
    Localhost TCP server that answers each connection with a canned
    response, in a background thread.
    """

    def __init__(self, response: bytes):
        self.response = response
        self.requests: list[bytes] = []
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind(("127.0.0.1", 0))
        self._socket.listen(5)
        self._socket.settimeout(5.0)
        self.port = self._socket.getsockname()[1]
        self._thread: threading.Thread = None

    def start(self, connections: int = 1):
        self._thread = threading.Thread(
            target=self._serve,
            args=(connections,),
            daemon=True,
        )
        self._thread.start()

    def _serve(self, connections: int):
        for _ in range(connections):
            try:
                conn, _ = self._socket.accept()
            except OSError:
                return
            with conn:
                conn.settimeout(5.0)
                self.requests.append(self._read_request(conn))
                conn.sendall(self.response)

    @staticmethod
    def _read_request(conn: socket.socket) -> bytes:
        data = b""
        while b"\r\n\r\n" not in data:
            chunk = conn.recv(4096)
            if not chunk:
                return data
            data += chunk

        head, _, body = data.partition(b"\r\n\r\n")
        length = 0
        for line in head.split(b"\r\n")[1:]:
            name, _, value = line.partition(b":")
            if name.strip().lower() == b"content-length":
                length = int(value.strip())
        while len(body) < length:
            chunk = conn.recv(4096)
            if not chunk:
                break
            body += chunk
        return head + b"\r\n\r\n" + body

    def stop(self):
        self._socket.close()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def one_shot_server() -> Generator[Callable[..., "OneShotServer"], None, None]:
    """Factory fixture: ``one_shot_server(response_bytes)`` → started server."""
    servers: list[OneShotServer] = []

    def start(response: bytes, connections: int = 1) -> OneShotServer:
        server = OneShotServer(response)
        server.start(connections)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()
