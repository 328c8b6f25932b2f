"""
=============================================================================
TRANSPORTS
=============================================================================

The protocol layer never opens sockets itself. It asks a Transport for a
connected stream and gives it back (closes it) when the exchange is over:

    ┌────────────┐  connect()   ┌──────────────┐
    │ HTTPClient │ ───────────► │  Transport   │ ──► Stream
    └────────────┘              └──────────────┘
                                 │            │
                      PlainTransport     TLSTransport
                      (TCP, port 80)     (TCP + TLS, port 443)

Tests swap in a double that returns an in-memory stream, so the whole
request/response path runs without a network.

=============================================================================
TWO TIMEOUTS
=============================================================================

    connection_timeout   how long the TCP (and TLS) handshake may take
    response_timeout     how long any single read or write may block

A timeout surfaces as TransportError and aborts the exchange. There are
no retries.

=============================================================================
"""

import socket
import ssl
import logging
from typing import Optional, Protocol

from .errors import TransportError
from .stream import SocketStream


logger = logging.getLogger(__name__)

HTTP_PORT = 80
HTTPS_PORT = 443


class Stream(Protocol):
    """A connected byte stream."""

    def read(self, size: int) -> bytes: ...

    def write(self, data: bytes) -> object: ...

    def close(self) -> None: ...


class Transport(Protocol):
    """Something that can open a connected Stream to a fixed destination."""

    host: str
    port: int

    def connect(self) -> Stream: ...


class PlainTransport:
    """
    Plaintext TCP transport.

    Args:
        host: Destination host name or IP.
        port: Destination port.
        connection_timeout: Seconds allowed for the TCP handshake.
        response_timeout: Seconds allowed per read/write once connected.
    """

    default_port = HTTP_PORT

    def __init__(
        self,
        host: str,
        port: Optional[int] = None,
        connection_timeout: float = 30.0,
        response_timeout: float = 60.0,
    ):
        self.host = host
        self.port = port if port is not None else self.default_port
        self.connection_timeout = connection_timeout
        self.response_timeout = response_timeout

    def connect(self) -> SocketStream:
        """
        Open a connection and return it as a SocketStream.

        Raises:
            TransportError: If the connection cannot be established.
        """
        sock = self._open_socket()
        try:
            sock = self._wrap(sock)
            sock.settimeout(self.response_timeout)
        except OSError as e:
            sock.close()
            raise TransportError(f"Handshake failed: {e}", self.host, self.port) from e

        logger.debug(f"Connected to {self.host}:{self.port}")
        return SocketStream(sock, (self.host, self.port))

    def _open_socket(self) -> socket.socket:
        try:
            # create_connection() resolves the name and tries each address
            return socket.create_connection(
                (self.host, self.port),
                timeout=self.connection_timeout,
            )
        except socket.timeout as e:
            raise TransportError("Connection timed out", self.host, self.port) from e
        except OSError as e:
            raise TransportError(f"Connection failed: {e}", self.host, self.port) from e

    def _wrap(self, sock: socket.socket) -> socket.socket:
        return sock

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.host!r}, {self.port})"


class TLSTransport(PlainTransport):
    """
    TCP transport with TLS on top.

    The handshake happens inside connect() and counts against the
    connection timeout, since the socket still has it set at that point.

    Args:
        context: SSLContext to use. Defaults to
            ssl.create_default_context(), which verifies certificates
            and host names.
    """

    default_port = HTTPS_PORT

    def __init__(
        self,
        host: str,
        port: Optional[int] = None,
        connection_timeout: float = 30.0,
        response_timeout: float = 60.0,
        context: Optional[ssl.SSLContext] = None,
    ):
        super().__init__(host, port, connection_timeout, response_timeout)
        self.context = context or ssl.create_default_context()

    def _wrap(self, sock: socket.socket) -> socket.socket:
        return self.context.wrap_socket(sock, server_hostname=self.host)


def create_transport(
    host: str,
    port: Optional[int] = None,
    secure: bool = False,
    connection_timeout: float = 30.0,
    response_timeout: float = 60.0,
) -> PlainTransport:
    """Build a PlainTransport or TLSTransport."""
    cls = TLSTransport if secure else PlainTransport
    return cls(host, port, connection_timeout, response_timeout)
