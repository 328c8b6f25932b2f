"""
=============================================================================
SOCKET STREAM
=============================================================================

Wraps one connected socket with the three operations the protocol layer
needs: read, write, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

    Server sends:              Client might receive:
        "HTTP/1.1 200 OK\\r\\n"     recv() → "HTTP/1.1 2"
        "Content-Length: 2"       recv() → "00 OK\\r\\nContent-Len"
        ...                       recv() → ...

read(n) is a single recv(): it returns AT MOST n bytes and may return
fewer. b"" means the peer closed its side. The response reader loops
until it has what it needs.

=============================================================================
"""

import socket
import logging
from enum import Enum

from .errors import TransportError


logger = logging.getLogger(__name__)


class StreamState(Enum):
    OPEN = "open"
    CLOSED = "closed"


class SocketStream:
    """
    A connected, readable and writable byte stream over a socket.

    Any OSError (timeouts included) is re-raised as TransportError so the
    layers above only deal with one failure type.

    Example:
        with SocketStream(sock, ("example.com", 80)) as stream:
            stream.write(b"GET / HTTP/1.1\\r\\nHost: example.com\\r\\n\\r\\n")
            first = stream.read(1024)
    """

    def __init__(self, sock: socket.socket, address: tuple[str, int]):
        self.socket = sock
        self.address = address
        self.state = StreamState.OPEN
        self.bytes_read = 0
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        return self.state is StreamState.CLOSED

    def read(self, size: int) -> bytes:
        """Receive up to ``size`` bytes; b"" at end of stream."""
        if self.closed:
            raise TransportError("Read on closed stream", *self.address)
        try:
            data = self.socket.recv(size)
        except socket.timeout as e:
            raise TransportError("Response read timed out", *self.address) from e
        except OSError as e:
            raise TransportError(f"Read failed: {e}", *self.address) from e
        self.bytes_read += len(data)
        return data

    def write(self, data: bytes) -> int:
        """Send all of ``data``."""
        if self.closed:
            raise TransportError("Write on closed stream", *self.address)
        try:
            # sendall() loops until every byte is handed to the kernel
            self.socket.sendall(data)
        except socket.timeout as e:
            raise TransportError("Request write timed out", *self.address) from e
        except OSError as e:
            raise TransportError(f"Write failed: {e}", *self.address) from e
        self.bytes_written += len(data)
        return len(data)

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self.closed:
            return
        self.state = StreamState.CLOSED

        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        logger.debug(
            f"Closed connection to {self.address[0]}:{self.address[1]} "
            f"({self.bytes_written} bytes sent, {self.bytes_read} received)"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
