"""
=============================================================================
HTTP RESPONSE READER
=============================================================================

Reads an HTTP/1.1 response off a byte stream and frames its body using
the Content-Length header.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  STATUS LINE                                                        │
    │  HTTP/1.1 200 OK\\r\\n                                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │  HEADERS                                                            │
    │  Content-Type: text/plain\\r\\n                                       │
    │  Content-Length: 5\\r\\n         ← tells us where the body ends       │
    │  \\r\\n                          ← empty line = end of headers        │
    ├─────────────────────────────────────────────────────────────────────┤
    │  BODY                                                               │
    │  hello                         ← exactly Content-Length bytes       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
READER STATE MACHINE
=============================================================================

    STATUS_LINE ──────► HEADERS ──(empty line)──► BODY ──────► DONE
                         │    ▲
                         └────┘ one header per line

=============================================================================
BODY FRAMING RULES
=============================================================================

This client only understands Content-Length framing. Anything else is
treated as "no decodable body" rather than risking a read that never ends:

    Content-Length header      Body returned
    ─────────────────────      ──────────────────────────────────────────
    missing                    b""  (even if more bytes are waiting)
    "abc" / "-"                b""  (not a non-negative integer)
    "0" or negative            b""
    "5", 11 bytes available    first 5 bytes, the other 6 stay unread
    "100", stream closes at 10 those 10 bytes, no error

None of these raise. Callers must not assume
len(response.body) == Content-Length.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from .lines import read_line


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024


class ByteSource(Protocol):
    def read(self, size: int) -> bytes: ...


class ReaderState(Enum):
    """Phases of reading one response."""
    STATUS_LINE = "status_line"
    HEADERS = "headers"
    BODY = "body"
    DONE = "done"


@dataclass
class HTTPResponse:
    """
    A received response.

    Attributes:
        status_line: Raw first line, e.g. "HTTP/1.1 200 OK".
        headers: Header name (lower-case) → trimmed value.
        body: Body bytes, framed by Content-Length.
    """
    status_line: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def version(self) -> str:
        return self.status_line.split(" ", 1)[0]

    @property
    def status_code(self) -> Optional[int]:
        """
        Numeric status code, or None if the status line is malformed.

        Example:
            HTTPResponse("HTTP/1.1 404 Not Found").status_code  # 404
        """
        parts = self.status_line.split(" ", 2)
        if len(parts) < 2:
            return None
        try:
            return int(parts[1])
        except ValueError:
            return None

    @property
    def reason(self) -> str:
        parts = self.status_line.split(" ", 2)
        return parts[2] if len(parts) == 3 else ""

    @property
    def content_length(self) -> Optional[int]:
        return parse_content_length(self.headers.get("content-length"))

    @property
    def is_truncated(self) -> bool:
        """True if fewer body bytes arrived than Content-Length declared."""
        declared = self.content_length
        return declared is not None and len(self.body) < declared

    def get_header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """
    Parse a Content-Length value.

    Returns:
        The length, or None if missing or not a plain decimal integer.
        Negative values are returned as-is; framing treats them as empty.
    """
    if value is None:
        return None
    value = value.strip()
    digits = value[1:] if value[:1] in ("+", "-") else value
    # isdigit() alone accepts characters like "²" that int() rejects
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(value)


class ResponseReader:
    """
    Reads one response from a stream.

    The reader is a small state machine (see ReaderState). Each call to
    ``read()`` walks it from STATUS_LINE to DONE and returns the parsed
    HTTPResponse. Use a new reader, or ``read()`` again, per response.

    Example:
        reader = ResponseReader(stream)
        response = reader.read()
        response.status_line   # "HTTP/1.1 200 OK"
    """

    def __init__(self, stream: ByteSource, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.stream = stream
        self.chunk_size = chunk_size
        self.state = ReaderState.STATUS_LINE
        self.status_line = ""
        self.headers: dict[str, str] = {}
        self.body = b""

    def read(self) -> HTTPResponse:
        """
        Read status line, headers and body.

        Raises:
            Whatever the stream raises (transport errors propagate).
        """
        self.state = ReaderState.STATUS_LINE
        self.status_line = ""
        self.headers = {}
        self.body = b""

        while self.state is not ReaderState.DONE:
            if self.state is ReaderState.STATUS_LINE:
                self._read_status_line()
            elif self.state is ReaderState.HEADERS:
                self._read_header_line()
            elif self.state is ReaderState.BODY:
                self._read_body()

        return HTTPResponse(
            status_line=self.status_line,
            headers=self.headers,
            body=self.body,
        )

    # =========================================================================
    # STATES
    # =========================================================================

    def _read_status_line(self) -> None:
        self.status_line = read_line(self.stream)
        logger.debug(f"< {self.status_line}")
        self.state = ReaderState.HEADERS

    def _read_header_line(self) -> None:
        line = read_line(self.stream)
        if not line:
            self.state = ReaderState.BODY
            return

        name, sep, value = line.partition(":")
        if not sep:
            logger.debug(f"Discarding malformed header line: {line!r}")
            return

        # Later duplicates replace earlier ones
        self.headers[name.lower()] = value.strip()

    def _read_body(self) -> None:
        self.body = self._read_framed_body()
        self.state = ReaderState.DONE

    def _read_framed_body(self) -> bytes:
        raw_length = self.headers.get("content-length")
        if raw_length is None:
            logger.debug("No Content-Length, treating body as empty")
            return b""

        length = parse_content_length(raw_length)
        if length is None:
            logger.debug(f"Invalid Content-Length {raw_length!r}, treating body as empty")
            return b""
        if length <= 0:
            return b""

        # ─────────────────────────────────────────────────────────────────
        # READ EXACTLY `length` BYTES
        # ─────────────────────────────────────────────────────────────────
        # recv() may return fewer bytes than asked for, so keep reading.
        # Never ask for more than is still owed: bytes past the body
        # belong to whatever comes next on the stream.
        buffer = bytearray()
        while len(buffer) < length:
            chunk = self.stream.read(min(self.chunk_size, length - len(buffer)))
            if not chunk:
                logger.warning(
                    f"Body truncated: expected {length} bytes, got {len(buffer)}"
                )
                break
            buffer += chunk

        return bytes(buffer)


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def read_response(
    stream: ByteSource,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> HTTPResponse:
    """Read a single response from ``stream``."""
    return ResponseReader(stream, chunk_size=chunk_size).read()
