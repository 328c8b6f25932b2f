"""
=============================================================================
HTTP REQUEST SERIALIZATION
=============================================================================

Turns an HTTPRequest descriptor into the exact bytes written to the socket.
Implements the client side of RFC 7230 message syntax.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST ON THE WIRE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  POST /api/users?v=2 HTTP/1.1\\r\\n          ← request line          │
    │  User-Agent: Mozilla/5.0 (rawhttp 1.0)\\r\\n  ┐                       │
    │  Host: example.com\\r\\n                      │ mandatory, fixed order │
    │  Content-Type: application/x-www-...\\r\\n    │ (body requests only)   │
    │  Content-Length: 20\\r\\n                     ┘                       │
    │  accept: application/json\\r\\n               ← custom headers        │
    │  \\r\\n                                       ← end of headers        │
    │  name=Alice&age=30                          ← body, exactly          │
    │                                               Content-Length bytes  │
    └─────────────────────────────────────────────────────────────────────┘

Header order is fixed so the output is byte-for-byte predictable.

=============================================================================
CONTENT-LENGTH
=============================================================================

Content-Length counts BYTES, not characters:

    "café"  → 4 characters, 5 bytes in UTF-8

It is always computed from the final encoded body, never estimated.

=============================================================================
PATHS
=============================================================================

The path is written as "/" + path, without normalization. It must
already be percent-encoded and must not start with "/":

    HTTPRequest("GET", "")            → GET / HTTP/1.1
    HTTPRequest("GET", "users/42")    → GET /users/42 HTTP/1.1

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from .headers import CustomHeaders


logger = logging.getLogger(__name__)

HTTP_VERSION = "HTTP/1.1"
VALID_METHODS = frozenset({"GET", "POST"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ByteSink(Protocol):
    def write(self, data: bytes) -> object: ...


@dataclass
class HTTPRequest:
    """
    Describes one request. Built, serialized and thrown away per call.

    Attributes:
        method: "GET" or "POST".
        path: Already percent-encoded path without the leading "/".
        query: Optional query string, with or without a leading "?".
        body: Body bytes. ``None`` means no body and no entity headers;
            ``b""`` still sends Content-Type and Content-Length: 0.
        content_type: Content-Type for the body.
    """
    method: str
    path: str = ""
    query: Optional[str] = None
    body: Optional[bytes] = None
    content_type: Optional[str] = None

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in VALID_METHODS:
            raise ValueError(f"Unsupported method: {self.method}")
        if self.body is not None and self.content_type is None:
            self.content_type = FORM_CONTENT_TYPE

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def target(self) -> str:
        """
        The request-target as written on the request line.

        Example:
            HTTPRequest("GET", "search", query="?q=x").target  # "/search?q=x"
        """
        target = "/" + self.path
        if self.query is not None:
            query = self.query[1:] if self.query.startswith("?") else self.query
            target += "?" + query
        return target

    @property
    def request_line(self) -> str:
        return f"{self.method} {self.target} {HTTP_VERSION}"


class RequestWriter:
    """
    Serializes HTTPRequest objects for one destination.

    The writer knows the values of the two headers every request carries
    (Host and User-Agent); the request supplies the rest.

    Example:
        writer = RequestWriter(host="example.com", user_agent="demo/1.0")
        writer.serialize(HTTPRequest("GET", "index.html"))
        # b"GET /index.html HTTP/1.1\\r\\nUser-Agent: demo/1.0\\r\\n"
        # b"Host: example.com\\r\\n\\r\\n"
    """

    def __init__(self, host: str, user_agent: str):
        self.host = host
        self.user_agent = user_agent

    def header_lines(
        self,
        request: HTTPRequest,
        custom_headers: Optional[CustomHeaders] = None,
    ) -> list[str]:
        """
        Build the header section lines in wire order.

        Mandatory headers come first (User-Agent, Host, then Content-Type
        and Content-Length for body requests), custom headers after.
        """
        lines = [
            f"User-Agent: {self.user_agent}",
            f"Host: {self.host}",
        ]
        if request.has_body:
            lines.append(f"Content-Type: {request.content_type}")
            lines.append(f"Content-Length: {len(request.body)}")
        if custom_headers:
            lines.extend(custom_headers.to_lines())
        return lines

    def serialize(
        self,
        request: HTTPRequest,
        custom_headers: Optional[CustomHeaders] = None,
    ) -> bytes:
        """
        Produce the complete request bytes: head, blank line, body.

        Returns:
            Bytes ready for ``sendall()``.
        """
        head = _join_head(
            [request.request_line],
            self.header_lines(request, custom_headers),
        )
        return head + (request.body or b"")

    def write(
        self,
        stream: ByteSink,
        request: HTTPRequest,
        custom_headers: Optional[CustomHeaders] = None,
    ) -> int:
        """
        Serialize ``request`` and write it to ``stream`` in one call.

        Returns:
            Number of bytes written.
        """
        data = self.serialize(request, custom_headers)
        logger.debug(f"> {request.request_line} ({len(data)} bytes)")
        stream.write(data)
        return len(data)


def _join_head(*groups: Iterable[str]) -> bytes:
    lines = [line for group in groups for line in group]
    lines.append("")  # Empty line ends the header section
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


def serialize_request(
    request: HTTPRequest,
    host: str,
    user_agent: str,
    custom_headers: Optional[CustomHeaders] = None,
) -> bytes:
    """
    Convenience function to serialize a single request.

    Use RequestWriter directly when sending several requests to the
    same destination.
    """
    return RequestWriter(host, user_agent).serialize(request, custom_headers)
