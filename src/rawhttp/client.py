"""
=============================================================================
HTTP CLIENT
=============================================================================

The public entry point: send GET and POST requests to one host and get the
response body back.

=============================================================================
ONE EXCHANGE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTPClient.request() Flow                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   transport.connect()          → fresh Stream                       │
    │          │                                                          │
    │   RequestWriter.write()        → request line, headers, body        │
    │          │                                                          │
    │   ResponseReader.read()        → status, headers, framed body       │
    │          │                                                          │
    │   stream.close()               ← ALWAYS, even if anything failed    │
    │          │                                                          │
    │   observers(response)          → e.g. log_exchange                  │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Every exchange gets its own connection, closed as soon as the response is
read. There is no keep-alive: without chunked decoding, a response that
lacks Content-Length would leave the stream at an unknown position.

=============================================================================
USAGE
=============================================================================

    client = HTTPClient("example.com")
    client.set_header("Accept", "text/html")

    body = client.get("index.html")
    client.status              # "HTTP/1.1 200 OK"
    client.response_headers    # {"content-type": "text/html", ...}

    client.post_form("login", {"user": "alice", "password": "s3cret"})

    photo = InputFile("a.png", "image/png", png_bytes)
    client.post_file("upload", {"caption": "hi"}, "photo", photo)

=============================================================================
THREAD SAFETY
=============================================================================

A client holds the last response as mutable state and performs one
blocking exchange at a time. Do not share an instance between threads
without a lock; prefer one client per thread, or use the HTTPResponse
returned by request() instead of the last-response accessors.

=============================================================================
"""

import logging
from typing import Callable, Mapping, Optional, Union

from .config import ClientConfig, DEFAULT_USER_AGENT, default_port
from .core.transport import PlainTransport, Transport, create_transport
from .http.encoding import encode_form
from .http.headers import CustomHeaders
from .http.multipart import InputFile, content_type_for, encode_multipart, generate_boundary
from .http.request import FORM_CONTENT_TYPE, HTTPRequest, RequestWriter
from .http.response import DEFAULT_CHUNK_SIZE, HTTPResponse, ResponseReader


logger = logging.getLogger(__name__)
exchange_logger = logging.getLogger("rawhttp.exchange")

Observer = Callable[[HTTPResponse], None]


class HTTPClient:
    """
    Sends GET, POST and multipart POST requests to a single host.

    Attributes:
        host: Destination host, also used for the Host header.
        port: Destination port.
        user_agent: Value of the User-Agent header.
        secure: Whether self-built transports use TLS.
    """

    def __init__(
        self,
        host: str,
        port: Optional[int] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        *,
        secure: bool = False,
        transport: Optional[Transport] = None,
        connection_timeout: float = 30.0,
        response_timeout: float = 60.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.host = host
        self.secure = secure
        self.port = port if port is not None else default_port(secure)
        self.user_agent = user_agent
        self.chunk_size = chunk_size

        self._transport = transport
        self._connection_timeout = connection_timeout
        self._response_timeout = response_timeout

        self._custom_headers = CustomHeaders()
        self._writer = RequestWriter(self._host_header(), user_agent)
        self._observers: list[Observer] = []
        self._last_response: Optional[HTTPResponse] = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[Transport] = None,
    ) -> "HTTPClient":
        """Create a client from a validated ClientConfig."""
        config.validate()
        return cls(
            config.host,
            config.effective_port,
            config.user_agent,
            secure=config.secure,
            transport=transport,
            connection_timeout=config.connection_timeout,
            response_timeout=config.response_timeout,
            chunk_size=config.chunk_size,
        )

    def _host_header(self) -> str:
        # The port is only spelled out when it differs from the scheme default
        if self.port == default_port(self.secure):
            return self.host
        return f"{self.host}:{self.port}"

    # =========================================================================
    # LAST RESPONSE
    # =========================================================================

    @property
    def last_response(self) -> Optional[HTTPResponse]:
        """The response of the last completed exchange, or None."""
        return self._last_response

    @property
    def status(self) -> Optional[str]:
        """Status line of the last response, e.g. "HTTP/1.1 200 OK"."""
        if self._last_response is None:
            return None
        return self._last_response.status_line

    @property
    def response_headers(self) -> Optional[dict[str, str]]:
        """Headers of the last response (lower-case names)."""
        if self._last_response is None:
            return None
        return self._last_response.headers

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def custom_headers(self) -> dict[str, str]:
        return self._custom_headers.as_dict()

    def set_header(self, name: str, value: str) -> None:
        """
        Set a header for all future requests, until unset_header().

        Raises:
            HeaderError: For host, content-length, content-type and
                user-agent. The user agent is set at construction.
        """
        self._custom_headers.set(name, value)

    def unset_header(self, name: str) -> None:
        """Remove a custom header. Does nothing if it was never set."""
        self._custom_headers.unset(name)

    @property
    def connection_timeout(self) -> float:
        return self._connection_timeout

    @property
    def response_timeout(self) -> float:
        return self._response_timeout

    def set_connection_timeout(self, seconds: float) -> None:
        """
        Maximum time to establish a connection.

        Applies to transports the client builds itself and to an injected
        PlainTransport or TLSTransport. Other injected transports manage
        their own timeouts and are left untouched.
        """
        if seconds <= 0:
            raise ValueError("connection timeout must be positive")
        self._connection_timeout = seconds
        if isinstance(self._transport, PlainTransport):
            self._transport.connection_timeout = seconds

    def set_response_timeout(self, seconds: float) -> None:
        """
        Maximum time the server may take for any single read.

        Reaches the same transports as set_connection_timeout().
        """
        if seconds <= 0:
            raise ValueError("response timeout must be positive")
        self._response_timeout = seconds
        if isinstance(self._transport, PlainTransport):
            self._transport.response_timeout = seconds

    def add_observer(self, observer: Observer) -> None:
        """Call ``observer(response)`` after every completed exchange."""
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        self._observers.remove(observer)

    # =========================================================================
    # THE EXCHANGE
    # =========================================================================

    def request(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send ``request`` and read the response.

        The connection is closed on every path out of this method. If the
        exchange fails, the last response is cleared so no partial state
        is visible through ``status`` or ``response_headers``.

        Returns:
            A fresh HTTPResponse, also kept as ``last_response``.

        Raises:
            TransportError: If connecting, writing or reading fails.
        """
        self._last_response = None
        transport = self._transport or create_transport(
            self.host,
            self.port,
            secure=self.secure,
            connection_timeout=self._connection_timeout,
            response_timeout=self._response_timeout,
        )

        stream = transport.connect()
        try:
            self._writer.write(stream, request, self._custom_headers)
            response = ResponseReader(stream, self.chunk_size).read()
        finally:
            stream.close()

        logger.debug(
            f"{request.method} {request.target} -> {response.status_line!r} "
            f"({len(response.body)} bytes)"
        )

        self._last_response = response
        for observer in list(self._observers):
            observer(response)
        return response

    # =========================================================================
    # GET
    # =========================================================================

    def get(
        self,
        path: str = "",
        query: Optional[str] = None,
        fields: Optional[Mapping[str, str]] = None,
    ) -> bytes:
        """
        Perform a GET request and return the response body.

        Args:
            path: Percent-encoded path without the leading "/"; "" for the
                root.
            query: Percent-encoded query string, with or without "?".
            fields: Field name → value, encoded into the query string.
                Mutually exclusive with ``query``.

        Returns:
            The response body, possibly empty.
        """
        if query is not None and fields is not None:
            raise ValueError("pass either query or fields, not both")
        if fields is not None:
            query = encode_form(fields)
        return self.request(HTTPRequest("GET", path, query=query)).body

    # =========================================================================
    # POST
    # =========================================================================

    def post(self, path: str = "", data: Union[str, bytes] = "") -> bytes:
        """
        POST a raw body as application/x-www-form-urlencoded.

        ``data`` is sent as given; strings are encoded as UTF-8.
        """
        body = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        request = HTTPRequest("POST", path, body=body, content_type=FORM_CONTENT_TYPE)
        return self.request(request).body

    def post_form(self, path: str, fields: Mapping[str, str]) -> bytes:
        """POST ``fields`` url-encoded. Values should not be pre-encoded."""
        return self.post(path, encode_form(fields))

    def post_multipart(
        self,
        path: str,
        fields: Optional[Mapping[str, str]] = None,
        files: Optional[Mapping[str, InputFile]] = None,
    ) -> bytes:
        """
        POST text fields and files as multipart/form-data.

        Args:
            path: Percent-encoded path without the leading "/".
            fields: Field name → text value.
            files: Field name → InputFile.
        """
        boundary = generate_boundary()
        body = encode_multipart(boundary, fields, files)
        request = HTTPRequest(
            "POST",
            path,
            body=body,
            content_type=content_type_for(boundary),
        )
        return self.request(request).body

    def post_file(
        self,
        path: str,
        fields: Optional[Mapping[str, str]],
        file_field_name: str,
        file: InputFile,
    ) -> bytes:
        """POST a single file (plus optional text fields) as multipart."""
        return self.post_multipart(path, fields, {file_field_name: file})

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================

    def describe(self) -> str:
        """Human-readable dump of the last status line and headers."""
        if self._last_response is None:
            return "-- NO REQUEST MADE YET --"
        return format_exchange(self._last_response)

    def __repr__(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"HTTPClient({scheme}://{self._host_header()})"


def format_exchange(response: HTTPResponse) -> str:
    lines = [f"Status of last received response: {response.status_line}", "Headers:"]
    lines.extend(f" {name}: {value}" for name, value in response.headers.items())
    return "\n".join(lines)


def log_exchange(response: HTTPResponse) -> None:
    """
    Observer that logs a response's status line and headers.

    Example:
        client.add_observer(log_exchange)
        logging.getLogger("rawhttp.exchange").setLevel(logging.INFO)
    """
    exchange_logger.info(format_exchange(response))
