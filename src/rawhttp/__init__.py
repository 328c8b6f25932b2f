"""
=============================================================================
RAWHTTP - HTTP/1.1 Client Built Directly On Sockets
=============================================================================

A small HTTP/1.1 client that frames requests and deframes responses by
hand, with no HTTP library underneath.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RAWHTTP ARCHITECTURE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   HTTPClient        get(), post(), post_form(), post_multipart()    │
    │       │                                                             │
    │       ├── http/     wire protocol                                   │
    │       │     encoding    percent-encoding, form encoding             │
    │       │     multipart   multipart/form-data bodies                  │
    │       │     request     request line + headers + body → bytes       │
    │       │     lines       unbuffered line reader                      │
    │       │     response    status + headers + Content-Length body      │
    │       │                                                             │
    │       └── core/     sockets                                         │
    │             transport   PlainTransport, TLSTransport                │
    │             stream      SocketStream                                │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    rawhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m rawhttp)
    ├── client.py            # HTTPClient
    ├── config.py            # ClientConfig dataclass
    ├── core/
    │   ├── errors.py        # TransportError
    │   ├── stream.py        # SocketStream
    │   └── transport.py     # Transport protocol and implementations
    └── http/
        ├── encoding.py      # percent_encode, encode_form
        ├── headers.py       # CustomHeaders, HeaderError
        ├── lines.py         # read_line
        ├── multipart.py     # InputFile, encode_multipart
        ├── request.py       # HTTPRequest, RequestWriter
        └── response.py      # HTTPResponse, ResponseReader

=============================================================================
QUICK START
=============================================================================

    from rawhttp import HTTPClient, InputFile

    client = HTTPClient("example.com")
    body = client.get("search", fields={"q": "raw sockets"})
    print(client.status)

    secure = HTTPClient("example.com", secure=True)
    secure.post_form("login", {"user": "alice"})

=============================================================================
WHAT IS NOT HERE
=============================================================================

No HTTP/2, pipelining, redirects, cookies, compression, chunked transfer
decoding or connection pooling. Responses without Content-Length have an
empty body.

=============================================================================
"""

__version__ = "1.0.0"

from .client import HTTPClient, log_exchange
from .config import ClientConfig, DEFAULT_USER_AGENT
from .core import TransportError, PlainTransport, TLSTransport
from .http import HTTPRequest, HTTPResponse, HeaderError, InputFile

__all__ = [
    "HTTPClient",
    "log_exchange",
    "ClientConfig",
    "DEFAULT_USER_AGENT",
    "TransportError",
    "PlainTransport",
    "TLSTransport",
    "HTTPRequest",
    "HTTPResponse",
    "HeaderError",
    "InputFile",
    "__version__",
]
