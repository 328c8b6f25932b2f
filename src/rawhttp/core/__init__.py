"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The socket-level pieces the HTTP layer sits on.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ transport.py   Transport protocol, PlainTransport, TLSTransport     │
    │ stream.py      SocketStream: read / write / close over one socket   │
    │ errors.py      TransportError                                       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .errors import TransportError
from .stream import SocketStream, StreamState
from .transport import (
    Stream,
    Transport,
    PlainTransport,
    TLSTransport,
    create_transport,
    HTTP_PORT,
    HTTPS_PORT,
)

__all__ = [
    "TransportError",
    "SocketStream",
    "StreamState",
    "Stream",
    "Transport",
    "PlainTransport",
    "TLSTransport",
    "create_transport",
    "HTTP_PORT",
    "HTTPS_PORT",
]
