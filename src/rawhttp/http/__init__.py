"""
=============================================================================
HTTP/1.1 WIRE PROTOCOL
=============================================================================

Client-side HTTP/1.1 message handling, with no HTTP library underneath.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ encoding.py   percent_encode(), encode_form()                       │
    │ lines.py      read_line(): one line, byte by byte, no buffering     │
    │ headers.py    CustomHeaders, reserved header names, HeaderError     │
    │ multipart.py  InputFile, generate_boundary(), encode_multipart()    │
    │ request.py    HTTPRequest, RequestWriter: descriptor → bytes        │
    │ response.py   ResponseReader: bytes → HTTPResponse                  │
    └─────────────────────────────────────────────────────────────────────┘

    HTTPRequest ──RequestWriter──► socket ──ResponseReader──► HTTPResponse

=============================================================================
"""

from .encoding import percent_encode, encode_form
from .lines import read_line
from .headers import CustomHeaders, HeaderError, RESERVED_HEADERS
from .multipart import InputFile, generate_boundary, encode_multipart, content_type_for
from .request import HTTPRequest, RequestWriter, serialize_request, FORM_CONTENT_TYPE
from .response import (
    HTTPResponse,
    ReaderState,
    ResponseReader,
    parse_content_length,
    read_response,
)

__all__ = [
    # Encoding
    "percent_encode",
    "encode_form",
    # Lines
    "read_line",
    # Headers
    "CustomHeaders",
    "HeaderError",
    "RESERVED_HEADERS",
    # Multipart
    "InputFile",
    "generate_boundary",
    "encode_multipart",
    "content_type_for",
    # Request
    "HTTPRequest",
    "RequestWriter",
    "serialize_request",
    "FORM_CONTENT_TYPE",
    # Response
    "HTTPResponse",
    "ReaderState",
    "ResponseReader",
    "parse_content_length",
    "read_response",
]
