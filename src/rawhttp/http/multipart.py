"""
=============================================================================
MULTIPART/FORM-DATA ENCODING
=============================================================================

URL-encoding binary data would triple its size, so file uploads use
multipart/form-data instead: each field travels in its own "part",
separated by a boundary string that does not occur anywhere else.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     MULTIPART BODY STRUCTURE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  --BOUNDARY\\r\\n                                    ┐              │
    │  Content-Disposition: form-data; name="caption"\\r\\n │ text part   │
    │  Content-type: text/plain; charset=utf-8\\r\\n\\r\\n    │              │
    │  hi\\r\\n                                            ┘              │
    │  --BOUNDARY\\r\\n                                    ┐              │
    │  Content-Disposition: form-data; name="photo";      │ file part    │
    │      filename="a.png"\\r\\n                           │              │
    │  Content-Type: image/png\\r\\n\\r\\n                    │              │
    │  <raw bytes, untouched>\\r\\n                        ┘              │
    │  --BOUNDARY--\\r\\n                                  ← terminator    │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Field names and filenames sit inside a quoted header parameter, so they
are percent-encoded. Values and file contents are written verbatim: they
are delimited by the boundary, not by any quoting.

=============================================================================
BOUNDARY SELECTION
=============================================================================

The boundary is wall-clock milliseconds XOR a high-resolution counter,
fresh per body. A collision with the content is not impossible, only
very unlikely for non-adversarial data.

=============================================================================
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .encoding import percent_encode


logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = "--------------------------------boundary-"
MULTIPART_CONTENT_TYPE = "multipart/form-data"


@dataclass(frozen=True)
class InputFile:
    """
    A file to upload in a multipart POST.

    Attributes:
        filename: Name reported to the server; need not match a local file.
        content_type: MIME type of the content, e.g. "image/png".
            Common choices: application/octet-stream (arbitrary binary),
            text/plain, text/html, image/png, image/gif.
        content: Raw file bytes, sent unmodified.
    """
    filename: str
    content_type: str = "application/octet-stream"
    content: bytes = field(default=b"", repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


def generate_boundary() -> str:
    """Return a boundary token that is unlikely to appear in any content."""
    millis = time.time_ns() // 1_000_000
    return f"{BOUNDARY_PREFIX}{millis ^ time.perf_counter_ns()}"


def content_type_for(boundary: str) -> str:
    """The Content-Type header value announcing ``boundary``."""
    return f"{MULTIPART_CONTENT_TYPE}; boundary={boundary}"


def encode_multipart(
    boundary: str,
    fields: Optional[Mapping[str, str]] = None,
    files: Optional[Mapping[str, InputFile]] = None,
) -> bytes:
    """
    Build a complete multipart/form-data body.

    Text fields are written first, then files, each group in the
    mapping's iteration order. File contents are read once and copied
    into the body; no reference to them is kept.

    Args:
        boundary: The delimiter, without the leading "--".
        fields: Field name → text value (not pre-encoded).
        files: Field name → InputFile.

    Returns:
        The body bytes, ending with "--{boundary}--\\r\\n".
    """
    fields = fields or {}
    files = files or {}
    delimiter = f"--{boundary}\r\n".encode("utf-8")
    body = bytearray()

    # ─────────────────────────────────────────────────────────────────
    # TEXT FIELDS
    # ─────────────────────────────────────────────────────────────────
    for name, value in fields.items():
        body += delimiter
        body += (
            f'Content-Disposition: form-data; name="{percent_encode(name)}"\r\n'
            "Content-type: text/plain; charset=utf-8\r\n\r\n"
        ).encode("utf-8")
        body += value.encode("utf-8")
        body += b"\r\n"

    # ─────────────────────────────────────────────────────────────────
    # FILE FIELDS
    # ─────────────────────────────────────────────────────────────────
    for name, upload in files.items():
        body += delimiter
        body += (
            f'Content-Disposition: form-data; name="{percent_encode(name)}"; '
            f'filename="{percent_encode(upload.filename)}"\r\n'
            f"Content-Type: {upload.content_type}\r\n\r\n"
        ).encode("utf-8")
        body += upload.content
        body += b"\r\n"

    body += f"--{boundary}--\r\n".encode("utf-8")

    logger.debug(
        f"Encoded multipart body: {len(fields)} field(s), "
        f"{len(files)} file(s), {len(body)} bytes"
    )
    return bytes(body)
