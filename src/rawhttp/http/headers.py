"""
=============================================================================
CUSTOM REQUEST HEADERS
=============================================================================

Headers the caller sets once and that ride along on every request until
they are unset:

    client.set_header("Accept", "application/json")
    client.set_header("X-Api-Key", "secret")

    GET /users HTTP/1.1\\r\\n
    User-Agent: ...\\r\\n          ┐
    Host: example.com\\r\\n        ┘ written by the client itself
    accept: application/json\\r\\n ┐
    x-api-key: secret\\r\\n        ┘ custom headers, in insertion order
    \\r\\n

=============================================================================
RESERVED NAMES
=============================================================================

Four headers are owned by the request writer and can never be custom:

    host            - derived from the destination
    user-agent      - fixed at construction
    content-type    - derived from the body encoding
    content-length  - computed from the encoded body

Letting a caller override Content-Length would desynchronise the framing
of the request body, so these are rejected up front, before any socket is
opened.

=============================================================================
"""

from typing import Iterator, Optional


RESERVED_HEADERS = frozenset({
    "host",
    "content-length",
    "content-type",
    "user-agent",
})


def _has_line_break(text: str) -> bool:
    return "\r" in text or "\n" in text


class HeaderError(ValueError):
    """
    Raised when a custom header cannot be set.

    This is a configuration error: it is raised synchronously and the
    header collection is left untouched.
    """

    def __init__(self, name: str, message: str = ""):
        super().__init__(message or f"{name} header cannot be set")
        self.name = name


class CustomHeaders:
    """
    Case-insensitive collection of caller-supplied request headers.

    Names are trimmed and lower-cased on the way in, values trimmed.
    Setting an existing name replaces its value (last write wins) while
    keeping its original position.

    Example:
        headers = CustomHeaders()
        headers.set("Accept", " text/html ")
        headers.get("ACCEPT")      # "text/html"
        headers.to_lines()         # ["accept: text/html"]
    """

    def __init__(self):
        self._headers: dict[str, str] = {}

    @staticmethod
    def normalize(name: str) -> str:
        return name.strip().lower()

    def set(self, name: str, value: str) -> None:
        """
        Set a header for all future requests.

        Raises:
            HeaderError: If ``name`` is empty or one of RESERVED_HEADERS,
                if ``name`` contains ":", or if either contains CR or LF.
        """
        key = self.normalize(name)
        if not key:
            raise HeaderError(name, "header name cannot be empty")
        if ":" in key or _has_line_break(key):
            raise HeaderError(name, f"invalid header name: {name!r}")
        if key in RESERVED_HEADERS:
            raise HeaderError(name)
        # A line break in the value would start a new header line on the wire
        if _has_line_break(value):
            raise HeaderError(name, f"{name} header value cannot contain CR or LF")
        self._headers[key] = value.strip()

    def unset(self, name: str) -> None:
        """Remove a header. Unknown names are ignored."""
        self._headers.pop(self.normalize(name), None)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(self.normalize(name), default)

    def to_lines(self) -> list[str]:
        """Render as "name: value" lines (no terminators)."""
        return [f"{name}: {value}" for name, value in self._headers.items()]

    def as_dict(self) -> dict[str, str]:
        return dict(self._headers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.normalize(name) in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"CustomHeaders({self._headers!r})"
