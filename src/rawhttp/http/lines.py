"""
=============================================================================
UNBUFFERED LINE READER
=============================================================================

HTTP headers are line-oriented, the body is not. After the blank line that
ends the headers, the SAME stream continues with raw body bytes:

    HTTP/1.1 200 OK\\r\\n          ← read_line()
    Content-Length: 5\\r\\n        ← read_line()
    \\r\\n                         ← read_line() returns ""
    hello                        ← stream.read(5), NOT a line

A buffered reader would happily pull "hello" into its own buffer while
looking for the next newline, and the body reader would then find the
stream empty. So this reader takes ONE byte at a time and never reads past
the terminator of the line it returns.

=============================================================================
LINE TERMINATORS
=============================================================================

    "abc\\r\\n"    → "abc"
    "abc\\n"       → "abc"       (bare LF is tolerated)
    "abc\\rdef\\n"  → "abc\\rdef"  (a lone CR is ordinary content)

Handling the lone CR needs one byte of lookahead, which an unbuffered
stream cannot give back. Instead the CR is held as *pending*: if the next
byte is LF the line ends, otherwise the CR is emitted as content and the
byte is processed normally.

=============================================================================
"""

from typing import Protocol

CR = 0x0D
LF = 0x0A


class ByteSource(Protocol):
    """Anything with a ``read(size)`` that returns b"" at end of stream."""

    def read(self, size: int) -> bytes: ...


def read_line(stream: ByteSource, encoding: str = "utf-8") -> str:
    """
    Read one line from ``stream`` and return it without its terminator.

    Reads byte by byte and consumes exactly the bytes of this line,
    including its "\\r\\n" or "\\n" terminator. At end of stream, whatever
    was accumulated is returned ("" at true EOF). Bytes that are not
    valid in ``encoding`` are replaced rather than raising.
    """
    line = bytearray()
    pending_cr = False

    while True:
        byte = stream.read(1)
        if not byte:
            # EOF: a trailing CR never saw its LF, so it is content
            if pending_cr:
                line.append(CR)
            break

        value = byte[0]

        if value == LF:
            break

        if pending_cr:
            line.append(CR)
            pending_cr = False

        if value == CR:
            pending_cr = True
        else:
            line.append(value)

    return line.decode(encoding, errors="replace")
