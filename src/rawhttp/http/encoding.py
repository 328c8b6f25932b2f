"""
=============================================================================
PERCENT-ENCODING AND FORM ENCODING
=============================================================================

URLs and form bodies may only carry a small set of "safe" characters.
Everything else is escaped as %XX using the UTF-8 bytes of the character.

    "x y"      → "x+y"          (space becomes + in form context)
    "a&b=c"    → "a%26b%3Dc"    (delimiters must be escaped!)
    "café"     → "caf%C3%A9"    (é is two UTF-8 bytes)

=============================================================================
application/x-www-form-urlencoded
=============================================================================

    fields = {"name": "Alice Smith", "page": "1"}

    ┌───────────────────────────────────────────────────────────────┐
    │   name=Alice+Smith&page=1                                     │
    │   ──┬─ ─────┬───── ─┬── ┬                                     │
    │   name    value    name value                                 │
    │        pairs joined with "&", name and value with "="         │
    └───────────────────────────────────────────────────────────────┘

The same string is used as a GET query (after "?") and as a POST body.

=============================================================================
"""

from typing import Mapping
from urllib.parse import quote_plus


def percent_encode(text: str) -> str:
    """
    Percent-encode text for use in a query string, form body or
    multipart header.

    Unreserved characters (letters, digits, "-", ".", "_", "~") pass
    through, spaces become "+", and everything else becomes %XX of its
    UTF-8 bytes.

    Example:
        percent_encode("x y/z")  # "x+y%2Fz"
    """
    return quote_plus(text, safe="", encoding="utf-8")


def encode_form(fields: Mapping[str, str]) -> str:
    """
    Encode a field mapping as application/x-www-form-urlencoded.

    Pairs are emitted in the mapping's iteration order. A plain ``dict``
    keeps insertion order, so callers who need a stable wire format
    should build the mapping in the order they want it sent.

    Args:
        fields: Field name → value. Neither should be pre-encoded.

    Returns:
        "name1=value1&name2=value2", or "" for an empty mapping.
    """
    return "&".join(
        f"{percent_encode(name)}={percent_encode(value)}"
        for name, value in fields.items()
    )
