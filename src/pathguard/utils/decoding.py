"""Strict, bounded percent-decoding."""

import re
from collections.abc import Iterator
from urllib.parse import unquote_to_bytes

_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class DecodingError(ValueError):
    """Raised when text is not valid percent-encoded UTF-8."""


def has_escapes(text: str) -> bool:
    return _ESCAPE.search(text) is not None


def percent_decode(text: str) -> str:
    """Decode one round of ``%XX`` escapes.

    Unlike :func:`urllib.parse.unquote`, malformed input is an error: a ``%``
    must be followed by two hex digits and the decoded bytes must be valid
    UTF-8, which also rules out overlong forms such as ``%c0%ae``.

    Raises:
        DecodingError: On a malformed escape or invalid UTF-8.
    """
    match = _MALFORMED_ESCAPE.search(text)
    if match:
        raise DecodingError(f"Malformed escape at offset {match.start()}")
    if "%" not in text:
        return text
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingError(f"Decoded bytes are not valid UTF-8: {e.reason}") from e


def decode_layers(text: str, max_rounds: int) -> Iterator[str]:
    """Yield each successive decoding of *text*, at most *max_rounds* of them.

    Stops early once a round leaves the text unchanged.
    """
    current = text
    for _ in range(max_rounds):
        decoded = percent_decode(current)
        if decoded == current:
            return
        yield decoded
        current = decoded
