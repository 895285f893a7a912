"""Signature scanning for traversal and encoding attacks in untrusted text.

Each signature class is independent so a rejection names exactly one reason.
:func:`inspect` runs them over the raw text and over every percent-decoded
layer of it.
"""

import logging
import os
import re
from dataclasses import dataclass

from pathguard.core.errors import PathSecurityError, ViolationKind
from pathguard.utils.decoding import DecodingError, decode_layers, percent_decode

logger = logging.getLogger(__name__)

DEFAULT_DECODE_ROUNDS = 3


@dataclass(frozen=True)
class Signature:
    name: str
    pattern: re.Pattern[str]
    kind: ViolationKind = ViolationKind.SUSPICIOUS_PATTERN
    skip_drive: bool = False

    def matches(self, text: str) -> bool:
        if self.skip_drive:
            text = os.path.splitdrive(text)[1]
        return self.pattern.search(text) is not None


def _sig(name: str, pattern: str, **kwargs: bool) -> Signature:
    return Signature(name, re.compile(pattern, re.IGNORECASE), **kwargs)


NULL_BYTE = _sig("null byte", r"\x00")
PARENT_REFERENCE = _sig("parent directory reference", r"(?:^|[\\/])\.\.|\.\.(?:[\\/]|$)")
ENCODED_TRAVERSAL = _sig("encoded traversal", r"%2e(?:%2e|\.)|\.%2e|%2f|%5c")
DOUBLE_ENCODING = _sig("double encoding", r"%25[0-9a-f]{2}")
OVERLONG_UTF8 = _sig(
    "overlong utf-8",
    r"%c0%(?:ae|af|2e|2f|5c)|%c1%(?:9c|1c|81)|%e0%80%(?:ae|af)|%f0%80%80%(?:ae|af)",
)
UNICODE_HOMOGLYPH = _sig(
    "unicode homoglyph",
    "[\uff0e\uff0f\uff3c\u2024\u2215\u2044\ufe52]",
)
ILLEGAL_CHARACTER = _sig("illegal filename character", r'[<>:"|?*]', skip_drive=True)

SIGNATURES: tuple[Signature, ...] = (
    NULL_BYTE,
    PARENT_REFERENCE,
    ENCODED_TRAVERSAL,
    DOUBLE_ENCODING,
    OVERLONG_UTF8,
    UNICODE_HOMOGLYPH,
    ILLEGAL_CHARACTER,
)


def find_signature(text: str) -> Signature | None:
    """Return the first signature matching *text*, or ``None``."""
    for signature in SIGNATURES:
        if signature.matches(text):
            return signature
    return None


def scan(text: str) -> ViolationKind | None:
    """Scan *text* as-is, without decoding it."""
    signature = find_signature(text)
    return signature.kind if signature else None


def _reject(text: str, layer: int) -> None:
    signature = find_signature(text)
    if signature is None:
        return
    logger.debug(f"Signature '{signature.name}' matched at decode layer {layer}")
    raise PathSecurityError(
        signature.kind, f"Invalid path: contains suspicious pattern ({signature.name})"
    )


def _invalid_encoding(error: DecodingError) -> PathSecurityError:
    logger.debug(f"Rejected encoding: {error}")
    return PathSecurityError(
        ViolationKind.INVALID_ENCODING, "Invalid path: contains invalid URL encoding"
    )


def inspect(text: str, max_rounds: int = DEFAULT_DECODE_ROUNDS) -> str:
    """Scan *text* and each of its decoded layers, returning the decoded text.

    The raw text is scanned first, then percent-decoded up to *max_rounds*
    times with a re-scan after every round. The returned text contains no
    ``%`` at all: any left after the last round is either a malformed escape
    or encoding nested deeper than the bound.

    Raises:
        PathSecurityError: ``SUSPICIOUS_PATTERN`` when a signature matches on
            any layer or nesting exceeds the bound, ``INVALID_ENCODING`` when a
            layer fails to decode.
    """
    _reject(text, 0)

    decoded = text
    try:
        for layer, decoded in enumerate(decode_layers(text, max_rounds), start=1):
            _reject(decoded, layer)
    except DecodingError as e:
        raise _invalid_encoding(e) from e

    if "%" in decoded:
        try:
            percent_decode(decoded)
        except DecodingError as e:
            raise _invalid_encoding(e) from e
        raise PathSecurityError(
            ViolationKind.SUSPICIOUS_PATTERN,
            f"Invalid path: contains suspicious pattern (nested encoding beyond {max_rounds} rounds)",
        )
    return decoded
