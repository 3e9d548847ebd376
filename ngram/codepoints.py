"""
Lossless conversion between UTF-8 bytes and Unicode scalar values.

- Malformed UTF-8 is rejected, never replaced.
- Surrogates (U+D800..U+DFFF) and values above U+10FFFF are not scalar values and are rejected too.
"""

from typing import Iterable, List

from protocol.errors import EncodingError

MAX_CODEPOINT = 0x10FFFF
_SURROGATE_FIRST = 0xD800
_SURROGATE_LAST = 0xDFFF


def is_scalar_value(cp: int) -> bool:
    return 0 <= cp <= MAX_CODEPOINT and not (_SURROGATE_FIRST <= cp <= _SURROGATE_LAST)


def utf8_to_codepoints(data: bytes) -> List[int]:
    """Decode UTF-8 bytes to a list of codepoints. Raises EncodingError on invalid input."""
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid UTF-8 sequence at byte {e.start}: {e.reason}") from e
    return [ord(c) for c in text]


def codepoints_to_utf8(codepoints: Iterable[int]) -> bytes:
    """Encode codepoints as UTF-8 bytes. Raises EncodingError for non-scalar values."""
    chars = []
    for i, cp in enumerate(codepoints):
        if not is_scalar_value(cp):
            raise EncodingError(f"Invalid codepoint at index {i}: {cp:#x}")
        chars.append(chr(cp))
    return "".join(chars).encode("utf-8")
