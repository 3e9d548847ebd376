"""
Text normalization applied before n-gram generation.

- NFKC collapses compatibility variants (ligatures, circled digits, half-width kana).
- Width folding: "narrow" maps full-width ASCII to ASCII, "wide" does the reverse, "keep" leaves text alone.
- Optional Unicode case folding (not ASCII-only).
- Must match the server's index-time normalization or queries silently miss.
"""

import unicodedata

WIDTH_NARROW = "narrow"
WIDTH_WIDE = "wide"
WIDTH_KEEP = "keep"

# Full-width forms of printable ASCII live at a fixed offset.
_FULLWIDTH_FIRST = 0xFF01
_FULLWIDTH_LAST = 0xFF5E
_FULLWIDTH_OFFSET = 0xFEE0
_IDEOGRAPHIC_SPACE = "　"

_TO_NARROW = {cp: cp - _FULLWIDTH_OFFSET for cp in range(_FULLWIDTH_FIRST, _FULLWIDTH_LAST + 1)}
_TO_NARROW[ord(_IDEOGRAPHIC_SPACE)] = ord(" ")

_TO_WIDE = {cp - _FULLWIDTH_OFFSET: cp for cp in range(_FULLWIDTH_FIRST, _FULLWIDTH_LAST + 1)}
_TO_WIDE[ord(" ")] = ord(_IDEOGRAPHIC_SPACE)


def _nfkc_casefold(text: str) -> str:
    """NFKC_Casefold closure: NFKC(casefold(NFKC(casefold(NFD(text)))))."""
    folded = unicodedata.normalize("NFD", text).casefold()
    folded = unicodedata.normalize("NFKC", folded).casefold()
    return unicodedata.normalize("NFKC", folded)


def convert_width(text: str, width: str = WIDTH_NARROW) -> str:
    """Fold character width. Unknown modes behave like "keep"."""
    if width == WIDTH_NARROW:
        return text.translate(_TO_NARROW)
    if width == WIDTH_WIDE:
        return text.translate(_TO_WIDE)
    return text


def normalize_text(
    text: str,
    nfkc: bool = True,
    width: str = WIDTH_NARROW,
    lower: bool = False,
) -> str:
    """
    Normalize text the way the server does before indexing.
    Idempotent for fixed parameters: normalize_text(normalize_text(x)) == normalize_text(x).
    Width folding runs last because NFKC would undo a "wide" conversion.
    """
    if nfkc and lower:
        text = _nfkc_casefold(text)
    elif nfkc:
        text = unicodedata.normalize("NFKC", text)
    elif lower:
        text = text.casefold()
    return convert_width(text, width)
