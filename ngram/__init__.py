"""Text pipeline shared with the server: normalization, codepoints, n-grams."""

from .normalize import (
    WIDTH_KEEP,
    WIDTH_NARROW,
    WIDTH_WIDE,
    convert_width,
    normalize_text,
)
from .codepoints import (
    codepoints_to_utf8,
    is_scalar_value,
    utf8_to_codepoints,
)
from .ngrams import (
    CJK_IDEOGRAPH_RANGES,
    generate_hybrid_ngrams,
    generate_ngrams,
    is_cjk_ideograph,
    split_script_runs,
    tokenize_query,
)

__all__ = [
    "WIDTH_KEEP",
    "WIDTH_NARROW",
    "WIDTH_WIDE",
    "convert_width",
    "normalize_text",
    "codepoints_to_utf8",
    "is_scalar_value",
    "utf8_to_codepoints",
    "CJK_IDEOGRAPH_RANGES",
    "generate_hybrid_ngrams",
    "generate_ngrams",
    "is_cjk_ideograph",
    "split_script_runs",
    "tokenize_query",
]
