"""
N-gram tokenization for query terms.

- Uniform n-grams: sliding window over codepoints (default n=1).
- Hybrid n-grams: CJK ideographs and everything else are split into runs, each run n-grammed
  with its own size. Ideographs are often whole words (size 1), alphabetic text needs longer windows.
- The query side must use the same sizes and class boundaries the server indexed with.
"""

from typing import List, Tuple

from .normalize import WIDTH_NARROW, normalize_text

DEFAULT_ASCII_NGRAM_SIZE = 2
DEFAULT_KANJI_NGRAM_SIZE = 1

# Inclusive codepoint ranges treated as CJK ideographs.
CJK_IDEOGRAPH_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x3400, 0x4DBF),    # Extension A
    (0x4E00, 0x9FFF),    # Unified Ideographs
    (0xF900, 0xFAFF),    # Compatibility Ideographs
    (0x20000, 0x2A6DF),  # Extension B
    (0x2A700, 0x2B73F),  # Extension C
    (0x2B740, 0x2B81F),  # Extension D
    (0x2B820, 0x2CEAF),  # Extension E
    (0x2CEB0, 0x2EBEF),  # Extension F
    (0x2EBF0, 0x2EE5F),  # Extension I
    (0x2F800, 0x2FA1F),  # Compatibility Supplement
    (0x30000, 0x3134F),  # Extension G
    (0x31350, 0x323AF),  # Extension H
)


def is_cjk_ideograph(cp: int) -> bool:
    for first, last in CJK_IDEOGRAPH_RANGES:
        if first <= cp <= last:
            return True
    return False


def generate_ngrams(text: str, n: int = 1) -> List[str]:
    """
    All overlapping n-codepoint windows of text, in order.
    Returns max(0, len(text) - n + 1) n-grams; text shorter than n yields [].
    """
    if n < 1:
        raise ValueError("N-gram size must be at least 1")
    return [text[i : i + n] for i in range(len(text) - n + 1)]


def split_script_runs(text: str) -> List[Tuple[bool, str]]:
    """Split text into maximal (is_cjk, run) pairs, preserving order."""
    runs: List[Tuple[bool, str]] = []
    start = 0
    for i in range(1, len(text) + 1):
        if i == len(text) or is_cjk_ideograph(ord(text[i])) != is_cjk_ideograph(ord(text[start])):
            runs.append((is_cjk_ideograph(ord(text[start])), text[start:i]))
            start = i
    return runs


def generate_hybrid_ngrams(
    text: str,
    ascii_size: int = DEFAULT_ASCII_NGRAM_SIZE,
    kanji_size: int = DEFAULT_KANJI_NGRAM_SIZE,
) -> List[str]:
    """
    N-grams per script run: kanji_size for CJK ideograph runs, ascii_size for the rest.
    No n-gram crosses a run boundary.
    """
    if ascii_size < 1 or kanji_size < 1:
        raise ValueError("N-gram size must be at least 1")
    result: List[str] = []
    for is_cjk, run in split_script_runs(text):
        result.extend(generate_ngrams(run, kanji_size if is_cjk else ascii_size))
    return result


def tokenize_query(
    text: str,
    ascii_size: int = DEFAULT_ASCII_NGRAM_SIZE,
    kanji_size: int = DEFAULT_KANJI_NGRAM_SIZE,
    nfkc: bool = True,
    width: str = WIDTH_NARROW,
    lower: bool = False,
) -> List[str]:
    """Normalize then hybrid-tokenize, mirroring the server's indexing pipeline."""
    return generate_hybrid_ngrams(normalize_text(text, nfkc=nfkc, width=width, lower=lower), ascii_size, kanji_size)
