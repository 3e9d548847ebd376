"""
Normalization tests: NFKC, width folding, case folding, idempotence.
"""

import pytest

from ngram import convert_width, normalize_text

SAMPLES = [
    "Hello World",
    "ＨＥＬＬＯ　ｗｏｒｌｄ！",
    "ｶﾞｷﾞｸﾞ",           # half-width katakana with voiced marks
    "①②③ ㍻ ﬁ",          # compatibility characters
    "Straße ΣΑΣ İstanbul",
    "東京タワー 123",
    "e\u0301",          # decomposed e + combining acute
    "",
]

PARAMS = [
    dict(nfkc=True, width="narrow", lower=False),
    dict(nfkc=True, width="narrow", lower=True),
    dict(nfkc=True, width="wide", lower=False),
    dict(nfkc=True, width="wide", lower=True),
    dict(nfkc=True, width="keep", lower=True),
    dict(nfkc=False, width="narrow", lower=False),
    dict(nfkc=False, width="narrow", lower=True),
    dict(nfkc=False, width="wide", lower=True),
    dict(nfkc=False, width="keep", lower=False),
    dict(nfkc=True, width="bogus", lower=False),
]


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("params", PARAMS)
def test_normalize_is_idempotent(text, params):
    once = normalize_text(text, **params)
    assert normalize_text(once, **params) == once


def test_nfkc_defaults():
    assert normalize_text("ＡＢＣ１２３") == "ABC123"
    assert normalize_text("ｶﾞ") == "ガ"
    assert normalize_text("ﬁ") == "fi"
    assert normalize_text("e\u0301") == "\u00e9"


def test_nfkc_disabled_keeps_compatibility_forms():
    assert normalize_text("ﬁ", nfkc=False, width="keep") == "ﬁ"
    assert normalize_text("ｶﾞ", nfkc=False, width="keep") == "ｶﾞ"


def test_narrow_without_nfkc_still_folds_fullwidth_ascii():
    assert normalize_text("ＡＢＣ　１", nfkc=False, width="narrow") == "ABC 1"


def test_wide_conversion():
    assert normalize_text("AB 1", width="wide") == "ＡＢ　１"
    assert convert_width("a~", "wide") == "ａ～"


def test_unknown_width_behaves_like_keep():
    assert normalize_text("ＡＢ", nfkc=False, width="bogus") == "ＡＢ"
    assert convert_width("ＡＢ", "bogus") == convert_width("ＡＢ", "keep")


def test_lower_is_unicode_case_folding():
    assert normalize_text("ÀÉÎ", lower=True) == "àéî"
    assert normalize_text("Straße", lower=True) == "strasse"
    assert normalize_text("ΣΑΣ", lower=True) == "σασ"
    assert normalize_text("ＡＢＣ", nfkc=False, lower=True) == "abc"


def test_lower_off_preserves_case():
    assert normalize_text("Hello") == "Hello"
