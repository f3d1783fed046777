"""Text normalization utilities for Japanese place name matching."""
import re
from typing import Optional


# Full-width digits (U+FF10..U+FF19) sit 0xFEE0 above ASCII digits
FULLWIDTH_DIGIT_OFFSET = 0xFEE0
FULLWIDTH_DIGITS = re.compile(r"[０-９]")

KANJI_DIGITS = {
    "一": 1, "二": 2, "三": 3, "四": 4, "五": 5,
    "六": 6, "七": 7, "八": 8, "九": 9,
}

CHOME = "丁目"
KANJI_CHOME = re.compile(r"([一二三四五六七八九十]+)丁目")
WHITESPACE = re.compile(r"[\s　]+")

PREFECTURE_SUFFIXES = ("都", "道", "府", "県")
CITY_SUFFIXES = ("市", "区", "町", "村", "郡")


def fold_fullwidth_digits(text: str) -> str:
    """Convert full-width digits to ASCII digits, leaving everything else alone."""
    return FULLWIDTH_DIGITS.sub(lambda m: chr(ord(m.group(0)) - FULLWIDTH_DIGIT_OFFSET), text)


def kanji_to_number(token: str) -> Optional[int]:
    """
    Convert a kanji numeral in the range 1-99 to an integer.

    Accepts a bare digit (一..九), 十, or ``[一-九]?十[一-九]?``. Block
    numbers never need hundreds, so anything else returns None.

    Args:
        token: Kanji numeral string

    Returns:
        Integer value or None when outside the supported grammar
    """
    if not token:
        return None
    if token == "十":
        return 10
    if "十" not in token:
        if len(token) == 1:
            return KANJI_DIGITS.get(token)
        return None

    tens_part, _, ones_part = token.partition("十")
    if "十" in ones_part:
        return None
    if tens_part:
        if len(tens_part) != 1 or tens_part not in KANJI_DIGITS:
            return None
        tens = KANJI_DIGITS[tens_part]
    else:
        tens = 1
    if ones_part:
        if len(ones_part) != 1 or ones_part not in KANJI_DIGITS:
            return None
        ones = KANJI_DIGITS[ones_part]
    else:
        ones = 0
    return tens * 10 + ones


def _replace_kanji_chome(text: str) -> str:
    def replace(match: re.Match) -> str:
        number = kanji_to_number(match.group(1))
        return f"{number}{CHOME}" if number is not None else match.group(0)

    return KANJI_CHOME.sub(replace, text)


def _truncate_at_chome(text: str) -> str:
    idx = text.find(CHOME)
    if idx >= 0:
        return text[:idx + len(CHOME)]
    return text


def normalize_chome(text: str) -> str:
    """
    Normalize a town-level address line down to its 丁目 block key.

    Folds full-width digits, strips whitespace, rewrites kanji block numbers
    (三丁目 -> 3丁目) and cuts everything after the first 丁目, which drops
    lot numbers such as 13番.

    Args:
        text: Address line, e.g. "弥生町３丁目１３番"

    Returns:
        Normalized string, e.g. "弥生町3丁目"
    """
    if not text:
        return ""
    result = WHITESPACE.sub("", fold_fullwidth_digits(text))
    result = _replace_kanji_chome(result)
    return _truncate_at_chome(result)


def normalize_town(name: str) -> str:
    """Normalize a boundary-source town label for matching against chome keys."""
    if not name:
        return ""
    result = WHITESPACE.sub("", fold_fullwidth_digits(name))
    # Boundary labels are cut first, then the block number is rewritten
    result = _truncate_at_chome(result)
    return _replace_kanji_chome(result).strip()


def _strip_one_suffix(name: str, suffixes) -> str:
    name = name.strip()
    for suffix in suffixes:
        if name.endswith(suffix):
            return name[:-len(suffix)].strip()
    return name


def normalize_prefecture(name: str) -> str:
    """Strip one trailing 都/道/府/県 from a prefecture name."""
    if not name:
        return ""
    return _strip_one_suffix(fold_fullwidth_digits(name), PREFECTURE_SUFFIXES)


def normalize_city(name: str) -> str:
    """Strip one trailing 市/区/町/村/郡 from a municipality name."""
    if not name:
        return ""
    return _strip_one_suffix(fold_fullwidth_digits(name), CITY_SUFFIXES)


def clean_text(text: Optional[str]) -> Optional[str]:
    """Return stripped text, or None for missing or blank values."""
    if text is None:
        return None
    text = str(text).strip()
    return text or None
