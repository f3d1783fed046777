"""Tests for Japanese place name normalization."""
import pytest
from phototrail.core.normalization import (
    clean_text,
    fold_fullwidth_digits,
    kanji_to_number,
    normalize_chome,
    normalize_city,
    normalize_prefecture,
    normalize_town,
)


def test_fold_fullwidth_digits():
    """Test full-width digit folding."""
    assert fold_fullwidth_digits("３丁目１３番") == "3丁目13番"
    assert fold_fullwidth_digits("０１２３４５６７８９") == "0123456789"
    assert fold_fullwidth_digits("abc 123") == "abc 123"
    assert fold_fullwidth_digits("") == ""


@pytest.mark.parametrize("token,expected", [
    ("一", 1),
    ("九", 9),
    ("十", 10),
    ("十一", 11),
    ("二十", 20),
    ("二十三", 23),
    ("九十九", 99),
])
def test_kanji_to_number(token, expected):
    """Test kanji numerals inside the supported grammar."""
    assert kanji_to_number(token) == expected


@pytest.mark.parametrize("token", ["百", "", "十十", "一二", "二十三四", "零", "abc"])
def test_kanji_to_number_out_of_grammar(token):
    """Test tokens outside the 1-99 grammar return None."""
    assert kanji_to_number(token) is None


def test_normalize_chome():
    """Test chome normalization."""
    assert normalize_chome("弥生町３丁目１３番") == "弥生町3丁目"
    assert normalize_chome("一丁目") == "1丁目"
    assert normalize_chome("西新宿二十三丁目") == "西新宿23丁目"
    assert normalize_chome("中央 三丁目 5番") == "中央3丁目"
    assert normalize_chome("本町") == "本町"
    assert normalize_chome("") == ""


def test_normalize_chome_keeps_unconvertible_numerals():
    """Test numerals outside the grammar are left as written."""
    assert normalize_chome("十十丁目") == "十十丁目"


def test_normalize_chome_truncates_at_first_chome():
    """Test only the first 丁目 is kept."""
    assert normalize_chome("本町1丁目2丁目") == "本町1丁目"


def test_normalize_town():
    """Test boundary-source town label normalization."""
    assert normalize_town("弥生町三丁目") == "弥生町3丁目"
    assert normalize_town("弥生町３丁目") == "弥生町3丁目"
    assert normalize_town("  本町  ") == "本町"
    assert normalize_town("") == ""


def test_normalize_prefecture():
    """Test prefecture suffix stripping."""
    assert normalize_prefecture("東京都") == "東京"
    assert normalize_prefecture("北海道") == "北海"
    assert normalize_prefecture("大阪府") == "大阪"
    assert normalize_prefecture("神奈川県") == "神奈川"
    assert normalize_prefecture("東京") == "東京"
    assert normalize_prefecture("") == ""


def test_normalize_city_strips_exactly_one_suffix():
    """Test municipality suffix stripping."""
    assert normalize_city("中野区") == "中野"
    assert normalize_city("横浜市") == "横浜"
    assert normalize_city("東京都 中野") == "東京都 中野"
    # Only one suffix is removed
    assert normalize_city("大町市") == "大町"
    assert normalize_city("") == ""


def test_clean_text():
    """Test blank values become None."""
    assert clean_text(None) is None
    assert clean_text("") is None
    assert clean_text("   ") is None
    assert clean_text(" 中野区 ") == "中野区"
