"""텍스트 유틸리티 테스트"""
import re

import pytest

from src.utils.text_utils import escape_regex, is_rtl_text, normalize_search_term, split_words


class TestEscapeRegex:
    """정규식 이스케이프"""

    @pytest.mark.parametrize("raw", ["c++", "a.b", "(x)", "[y]", "1$", "^a|b", "q?", "a\\b", "{3}"])
    def test_escaped_text_matches_literally(self, raw):
        """이스케이프 결과는 원문 그대로만 매칭"""
        pattern = re.compile(escape_regex(raw))
        assert pattern.search(f"prefix {raw} suffix")

    def test_metacharacters_escaped(self):
        assert escape_regex("c++") == "c\\+\\+"
        assert escape_regex("a.b") == "a\\.b"

    def test_plain_text_unchanged(self):
        assert escape_regex("galaxy s25") == "galaxy s25"
        assert escape_regex("شنطة") == "شنطة"

    def test_empty(self):
        assert escape_regex("") == ""


class TestIsRtlText:
    """RTL 판별"""

    def test_arabic_only(self):
        assert is_rtl_text("شنطة")
        assert is_rtl_text("شنطة جلد")

    def test_hebrew_only(self):
        assert is_rtl_text("תיק")

    def test_latin(self):
        assert not is_rtl_text("bag")

    def test_mixed(self):
        """라틴 문자가 섞이면 RTL 아님"""
        assert not is_rtl_text("شنطة nike")

    def test_digits_not_rtl(self):
        assert not is_rtl_text("شنطة 2")

    def test_empty(self):
        assert not is_rtl_text("")


class TestSplitWords:
    def test_multiple_spaces(self):
        assert split_words("  galaxy   s25 ultra ") == ["galaxy", "s25", "ultra"]

    def test_empty(self):
        assert split_words("") == []
        assert split_words("   ") == []


class TestNormalizeSearchTerm:
    def test_none(self):
        assert normalize_search_term(None) == ""

    def test_strip(self):
        assert normalize_search_term("  phone \n") == "phone"

    def test_whitespace_only(self):
        assert normalize_search_term("   ") == ""
