"""
Tests for the regex matching operations

Covers find, highlight, replace (including dollar-style group references),
pattern validation and detailed match inspection.
"""

import re

import pytest

from pattern_matching import (
    MatchFlag,
    MatchResult,
    PatternSyntaxError,
    ReplacementError,
    compile_pattern,
    find_matches,
    count_matches,
    highlight_matches,
    replace_all,
    is_valid_pattern,
    get_detailed_matches
)
from pattern_matching.base import to_regex_flags


SAMPLE = "The quick brown fox jumps over the lazy dog"
FOUR_LETTER_WORDS = r"\b\w{4}\b"


class TestFindMatches:
    """Test find_matches and count_matches"""

    def test_finds_matches_in_order(self):
        assert find_matches(SAMPLE, FOUR_LETTER_WORDS) == ["over", "lazy"]

    def test_count_agrees_with_find(self):
        assert count_matches(SAMPLE, FOUR_LETTER_WORDS) == 2
        assert count_matches(SAMPLE, r"\d") == 0

    def test_empty_inputs_yield_no_matches(self):
        assert find_matches("", FOUR_LETTER_WORDS) == []
        assert find_matches(None, FOUR_LETTER_WORDS) == []
        assert find_matches(SAMPLE, "") == []
        assert find_matches(SAMPLE, None) == []
        assert count_matches(None, "x") == 0

    def test_case_insensitive_flag(self):
        assert find_matches("Cat cat CAT", "cat") == ["cat"]
        assert find_matches("Cat cat CAT", "cat", MatchFlag.CASE_INSENSITIVE) == ["Cat", "cat", "CAT"]

    def test_multiline_flag(self):
        text = "one\ntwo"
        assert find_matches(text, r"^\w+$") == []
        assert find_matches(text, r"^\w+$", MatchFlag.MULTILINE) == ["one", "two"]

    def test_unsupported_flag_bits_are_ignored(self):
        assert to_regex_flags(re.DOTALL) == 0
        assert find_matches("a\nb", "a.b", re.DOTALL) == []
        assert find_matches("ABC", "abc", int(MatchFlag.CASE_INSENSITIVE) | re.VERBOSE) == ["ABC"]

    def test_invalid_pattern_raises(self):
        with pytest.raises(PatternSyntaxError) as exc:
            find_matches(SAMPLE, "(abc")

        assert exc.value.pattern == "(abc"
        assert exc.value.position == 0
        assert "(abc" in str(exc.value)

    def test_pattern_syntax_error_is_value_error(self):
        with pytest.raises(ValueError):
            compile_pattern("[")


class TestHighlightMatches:
    """Test highlight_matches"""

    def test_wraps_every_match(self):
        assert highlight_matches("a1b22", r"\d+", "<", ">") == "a<1>b<22>"

    def test_default_style_markers(self):
        result = highlight_matches(SAMPLE, FOUR_LETTER_WORDS, "[[", "]]")
        assert result == "The quick brown fox jumps [[over]] the [[lazy]] dog"

    def test_no_match_leaves_text_unchanged(self):
        assert highlight_matches(SAMPLE, r"\d+", "<", ">") == SAMPLE

    def test_missing_arguments(self):
        assert highlight_matches(None, r"\d", "<", ">") is None
        assert highlight_matches("a1", "", "<", ">") == "a1"
        assert highlight_matches("a1", r"\d", None, ">") == "a1"
        assert highlight_matches("a1", r"\d", "<", None) == "a1"

    def test_empty_markers_are_allowed(self):
        assert highlight_matches("a1", r"\d", "", "") == "a1"

    def test_zero_length_matches(self):
        assert highlight_matches("ab", "x*", "[", "]") == "[]a[]b[]"

    def test_invalid_pattern_raises(self):
        with pytest.raises(PatternSyntaxError):
            highlight_matches(SAMPLE, "[a-", "<", ">")


class TestReplaceAll:
    """Test replace_all and its replacement syntax"""

    def test_replaces_every_match(self):
        result = replace_all(SAMPLE, FOUR_LETTER_WORDS, "****")
        assert result == "The quick brown fox jumps **** the **** dog"

    def test_replacing_twice_is_stable(self):
        once = replace_all(SAMPLE, FOUR_LETTER_WORDS, "****")
        assert replace_all(once, FOUR_LETTER_WORDS, "****") == once

    def test_numbered_group_references(self):
        assert replace_all("John Smith", r"(\w+) (\w+)", "$2, $1") == "Smith, John"

    def test_whole_match_reference(self):
        assert replace_all("a1b2", r"\d", "<$0>") == "a<1>b<2>"

    def test_named_group_references(self):
        result = replace_all(
            "2024-01-15",
            r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})",
            "${day}/${month}/${year}"
        )
        assert result == "15/01/2024"

    def test_multi_digit_reference_stops_at_last_valid_group(self):
        assert replace_all("ab", "(a)", "$10") == "a0b"

    def test_escaped_characters_are_literal(self):
        assert replace_all("cost 5", r"\d", r"\$$0") == "cost $5"
        assert replace_all("x", "x", "a\\\\b") == "a\\b"

    def test_python_template_syntax_is_literal(self):
        assert replace_all("ab", "(a)", r"\g<1>") == "g<1>b"

    def test_non_participating_group_is_empty(self):
        assert replace_all("b", "(a)?b", "[$1]") == "[]"

    def test_missing_arguments(self):
        assert replace_all(None, "a", "b") is None
        assert replace_all("abc", "a", None) == "abc"
        assert replace_all("abc", "", "x") == "abc"

    @pytest.mark.parametrize("replacement", ["$2", "$", "${missing}", "${}", "${open", "$x", "trailing\\"])
    def test_malformed_replacement_raises(self, replacement):
        with pytest.raises(ReplacementError) as exc:
            replace_all("ab", "(a)", replacement)
        assert exc.value.replacement == replacement

    def test_invalid_pattern_raises(self):
        with pytest.raises(PatternSyntaxError):
            replace_all(SAMPLE, "*", "x")


class TestValidationAndDetails:
    """Test is_valid_pattern and get_detailed_matches"""

    def test_is_valid_pattern(self):
        assert is_valid_pattern(r"[a-z]+")
        assert is_valid_pattern(FOUR_LETTER_WORDS)
        assert not is_valid_pattern("[")
        assert not is_valid_pattern("")
        assert not is_valid_pattern(None)

    def test_detailed_matches_carry_offsets_and_groups(self):
        matches = get_detailed_matches("John Smith, Jane Doe", r"(\w+) (\w+)")

        assert len(matches) == 2
        first = matches[0]
        assert isinstance(first, MatchResult)
        assert (first.text, first.start, first.end) == ("John Smith", 0, 10)
        assert first.groups == ("John Smith", "John", "Smith")
        assert first.group_count == 2
        assert first.group(2) == "Smith"
        assert first.group(5) is None
        assert matches[1].start == 12

    def test_optional_group_is_none(self):
        match = get_detailed_matches("b", "(a)?b")[0]
        assert match.groups == ("b", None)

    def test_to_dict(self):
        match = get_detailed_matches("x42", r"\d+")[0]
        assert match.to_dict() == {"text": "42", "start": 1, "end": 3, "groups": ["42"]}
        assert str(match) == "Match: '42', pos: 1-3"

    def test_empty_inputs(self):
        assert get_detailed_matches("", r"\d") == []
        assert get_detailed_matches("1", None) == []


MATCH_CASES = [
    (SAMPLE, FOUR_LETTER_WORDS),
    ("a1b22c333", r"\d+"),
    ("ab", "x*"),
    ("aaa", "a*"),
    ("one\ntwo\n", r"$"),
    ("Hello, world!", r"\b"),
    ("no digits here", r"\d"),
]


class TestMatchProperties:
    """Properties that hold for every text and pattern"""

    @pytest.mark.parametrize("text,pattern", MATCH_CASES)
    def test_matches_and_gaps_rebuild_text(self, text, pattern):
        details = get_detailed_matches(text, pattern)
        assert [d.text for d in details] == find_matches(text, pattern)

        parts = []
        position = 0
        for detail in details:
            assert detail.start >= position
            assert text[detail.start:detail.end] == detail.text
            parts.append(text[position:detail.start])
            parts.append(detail.text)
            position = detail.end
        parts.append(text[position:])

        assert "".join(parts) == text

    @pytest.mark.parametrize("text,pattern", MATCH_CASES)
    @pytest.mark.parametrize("prefix,suffix", [("<<", ">"), ("", "]]"), ("⟦", "⟧")])
    def test_highlight_adds_only_markers(self, text, pattern, prefix, suffix):
        result = highlight_matches(text, pattern, prefix, suffix)
        count = count_matches(text, pattern)

        assert len(result) == len(text) + count * (len(prefix) + len(suffix))

        stripped = result
        for marker in (prefix, suffix):
            if marker:
                stripped = stripped.replace(marker, "")
        assert stripped == text
