"""Tests for the highlight rule scanner."""

import dataclasses

import pytest

from tedit.highlighting import (
    HighlightingOptions,
    HighlightTag,
    highlight_line,
    is_separator,
    overlay_matches,
)
from tedit.row import Row
from tedit.width import split_graphemes

N = HighlightTag.NONE
NUM = HighlightTag.NUMBER
STR = HighlightTag.STRING
CHR = HighlightTag.CHARACTER
COM = HighlightTag.COMMENT
ML = HighlightTag.MULTILINE_COMMENT
KW1 = HighlightTag.PRIMARY_KEYWORD
KW2 = HighlightTag.SECONDARY_KEYWORD
MATCH = HighlightTag.MATCH

ALL = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords={"let", "fn", "for_each"},
    secondary_keywords={"u32", "let"},
)


def tags_for(text, options=ALL, continuation=False):
    return highlight_line(split_graphemes(text), options, continuation)


class TestOptions:
    """HighlightingOptions value semantics."""

    def test_keywords_frozen(self):
        options = HighlightingOptions(primary_keywords=["a", "b"])
        assert options.primary_keywords == frozenset({"a", "b"})

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ALL.numbers = False

    def test_plain(self):
        assert HighlightingOptions().is_plain
        assert not ALL.is_plain

    def test_plain_options_tag_nothing(self):
        tags, cont = tags_for("/* let 42 \"s\"", HighlightingOptions(), True)
        assert tags == [N] * 13
        assert cont is False

    def test_tag_style(self):
        assert HighlightTag.NONE.style == ""
        assert HighlightTag.NUMBER.style


class TestSeparators:
    def test_separators(self):
        assert is_separator(" ")
        assert is_separator("\t")
        assert is_separator(";")
        assert is_separator("(")

    def test_non_separators(self):
        assert not is_separator("a")
        assert not is_separator("_")
        assert not is_separator("1")
        assert not is_separator("日")


class TestKeywords:
    """Keyword rule."""

    def test_scenario_let_number(self):
        options = HighlightingOptions(numbers=True, primary_keywords={"let"})
        tags, cont = tags_for("let x = 42;", options)
        assert tags == [KW1] * 3 + [N] * 5 + [NUM] * 2 + [N]
        assert cont is False

    def test_no_partial_word(self):
        tags, _ = tags_for("letter")
        assert tags == [N] * 6

    def test_underscore_joins_word(self):
        tags, _ = tags_for("let_x")
        assert tags == [N] * 5

    def test_keyword_not_after_word_char(self):
        tags, _ = tags_for("xlet")
        assert tags == [N] * 4

    def test_longer_keyword_wins(self):
        tags, _ = tags_for("for_each(x)")
        assert tags[:8] == [KW1] * 8
        assert tags[8:] == [N] * 3

    def test_secondary(self):
        tags, _ = tags_for("x: u32")
        assert tags == [N, N, N, KW2, KW2, KW2]

    def test_primary_before_secondary(self):
        tags, _ = tags_for("let")
        assert tags == [KW1] * 3

    def test_keyword_between_parens(self):
        tags, _ = tags_for("(let)")
        assert tags == [N, KW1, KW1, KW1, N]


class TestStringsAndCharacters:
    """String and character literal rules."""

    def test_string(self):
        tags, _ = tags_for('"ab" c')
        assert tags == [STR] * 4 + [N, N]

    def test_escaped_quote(self):
        tags, _ = tags_for('"a\\"b" c')
        assert tags == [STR] * 6 + [N, N]

    def test_unterminated_string(self):
        tags, cont = tags_for('"abc')
        assert tags == [STR] * 4
        assert cont is False

    def test_strings_disabled(self):
        tags, _ = tags_for('"a"', HighlightingOptions())
        assert tags == [N] * 3

    def test_string_hides_keyword(self):
        tags, _ = tags_for('"let"')
        assert tags == [STR] * 5

    def test_characters(self):
        options = HighlightingOptions(characters=True)
        tags, _ = tags_for("'a' '\\n' 'ab'", options)
        assert tags[:3] == [CHR] * 3
        assert tags[3] == N
        assert tags[4:8] == [CHR] * 4
        assert tags[8:] == [N] * 5

    def test_character_wide(self):
        options = HighlightingOptions(characters=True)
        tags, _ = tags_for("'日'", options)
        assert tags == [CHR] * 3


class TestNumbers:
    """Number rule."""

    def test_decimal(self):
        tags, _ = tags_for("3.14")
        assert tags == [NUM] * 4

    def test_single_decimal_point(self):
        tags, _ = tags_for("1.2.3")
        assert tags == [NUM, NUM, NUM, N, NUM]

    def test_trailing_dot_not_number(self):
        tags, _ = tags_for("42.")
        assert tags == [NUM, NUM, N]

    def test_digit_inside_word(self):
        tags, _ = tags_for("x42")
        assert tags == [N] * 3

    def test_number_after_wide_text(self):
        tags, _ = tags_for("日本 42")
        assert tags == [N, N, N, NUM, NUM]

    def test_numbers_disabled(self):
        tags, _ = tags_for("42", HighlightingOptions())
        assert tags == [N, N]


class TestComments:
    """Line and block comments, including the continuation state."""

    def test_line_comment(self):
        tags, cont = tags_for("x = 1 // note")
        assert tags[:4] == [N] * 4
        assert tags[4] == NUM
        assert tags[5] == N
        assert tags[6:] == [COM] * 7
        assert cont is False

    def test_line_comments_do_not_continue(self):
        options = HighlightingOptions(comments=True)
        first, cont = tags_for("// start of comment", options)
        assert first == [COM] * 19
        assert cont is False
        second, cont = tags_for("still commented", options, cont)
        assert second == [N] * 15
        assert cont is False

    def test_block_comment_opens(self):
        tags, cont = tags_for("a /* b")
        assert tags == [N, N] + [ML] * 4
        assert cont is True

    def test_block_comment_closes_on_next_line(self):
        tags, cont = tags_for("c */ 1", continuation=True)
        assert tags == [ML] * 4 + [N, NUM]
        assert cont is False

    def test_block_comment_spans_whole_line(self):
        tags, cont = tags_for("let x", continuation=True)
        assert tags == [ML] * 5
        assert cont is True

    def test_block_comment_on_one_line(self):
        tags, cont = tags_for("/* a */ 7")
        assert tags == [ML] * 7 + [N, NUM]
        assert cont is False

    def test_opener_is_not_closer(self):
        tags, cont = tags_for("/*/")
        assert tags == [ML] * 3
        assert cont is True

    def test_empty_line_keeps_comment_open(self):
        assert highlight_line([], ALL, True) == ([], True)
        assert highlight_line([], ALL, False) == ([], False)

    def test_continuation_ignored_without_block_comments(self):
        options = HighlightingOptions(numbers=True)
        tags, cont = tags_for("1 */", options, True)
        assert tags == [NUM, N, N, N]
        assert cont is False

    def test_line_comment_before_block(self):
        tags, cont = tags_for("// /* not a block")
        assert all(t == COM for t in tags)
        assert cont is False


class TestPurity:
    def test_same_input_same_output(self):
        text = 'fn main() { let s = "x"; /* 1'
        assert tags_for(text) == tags_for(text)

    def test_row_highlight_twice(self):
        row = Row('let s = "日本"; // 42')
        first = row.highlight(ALL, "s")
        first_tags = row.tags
        second = row.highlight(ALL, "s")
        assert first == second
        assert row.tags == first_tags


class TestSearchOverlay:
    """MATCH overlay applied after the base pass."""

    def test_overlay(self):
        tags = [N] * 5
        assert overlay_matches(tags, [(1, 3), (4, 9)]) == [N, MATCH, MATCH, N, MATCH]

    def test_match_beats_keyword(self):
        row = Row("let let")
        row.highlight(ALL, "let")
        assert row.tags == (MATCH,) * 3 + (N,) + (MATCH,) * 3

    def test_match_inside_string(self):
        row = Row('"abc"')
        row.highlight(ALL, "b")
        assert row.tags == (STR, STR, MATCH, STR, STR)

    def test_match_keeps_continuation(self):
        row = Row("/* foo")
        assert row.highlight(ALL, "foo") is True
        assert len(row.tags) == len(row)

    def test_match_wide_chars(self):
        row = Row("日本語日本")
        row.highlight(HighlightingOptions(), "日本")
        assert row.tags == (MATCH, MATCH, N, MATCH, MATCH)
