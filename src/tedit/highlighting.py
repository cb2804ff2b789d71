"""Rule-based syntax highlighting for a single row of graphemes."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import lru_cache
from typing import Callable, Iterable, Sequence

from tedit.width import split_graphemes


class HighlightTag(Enum):
    NONE = auto()
    NUMBER = auto()
    STRING = auto()
    CHARACTER = auto()
    COMMENT = auto()
    MULTILINE_COMMENT = auto()
    PRIMARY_KEYWORD = auto()
    SECONDARY_KEYWORD = auto()
    MATCH = auto()

    @property
    def style(self) -> str:
        """Rich style used when painting this tag ("" keeps the default)."""
        return _TAG_STYLES[self]


_TAG_STYLES = {
    HighlightTag.NONE: "",
    HighlightTag.NUMBER: "rgb(220,163,163)",
    HighlightTag.STRING: "rgb(211,54,130)",
    HighlightTag.CHARACTER: "rgb(108,113,196)",
    HighlightTag.COMMENT: "rgb(133,153,0)",
    HighlightTag.MULTILINE_COMMENT: "rgb(133,153,0)",
    HighlightTag.PRIMARY_KEYWORD: "rgb(181,137,0)",
    HighlightTag.SECONDARY_KEYWORD: "rgb(42,161,152)",
    HighlightTag.MATCH: "bold rgb(38,139,210)",
}


@dataclass(frozen=True)
class HighlightingOptions:
    """Which highlight rules are active for a file type.

    Built once per file type and shared by every row; never mutated.
    """

    numbers: bool = False
    strings: bool = False
    characters: bool = False
    comments: bool = False
    multiline_comments: bool = False
    primary_keywords: frozenset[str] = field(default_factory=frozenset)
    secondary_keywords: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of keywords but always store frozensets.
        object.__setattr__(self, "primary_keywords", frozenset(self.primary_keywords))
        object.__setattr__(
            self, "secondary_keywords", frozenset(self.secondary_keywords)
        )

    @property
    def is_plain(self) -> bool:
        return not (
            self.numbers
            or self.strings
            or self.characters
            or self.comments
            or self.multiline_comments
            or self.primary_keywords
            or self.secondary_keywords
        )


PLAIN = HighlightingOptions()

_PUNCT = frozenset(string.punctuation) - {"_"}


def is_separator(g: str) -> bool:
    """Return True when *g* may bound a keyword or start a number."""
    return g.isspace() or g in _PUNCT


def _is_digit(g: str) -> bool:
    return g.isascii() and g.isdigit()


@lru_cache(maxsize=64)
def _by_length(keywords: frozenset[str]) -> tuple[tuple[str, int], ...]:
    """Keywords paired with their grapheme length, longest first."""
    pairs = [(word, len(split_graphemes(word))) for word in keywords if word]
    return tuple(sorted(pairs, key=lambda pair: (-pair[1], pair[0])))


def _find_sequence(graphemes: Sequence[str], needle: str, start: int) -> int:
    """Index of a two-grapheme *needle* at or after *start*, or -1."""
    first, second = needle
    for i in range(start, len(graphemes) - 1):
        if graphemes[i] == first and graphemes[i + 1] == second:
            return i
    return -1


class _Scanner:
    """Left-to-right rule evaluation over one row.

    Each rule looks at position ``i`` and returns how many graphemes it
    consumed (0 rejects). Rules run in ``RULES`` order; the first to accept
    wins.
    """

    def __init__(self, graphemes: Sequence[str], options: HighlightingOptions) -> None:
        self.g = graphemes
        self.n = len(graphemes)
        self.options = options
        self.tags = [HighlightTag.NONE] * self.n
        self.open_comment = False
        self._primary = _by_length(options.primary_keywords)
        self._secondary = _by_length(options.secondary_keywords)

    def _mark(self, start: int, end: int, tag: HighlightTag) -> int:
        end = min(end, self.n)
        self.tags[start:end] = [tag] * (end - start)
        return end - start

    def _prev_is_separator(self, i: int) -> bool:
        return i == 0 or is_separator(self.g[i - 1])

    # -- Rules -------------------------------------------------------------

    def character(self, i: int) -> int:
        if not self.options.characters or self.g[i] != "'" or i + 1 >= self.n:
            return 0
        closing = i + 3 if self.g[i + 1] == "\\" else i + 2
        if closing < self.n and self.g[closing] == "'":
            return self._mark(i, closing + 1, HighlightTag.CHARACTER)
        return 0

    def line_comment(self, i: int) -> int:
        if not self.options.comments:
            return 0
        if self.g[i] == "/" and i + 1 < self.n and self.g[i + 1] == "/":
            return self._mark(i, self.n, HighlightTag.COMMENT)
        return 0

    def block_comment(self, i: int) -> int:
        if not self.options.multiline_comments:
            return 0
        if self.g[i] != "/" or i + 1 >= self.n or self.g[i + 1] != "*":
            return 0
        closing = _find_sequence(self.g, "*/", i + 2)
        if closing == -1:
            self.open_comment = True
            return self._mark(i, self.n, HighlightTag.MULTILINE_COMMENT)
        return self._mark(i, closing + 2, HighlightTag.MULTILINE_COMMENT)

    def _keyword(
        self, i: int, keywords: tuple[tuple[str, int], ...], tag: HighlightTag
    ) -> int:
        if not keywords or not self._prev_is_separator(i):
            return 0
        g = self.g
        for word, length in keywords:
            end = i + length
            if end > self.n:
                continue
            if "".join(g[i:end]) != word:
                continue
            if end < self.n and not is_separator(g[end]):
                continue
            return self._mark(i, end, tag)
        return 0

    def primary_keyword(self, i: int) -> int:
        return self._keyword(i, self._primary, HighlightTag.PRIMARY_KEYWORD)

    def secondary_keyword(self, i: int) -> int:
        return self._keyword(i, self._secondary, HighlightTag.SECONDARY_KEYWORD)

    def string_literal(self, i: int) -> int:
        if not self.options.strings or self.g[i] != '"':
            return 0
        j = i + 1
        while j < self.n:
            ch = self.g[j]
            if ch == "\\":
                j += 2
                continue
            j += 1
            if ch == '"':
                break
        return self._mark(i, j, HighlightTag.STRING)

    def number(self, i: int) -> int:
        if not self.options.numbers or not _is_digit(self.g[i]):
            return 0
        if not self._prev_is_separator(i):
            return 0
        j = i + 1
        seen_dot = False
        while j < self.n:
            ch = self.g[j]
            if _is_digit(ch):
                j += 1
                continue
            # A single decimal point, only when a digit follows it.
            followed = j + 1 < self.n and _is_digit(self.g[j + 1])
            if ch == "." and not seen_dot and followed:
                seen_dot = True
                j += 1
                continue
            break
        return self._mark(i, j, HighlightTag.NUMBER)

    RULES: tuple[Callable[["_Scanner", int], int], ...] = (
        character,
        line_comment,
        block_comment,
        primary_keyword,
        secondary_keyword,
        string_literal,
        number,
    )

    # -- Driver ------------------------------------------------------------

    def resume_comment(self) -> int:
        """Tag the tail of a block comment carried over from the previous row."""
        closing = _find_sequence(self.g, "*/", 0)
        if closing == -1:
            self.open_comment = True
            return self._mark(0, self.n, HighlightTag.MULTILINE_COMMENT)
        return self._mark(0, closing + 2, HighlightTag.MULTILINE_COMMENT)

    def run(self, continuation: bool) -> tuple[list[HighlightTag], bool]:
        i = 0
        if continuation and self.options.multiline_comments:
            i = self.resume_comment()
        while i < self.n:
            for rule in self.RULES:
                consumed = rule(self, i)
                if consumed:
                    i += consumed
                    break
            else:
                i += 1
        return self.tags, self.open_comment


def highlight_line(
    graphemes: Sequence[str],
    options: HighlightingOptions,
    continuation: bool = False,
) -> tuple[list[HighlightTag], bool]:
    """Compute one tag per grapheme and the outgoing block-comment state.

    ``continuation`` is True when the previous row ended inside a block
    comment. Pure: the same input always yields the same output.
    """
    if not graphemes:
        return [], bool(continuation and options.multiline_comments)
    if options.is_plain:
        return [HighlightTag.NONE] * len(graphemes), False
    return _Scanner(graphemes, options).run(continuation)


def overlay_matches(
    tags: list[HighlightTag], spans: Iterable[tuple[int, int]]
) -> list[HighlightTag]:
    """Paint MATCH over every ``(start, end)`` span, in place."""
    n = len(tags)
    for start, end in spans:
        end = min(end, n)
        if start < end:
            tags[start:end] = [HighlightTag.MATCH] * (end - start)
    return tags
