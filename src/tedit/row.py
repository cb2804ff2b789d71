"""A single line of text, indexed by grapheme cluster."""

from __future__ import annotations

from itertools import groupby
from typing import Iterator

from rich.text import Text

from tedit.highlighting import (
    HighlightingOptions,
    HighlightTag,
    highlight_line,
    overlay_matches,
)
from tedit.position import SearchDirection
from tedit.width import fit_width, split_graphemes, text_width


class Row:
    """One line's text plus one highlight tag per grapheme cluster.

    Every position taken or returned by a Row is a grapheme index. Mutations
    re-segment the whole line, so ``len(row)`` never drifts from the text,
    and reset the tags to ``NONE``; callers re-run :meth:`highlight`.
    """

    __slots__ = ("_text", "_graphemes", "_tags", "open_comment")

    def __init__(self, text: str = "") -> None:
        self._text = ""
        self._graphemes: list[str] = []
        self._tags: list[HighlightTag] = []
        # Outgoing block-comment state from the last highlight pass.
        self.open_comment = False
        self._set_text(text)

    def _set_text(self, text: str) -> None:
        self._text = text
        self._graphemes = split_graphemes(text)
        self._tags = [HighlightTag.NONE] * len(self._graphemes)

    def __len__(self) -> int:
        return len(self._graphemes)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Row({self._text!r})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def graphemes(self) -> tuple[str, ...]:
        return tuple(self._graphemes)

    @property
    def tags(self) -> tuple[HighlightTag, ...]:
        return tuple(self._tags)

    # -- Editing -------------------------------------------------------------

    def insert(self, at: int, c: str) -> None:
        """Insert *c* before grapheme *at*; append when *at* is past the end."""
        at = max(0, at)
        if at >= len(self):
            self._set_text(self._text + c)
            return
        g = self._graphemes
        self._set_text("".join(g[:at]) + c + "".join(g[at:]))

    def delete(self, at: int) -> None:
        """Remove grapheme *at*. No-op at or past the end of the line."""
        if at < 0 or at >= len(self):
            return
        g = self._graphemes
        self._set_text("".join(g[:at]) + "".join(g[at + 1 :]))

    def split(self, at: int) -> Row:
        """Keep graphemes before *at*; return a new Row with the rest."""
        at = max(0, min(at, len(self)))
        g = self._graphemes
        tail = Row("".join(g[at:]))
        self._set_text("".join(g[:at]))
        return tail

    def append(self, other: Row) -> None:
        self._set_text(self._text + other._text)

    # -- Search --------------------------------------------------------------

    def _locate(
        self, query: str, at: int, direction: SearchDirection
    ) -> tuple[int, int] | None:
        """Return the ``(start, end)`` grapheme span of a match, or None.

        Matching runs on the joined text; hits that do not start and end on
        grapheme boundaries are skipped.
        """
        n = len(self)
        at = max(0, at)
        if direction == SearchDirection.BACKWARD:
            at = min(at, n)
        if not query or at > n:
            return None
        start, end = (at, n) if direction == SearchDirection.FORWARD else (0, at)
        window = self._graphemes[start:end]
        text = "".join(window)

        # code-point offset -> grapheme index within the window
        bounds: dict[int, int] = {}
        offset = 0
        for i, g in enumerate(window):
            bounds[offset] = i
            offset += len(g)
        bounds[offset] = len(window)

        qlen = len(query)
        if direction == SearchDirection.FORWARD:
            pos = text.find(query)
            while pos != -1:
                if pos in bounds and pos + qlen in bounds:
                    return start + bounds[pos], start + bounds[pos + qlen]
                pos = text.find(query, pos + 1)
        else:
            pos = text.rfind(query)
            while pos != -1:
                if pos in bounds and pos + qlen in bounds:
                    return start + bounds[pos], start + bounds[pos + qlen]
                pos = text.rfind(query, 0, pos + qlen - 1)
        return None

    def find(
        self,
        query: str,
        at: int = 0,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> int | None:
        """Grapheme index of *query* in ``[at, end)`` or, backward, ``[0, at)``."""
        span = self._locate(query, at, direction)
        return span[0] if span else None

    def matches(self, word: str) -> Iterator[tuple[int, int]]:
        """Yield the span of every forward occurrence of *word*."""
        at = 0
        while True:
            span = self._locate(word, at, SearchDirection.FORWARD)
            if span is None:
                return
            yield span
            at = span[1]

    # -- Highlighting --------------------------------------------------------

    def highlight(
        self,
        options: HighlightingOptions,
        search_word: str | None = None,
        continuation: bool = False,
    ) -> bool:
        """Rebuild the tags and return the outgoing block-comment state."""
        tags, open_comment = highlight_line(self._graphemes, options, continuation)
        if search_word:
            overlay_matches(tags, self.matches(search_word))
        self._tags = tags
        self.open_comment = open_comment
        return open_comment

    # -- Display -------------------------------------------------------------

    def full2half_width(self, start: int, end: int) -> int:
        """Display width of the graphemes in ``[start, end)``."""
        end = max(0, min(end, len(self)))
        start = max(0, min(start, end))
        return text_width(self._graphemes[start:end])

    def half2full_width(self, half_end: int) -> int:
        """How many leading graphemes fit in *half_end* display columns."""
        return fit_width(self._graphemes, max(0, half_end))

    def _visible(self, offset: int, width: int) -> tuple[int, int]:
        start = max(0, min(offset, len(self)))
        return start, start + fit_width(self._graphemes[start:], max(0, width))

    def clip(self, offset: int, width: int) -> str:
        """Plain text visible from grapheme *offset* within *width* columns."""
        start, stop = self._visible(offset, width)
        return "".join(" " if g == "\t" else g for g in self._graphemes[start:stop])

    def render(self, offset: int, width: int) -> Text:
        """Like :meth:`clip`, with one styled span per run of equal tags."""
        start, stop = self._visible(offset, width)
        result = Text()
        pairs = zip(self._graphemes[start:stop], self._tags[start:stop])
        for tag, run in groupby(pairs, key=lambda pair: pair[1]):
            chunk = "".join(" " if g == "\t" else g for g, _ in run)
            result.append(chunk, style=tag.style or None)
        return result
