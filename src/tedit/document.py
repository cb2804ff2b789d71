"""Ordered rows of a file, with cross-row editing, load/save and search."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from tedit.filetype import FileType
from tedit.position import Position, SearchDirection
from tedit.row import Row

logger = logging.getLogger(__name__)


class DocumentIOError(OSError):
    """Raised when a document cannot be read from or written to disk."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class Document:
    """The rows of one file and whether they differ from disk.

    An empty document has no rows at all; the first typed character
    creates one. Edits never raise: out-of-range positions are no-ops.
    """

    def __init__(
        self,
        file_type: FileType | None = None,
        *,
        file_name: str | None = None,
    ) -> None:
        self._rows: list[Row] = []
        self.file_name = file_name
        self.file_type = file_type or FileType()
        self._dirty = False
        self._search_word: str | None = None

    @classmethod
    def open(cls, path: str | Path, file_type: FileType | None = None) -> Document:
        """Read *path* into a new document, one row per LF-delimited line."""
        path = str(path)
        try:
            with open(path, encoding="utf-8", newline="") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Could not open %s: %s", path, exc)
            raise DocumentIOError(f"cannot open {path}: {exc}", path=path) from exc

        doc = cls.from_text(content, file_type)
        doc.file_name = path
        logger.debug("Opened %s (%d rows, %s)", path, len(doc), doc.file_type.name)
        return doc

    @classmethod
    def from_text(cls, content: str, file_type: FileType | None = None) -> Document:
        """Build a clean document from *content*; a trailing LF adds no row."""
        doc = cls(file_type)
        lines = content.split("\n")
        if content.endswith("\n"):
            lines.pop()
        doc._rows = [Row(line) for line in lines] if content else []
        doc._rehighlight_all()
        return doc

    # -- Read access ---------------------------------------------------------

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    def row(self, index: int) -> Row | None:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def is_empty(self) -> bool:
        return not self._rows

    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def file_type_name(self) -> str:
        return self.file_type.name

    def get_content(self) -> str:
        return "".join(f"{row.text}\n" for row in self._rows)

    # -- Highlighting --------------------------------------------------------

    def _rehighlight_all(self) -> None:
        options = self.file_type.options
        word = self._search_word
        continuation = False
        for row in self._rows:
            continuation = row.highlight(options, word, continuation)

    def _rehighlight_from(self, index: int, count: int, stale: bool) -> None:
        """Re-highlight rows ``index .. index+count-1`` after an edit.

        *stale* is the block-comment state the row below the edited region
        was last highlighted with. Rows below are re-highlighted only while
        their incoming state differs from what they last saw.
        """
        options = self.file_type.options
        word = self._search_word
        rows = self._rows
        continuation = rows[index - 1].open_comment if index > 0 else False
        y = index
        end = min(index + count, len(rows))
        while y < end:
            continuation = rows[y].highlight(options, word, continuation)
            y += 1
        while y < len(rows) and continuation != stale:
            stale = rows[y].open_comment
            continuation = rows[y].highlight(options, word, continuation)
            y += 1

    def highlight(self, search_word: str | None = None) -> None:
        """Re-highlight every row, painting *search_word* matches."""
        self._search_word = search_word or None
        self._rehighlight_all()

    # -- Editing -------------------------------------------------------------

    def _insert_newline(self, at: Position) -> None:
        if at.y == len(self._rows):
            self._rows.append(Row())
            self._rehighlight_from(at.y, 1, False)
            return
        current = self._rows[at.y]
        stale = current.open_comment
        self._rows.insert(at.y + 1, current.split(at.x))
        self._rehighlight_from(at.y, 2, stale)

    def insert(self, at: Position, c: str) -> None:
        """Insert *c* at *at*; ``"\\n"`` splits the row."""
        if at.y < 0 or at.y > len(self._rows):
            return
        self._dirty = True
        if c == "\n":
            self._insert_newline(at)
            return
        if at.y == len(self._rows):
            self._rows.append(Row())
        row = self._rows[at.y]
        stale = row.open_comment
        row.insert(at.x, c)
        self._rehighlight_from(at.y, 1, stale)

    def delete(self, at: Position) -> None:
        """Delete the grapheme at *at*, or join the next row at end of line.

        A column past the end of the line counts as end of line.
        """
        if at.y < 0 or at.y >= len(self._rows):
            return
        row = self._rows[at.y]
        stale = row.open_comment
        if at.x >= len(row):
            if at.y + 1 >= len(self._rows):
                return
            following = self._rows.pop(at.y + 1)
            stale = following.open_comment
            row.append(following)
        elif at.x >= 0:
            row.delete(at.x)
        else:
            return
        self._dirty = True
        self._rehighlight_from(at.y, 1, stale)

    # -- Persistence ---------------------------------------------------------

    def save(self) -> None:
        """Write every row plus LF to ``file_name``; no-op without a name."""
        if not self.file_name:
            logger.warning("Save skipped: document has no file name")
            return
        options = self.file_type.options
        continuation = False
        try:
            with open(self.file_name, "w", encoding="utf-8", newline="") as fh:
                for row in self._rows:
                    fh.write(row.text)
                    fh.write("\n")
                    continuation = row.highlight(options, None, continuation)
        except OSError as exc:
            logger.error("Could not save %s: %s", self.file_name, exc)
            raise DocumentIOError(
                f"cannot save {self.file_name}: {exc}", path=self.file_name
            ) from exc
        self._search_word = None
        self._dirty = False
        logger.debug("Saved %s (%d rows)", self.file_name, len(self._rows))

    # -- Search --------------------------------------------------------------

    def find(
        self,
        query: str,
        at: Position,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> Position | None:
        """Find *query* starting at *at*, walking rows in *direction*.

        Each row is searched at most once; returns None at the document edge.
        """
        if not query or at.y < 0 or at.y >= len(self._rows):
            return None
        x, y = at.x, at.y
        while 0 <= y < len(self._rows):
            found = self._rows[y].find(query, x, direction)
            if found is not None:
                return Position(found, y)
            if direction == SearchDirection.FORWARD:
                y += 1
                x = 0
            else:
                y -= 1
                if y >= 0:
                    x = len(self._rows[y])
        logger.debug("No match for %r from %s", query, at)
        return None
