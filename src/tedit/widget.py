"""Textual widget that paints a Document."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from tedit.document import Document
from tedit.position import Position


class DocumentView(Widget, can_focus=True):
    """Draws the visible rows of a :class:`Document` with their highlighting.

    ``scroll_row`` is a row index and ``scroll_col`` a grapheme offset; the
    cursor is a document :class:`Position`. Screen cells are mapped to and
    from graphemes with the row width conversions, so wide characters left
    of the cursor are accounted for.
    """

    DEFAULT_CSS = """
    DocumentView {
        height: 1fr;
        background: $surface;
    }
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.document: Document = document or Document()
        self.cursor = Position()
        self.scroll_row = 0
        self.scroll_col = 0

    # -- Coordinates -------------------------------------------------------

    def cursor_offset(self) -> tuple[int, int]:
        """Return the ``(column, line)`` screen cell under the cursor."""
        row = self.document.row(self.cursor.y)
        column = row.full2half_width(self.scroll_col, self.cursor.x) if row else 0
        return column, self.cursor.y - self.scroll_row

    def position_at(self, column: int, line: int) -> Position:
        """Map a screen cell back to the grapheme drawn there."""
        y = self.scroll_row + max(0, line)
        row = self.document.row(y)
        if row is None:
            return Position(0, y)
        left = row.full2half_width(0, self.scroll_col)
        return Position(row.half2full_width(left + max(0, column)), y)

    def scroll_to_cursor(self, width: int, height: int) -> None:
        """Adjust the scroll offsets so the cursor cell is on screen."""
        if self.cursor.y < self.scroll_row:
            self.scroll_row = self.cursor.y
        elif self.cursor.y >= self.scroll_row + height:
            self.scroll_row = self.cursor.y - height + 1

        if self.cursor.x < self.scroll_col:
            self.scroll_col = self.cursor.x
            return
        row = self.document.row(self.cursor.y)
        if row is None:
            return
        while (
            self.scroll_col < self.cursor.x
            and row.full2half_width(self.scroll_col, self.cursor.x) >= width
        ):
            self.scroll_col += 1

    # -- Search ------------------------------------------------------------

    def highlight_search(self, word: str | None) -> None:
        self.document.highlight(word)
        self.refresh()

    # -- Rendering ---------------------------------------------------------

    def render_lines(self, width: int, height: int) -> Text:
        result = Text()
        for line in range(height):
            row = self.document.row(self.scroll_row + line)
            if row is None:
                result.append("~", style="dim")
            else:
                result.append_text(row.render(self.scroll_col, width))
            if line < height - 1:
                result.append("\n")
        return result

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if width < 1 or height < 1:
            return Text()
        self.scroll_to_cursor(width, height)
        return self.render_lines(width, height)
