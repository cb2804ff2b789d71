"""Document coordinates and search direction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SearchDirection(Enum):
    FORWARD = auto()
    BACKWARD = auto()


@dataclass(frozen=True)
class Position:
    """A point in a document: ``x`` is a grapheme column, ``y`` a row index."""

    x: int = 0
    y: int = 0
