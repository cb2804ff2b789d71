"""File types: a display name plus the highlighting rule set for it."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import cache
from pathlib import Path

from tedit.highlighting import PLAIN, HighlightingOptions

logger = logging.getLogger(__name__)

# Data directory path
_DATA_DIR = Path(__file__).parent / "data"

_OPTION_FLAGS = ("numbers", "strings", "characters", "comments", "multiline_comments")
_OPTION_KEYWORDS = ("primary_keywords", "secondary_keywords")


@dataclass(frozen=True)
class FileType:
    name: str = "No filetype"
    extensions: tuple[str, ...] = ()
    options: HighlightingOptions = PLAIN

    def matches(self, file_name: str) -> bool:
        return any(file_name.endswith(ext) for ext in self.extensions)

    @classmethod
    def detect(
        cls, file_name: str | None, registry: tuple[FileType, ...] | None = None
    ) -> FileType:
        """Pick the file type whose extension matches *file_name*.

        Falls back to the plain default when nothing matches.
        """
        if not file_name:
            return cls()
        for file_type in registry if registry is not None else builtin_filetypes():
            if file_type.matches(file_name):
                logger.debug("Detected file type %s for %s", file_type.name, file_name)
                return file_type
        return cls()


def _parse_entry(entry: object) -> FileType:
    if not isinstance(entry, dict):
        raise ValueError(f"file type entry must be an object, got {entry!r}")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"file type entry without a name: {entry!r}")
    extensions = entry.get("extensions", [])
    if not isinstance(extensions, list) or not all(
        isinstance(e, str) for e in extensions
    ):
        raise ValueError(f"{name}: 'extensions' must be a list of strings")

    kwargs: dict[str, object] = {}
    for flag in _OPTION_FLAGS:
        value = entry.get(flag, False)
        if not isinstance(value, bool):
            raise ValueError(f"{name}: '{flag}' must be true or false")
        kwargs[flag] = value
    for key in _OPTION_KEYWORDS:
        words = entry.get(key, [])
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise ValueError(f"{name}: '{key}' must be a list of strings")
        kwargs[key] = frozenset(words)

    return FileType(
        name=name,
        extensions=tuple(extensions),
        options=HighlightingOptions(**kwargs),
    )


def parse_filetypes(content: str) -> tuple[FileType, ...]:
    """Parse a JSON list of rule sets. Raises ``ValueError`` on bad input."""
    try:
        entries = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid file type JSON: {exc}") from exc
    if not isinstance(entries, list):
        raise ValueError("file type JSON must be a list")
    return tuple(_parse_entry(entry) for entry in entries)


def load_filetypes(path: str | Path | None = None) -> tuple[FileType, ...]:
    """Load rule sets from *path*, or the built-in ``filetypes.json``."""
    source = Path(path) if path is not None else _DATA_DIR / "filetypes.json"
    file_types = parse_filetypes(source.read_text(encoding="utf-8"))
    logger.debug("Loaded %d file types from %s", len(file_types), source)
    return file_types


@cache
def builtin_filetypes() -> tuple[FileType, ...]:
    return load_filetypes()
