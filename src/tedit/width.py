"""Grapheme segmentation and terminal display-width helpers."""

from __future__ import annotations

import unicodedata

import grapheme as _grapheme

_WIDTH_CACHE: dict[str, int] = {}


def split_graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters (extended grapheme clusters)."""
    if text.isascii() and "\r\n" not in text:
        return list(text)
    return list(_grapheme.graphemes(text))


def cluster_width(cluster: str) -> int:
    """Return display width of a grapheme cluster (2 for fullwidth/wide)."""
    if cluster < "\u0100":
        return 1
    w = _WIDTH_CACHE.get(cluster)
    if w is None:
        w = 2 if unicodedata.east_asian_width(cluster[0]) in ("W", "F") else 1
        _WIDTH_CACHE[cluster] = w
    return w


def text_width(clusters: list[str]) -> int:
    """Return the total display width of a sequence of clusters."""
    return sum(cluster_width(g) for g in clusters)


def fit_width(clusters: list[str], budget: int) -> int:
    """Return how many leading *clusters* fit within *budget* display columns."""
    used = 0
    count = 0
    for g in clusters:
        w = cluster_width(g)
        if used + w > budget:
            break
        used += w
        count += 1
    return count
