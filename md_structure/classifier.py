"""Stateless line classification."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TypeVar

from .constants import (
    CODE_FENCE_PATTERN,
    HEADING_PATTERN,
    LINK_PATTERN,
    LIST_INDENT_WIDTH,
    LIST_ITEM_PATTERN,
)

Tag = TypeVar("Tag")


class LineKind(Enum):
    """What a single line contributes to the document structure."""

    FENCE = auto()
    HEADING = auto()
    LIST_ITEM = auto()
    LINK_TEXT = auto()
    TEXT = auto()


@dataclass(frozen=True)
class HeadingMatch:
    level: int
    text: str


@dataclass(frozen=True)
class ListItemMatch:
    indent: str
    marker: str
    text: str

    @property
    def indent_level(self) -> int:
        return len(self.indent) // LIST_INDENT_WIDTH


@dataclass(frozen=True)
class FenceMatch:
    language: str


# Order is significant: a fence delimiter is never a heading or list item.
LINE_PATTERNS: tuple[tuple[LineKind, re.Pattern[str]], ...] = (
    (LineKind.FENCE, CODE_FENCE_PATTERN),
    (LineKind.HEADING, HEADING_PATTERN),
    (LineKind.LIST_ITEM, LIST_ITEM_PATTERN),
)


def first_match(table: Iterable[tuple[Tag, re.Pattern[str]]], subject: str) -> Tag | None:
    """Return the tag of the first pattern that matches anywhere in `subject`.

    Args:
        table: Ordered ``(tag, compiled pattern)`` pairs.
        subject: Text to search.

    Returns:
        The first matching tag, or None when no pattern matches.

    Examples:
        first_match(LINE_PATTERNS, "## Usage")  # LineKind.HEADING
    """
    for tag, pattern in table:
        if pattern.search(subject):
            return tag
    return None


def match_heading(line: str) -> HeadingMatch | None:
    match = HEADING_PATTERN.match(line)
    if not match:
        return None
    return HeadingMatch(level=len(match.group(1)), text=match.group(2))


def match_list_item(line: str) -> ListItemMatch | None:
    match = LIST_ITEM_PATTERN.match(line)
    if not match:
        return None
    return ListItemMatch(indent=match.group(1), marker=match.group(2), text=match.group(3))


def match_fence(line: str) -> FenceMatch | None:
    """Match a fence delimiter line; the declared language may be empty."""
    match = CODE_FENCE_PATTERN.match(line)
    if not match:
        return None
    return FenceMatch(language=match.group(1))


def find_links(line: str) -> list[tuple[str, str]]:
    """Return ``(text, url)`` for every non-overlapping inline link in `line`."""
    return [(match.group(1), match.group(2)) for match in LINK_PATTERN.finditer(line)]


def is_blank(line: str) -> bool:
    return not line.strip()


def classify(line: str) -> LineKind:
    """Classify a line into exactly one `LineKind`.

    Structural kinds win over link-bearing text; links on a heading or list
    line are still reported by `find_links`.

    Examples:
        classify("```python")  # LineKind.FENCE
        classify("See [docs](https://example.com)")  # LineKind.LINK_TEXT
    """
    kind = first_match(LINE_PATTERNS, line)
    if kind is not None:
        return kind
    if LINK_PATTERN.search(line):
        return LineKind.LINK_TEXT
    return LineKind.TEXT
