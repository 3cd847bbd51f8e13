"""Language inference for unlabeled code fences."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .classifier import first_match

# Order is significant: the first matching language wins.
LANGUAGE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("javascript", re.compile(r"\b(const|let|var|function|=>|async|await|import|export)\b")),
    (
        "typescript",
        re.compile(r"\b(interface|type|enum|namespace|readonly|private|public|protected)\b"),
    ),
    ("python", re.compile(r"\b(def|class|import|from|if __name__|print|lambda)\b")),
    ("html", re.compile(r"</?[a-z][\s\S]*>", re.IGNORECASE)),
    ("css", re.compile(r"[.#][\w-]+\s*{|@media|@import")),
    ("json", re.compile(r"^[\s]*[{\[]")),
    ("yaml", re.compile(r"^[\s]*[-?:][\s]|^[\s]*[A-Za-z0-9_-]+:")),
    ("bash", re.compile(r"\b(echo|export|source|sudo|apt|npm|yarn|pnpm)\b")),
    ("markdown", re.compile(r"^#+\s|^\s*[-*+]\s|\[.*\]\(.*\)")),
)

FALLBACK_LANGUAGE = "text"


def infer_language(content: str, surrounding_lines: Iterable[str] = ()) -> str:
    """Guess the language of a code block.

    The pattern table is tried against the block content first, then against
    the lowercased, space-joined lines around the block.

    Args:
        content: Lines between the fences.
        surrounding_lines: Lines before and after the block.

    Returns:
        str: The inferred language tag, ``"text"`` when nothing matches.

    Examples:
        infer_language("const x = 1;\\n")  # "javascript"
        infer_language("interface Props {\\n}\\n")  # "typescript"
        infer_language("some random content\\n")  # "text"
    """
    language = first_match(LANGUAGE_PATTERNS, content)
    if language is not None:
        return language

    context = " ".join(surrounding_lines).lower()
    language = first_match(LANGUAGE_PATTERNS, context)
    if language is not None:
        return language

    return FALLBACK_LANGUAGE
