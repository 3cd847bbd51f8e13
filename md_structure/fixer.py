"""Context-aware rewriting of Markdown documents."""

from __future__ import annotations

import logging

from .classifier import (
    LineKind,
    classify,
    is_blank,
    match_fence,
    match_heading,
    match_list_item,
)
from .constants import (
    CONTEXT_WINDOW_LINES,
    DEFAULT_TITLE,
    FENCE,
    HEADING_TRAILING_PUNCTUATION,
    NORMALIZED_LIST_MARKER,
)
from .language import infer_language
from .models import DocumentContext, ScanContext, ScanState
from .parser import (
    build_heading_context,
    fence_mask,
    split_lines,
    try_close_fence,
    try_open_fence,
)

logger = logging.getLogger(__name__)


def suggest_heading_level(written_level: int, previous_level: int) -> int:
    """Pick the level a heading should have given the heading before it.

    Args:
        written_level: Level as written in the document.
        previous_level: Level of the preceding heading, 0 when there is none.

    Returns:
        int: 1 for level-1 headings and for the first heading; otherwise the
            written level capped at one below the previous heading.

    Examples:
        suggest_heading_level(4, 2)  # 3
        suggest_heading_level(2, 3)  # 2
    """
    if written_level == 1:
        return 1
    if previous_level == 0:
        return 1
    return min(written_level, previous_level + 1)


def strip_heading_punctuation(text: str) -> str:
    """Remove one trailing punctuation character, never emptying the text."""
    if len(text) > 1 and text[-1] in HEADING_TRAILING_PUNCTUATION:
        return text[:-1]
    return text


def normalize_heading(line: str, previous_level: int) -> tuple[str, int]:
    """Rewrite a line starting with ``#`` as a well-formed heading.

    Args:
        line: Line beginning with one or more ``#`` characters.
        previous_level: Level of the preceding heading, 0 when there is none.

    Returns:
        tuple[str, int]: The rewritten line and its heading level. The level is
            0 when the line has no text after the hashes and is therefore not
            a heading.

    Examples:
        normalize_heading("####Details:", 2)  # ("### Details", 3)
        normalize_heading("##", 1)  # ("##", 0)
    """
    written_level = len(line) - len(line.lstrip("#"))
    text = line[written_level:].strip()
    if not text:
        return line.rstrip(), 0

    level = suggest_heading_level(written_level, previous_level)
    if level != written_level:
        logger.debug("Heading %r moved from level %d to %d", text, written_level, level)
    return f"{'#' * level} {strip_heading_punctuation(text)}", level


def normalize_list_item(line: str) -> str | None:
    """Rewrite a bullet line with the ``-`` marker, or return None for other lines."""
    item = match_list_item(line)
    if item is None:
        return None
    return f"{item.indent}{NORMALIZED_LIST_MARKER} {item.text}"


def infer_fence_language(lines: list[str], open_index: int) -> str:
    """Infer the language of the unlabeled fence opened at `open_index`.

    The block runs to the next fence delimiter or to the end of the document.
    Up to `CONTEXT_WINDOW_LINES` lines before the opening fence and after the
    closing fence serve as context.
    """
    close_index = next(
        (
            index
            for index in range(open_index + 1, len(lines))
            if match_fence(lines[index]) is not None
        ),
        None,
    )
    end_index = len(lines) if close_index is None else close_index
    content = "".join(f"{line}\n" for line in lines[open_index + 1 : end_index])

    before = lines[max(0, open_index - CONTEXT_WINDOW_LINES) : open_index]
    after = lines[end_index + 1 : end_index + 1 + CONTEXT_WINDOW_LINES]
    language = infer_language(content, [*before, *after])
    logger.debug("Inferred %r for fence at line %d", language, open_index + 1)
    return language


def _ensure_blank_before(output: list[str]) -> None:
    if output and not is_blank(output[-1]):
        output.append("")


def _has_text(line: str | None) -> bool:
    return line is not None and not is_blank(line)


def rewrite_lines(lines: list[str]) -> list[str]:
    """Apply line-local and block-local fixes, building a new line buffer.

    The input lines are never modified; each one contributes zero or more
    lines to the output, so inserted blank lines do not shift what is read.

    Args:
        lines: Document lines.

    Returns:
        list[str]: Rewritten lines.
    """
    output: list[str] = []
    ctx = ScanContext()
    previous_level = 0

    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else None

        if ctx.state is ScanState.IN_FENCED_CODE:
            output.append(line)
            if try_close_fence(ctx, line) and _has_text(next_line):
                output.append("")
            continue

        kind = classify(line)
        if kind is LineKind.FENCE:
            language = try_open_fence(ctx, line, index + 1)
            if not language:
                line = FENCE + infer_fence_language(lines, index)
            _ensure_blank_before(output)
            output.append(line)
            continue

        # Also catches `#Title`, which only becomes a heading once normalized.
        if line.startswith("#"):
            line, level = normalize_heading(line, previous_level)
            if level:
                previous_level = level
                _ensure_blank_before(output)
                output.append(line)
                if _has_text(next_line):
                    output.append("")
                continue
            output.append(line)
            continue

        if kind is LineKind.LIST_ITEM:
            list_line = normalize_list_item(line)
            if output and not is_blank(output[-1]) and match_list_item(output[-1]) is None:
                output.append("")
            output.append(list_line)
            if _has_text(next_line) and match_list_item(next_line) is None:
                output.append("")
            continue

        output.append(line)

    return output


def collapse_blank_lines(lines: list[str]) -> list[str]:
    """Collapse runs of blank lines outside code blocks into one empty line."""
    collapsed: list[str] = []
    previous_blank = False
    for line, fenced in zip(lines, fence_mask(lines)):
        if fenced or not is_blank(line):
            collapsed.append(line)
            previous_blank = False
            continue
        if not previous_blank:
            collapsed.append("")
        previous_blank = True
    return collapsed


def document_title(context: DocumentContext) -> str:
    """Title for a synthesized level-1 heading: the first heading's text or a default."""
    if context.headings:
        title = strip_heading_punctuation(context.headings[0].raw_text.strip())
        if title:
            return title
    return DEFAULT_TITLE


def ensure_leading_heading(lines: list[str], context: DocumentContext) -> list[str]:
    """Drop leading blank lines and make sure the document opens with a level-1 heading."""
    start = 0
    while start < len(lines) and is_blank(lines[start]):
        start += 1
    lines = lines[start:]

    if lines:
        heading = match_heading(lines[0])
        if heading is not None and heading.level == 1:
            return lines

    title = document_title(context)
    logger.debug("Adding top-level heading %r", title)
    if not lines:
        return [f"# {title}"]
    return [f"# {title}", "", *lines]


def autofix(content: str) -> str:
    """Fix common Markdown issues using the document's heading structure.

    Never raises. The result is not guaranteed to validate cleanly: duplicate
    headings, extra top-level headings and long lines are left for the caller.

    Args:
        content: The markdown content to fix.

    Returns:
        str: The fixed content, ending with exactly one newline.

    Examples:
        autofix("# Title\\n## Section\\ntext")  # "# Title\\n\\n## Section\\n\\ntext\\n"
    """
    lines = split_lines(content)
    context = build_heading_context(lines)

    fixed = rewrite_lines(lines)
    fixed = collapse_blank_lines(fixed)
    fixed = ensure_leading_heading(fixed, context)

    return "\n".join(fixed).rstrip() + "\n"
