"""Single-pass construction of the document context."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .classifier import (
    LineKind,
    classify,
    find_links,
    match_fence,
    match_heading,
    match_list_item,
)
from .models import CodeBlock, DocumentContext, ScanContext, ScanState

logger = logging.getLogger(__name__)


def split_lines(content: str) -> list[str]:
    """Split content on ``\\n`` only; a trailing newline yields a final empty line."""
    return content.split("\n")


def try_open_fence(ctx: ScanContext, line: str, line_number: int) -> str | None:
    """Detect the start of a fenced code block.

    Args:
        ctx: Scan context to update when a fence opens.
        line: Current line being scanned.
        line_number: One-based line number of `line`.

    Returns:
        str | None: The declared language (possibly empty) when the line opens
            a fence, otherwise None.

    Examples:
        try_open_fence(ScanContext(), "```python", 3)  # "python"
    """
    if ctx.state is not ScanState.NORMAL:
        return None

    fence = match_fence(line)
    if fence is None:
        return None

    ctx.state = ScanState.IN_FENCED_CODE
    ctx.fence_line = line_number
    return fence.language


def try_close_fence(ctx: ScanContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Any fence delimiter closes the open block, whatever language it names.

    Args:
        ctx: Scan context describing the active fence.
        line: Current line being scanned.

    Returns:
        bool: True when the line closes the fence; otherwise False.
    """
    if ctx.state is not ScanState.IN_FENCED_CODE:
        return False

    if match_fence(line) is None:
        return False

    ctx.state = ScanState.NORMAL
    ctx.fence_line = None
    return True


def fence_mask(lines: list[str]) -> list[bool]:
    """Flag every line that delimits or sits inside a fenced code block.

    An unterminated fence covers the rest of the document.

    Examples:
        fence_mask(["text", "```", "code", "```", "after"])
        # [False, True, True, True, False]
    """
    ctx = ScanContext()
    mask = []
    for line_number, line in enumerate(lines, start=1):
        if ctx.state is ScanState.IN_FENCED_CODE:
            try_close_fence(ctx, line)
            mask.append(True)
            continue
        mask.append(try_open_fence(ctx, line, line_number) is not None)
    return mask


def iter_fences(lines: list[str]) -> Iterator[tuple[int, int | None, str]]:
    """Yield ``(open_index, close_index, language)`` for each fenced block.

    Indices are zero-based; `close_index` is None for an unterminated fence.
    """
    ctx = ScanContext()
    open_index = 0
    language = ""
    for index, line in enumerate(lines):
        if ctx.state is ScanState.IN_FENCED_CODE:
            if try_close_fence(ctx, line):
                yield open_index, index, language
            continue
        opened = try_open_fence(ctx, line, index + 1)
        if opened is not None:
            open_index, language = index, opened

    if ctx.state is ScanState.IN_FENCED_CODE:
        yield open_index, None, language


def build_context(content: str) -> DocumentContext:
    """Build the structural model of a document in one forward pass.

    Fenced lines are collected into their code block and never classified as
    headings or list items. Links are extracted from every line that is not a
    fence delimiter, fenced or not. Whitespace-only content yields an empty
    context.

    Args:
        content: Markdown text.

    Returns:
        DocumentContext: Headings, list items, code blocks and links in
            document order.

    Examples:
        build_context("# Title\\n\\n- item\\n").summary()
    """
    context = DocumentContext()
    if not content.strip():
        return context

    ctx = ScanContext()
    open_block: CodeBlock | None = None

    for line_number, line in enumerate(split_lines(content), start=1):
        if ctx.state is ScanState.IN_FENCED_CODE:
            if try_close_fence(ctx, line):
                open_block.seal(line_number)
                open_block = None
                continue
            open_block.append_line(line)
        else:
            kind = classify(line)
            if kind is LineKind.FENCE:
                language = try_open_fence(ctx, line, line_number)
                open_block = context.open_code_block(language, line_number)
                continue
            if kind is LineKind.HEADING:
                heading = match_heading(line)
                context.add_heading(heading.level, heading.text, line_number)
            elif kind is LineKind.LIST_ITEM:
                item = match_list_item(line)
                context.add_list_item(item.marker, item.text, line_number, item.indent_level)

        for text, url in find_links(line):
            context.add_link(text, url, line_number)

    if open_block is not None:
        logger.debug("Code block opened at line %d is never closed", open_block.start_line)
        open_block.seal()

    logger.debug("Built document context: %s", context.summary())
    return context


def build_heading_context(lines: list[str]) -> DocumentContext:
    """Collect headings only, skipping fenced lines.

    Used ahead of a rewrite, where only the heading hierarchy is needed.
    """
    context = DocumentContext()
    ctx = ScanContext()

    for line_number, line in enumerate(lines, start=1):
        if ctx.state is ScanState.IN_FENCED_CODE:
            try_close_fence(ctx, line)
            continue
        kind = classify(line)
        if kind is LineKind.FENCE:
            try_open_fence(ctx, line, line_number)
        elif kind is LineKind.HEADING:
            heading = match_heading(line)
            context.add_heading(heading.level, heading.text, line_number)

    return context
