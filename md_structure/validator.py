"""Structural and style validation of Markdown documents."""

from __future__ import annotations

from .config import LintConfig, validate_config
from .models import DocumentContext, Finding, ValidationResult
from .parser import build_context, split_lines
from .rules import run_rules


def check_heading_hierarchy(context: DocumentContext) -> list[Finding]:
    """Report repeated level-1 headings and skipped heading levels.

    The expected level starts at 1 and follows each heading; going back up
    any number of levels is allowed.
    """
    findings = []
    last_level = 1
    seen_top_level = False

    for heading in context.headings:
        if heading.level == 1:
            if seen_top_level:
                findings.append(Finding.multiple_top_level_headings(heading.line_number))
            seen_top_level = True

        if heading.level > last_level + 1:
            findings.append(Finding.skipped_heading_level(last_level + 1, heading.line_number))
        last_level = heading.level

    return findings


def check_duplicate_headings(context: DocumentContext) -> list[Finding]:
    return [
        Finding.duplicate_heading(text, occurrence.first_line)
        for text, occurrence in context.heading_index.items()
        if occurrence.count > 1
    ]


def check_list_markers(context: DocumentContext) -> list[Finding]:
    """Report every list item whose marker differs from the previous item's.

    Items are compared across the whole document, not per list.
    """
    findings = []
    last_marker = None
    for item in context.list_items:
        if last_marker is not None and item.marker != last_marker:
            findings.append(Finding.inconsistent_list_markers(item.line_number))
        last_marker = item.marker
    return findings


def check_line_length(content: str, max_line_length: int) -> list[Finding]:
    return [
        Finding.line_too_long(line_number, max_line_length)
        for line_number, line in enumerate(split_lines(content), start=1)
        if len(line) > max_line_length
    ]


def validate(content: str, config: LintConfig | None = None) -> ValidationResult:
    """Validate Markdown content.

    Line-style rule findings come first, then structural findings, then long
    lines. Empty or whitespace-only content short-circuits to a single
    ``EmptyDocument`` finding.

    Args:
        content: The markdown content to validate.
        config: Rule configuration. Defaults to a new `LintConfig` when omitted.

    Returns:
        ValidationResult: Validity flag, findings, and the document context.

    Raises:
        ConfigLoadError: If the configuration fails validation.

    Examples:
        validate("# Title\\n\\n## Section\\n\\n#### Subsection\\n").findings
    """
    config = config or LintConfig()
    validate_config(config)

    if not content.strip():
        return ValidationResult(
            valid=False, findings=[Finding.empty_document()], context=DocumentContext()
        )

    context = build_context(content)

    findings = run_rules(content, config)
    findings.extend(check_heading_hierarchy(context))
    findings.extend(check_duplicate_headings(context))
    findings.extend(check_list_markers(context))
    findings.extend(check_line_length(content, config.max_line_length))

    return ValidationResult(valid=not findings, findings=findings, context=context)
