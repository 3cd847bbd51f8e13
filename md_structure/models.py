"""Data models for md-structure."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ScanState(Enum):
    """Scanner states used while walking Markdown content.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class ScanContext:
    """Encapsulate scanner state while walking Markdown text.

    Attributes:
        state: Current scanner state.
        fence_line: One-based line number of the open fence, if any.
    """

    state: ScanState = ScanState.NORMAL
    fence_line: int | None = None


@dataclass(frozen=True)
class Heading:
    """An ATX heading.

    Attributes:
        level: Number of leading ``#`` characters.
        raw_text: Heading text as written.
        normalized_text: Lowercased, trimmed text used as the duplicate key.
        line_number: One-based line number.
    """

    level: int
    raw_text: str
    normalized_text: str
    line_number: int


@dataclass
class HeadingOccurrence:
    """Duplicate-index entry for one normalized heading text."""

    count: int
    first_line: int


@dataclass(frozen=True)
class ListItem:
    """A bulleted list item, marker kept exactly as written."""

    marker: str
    text: str
    line_number: int
    indent_level: int = 0


@dataclass
class CodeBlock:
    """A fenced code block.

    Content is only appended while the block is open; once sealed the block
    rejects further lines.

    Attributes:
        language: Declared language, ``"text"`` when the fence names none.
        content: Lines between the fences, each followed by a newline.
        start_line: One-based line number of the opening fence.
        end_line: One-based line number of the closing fence, or None when
            the fence runs to the end of the document.
        sealed: Whether the closing fence (or end of document) was reached.
    """

    language: str
    content: str = ""
    start_line: int = 0
    end_line: int | None = None
    sealed: bool = False

    def append_line(self, line: str) -> None:
        if self.sealed:
            raise ValueError(f"Code block starting at line {self.start_line} is sealed")
        self.content += line + "\n"

    def seal(self, end_line: int | None = None) -> None:
        self.end_line = end_line
        self.sealed = True


@dataclass(frozen=True)
class Link:
    """An inline ``[text](url)`` link."""

    text: str
    url: str
    line_number: int


@dataclass
class DocumentContext:
    """Structural model of a document, built by a single forward scan.

    Sequences keep document order. The heading index only ever grows.

    Attributes:
        headings: Headings in document order.
        list_items: List items in document order.
        code_blocks: Code blocks in document order.
        links: Links in document order.
        heading_index: Normalized heading text to its occurrence record.
        current_level: Level of the most recent heading, 0 before any.
    """

    headings: list[Heading] = field(default_factory=list)
    list_items: list[ListItem] = field(default_factory=list)
    code_blocks: list[CodeBlock] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    heading_index: dict[str, HeadingOccurrence] = field(default_factory=dict)
    current_level: int = 0

    def add_heading(self, level: int, text: str, line_number: int) -> Heading:
        normalized_text = text.lower().strip()
        occurrence = self.heading_index.get(normalized_text)
        if occurrence is None:
            self.heading_index[normalized_text] = HeadingOccurrence(count=1, first_line=line_number)
        else:
            occurrence.count += 1

        heading = Heading(level, text, normalized_text, line_number)
        self.headings.append(heading)
        self.current_level = level
        return heading

    def add_list_item(
        self, marker: str, text: str, line_number: int, indent_level: int = 0
    ) -> ListItem:
        item = ListItem(marker, text, line_number, indent_level)
        self.list_items.append(item)
        return item

    def open_code_block(self, language: str, start_line: int) -> CodeBlock:
        block = CodeBlock(language=language or "text", start_line=start_line)
        self.code_blocks.append(block)
        return block

    def add_link(self, text: str, url: str, line_number: int) -> Link:
        link = Link(text, url, line_number)
        self.links.append(link)
        return link

    @property
    def is_empty(self) -> bool:
        return not (self.headings or self.list_items or self.code_blocks or self.links)

    def summary(self) -> dict[str, int]:
        """Return the counts reported alongside validation results."""
        return {
            "headings": len(self.headings),
            "lists": len(self.list_items),
            "code_blocks": len(self.code_blocks),
            "links": len(self.links),
            "current_level": self.current_level,
        }


class FindingKind(Enum):
    """Closed set of finding kinds.

    Attributes:
        EMPTY_DOCUMENT: Input is empty or whitespace only.
        SKIPPED_HEADING_LEVEL: A heading jumps more than one level deeper.
        MULTIPLE_TOP_LEVEL_HEADINGS: A second level-1 heading.
        DUPLICATE_HEADING: Same normalized heading text used more than once.
        INCONSISTENT_LIST_MARKERS: A list marker differs from the previous item.
        LINE_TOO_LONG: A physical line exceeds the configured length.
        LINT_RULE: Finding produced by a configurable line-style rule.
    """

    EMPTY_DOCUMENT = "EmptyDocument"
    SKIPPED_HEADING_LEVEL = "SkippedHeadingLevel"
    MULTIPLE_TOP_LEVEL_HEADINGS = "MultipleTopLevelHeadings"
    DUPLICATE_HEADING = "DuplicateHeading"
    INCONSISTENT_LIST_MARKERS = "InconsistentListMarkers"
    LINE_TOO_LONG = "LineTooLong"
    LINT_RULE = "LintRule"

    @property
    def auto_fixable(self) -> bool:
        return self in (FindingKind.SKIPPED_HEADING_LEVEL, FindingKind.INCONSISTENT_LIST_MARKERS)


@dataclass(frozen=True)
class Finding:
    """A single validation result.

    Build instances through the kind-specific constructors so every kind
    carries its own fields.

    Attributes:
        kind: What produced the finding.
        message: Human-readable description.
        line: One-based line number.
        column: Zero for structural findings, the match column for rule findings.
        rule: Rule id for ``LINT_RULE`` findings.
        expected_level: Level that should have come next (skipped levels).
        heading: Normalized heading text (duplicates).
        first_line: Line of the first occurrence (duplicates).
        limit: Configured maximum (long lines).
    """

    kind: FindingKind
    message: str
    line: int
    column: int = 0
    rule: str | None = None
    expected_level: int | None = None
    heading: str | None = None
    first_line: int | None = None
    limit: int | None = None

    def __str__(self) -> str:
        return f"{self.message} [{self.line}:{self.column}]"

    @classmethod
    def empty_document(cls) -> Finding:
        return cls(FindingKind.EMPTY_DOCUMENT, "Document is empty or contains only whitespace", 1)

    @classmethod
    def skipped_heading_level(cls, expected_level: int, line: int) -> Finding:
        return cls(
            FindingKind.SKIPPED_HEADING_LEVEL,
            f"Skipped heading level {expected_level}",
            line,
            expected_level=expected_level,
        )

    @classmethod
    def multiple_top_level_headings(cls, line: int) -> Finding:
        return cls(
            FindingKind.MULTIPLE_TOP_LEVEL_HEADINGS,
            "Multiple top-level headings in the same document",
            line,
        )

    @classmethod
    def duplicate_heading(cls, heading: str, first_line: int) -> Finding:
        return cls(
            FindingKind.DUPLICATE_HEADING,
            f'Duplicate heading "{heading}" first used at line {first_line}',
            first_line,
            heading=heading,
            first_line=first_line,
        )

    @classmethod
    def inconsistent_list_markers(cls, line: int) -> Finding:
        return cls(FindingKind.INCONSISTENT_LIST_MARKERS, "Inconsistent list markers", line)

    @classmethod
    def line_too_long(cls, line: int, limit: int) -> Finding:
        return cls(
            FindingKind.LINE_TOO_LONG,
            f"Line length exceeds {limit} characters",
            line,
            limit=limit,
        )

    @classmethod
    def lint_rule(cls, rule: str, description: str, line: int, column: int = 0) -> Finding:
        return cls(FindingKind.LINT_RULE, description, line, column, rule=rule)


@dataclass
class ValidationResult:
    """Outcome of validating one document.

    Attributes:
        valid: True when no findings were produced.
        findings: Findings in rule evaluation order.
        context: Structural model the structural rules ran against.
    """

    valid: bool
    findings: list[Finding]
    context: DocumentContext


@dataclass
class FixReport:
    """Outcome of a validate, fix, re-validate cycle.

    Attributes:
        original_findings: Findings for the input text.
        fixed_text: Text after one autofix pass (the input when it was valid).
        residual_findings: Findings the autofix could not resolve.
        context: Structural model of the fixed text.
    """

    original_findings: list[Finding]
    fixed_text: str
    residual_findings: list[Finding]
    context: DocumentContext

    @property
    def valid(self) -> bool:
        return not self.residual_findings
