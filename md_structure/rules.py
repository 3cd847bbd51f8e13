"""Configurable line-style rules.

Each rule is a generator over a `LintDocument` yielding `LINT_RULE` findings.
Rule ids and descriptions follow markdownlint so existing configuration
tables keep their meaning.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .classifier import is_blank, match_heading, match_list_item
from .config import LintConfig
from .models import Finding
from .parser import fence_mask, iter_fences, split_lines

logger = logging.getLogger(__name__)

MISSING_SPACE_AFTER_HASH = re.compile(r"^#+[^#\s]")


@dataclass
class LintDocument:
    """Lines of a document prepared for line rules.

    Attributes:
        content: Original text.
        lines: Physical lines; the empty string after a final newline is dropped.
        fenced: Per-line flag, True for fence delimiters and fenced content.
    """

    content: str
    lines: list[str] = field(init=False)
    fenced: list[bool] = field(init=False)

    def __post_init__(self):
        lines = split_lines(self.content)
        if self.content.endswith("\n"):
            lines = lines[:-1]
        self.lines = lines
        self.fenced = fence_mask(lines)

    def is_list_item(self, index: int) -> bool:
        return not self.fenced[index] and match_list_item(self.lines[index]) is not None

    def has_text_at(self, index: int) -> bool:
        return 0 <= index < len(self.lines) and not is_blank(self.lines[index])


RuleCheck = Callable[[LintDocument, dict], Iterator[Finding]]


@dataclass(frozen=True)
class LineRule:
    rule_id: str
    alias: str
    description: str
    check: RuleCheck
    defaults: dict = field(default_factory=dict)

    def finding(self, line: int, column: int = 0) -> Finding:
        return Finding.lint_rule(self.rule_id, self.description, line, column)


def trailing_spaces(rule: LineRule, document: LintDocument, params: dict) -> Iterator[Finding]:
    """Flag trailing spaces, allowing exactly `br_spaces` for hard line breaks."""
    br_spaces = params["br_spaces"]
    for index, line in enumerate(document.lines):
        if document.fenced[index]:
            continue
        stripped = line.rstrip(" ")
        trailing = len(line) - len(stripped)
        if trailing == 0:
            continue
        if br_spaces >= 2 and trailing == br_spaces and stripped.strip():
            continue
        yield rule.finding(index + 1, len(stripped) + 1)


def hard_tabs(rule: LineRule, document: LintDocument, params: dict) -> Iterator[Finding]:
    """Flag hard tab characters, code blocks included."""
    for index, line in enumerate(document.lines):
        column = line.find("\t")
        if column >= 0:
            yield rule.finding(index + 1, column + 1)


def multiple_blank_lines(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    """Flag runs of blank lines longer than `maximum` outside code blocks."""
    maximum = params["maximum"]
    run = 0
    for index, line in enumerate(document.lines):
        if document.fenced[index] or not is_blank(line):
            run = 0
            continue
        run += 1
        if run > maximum:
            yield rule.finding(index + 1)


def missing_space_after_hash(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    for index, line in enumerate(document.lines):
        if not document.fenced[index] and MISSING_SPACE_AFTER_HASH.match(line):
            yield rule.finding(index + 1, 1)


def blanks_around_headings(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    for index, line in enumerate(document.lines):
        if document.fenced[index] or match_heading(line) is None:
            continue
        if document.has_text_at(index - 1) or document.has_text_at(index + 1):
            yield rule.finding(index + 1)


def heading_trailing_punctuation(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    punctuation = params["punctuation"]
    for index, line in enumerate(document.lines):
        if document.fenced[index] or match_heading(line) is None:
            continue
        stripped = line.rstrip()
        if stripped[-1] in punctuation:
            yield rule.finding(index + 1, len(stripped))


def blanks_around_fences(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    for open_index, close_index, _ in iter_fences(document.lines):
        if document.has_text_at(open_index - 1):
            yield rule.finding(open_index + 1)
        if close_index is not None and document.has_text_at(close_index + 1):
            yield rule.finding(close_index + 1)


def blanks_around_lists(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    for index in range(len(document.lines)):
        if not document.is_list_item(index):
            continue
        starts_run = index == 0 or not document.is_list_item(index - 1)
        ends_run = index + 1 >= len(document.lines) or not document.is_list_item(index + 1)
        if (starts_run and document.has_text_at(index - 1)) or (
            ends_run and document.has_text_at(index + 1)
        ):
            yield rule.finding(index + 1)


def fenced_code_language(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    for open_index, _, language in iter_fences(document.lines):
        if not language:
            yield rule.finding(open_index + 1)


def single_trailing_newline(
    rule: LineRule, document: LintDocument, params: dict
) -> Iterator[Finding]:
    if document.content and not document.content.endswith("\n"):
        last_line = document.lines[-1]
        yield rule.finding(len(document.lines), len(last_line) + 1)


_RULE_TABLE = (
    ("MD009", "no-trailing-spaces", "Trailing spaces", trailing_spaces, {"br_spaces": 2}),
    ("MD010", "no-hard-tabs", "Hard tabs", hard_tabs, {}),
    (
        "MD012",
        "no-multiple-blanks",
        "Multiple consecutive blank lines",
        multiple_blank_lines,
        {"maximum": 1},
    ),
    (
        "MD018",
        "no-missing-space-atx",
        "No space after hash on atx style heading",
        missing_space_after_hash,
        {},
    ),
    (
        "MD022",
        "blanks-around-headings",
        "Headings should be surrounded by blank lines",
        blanks_around_headings,
        {},
    ),
    (
        "MD026",
        "no-trailing-punctuation",
        "Trailing punctuation in heading",
        heading_trailing_punctuation,
        {"punctuation": ".,;:!"},
    ),
    (
        "MD031",
        "blanks-around-fences",
        "Fenced code blocks should be surrounded by blank lines",
        blanks_around_fences,
        {},
    ),
    (
        "MD032",
        "blanks-around-lists",
        "Lists should be surrounded by blank lines",
        blanks_around_lists,
        {},
    ),
    (
        "MD040",
        "fenced-code-language",
        "Fenced code blocks should have a language specified",
        fenced_code_language,
        {},
    ),
    (
        "MD047",
        "single-trailing-newline",
        "Files should end with a single newline character",
        single_trailing_newline,
        {},
    ),
)

# Registry of all line rules, in reporting order
RULES: dict[str, LineRule] = {
    rule_id: LineRule(rule_id, alias, description, check, defaults)
    for rule_id, alias, description, check, defaults in _RULE_TABLE
}

_ALIASES = {rule.alias: rule.rule_id for rule in RULES.values()}


def resolve_rule_name(name: str) -> str | None:
    """Map a rule id (any case) or alias to its canonical id."""
    if name.upper() in RULES:
        return name.upper()
    return _ALIASES.get(name.lower())


def enabled_rules(config: LintConfig) -> list[tuple[LineRule, dict]]:
    """Resolve which rules run and with which parameters.

    Entries under a rule id take precedence over entries under its alias.

    Examples:
        enabled_rules(LintConfig(default=False, rules={"MD047": True}))
    """
    settings: dict[str, bool | dict] = {}
    for name, setting in config.rules.items():
        rule_id = resolve_rule_name(name)
        if rule_id is None:
            continue
        if rule_id in settings and name.upper() != rule_id:
            continue
        settings[rule_id] = setting

    selected = []
    for rule_id, rule in RULES.items():
        setting = settings.get(rule_id, config.default)
        if setting is False:
            continue
        params = dict(rule.defaults)
        if isinstance(setting, dict):
            params.update(setting)
        selected.append((rule, params))
    return selected


def run_rules(content: str, config: LintConfig) -> list[Finding]:
    """Run every enabled line rule over `content`, in registry order."""
    document = LintDocument(content)
    findings: list[Finding] = []
    for rule, params in enabled_rules(config):
        rule_findings = list(rule.check(rule, document, params))
        if rule_findings:
            logger.debug("Rule %s reported %d finding(s)", rule.rule_id, len(rule_findings))
        findings.extend(rule_findings)
    return findings


def describe_rules() -> dict[str, str]:
    """Map each rule id to ``"<alias>: <description>"``."""
    return {rule.rule_id: f"{rule.alias}: {rule.description}" for rule in RULES.values()}
