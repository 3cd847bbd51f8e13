"""Validate, fix, and re-validate as one operation."""

from __future__ import annotations

import logging

from .config import LintConfig, validate_config
from .fixer import autofix
from .models import FixReport, ValidationResult
from .validator import validate

logger = logging.getLogger(__name__)


def check(content: str, config: LintConfig | None = None) -> ValidationResult:
    """Validate `content`; see `validator.validate`."""
    return validate(content, config)


def check_and_fix(content: str, config: LintConfig | None = None) -> FixReport:
    """Validate, fix once when invalid, and validate the fixed text.

    The fixer runs at most once; findings it cannot resolve are returned as
    residual findings rather than retried.

    Args:
        content: The markdown content to check.
        config: Rule configuration. Defaults to a new `LintConfig` when omitted.

    Returns:
        FixReport: Original findings, fixed text, and residual findings. Valid
            input is returned unchanged with no residual findings.

    Raises:
        ConfigLoadError: If the configuration fails validation.

    Examples:
        report = check_and_fix("# Title\\n\\n* a\\n+ b\\n")
        report.fixed_text  # "# Title\\n\\n- a\\n- b\\n"
    """
    config = config or LintConfig()
    validate_config(config)

    original = validate(content, config)
    if original.valid:
        return FixReport(
            original_findings=[],
            fixed_text=content,
            residual_findings=[],
            context=original.context,
        )

    fixed_text = autofix(content)
    residual = validate(fixed_text, config)
    logger.debug(
        "Fixed %d finding(s); %d remain",
        len(original.findings) - len(residual.findings),
        len(residual.findings),
    )
    return FixReport(
        original_findings=original.findings,
        fixed_text=fixed_text,
        residual_findings=residual.findings,
        context=residual.context,
    )


class PendingDocuments:
    """Caller-owned buffers for documents that arrive in pieces.

    Each document id maps to the text received so far. Nothing here is
    shared between instances.

    Examples:
        store = PendingDocuments()
        store.feed("readme", "# Title\\n")
        store.feed("readme", "\\nBody\\n")
        check_pending(store, "readme").valid  # True
    """

    def __init__(self):
        self._buffers: dict[str, list[str]] = {}

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def feed(self, doc_id: str, chunk: str) -> None:
        self._buffers.setdefault(doc_id, []).append(chunk)

    def peek(self, doc_id: str) -> str:
        """Return the buffered text for `doc_id` without consuming it.

        Raises:
            KeyError: If nothing was fed for `doc_id`.
        """
        return "".join(self._buffers[doc_id])

    def take(self, doc_id: str) -> str:
        """Return and forget the buffered text for `doc_id`."""
        return "".join(self._buffers.pop(doc_id))

    def discard(self, doc_id: str) -> None:
        self._buffers.pop(doc_id, None)


def check_pending(
    store: PendingDocuments, doc_id: str, config: LintConfig | None = None
) -> ValidationResult:
    """Validate the text buffered so far for `doc_id`, leaving it in the store."""
    return validate(store.peek(doc_id), config)


def finish_pending(
    store: PendingDocuments, doc_id: str, config: LintConfig | None = None
) -> FixReport:
    """Consume the completed document `doc_id` and run `check_and_fix` on it.

    The buffer is removed from the store even when the configuration is
    rejected.

    Raises:
        KeyError: If nothing was fed for `doc_id`.
        ConfigLoadError: If the configuration fails validation.
    """
    return check_and_fix(store.take(doc_id), config)
