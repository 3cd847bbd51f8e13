from __future__ import annotations

import pytest
import md_structure.orchestrator as orchestrator
from md_structure.config import ConfigLoadError, LintConfig
from md_structure.models import Finding, FindingKind
from md_structure.orchestrator import (
    PendingDocuments,
    check,
    check_and_fix,
    check_pending,
    finish_pending,
)


def test_check_matches_validate():
    result = check("# Title\n\n## Section\n")
    assert result.valid
    assert result.context.summary()["headings"] == 2


def test_check_and_fix_resolves_fixable_findings():
    report = check_and_fix("# Title\n\n* Item 1\n- Item 2\n+ Item 3\n")

    assert {finding.kind for finding in report.original_findings} == {
        FindingKind.INCONSISTENT_LIST_MARKERS
    }
    assert report.fixed_text == "# Title\n\n- Item 1\n- Item 2\n- Item 3\n"
    assert report.residual_findings == []
    assert report.valid


def test_valid_input_returned_unchanged():
    content = "# Title\n\nBody text.\n"
    report = check_and_fix(content)

    assert report.fixed_text == content
    assert report.original_findings == []
    assert report.residual_findings == []


def test_unfixable_findings_are_residual():
    report = check_and_fix("# A\n\nbody\n\n# B\n")

    assert report.residual_findings == [Finding.multiple_top_level_headings(5)]
    assert not report.valid


def test_empty_document_fixed_with_default_title():
    report = check_and_fix("")

    assert report.original_findings == [Finding.empty_document()]
    assert report.fixed_text == "# Document\n"
    assert report.residual_findings == []


def test_fixer_runs_at_most_once(monkeypatch):
    calls = []
    original_autofix = orchestrator.autofix

    def _counting_autofix(content):
        calls.append(content)
        return original_autofix(content)

    monkeypatch.setattr(orchestrator, "autofix", _counting_autofix)
    check_and_fix("# A\n\nbody\n\n# B\n")
    check_and_fix("# Title\n")

    assert len(calls) == 1


def test_residuals_respect_config():
    content = "# Title\n\n" + "a" * 130 + "\n"
    assert not check_and_fix(content).valid
    assert check_and_fix(content, LintConfig(max_line_length=200)).valid


def test_check_and_fix_rejects_bad_config():
    with pytest.raises(ConfigLoadError):
        check_and_fix("# Title\n", LintConfig(rules={"not-a-rule": True}))


def test_pending_documents_accumulate_chunks():
    store = PendingDocuments()
    store.feed("readme", "# Title\n")
    store.feed("readme", "\nBody\n")

    assert "readme" in store
    assert len(store) == 1
    assert store.peek("readme") == "# Title\n\nBody\n"
    assert check_pending(store, "readme").valid
    assert "readme" in store


def test_pending_documents_are_independent():
    store = PendingDocuments()
    store.feed("a", "# A\n")
    store.feed("b", "#### B")

    assert check_pending(store, "a").valid
    assert not check_pending(store, "b").valid
    assert len(PendingDocuments()) == 0


def test_take_and_discard():
    store = PendingDocuments()
    store.feed("doc", "# Title\n")

    assert store.take("doc") == "# Title\n"
    assert "doc" not in store
    store.discard("doc")
    with pytest.raises(KeyError):
        store.peek("doc")


def test_finish_pending_fixes_and_consumes_document():
    store = PendingDocuments()
    store.feed("doc", "# Title\n\n* a\n")
    store.feed("doc", "+ b\n")

    report = finish_pending(store, "doc")

    assert report.fixed_text == "# Title\n\n- a\n- b\n"
    assert report.valid
    assert "doc" not in store


def test_finish_pending_unknown_document():
    with pytest.raises(KeyError):
        finish_pending(PendingDocuments(), "missing")


def test_finish_pending_consumes_buffer_on_bad_config():
    store = PendingDocuments()
    store.feed("doc", "# Title\n")

    with pytest.raises(ConfigLoadError):
        finish_pending(store, "doc", LintConfig(max_line_length=0))
    assert "doc" not in store
