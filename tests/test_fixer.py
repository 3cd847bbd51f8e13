from __future__ import annotations

import pytest
import md_structure.fixer as fixer_module
from md_structure.classifier import LineKind
from md_structure.fixer import (
    autofix,
    collapse_blank_lines,
    ensure_leading_heading,
    infer_fence_language,
    normalize_heading,
    normalize_list_item,
    strip_heading_punctuation,
    suggest_heading_level,
)
from md_structure.models import DocumentContext
from md_structure.validator import validate


def test_adds_blank_lines_and_trailing_newline():
    content = "# Title\n## Section\nThis is a paragraph.\n- Item 1\n- Item 2"
    expected = "# Title\n\n## Section\n\nThis is a paragraph.\n\n- Item 1\n- Item 2\n"

    fixed = autofix(content)

    assert fixed == expected
    assert validate(fixed).valid


def test_normalizes_list_markers():
    fixed = autofix("# Title\n\n* Item 1\n- Item 2\n+ Item 3\n")
    assert fixed == "# Title\n\n- Item 1\n- Item 2\n- Item 3\n"


def test_keeps_nested_list_indentation():
    assert autofix("# T\n\n* a\n  + b\n") == "# T\n\n- a\n  - b\n"


def test_labels_javascript_fence():
    fixed = autofix("# Title\n```\nconst x = 1;\nfunction test() {}\n```")
    assert fixed == "# Title\n\n```javascript\nconst x = 1;\nfunction test() {}\n```\n"


def test_surrounds_fence_with_blank_lines():
    fixed = autofix("# Title\n```\nconst x = 1;\n```\nText")
    assert fixed == "# Title\n\n```javascript\nconst x = 1;\n```\n\nText\n"


def test_labels_typescript_fence():
    fixed = autofix("# Title\n\n```\ninterface Test {\n  prop: string;\n}\n```\n")
    assert "```typescript\n" in fixed


def test_unknown_fence_content_labeled_text():
    fixed = autofix("# Title\n\nSome notes.\n\n```\nsome random content\n```\n")
    assert "```text\n" in fixed


def test_existing_fence_language_kept():
    content = "# T\n\n```python\nconst x = 1\n```\n"
    assert autofix(content) == content


def test_fence_contents_untouched():
    content = "# T\n\n```python\n# comment\n* not a list\n\n\n\nx = 1\n```\n"
    assert autofix(content) == content


def test_blank_lines_added_around_labeled_fence():
    fixed = autofix("# T\n\ntext\n```bash\nls\n```\nmore\n")
    assert fixed == "# T\n\ntext\n\n```bash\nls\n```\n\nmore\n"


def test_unterminated_fence_runs_to_end():
    fixed = autofix("# T\n\n```\nconst a = 1;\n")
    assert fixed == "# T\n\n```javascript\nconst a = 1;\n"


def test_clamps_skipped_heading_levels():
    fixed = autofix("# Title\n\n## Section\n\n#### Deep\n")
    assert fixed == "# Title\n\n## Section\n\n### Deep\n"


def test_first_heading_becomes_top_level():
    assert autofix("## Intro\n\ntext\n") == "# Intro\n\ntext\n"


def test_heading_levels_going_back_up_are_kept():
    content = "# A\n\n## B\n\n### C\n\n## D\n"
    assert autofix(content) == content


def test_heading_spacing_normalized():
    assert autofix("#Title\n") == "# Title\n"
    assert autofix("# T\n\n##   Section  \n") == "# T\n\n## Section\n"


def test_heading_trailing_punctuation_removed():
    assert autofix("# Title:\n\n## Notes.\n") == "# Title\n\n## Notes\n"


def test_unfixable_findings_left_alone():
    content = "# A\n\nbody\n\n# B\n"
    assert autofix(content) == content


def test_collapses_blank_lines():
    assert autofix("# T\n\n\n\ntext\n\n\n\n") == "# T\n\ntext\n"


def test_list_surrounded_by_blank_lines():
    fixed = autofix("Intro\n* a\n* b\nOutro\n")
    assert fixed == "# Document\n\nIntro\n\n- a\n- b\n\nOutro\n"


def test_leading_heading_taken_from_first_heading():
    assert autofix("Intro text\n\n## Usage\n") == "# Usage\n\nIntro text\n\n# Usage\n"


def test_leading_blank_lines_dropped():
    assert autofix("\n\n# Title\n\ntext\n") == "# Title\n\ntext\n"


@pytest.mark.parametrize("content", ["", "   ", "\n\n\n", " \t\n"])
def test_empty_input_becomes_titled_document(content):
    assert autofix(content) == "# Document\n"


def test_bare_hashes_are_not_headings():
    assert autofix("# T\n\n###\n") == "# T\n\n###\n"


@pytest.mark.parametrize(
    ("written", "previous", "expected"),
    [
        (1, 0, 1),
        (1, 3, 1),
        (3, 0, 1),
        (4, 2, 3),
        (3, 2, 3),
        (2, 3, 2),
    ],
)
def test_suggest_heading_level(written, previous, expected):
    assert suggest_heading_level(written, previous) == expected


def test_normalize_heading():
    assert normalize_heading("####Details:", 2) == ("### Details", 3)
    assert normalize_heading("##  ", 1) == ("##", 0)


@pytest.mark.parametrize(
    ("text", "expected"),
    [("Title.", "Title"), ("Title!!", "Title!"), ("!", "!"), ("What?", "What?")],
)
def test_strip_heading_punctuation(text, expected):
    assert strip_heading_punctuation(text) == expected


def test_normalize_list_item():
    assert normalize_list_item("  * item") == "  - item"
    assert normalize_list_item("plain") is None


def test_infer_fence_language_uses_nearby_lines():
    lines = ["Install it with npm:", "", "```", "install left-pad", "```", ""]
    assert infer_fence_language(lines, 2) == "bash"


def test_collapse_blank_lines_outside_fences():
    lines = ["a", "", "  ", "b", "```", "", "", "```"]
    assert collapse_blank_lines(lines) == ["a", "", "b", "```", "", "", "```"]


def test_ensure_leading_heading_keeps_existing_title():
    lines = ["", "# Title", "", "text"]
    assert ensure_leading_heading(lines, DocumentContext()) == ["# Title", "", "text"]


def test_autofix_is_deterministic():
    content = "## Intro\n* a\n+ b\n```\nconst x = 1;\n```\n#### Deep."
    assert autofix(content) == autofix(content)


def test_rewrite_follows_line_classification(monkeypatch):
    monkeypatch.setattr(fixer_module, "classify", lambda line: LineKind.TEXT)
    assert autofix("# T\n\n* a\n") == "# T\n\n* a\n"
