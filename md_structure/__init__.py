"""
md-structure: structural validation and automatic repair of Markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-structure README.md
    md-structure README.md --fix

Library Usage:
    from md_structure import autofix, check_and_fix, validate

    result = validate("# Title\\n\\n## Section\\n\\n#### Subsection\\n")
    for finding in result.findings:
        print(finding)

    report = check_and_fix(content)
    print(report.fixed_text)
"""

from .config import ConfigLoadError, LintConfig
from .fixer import autofix
from .language import infer_language
from .models import DocumentContext, Finding, FindingKind, FixReport, ValidationResult
from .orchestrator import (
    PendingDocuments,
    check,
    check_and_fix,
    check_pending,
    finish_pending,
)
from .parser import build_context
from .validator import validate

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "validate",
    "autofix",
    "check",
    "check_and_fix",
    "check_pending",
    "finish_pending",
    "build_context",
    "infer_language",
    # Data models
    "DocumentContext",
    "Finding",
    "FindingKind",
    "FixReport",
    "ValidationResult",
    "PendingDocuments",
    # Configuration
    "LintConfig",
    # Exceptions
    "ConfigLoadError",
    # Version
    "__version__",
]
