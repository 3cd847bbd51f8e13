"""Constants used across the md-structure package."""

from __future__ import annotations

import re

from .config import LintConfig

DEFAULT_CONFIG = LintConfig()

# Line patterns
HEADING_PATTERN = re.compile(r"^(#+)\s+(.+)$")
LIST_ITEM_PATTERN = re.compile(r"^(\s*)([*+-])\s+(.+)$")
CODE_FENCE_PATTERN = re.compile(r"^```(\w*)$")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

# Spaces per list nesting level
LIST_INDENT_WIDTH = 2

# Autofix
FENCE = "```"
NORMALIZED_LIST_MARKER = "-"
HEADING_TRAILING_PUNCTUATION = ".,:;!"
DEFAULT_TITLE = "Document"
CONTEXT_WINDOW_LINES = 3

# Limits and file handling
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
MARKDOWN_EXTENSIONS = (".md", ".markdown")
