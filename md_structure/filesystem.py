"""Reading and rewriting Markdown files for the command line."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "MD_STRUCTURE_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the largest document size accepted, in bytes.

    `MD_STRUCTURE_MAX_FILE_SIZE` overrides `default` when set.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default

    if not raw_value.strip().isdecimal() or int(raw_value) <= 0:
        raise ValueError(
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {raw_value} (expected positive integer)"
        )
    return int(raw_value)


def resolve_document(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied path to a Markdown file under `base_dir`.

    Args:
        raw_path: Absolute or relative path given on the command line.
        base_dir: Working directory the document must live in.

    Returns:
        Path: Absolute path to the document.

    Raises:
        ValueError: If the path goes through a symlink, does not name an
            existing regular file, lies outside `base_dir`, or lacks a
            Markdown extension.

    Examples:
        resolve_document("docs/guide.md", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    if any(candidate.is_symlink() for candidate in (path, *path.parents)):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Markdown file.\n"
            f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        )
    return resolved


def stat_document(filepath: Path, max_size: int) -> os.stat_result:
    """Snapshot a document's metadata, refusing anything but a small regular file.

    Raises:
        IOError: If the file is inaccessible, not a regular file, or larger
            than `max_size` bytes.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if not stat.S_ISREG(stat_result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")
    return stat_result


def _fingerprint(stat_result: os.stat_result) -> tuple:
    return (stat_result.st_ino, stat_result.st_dev, stat_result.st_size, stat_result.st_mtime_ns)


def read_document(filepath: Path) -> str:
    """Read a document as UTF-8, translating CRLF and CR line endings to ``\\n``.

    Raises:
        IOError: If the file cannot be opened or is not valid UTF-8.
    """
    try:
        with open(filepath, "r", encoding="UTF-8") as file:
            return file.read()
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def write_document(filepath: Path, content: str, expected_stat: os.stat_result):
    """Atomically replace a document, keeping its permission bits.

    The file is written with ``\\n`` line endings.

    Args:
        filepath: Document to rewrite.
        content: New text.
        expected_stat: Snapshot taken by `stat_document` before reading.

    Raises:
        IOError: If the file changed since the snapshot or cannot be replaced.

    Examples:
        write_document(path, report.fixed_text, snapshot)
    """
    try:
        current_stat = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error
    if _fingerprint(current_stat) != _fingerprint(expected_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(temp_path, stat.S_IMODE(expected_stat.st_mode))
        os.replace(temp_path, filepath)
        temp_path = None
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
