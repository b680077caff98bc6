"""Filesystem helpers for markdown-toc-gen."""

from __future__ import annotations

import glob
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "MARKDOWN_TOC_GEN_MAX_FILE_SIZE"
GLOB_CHARACTERS = frozenset("*?[")

Fingerprint = tuple[object, object, int, int]


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MARKDOWN_TOC_GEN_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def _is_hidden(path: Path) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in path.parts)


def _expand_directory(directory: Path) -> list[Path]:
    matches: list[Path] = []
    for extension in MARKDOWN_EXTENSIONS:
        pattern = os.path.join(glob.escape(str(directory)), "**", f"*{extension}")
        matches.extend(Path(match) for match in glob.glob(pattern, recursive=True))
    return sorted(
        path for path in matches if path.is_file() and not _is_hidden(path.relative_to(directory))
    )


def expand_paths(patterns: Iterable[str]) -> list[Path]:
    """Expand path, directory and glob arguments into Markdown file paths.

    Directories expand to every Markdown file below them (hidden entries
    skipped), glob patterns expand recursively, and existing files pass through
    whatever their extension. Duplicates are dropped, first occurrence wins.

    Args:
        patterns: Paths, directories or glob patterns.

    Returns:
        list[Path]: Matching files in argument order, each group sorted.

    Examples:
        expand_paths(["README.md", "docs", "guides/**/*.md"])
    """
    seen: set[Path] = set()
    expanded: list[Path] = []

    for pattern in patterns:
        path = Path(pattern).expanduser()
        if path.is_dir():
            candidates = _expand_directory(path)
        elif GLOB_CHARACTERS.intersection(pattern):
            candidates = sorted(
                Path(match)
                for match in glob.glob(os.path.expanduser(pattern), recursive=True)
                if Path(match).is_file()
            )
        elif path.is_file():
            candidates = [path]
        else:
            candidates = []

        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                expanded.append(candidate)

    return expanded


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.

    Examples:
        stat_result = collect_file_stat(Path("README.md"))
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def file_fingerprint(stat_result: os.stat_result) -> Fingerprint:
    """Summarize the identity and modification state of a file."""
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Detect changes between two filesystem snapshots.

    Raises:
        IOError: If inode, device, size, or modification time differ.

    Examples:
        ensure_file_unchanged(expected_stat, current_stat, filepath)
    """
    if file_fingerprint(expected_stat) != file_fingerprint(current_stat):
        error_message = f"{filepath} changed during processing; refusing to overwrite."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Line endings are left untranslated so CRLF documents round-trip.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("README.md")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def write_document(filepath: Path, content: str, expected_stat: os.stat_result):
    """Atomically replace a Markdown file with new content.

    Writes to a temporary file in the same directory, copies the original
    permissions and swaps it in with `os.replace`.

    Args:
        filepath: Path to the Markdown file to update.
        content: Full new document text.
        expected_stat: File stat captured before reading, used to detect races.

    Returns:
        None.

    Raises:
        IOError: If the file changed since it was read or cannot be replaced.

    Examples:
        write_document(Path("README.md"), new_text, stat_before_read)
    """
    current_stat = collect_file_stat(filepath)
    ensure_file_unchanged(expected_stat, current_stat, filepath)

    permissions = stat.S_IMODE(expected_stat.st_mode)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

        os.replace(temp_path, filepath)
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
