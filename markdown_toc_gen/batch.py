"""Per-file processing and batch reporting."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .config import TocConfig
from .core import render
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    expand_paths,
    get_max_file_size,
    safe_read,
    write_document,
)
from .logger import Logger
from .models import BatchReport, FileResult, Outcome


class ProcessFileError(Exception):
    """Raised when a Markdown file cannot be read or written."""


def _read_document(filepath: Path, config: TocConfig):
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        raise ProcessFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except (IOError, ValueError) as error:
        raise ProcessFileError(str(error)) from error
    return content, initial_stat


def process_file(
    filepath: Path, config: TocConfig, logger: Logger, always_write: bool = False
) -> FileResult:
    """Regenerate the table of contents of one Markdown file.

    Reads the file, renders it and writes it back when the content changed, or
    whenever `always_write` is set and the document has a marker block. All
    errors are reported through the returned result rather than raised.

    Args:
        filepath: Markdown file to update.
        config: Validated configuration.
        logger: Receives per-file outcome messages and pipeline traces.
        always_write: Rewrite the file even when the content is unchanged.

    Returns:
        FileResult: The file's outcome and, for failures, the reason.

    Examples:
        process_file(Path("README.md"), TocConfig(), Logger("info"))
    """
    logger.debug(f"Processing {filepath}")
    try:
        content, initial_stat = _read_document(filepath, config)
        result = render(content, config, logger)

        if result.outcome is Outcome.NO_MARKERS:
            logger.warn(
                f"[{filepath}] No TOC markers found. Add "
                f"{config.start_marker} and {config.end_marker} manually, "
                "or pass --auto-insert."
            )
            return FileResult(filepath, Outcome.NO_MARKERS)

        if result.outcome is Outcome.MALFORMED_MARKERS:
            logger.warn(
                f"[{filepath}] {config.start_marker} has no matching "
                f"{config.end_marker}; file left unchanged."
            )
            return FileResult(filepath, Outcome.MALFORMED_MARKERS)

        if result.changed or always_write:
            try:
                write_document(filepath, result.output, initial_stat)
            except IOError as error:
                raise ProcessFileError(str(error)) from error
            logger.success(f"[{filepath}] Table of contents updated")
            return FileResult(filepath, Outcome.UPDATED)

        logger.info(f"[{filepath}] Table of contents is up to date")
        return FileResult(filepath, Outcome.UNCHANGED)
    except ProcessFileError as error:
        logger.error(f"[{filepath}] Processing failed: {error}")
        return FileResult(filepath, Outcome.FAILED, reason=str(error))


def process_files(
    patterns: Iterable[str],
    config: TocConfig,
    logger: Logger,
    always_write: bool = False,
) -> BatchReport:
    """Expand path arguments and process every matching file.

    A failing file never stops the batch; its failure is recorded in the report.

    Args:
        patterns: Files, directories or glob patterns.
        config: Validated configuration.
        logger: Receives per-file messages.
        always_write: Forwarded to `process_file`.

    Returns:
        BatchReport: One result per expanded file.
    """
    report = BatchReport()
    files = expand_paths(patterns)
    if not files:
        logger.warn("No Markdown files found")
        return report

    logger.debug(f"Found {len(files)} Markdown file(s) to process")
    for filepath in files:
        report.record(process_file(filepath, config, logger, always_write=always_write))
    return report


def log_report(report: BatchReport, logger: Logger) -> None:
    """Print the batch summary counts."""
    logger.info("Done:")
    logger.success(f"  ✓ {report.updated} file(s) updated")
    logger.info(f"  - {report.skipped} file(s) skipped")
    if report.failed:
        logger.error(f"  × {report.failed} file(s) failed")
