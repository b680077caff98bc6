from __future__ import annotations

from markdown_toc_gen.logger import LogLevel
from markdown_toc_gen.tables import filter_tables


def test_filter_tables_blanks_separator_and_body_rows():
    lines = [
        "## Before",
        "| Name | Value |",
        "| ---- | ----- |",
        "| a    | 1     |",
        "| b    | 2     |",
        "## After",
    ]

    assert filter_tables(lines) == [
        "## Before",
        "| Name | Value |",
        "",
        "",
        "",
        "## After",
    ]


def test_filter_tables_keeps_length_and_input():
    lines = ["|--|", "| x |", "text", "| y |"]
    original = list(lines)

    filtered = filter_tables(lines)

    assert len(filtered) == len(lines)
    assert lines == original
    assert filtered == ["", "", "text", "| y |"]


def test_filter_tables_leaves_documents_without_tables_alone():
    lines = ["# Title", "", "Some - prose", "## Next"]

    assert filter_tables(lines) == lines


def test_filter_tables_blanks_prose_with_pipe_and_hyphen():
    lines = ["Use a | b - c in prose", "## Heading"]

    assert filter_tables(lines) == ["", "## Heading"]


def test_filter_tables_logs_boundaries(recording_logger):
    filter_tables(["|---|", "| 1 |", "end"], recording_logger)

    assert recording_logger.messages(LogLevel.DEBUG) == [
        "Table starts at line 1",
        "Table ends at line 3",
    ]
