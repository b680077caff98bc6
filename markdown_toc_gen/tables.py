"""Pipe-table filtering ahead of heading extraction."""

from __future__ import annotations

from .logger import LogFunc, LogLevel, null_log


def filter_tables(lines: list[str], log: LogFunc = null_log) -> list[str]:
    """Blank out lines that belong to pipe tables.

    A line containing both ``|`` and ``-`` opens a table; while inside a table
    every line containing ``|`` is blanked, and the first line without one
    closes the table and is kept as is. Prose that contains both characters is
    blanked too; the heuristic is intentionally loose.

    Args:
        lines: Document lines split on newlines; a trailing carriage return is kept.
        log: Receives a debug trace for each table boundary.

    Returns:
        list[str]: A new list of the same length with table rows replaced by
            empty strings.

    Examples:
        filter_tables(["| a |", "|---|", "| 1 |", "## Next"])  # ["| a |", "", "", "## Next"]
    """
    filtered: list[str] = []
    in_table = False

    for line_number, line in enumerate(lines, start=1):
        if not in_table and "|" in line and "-" in line:
            in_table = True
            log(LogLevel.DEBUG, f"Table starts at line {line_number}")
            filtered.append("")
            continue

        if in_table:
            if "|" not in line:
                in_table = False
                log(LogLevel.DEBUG, f"Table ends at line {line_number}")
                filtered.append(line)
                continue
            filtered.append("")
            continue

        filtered.append(line)

    return filtered
