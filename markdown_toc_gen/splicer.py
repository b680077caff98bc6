"""Splicing rendered TOC content into the marker region of a document."""

from __future__ import annotations

from .exceptions import MalformedMarkerBlockError
from .models import MarkerPair, MarkerScan
from .parser import (
    block_end_suffix,
    block_start_prefix,
    find_first_level_one_heading,
    split_single_line,
)


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _line_ending(line: str) -> str:
    # Lines are split on "\n"; CRLF lines keep their "\r".
    return "\r" if line.endswith("\r") else ""


def _indent_lines(toc: str, indent: str) -> list[str]:
    if not toc:
        return [indent]
    return [f"{indent}{line}" if line else line for line in toc.split("\n")]


def insert_markers(lines: list[str], markers: MarkerPair) -> list[str]:
    """Insert an empty marker block into a document that has none.

    The block goes right after the first level-1 heading outside code fences,
    or at the top of the document when there is no such heading. The new
    lines take the line ending of the line they follow.

    Args:
        lines: Document lines split on newlines; a trailing carriage return is kept.
        markers: Marker pair to insert.

    Returns:
        list[str]: A new list with ``"", start, "", end, ""`` inserted.

    Examples:
        insert_markers(["# Title", "## A"], MarkerPair())
        # ["# Title", "", "<!-- toc -->", "", "<!-- tocstop -->", "", "## A"]
    """
    heading_index = find_first_level_one_heading(lines)
    insert_at = 0 if heading_index is None else heading_index + 1
    ending = _line_ending(lines[max(insert_at - 1, 0)]) if lines else ""
    block = [
        line + ending for line in ("", markers.start, "", markers.end, "")
    ]
    return [*lines[:insert_at], *block, *lines[insert_at:]]


def splice_toc(
    lines: list[str],
    toc: str,
    scan: MarkerScan,
    markers: MarkerPair,
    style: str,
) -> list[str]:
    """Replace the marker region of a document with a rendered TOC.

    Only the lines located by `scan` are rewritten. A combined marker line
    stays on one line for a horizontal TOC when nothing but the markers and
    the old TOC is on it; otherwise it is split into an opening line, the TOC
    and a closing line, keeping any text around the markers. A marker block is
    rewritten as the start line, a blank line, the TOC, a blank line and the
    end line, each marker keeping its original indentation. A block whose
    markers carry surrounding text is the split form of a combined line and is
    rewritten the same way, without blank lines. An empty TOC still takes one
    line.

    Args:
        lines: Original document lines, each keeping any trailing carriage return.
        toc: Rendered TOC body.
        scan: Marker positions from `scan_markers` on the same lines.
        markers: Configured marker pair.
        style: TOC style used to render `toc`.

    Returns:
        list[str]: The rewritten document lines. New lines end like the marker
            line they replace.

    Raises:
        MalformedMarkerBlockError: If `scan` does not describe a complete
            marker region within `lines`.

    Examples:
        splice_toc(["<!-- toc --><!-- tocstop -->"], "[A](#a)", scan, MarkerPair(), "horizontal")
        # ["<!-- toc -->[A](#a)<!-- tocstop -->"]
    """
    if not scan.present or scan.start_index is None or scan.end_index is None:
        line_number = None if scan.start_index is None else scan.start_index + 1
        raise MalformedMarkerBlockError(line_number)
    if not 0 <= scan.start_index <= scan.end_index < len(lines):
        raise MalformedMarkerBlockError(scan.start_index + 1)

    before = lines[: scan.start_index]
    after = lines[scan.end_index + 1 :]

    if scan.single_line:
        region = _splice_single_line(lines[scan.start_index], toc, markers, style)
    else:
        region = _splice_block(lines[scan.start_index], lines[scan.end_index], toc, markers)

    return [*before, *region, *after]


def _splice_single_line(line: str, toc: str, markers: MarkerPair, style: str) -> list[str]:
    indent = _leading_whitespace(line)
    ending = _line_ending(line)
    parts = split_single_line(line.strip(), markers)
    if parts is None:
        raise MalformedMarkerBlockError()
    prefix, _, suffix = parts

    if style == "horizontal" and not prefix and not suffix:
        return [f"{indent}{markers.start}{toc}{markers.end}{ending}"]

    return [
        f"{indent}{prefix}{markers.start}{ending}",
        *(toc_line + ending for toc_line in _indent_lines(toc, indent)),
        f"{indent}{markers.end}{suffix}{ending}",
    ]


def _splice_block(start_line: str, end_line: str, toc: str, markers: MarkerPair) -> list[str]:
    indent = _leading_whitespace(start_line)
    ending = _line_ending(start_line)
    prefix = block_start_prefix(start_line.strip(), markers)
    suffix = block_end_suffix(end_line.strip(), markers)
    if prefix is None or suffix is None:
        raise MalformedMarkerBlockError()

    toc_lines = [toc_line + ending for toc_line in _indent_lines(toc, indent)]
    closing = f"{_leading_whitespace(end_line)}{markers.end}{suffix}{_line_ending(end_line)}"

    if prefix or suffix:
        return [f"{indent}{prefix}{markers.start}{ending}", *toc_lines, closing]

    return [f"{indent}{markers.start}{ending}", ending, *toc_lines, ending, closing]
