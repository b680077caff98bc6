"""Markdown line scanning: code fences, TOC markers and headings."""

from __future__ import annotations

from .constants import CODE_FENCE, HEADING_PATTERN, LEVEL_ONE_HEADING_PATTERN, MARKER_ESCAPE
from .logger import LogFunc, LogLevel, null_log
from .models import Heading, MarkerPair, MarkerScan, ScanContext, ScanState
from .slugify import generate_slug


def is_fence_line(line: str) -> bool:
    """Return True when the line opens or closes a backtick code fence.

    Examples:
        is_fence_line("  ```python")  # True
        is_fence_line("`` not a fence")  # False
    """
    return line.strip().startswith(CODE_FENCE)


def _try_toggle_fence(ctx: ScanContext, line: str) -> bool:
    """Open or close a code fence.

    Opening remembers the current state so that closing the fence resumes it;
    a fence inside a pending marker block therefore never ends the block.

    Args:
        ctx: Scanner context to update.
        line: Current line being scanned.

    Returns:
        bool: True when the line is a fence delimiter.

    Examples:
        ctx = ScanContext(state=ScanState.AWAITING_END_MARKER)
        _try_toggle_fence(ctx, "```")  # ctx.state is IN_CODE_FENCE
        _try_toggle_fence(ctx, "```")  # ctx.state is AWAITING_END_MARKER
    """
    if not is_fence_line(line):
        return False

    if ctx.state is ScanState.IN_CODE_FENCE:
        ctx.state = ctx.resume_state
        ctx.resume_state = ScanState.NORMAL
    else:
        ctx.resume_state = ctx.state
        ctx.state = ScanState.IN_CODE_FENCE
    return True


def is_escaped_marker(stripped: str, markers: MarkerPair) -> bool:
    r"""Determine whether a line carries a backslash-escaped marker.

    Escaping either marker (``\<!-- toc -->``) opts the whole line out of
    marker detection.

    Examples:
        is_escaped_marker("\\<!-- toc -->", MarkerPair())  # True
    """
    return MARKER_ESCAPE + markers.start in stripped or MARKER_ESCAPE + markers.end in stripped


def split_single_line(stripped: str, markers: MarkerPair) -> tuple[str, str, str] | None:
    """Split a combined marker line into prefix, enclosed content and suffix.

    Args:
        stripped: Line without surrounding whitespace.
        markers: Configured marker pair.

    Returns:
        tuple[str, str, str] | None: ``(prefix, content, suffix)`` around the
            first start marker and the first end marker that follows it, or
            None when the line does not hold both in that order.

    Examples:
        split_single_line("See <!-- toc -->x<!-- tocstop -->.", MarkerPair())
        # ("See ", "x", ".")
    """
    prefix, found_start, rest = stripped.partition(markers.start)
    if not found_start:
        return None
    content, found_end, suffix = rest.partition(markers.end)
    if not found_end:
        return None
    return prefix, content, suffix


def block_start_prefix(stripped: str, markers: MarkerPair) -> str | None:
    """Return the text before a block start marker, or None if the line is not one.

    Examples:
        block_start_prefix("<!-- toc -->", MarkerPair())  # ""
        block_start_prefix("See <!-- toc -->", MarkerPair())  # "See "
    """
    if not stripped.endswith(markers.start):
        return None
    return stripped[: len(stripped) - len(markers.start)]


def block_end_suffix(stripped: str, markers: MarkerPair) -> str | None:
    """Return the text after a block end marker, or None if the line is not one."""
    if not stripped.startswith(markers.end):
        return None
    return stripped[len(markers.end) :]


def scan_markers(
    lines: list[str], markers: MarkerPair, log: LogFunc = null_log
) -> MarkerScan:
    """Locate the TOC marker pair in a document.

    Walks the lines with a three-state machine. Fence delimiters toggle the
    fence state and are never markers; fenced lines are skipped; lines with an
    escaped marker are skipped. A line holding both markers wins at once as the
    single-line form. Otherwise a line ending with the start marker opens the
    block and the next line starting with the end marker closes it; text
    before the start or after the end is allowed so that the split form of a
    single-line marker is found again. Only the first pair is reported.

    Args:
        lines: Document lines split on newlines; a trailing carriage return is kept.
        markers: Configured marker pair.
        log: Receives debug traces.

    Returns:
        MarkerScan: Marker positions. A start marker that is never closed is
            reported through `start_index` with `present` left False.

    Examples:
        scan_markers(["# T", "<!-- toc -->", "<!-- tocstop -->"], MarkerPair())
        # MarkerScan(present=True, single_line=False, start_index=1, end_index=2)
    """
    ctx = ScanContext()

    for index, line in enumerate(lines):
        if _try_toggle_fence(ctx, line):
            continue

        if ctx.state is ScanState.IN_CODE_FENCE:
            continue

        stripped = line.strip()
        if is_escaped_marker(stripped, markers):
            log(LogLevel.DEBUG, f"Ignoring escaped marker at line {index + 1}")
            continue

        if split_single_line(stripped, markers) is not None:
            log(LogLevel.DEBUG, f"Single-line TOC markers at line {index + 1}")
            return MarkerScan(present=True, single_line=True, start_index=index, end_index=index)

        if (
            ctx.state is ScanState.NORMAL
            and block_start_prefix(stripped, markers) is not None
        ):
            ctx.state = ScanState.AWAITING_END_MARKER
            ctx.start_index = index
            continue

        if (
            ctx.state is ScanState.AWAITING_END_MARKER
            and block_end_suffix(stripped, markers) is not None
        ):
            log(
                LogLevel.DEBUG,
                f"TOC markers span lines {ctx.start_index + 1} to {index + 1}",
            )
            return MarkerScan(
                present=True, single_line=False, start_index=ctx.start_index, end_index=index
            )

    if ctx.start_index is not None:
        log(LogLevel.DEBUG, f"Start marker at line {ctx.start_index + 1} is never closed")
    return MarkerScan(start_index=ctx.start_index)


def extract_headings(
    lines: list[str],
    max_level: int,
    preserve_unicode: bool = False,
    log: LogFunc = null_log,
) -> list[Heading]:
    """Extract ATX headings outside code fences.

    Args:
        lines: Document lines, normally already passed through the table filter.
        max_level: Deepest heading level kept in the result.
        preserve_unicode: Forwarded to `generate_slug`.
        log: Receives a debug trace of the collected headings.

    Returns:
        list[Heading]: Headings in document order, possibly empty.

    Examples:
        extract_headings(["# A", "```", "# Hidden", "```", "### C"], max_level=2)
        # [Heading(level=1, text="A", slug="a")]
    """
    ctx = ScanContext()
    headings: list[Heading] = []

    for line in lines:
        if _try_toggle_fence(ctx, line):
            continue

        if ctx.state is ScanState.IN_CODE_FENCE:
            continue

        heading_match = HEADING_PATTERN.match(line)
        if heading_match:
            level = len(heading_match.group(1))
            text = heading_match.group(2).strip()
            if not text:
                continue
            headings.append(
                Heading(
                    level=level,
                    text=text,
                    slug=generate_slug(text, preserve_unicode=preserve_unicode),
                )
            )

    log(LogLevel.DEBUG, f"Found {len(headings)} heading(s)")
    return [heading for heading in headings if heading.level <= max_level]


def find_first_level_one_heading(lines: list[str]) -> int | None:
    """Return the index of the first level-1 heading outside code fences."""
    ctx = ScanContext()

    for index, line in enumerate(lines):
        if _try_toggle_fence(ctx, line):
            continue

        if ctx.state is ScanState.IN_CODE_FENCE:
            continue

        if LEVEL_ONE_HEADING_PATTERN.match(line.strip()):
            return index

    return None
