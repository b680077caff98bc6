"""Table of contents generation for markdown files."""

from __future__ import annotations

from .config import TocConfig
from .constants import HORIZONTAL_SEPARATOR, VERTICAL_BULLET, VERTICAL_INDENT
from .exceptions import RenderError
from .logger import LogFunc, LogLevel, null_log
from .models import Heading, MarkerScan
from .parser import extract_headings
from .tables import filter_tables


def render_toc(headings: list[Heading], style: str) -> str:
    """Render headings as a TOC body, without markers.

    Horizontal style joins ``[text](#slug)`` links with a bullet separator on
    one line. Vertical style emits one ``- [text](#slug)`` item per line,
    indented two spaces per level below level 1.

    Args:
        headings: Headings to render, already filtered by level.
        style: ``"horizontal"`` or ``"vertical"``.

    Returns:
        str: The TOC body; empty when there are no headings.

    Raises:
        RenderError: If `style` is not supported.

    Examples:
        render_toc([Heading(1, "A", "a"), Heading(2, "B", "b")], "horizontal")
        # "[A](#a) • [B](#b)"
        render_toc([Heading(1, "A", "a"), Heading(2, "B", "b")], "vertical")
        # "- [A](#a)\\n  - [B](#b)"
    """
    if style == "horizontal":
        return HORIZONTAL_SEPARATOR.join(
            f"[{heading.text}](#{heading.slug})" for heading in headings
        )
    if style == "vertical":
        return "\n".join(
            f"{VERTICAL_INDENT * (heading.level - 1)}{VERTICAL_BULLET} "
            f"[{heading.text}](#{heading.slug})"
            for heading in headings
        )
    raise RenderError(f"Unsupported TOC style: {style!r}")


def mask_marker_region(lines: list[str], scan: MarkerScan) -> list[str]:
    """Blank the marker lines and everything between them.

    The region is about to be replaced, so nothing inside it may feed the
    heading list.

    Args:
        lines: Document lines.
        scan: Marker positions from `scan_markers`.

    Returns:
        list[str]: A new list of the same length.
    """
    if not scan.present:
        return list(lines)
    return [
        "" if scan.start_index <= index <= scan.end_index else line
        for index, line in enumerate(lines)
    ]


def generate_toc_content(
    lines: list[str], config: TocConfig, log: LogFunc = null_log
) -> str:
    """Build the TOC body for a document.

    Composes the table filter, the heading extractor and the renderer. Any
    failure along the way is logged and yields an empty body so one bad
    document cannot abort a batch.

    Args:
        lines: Document lines with the marker region already masked.
        config: Style, level and slug settings.
        log: Receives debug traces and the error message on failure.

    Returns:
        str: Rendered TOC body, or an empty string on failure.

    Examples:
        generate_toc_content(["# Title", "## Intro"], TocConfig(style="vertical"))
        # "- [Title](#title)\\n  - [Intro](#intro)"
    """
    try:
        filtered = filter_tables(lines, log)
        headings = extract_headings(
            filtered, config.max_level, preserve_unicode=config.preserve_unicode, log=log
        )
        toc = render_toc(headings, config.style)
    except Exception as error:
        log(LogLevel.ERROR, f"Failed to generate table of contents: {error}")
        return ""

    log(LogLevel.DEBUG, f"Rendered {config.style} TOC with {len(headings)} entries")
    return toc
