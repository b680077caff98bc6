"""Pure document-to-document TOC rendering."""

from __future__ import annotations

from .config import TocConfig, validate_config
from .exceptions import MalformedMarkerBlockError
from .generator import generate_toc_content, mask_marker_region
from .logger import LogFunc, LogLevel, null_log
from .models import Outcome, RenderResult
from .parser import scan_markers
from .splicer import insert_markers, splice_toc


def render(
    document: str, config: TocConfig | None = None, log: LogFunc = null_log
) -> RenderResult:
    """Regenerate the table of contents of a Markdown document.

    Scans the raw document for the configured markers, inserts them after the
    first level-1 heading when they are missing and `config.auto_insert` is
    set, builds the TOC from every heading outside the marker region and
    splices it in. Lines outside the region are preserved byte for byte.

    Args:
        document: Markdown text.
        config: Rendering configuration. Defaults to a new `TocConfig`.
        log: Receives debug traces; nothing is printed directly.

    Returns:
        RenderResult: The new document, whether it differs from the input and
            the outcome. Documents without markers (and without auto-insert) or
            with an unterminated marker block are returned unchanged with
            `Outcome.NO_MARKERS` or `Outcome.MALFORMED_MARKERS`.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        result = render("# Title\\n<!-- toc --><!-- tocstop -->\\n## A\\n")
        result.output  # "# Title\\n<!-- toc -->[Title](#title) • [A](#a)<!-- tocstop -->\\n## A\\n"
    """
    config = config or TocConfig()
    validate_config(config)
    markers = config.markers

    # CRLF lines keep their "\r", so mixed line endings survive the round trip.
    lines = document.split("\n")

    scan = scan_markers(lines, markers, log)
    if scan.malformed:
        log(LogLevel.DEBUG, "Leaving document unchanged: unterminated marker block")
        return RenderResult(output=document, changed=False, outcome=Outcome.MALFORMED_MARKERS)

    if not scan.present:
        if not config.auto_insert:
            log(LogLevel.DEBUG, "Leaving document unchanged: no TOC markers")
            return RenderResult(output=document, changed=False, outcome=Outcome.NO_MARKERS)
        log(LogLevel.DEBUG, "Inserting TOC markers")
        lines = insert_markers(lines, markers)
        scan = scan_markers(lines, markers, log)

    toc = generate_toc_content(mask_marker_region(lines, scan), config, log)

    try:
        spliced = splice_toc(lines, toc, scan, markers, config.style)
    except MalformedMarkerBlockError as error:
        log(LogLevel.DEBUG, f"Leaving document unchanged: {error}")
        return RenderResult(output=document, changed=False, outcome=Outcome.MALFORMED_MARKERS)

    output = "\n".join(spliced)
    changed = output != document
    return RenderResult(
        output=output,
        changed=changed,
        outcome=Outcome.UPDATED if changed else Outcome.UNCHANGED,
    )
