"""Data models for markdown-toc-gen."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path


class ScanState(Enum):
    """Scanner states used while walking Markdown lines.

    Attributes:
        NORMAL: Default state for regular text.
        IN_CODE_FENCE: Inside a backtick-fenced code block.
        AWAITING_END_MARKER: A start marker was seen; looking for the end marker.
    """

    NORMAL = auto()
    IN_CODE_FENCE = auto()
    AWAITING_END_MARKER = auto()


@dataclass
class ScanContext:
    """Encapsulate scanner state while walking Markdown text.

    Attributes:
        state: Current scanner state.
        resume_state: State restored when the active code fence closes.
        start_index: Zero-based line of a pending start marker, if any.
    """

    state: ScanState = ScanState.NORMAL
    resume_state: ScanState = ScanState.NORMAL
    start_index: int | None = None


@dataclass(frozen=True)
class Heading:
    """An ATX heading extracted from a document.

    Attributes:
        level: Number of leading ``#`` characters (1 to 6).
        text: Trimmed heading content.
        slug: Anchor derived from `text`; not de-duplicated.
    """

    level: int
    text: str
    slug: str


@dataclass(frozen=True)
class MarkerPair:
    """Start and end sentinel strings delimiting the TOC region."""

    start: str = "<!-- toc -->"
    end: str = "<!-- tocstop -->"


@dataclass(frozen=True)
class MarkerScan:
    """Outcome of scanning a document for TOC markers.

    Attributes:
        present: Whether a complete marker pair was found.
        single_line: Whether both markers share one line.
        start_index: Zero-based line of the start marker. Set without `present`
            when a start marker never found its end marker.
        end_index: Zero-based line of the end marker; equals `start_index` for
            the single-line form.
    """

    present: bool = False
    single_line: bool = False
    start_index: int | None = None
    end_index: int | None = None

    @property
    def malformed(self) -> bool:
        return not self.present and self.start_index is not None


class Outcome(Enum):
    """Per-document result reported to the batch layer."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    NO_MARKERS = "no-markers"
    MALFORMED_MARKERS = "malformed-markers"
    FAILED = "failed"

    @property
    def skipped(self) -> bool:
        return self in (Outcome.UNCHANGED, Outcome.NO_MARKERS, Outcome.MALFORMED_MARKERS)


@dataclass(frozen=True)
class RenderResult:
    """Result of rendering a TOC into a document.

    Attributes:
        output: The rewritten document.
        changed: True when `output` differs from the input document.
        outcome: What happened to the document.
    """

    output: str
    changed: bool
    outcome: Outcome


@dataclass(frozen=True)
class FileResult:
    """Outcome of processing one file."""

    path: Path
    outcome: Outcome
    reason: str | None = None


@dataclass
class BatchReport:
    """Aggregated outcomes for a batch of files."""

    results: list[FileResult] = field(default_factory=list)

    def record(self, result: FileResult) -> None:
        self.results.append(result)

    @property
    def updated(self) -> int:
        return sum(1 for result in self.results if result.outcome is Outcome.UPDATED)

    @property
    def skipped(self) -> int:
        return sum(1 for result in self.results if result.outcome.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.outcome is Outcome.FAILED)
