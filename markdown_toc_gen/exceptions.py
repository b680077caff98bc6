"""Package-specific exception types."""

from __future__ import annotations


class TocError(ValueError):
    """Base class for errors raised while building a table of contents."""


class MalformedMarkerBlockError(TocError):
    """Raised when a start marker has no matching end marker.

    Args:
        line_number: One-based line of the dangling start marker, if known.
    """

    def __init__(self, line_number: int | None = None):
        self.line_number = line_number
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.line_number is None:
            return "No complete TOC marker block to replace"
        return f"TOC start marker at line {self.line_number} has no matching end marker"


class RenderError(TocError):
    """Raised when headings cannot be rendered in the requested style."""
