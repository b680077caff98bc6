"""
markdown-toc-gen: keep a Markdown table of contents in sync with its headings.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    markdown-toc-gen README.md docs --style vertical

Library Usage:
    from pathlib import Path
    from markdown_toc_gen import TocConfig, render

    content = Path("README.md").read_text()
    result = render(content, TocConfig(style="vertical", max_level=3))
    if result.changed:
        Path("README.md").write_text(result.output)
"""

from .config import ConfigError, TocConfig
from .core import render
from .exceptions import MalformedMarkerBlockError, RenderError, TocError
from .generator import generate_toc_content, render_toc
from .logger import Logger, LogLevel, null_log
from .models import Heading, MarkerPair, MarkerScan, Outcome, RenderResult
from .parser import extract_headings, scan_markers
from .slugify import generate_slug
from .splicer import insert_markers, splice_toc
from .tables import filter_tables

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render",
    "scan_markers",
    "extract_headings",
    "filter_tables",
    "render_toc",
    "generate_toc_content",
    "splice_toc",
    "insert_markers",
    "generate_slug",
    # Data models
    "Heading",
    "MarkerPair",
    "MarkerScan",
    "Outcome",
    "RenderResult",
    "TocConfig",
    # Logging
    "Logger",
    "LogLevel",
    "null_log",
    # Exceptions
    "ConfigError",
    "MalformedMarkerBlockError",
    "RenderError",
    "TocError",
    # Version
    "__version__",
]
