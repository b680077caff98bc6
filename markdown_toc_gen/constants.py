"""Constants used across the markdown-toc-gen package."""

from __future__ import annotations

import re

from .config import TocConfig

DEFAULT_CONFIG = TocConfig()

# Markdown patterns
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
LEVEL_ONE_HEADING_PATTERN = re.compile(r"^#\s")
CODE_FENCE = "```"

# TOC markers and rendering defaults
TOC_START_MARKER = DEFAULT_CONFIG.start_marker
TOC_END_MARKER = DEFAULT_CONFIG.end_marker
MARKER_ESCAPE = "\\"
HORIZONTAL_SEPARATOR = " • "
VERTICAL_INDENT = "  "
VERTICAL_BULLET = "-"

# Files
MARKDOWN_EXTENSIONS = (".md", ".markdown")
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
