"""Slug generation for markdown headings."""

from __future__ import annotations

import re

# Word characters plus CJK unified ideographs and hyphens survive.
_DISALLOWED_ASCII = re.compile(r"[^\w\u4e00-\u9fa5-]", re.ASCII)
_DISALLOWED_UNICODE = re.compile(r"[^\w\u4e00-\u9fa5-]")


def generate_slug(title: str, preserve_unicode: bool = False) -> str:
    """Generate an anchor slug from a Markdown heading title.

    Lower-cases the title, turns every whitespace character into a hyphen,
    removes characters other than ASCII word characters, CJK ideographs and
    hyphens, collapses hyphen runs and trims hyphens from both ends. Identical
    titles produce identical slugs; no numbering suffix is added.

    Args:
        title: The heading text to convert into a slug.
        preserve_unicode: When True, keep every Unicode word character instead
            of only ASCII ones.

    Returns:
        str: Hyphen-separated slug, possibly empty.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("What's New?")  # "whats-new"
        generate_slug("快速 开始")  # "快速-开始"
        generate_slug("Café", preserve_unicode=True)  # "café"
    """
    slug = title.lower()
    slug = re.sub(r"\s", "-", slug)

    disallowed = _DISALLOWED_UNICODE if preserve_unicode else _DISALLOWED_ASCII
    slug = disallowed.sub("", slug)

    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")
