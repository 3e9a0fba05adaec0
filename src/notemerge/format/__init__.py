"""Formatting utilities for merged note content."""

from .headings import format_heading
from .links import format_link, link_pattern, render_link
from .region import format_region, render_region_annotation

__all__ = [
    "format_heading",
    "format_link",
    "link_pattern",
    "render_link",
    "format_region",
    "render_region_annotation",
]
