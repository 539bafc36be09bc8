"""Markdown formatting primitives."""

from .base import FormatterAdapter, FormatterLanguage, FormatterOptions, LinkFormat
from .code import MarkdownCodeGenerator
from .links import MarkdownLinkGenerator
from .markdown import MarkdownFormatter
from .service import FormatterService, UnsupportedFormatError
from .table import MarkdownTableGenerator

__all__ = [
    "FormatterAdapter",
    "FormatterLanguage",
    "FormatterOptions",
    "FormatterService",
    "LinkFormat",
    "MarkdownCodeGenerator",
    "MarkdownFormatter",
    "MarkdownLinkGenerator",
    "MarkdownTableGenerator",
    "UnsupportedFormatError",
]
