"""Markdown implementation of the formatter contract."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..content import Content
from ..sections import SectionIdentifier
from .base import FormatterAdapter, FormatterLanguage, FormatterOptions, LinkFormat
from .code import MarkdownCodeGenerator
from .links import MarkdownLinkGenerator
from .table import MarkdownTableGenerator

_INLINE_LINK = re.compile(r"^\s*!?\[[^\]]*\]\([^)]*\)\s*$")
_UNORDERED_ITEM = re.compile(r"^[-*+]\s+")
_ORDERED_ITEM = re.compile(r"^\d+\.\s+")


class MarkdownFormatter(FormatterAdapter):
    """Renders content as GitHub-flavoured Markdown."""

    ITALIC_DELIMITER = "*"
    BOLD_DELIMITER = "**"

    def __init__(
        self,
        table_generator: MarkdownTableGenerator | None = None,
        link_generator: MarkdownLinkGenerator | None = None,
        code_generator: MarkdownCodeGenerator | None = None,
        options: FormatterOptions | None = None,
    ) -> None:
        self._code = code_generator or MarkdownCodeGenerator()
        self._tables = table_generator or MarkdownTableGenerator(self._code)
        self._links = link_generator or MarkdownLinkGenerator()
        self._options = options or FormatterOptions()

    @property
    def options(self) -> FormatterOptions:
        return self._options

    def supports_language(self, language: FormatterLanguage) -> bool:
        return language == FormatterLanguage.MARKDOWN

    def set_options(self, options: FormatterOptions) -> None:
        self._options = options

    # ------------------------------------------------------------------
    # Block elements

    def heading(self, content: Content, level: int = 1) -> Content:
        hashes = "#" * max(1, min(6, level))
        return Content(f"{hashes} ").append(content, self.line_break())

    def center(self, content: Content) -> Content:
        content = content.trim()
        result = Content('<div align="center">')
        if not content.is_empty():
            lines = [line.trim() for line in content.split_lines() if not line.trim().is_empty()]
            result = result.append(self.line_break())
            for line in lines:
                result = result.append("  ", line, self.line_break())
        return result.append("</div>", self.line_break())

    def paragraph(self, content: Content) -> Content:
        link_format = self._options.link_format
        processed = content
        if link_format != LinkFormat.NONE:
            processed = self._links.transform_urls(
                content, full_link_format=link_format == LinkFormat.FULL
            )
        return self._indent_list_continuations(processed).append(self.line_break())

    def code(self, content: Content, language: Optional[Content] = None) -> Content:
        return self._code.code_block(content, language)

    def table(self, headers: Sequence[Content], rows: Sequence[Sequence[Content]]) -> Content:
        return self._tables.table(headers, rows)

    def list(self, items: Sequence[Content], ordered: bool = False) -> Content:
        result = Content.empty()
        for index, item in enumerate(items, start=1):
            prefix = f"{index}. " if ordered else "- "
            result = result.append(prefix, item, self.line_break())
        return result

    def horizontal_rule(self) -> Content:
        return Content("---").append(self.line_break())

    def line_break(self) -> Content:
        return Content("\n")

    # ------------------------------------------------------------------
    # Inline elements

    def bold(self, content: Content) -> Content:
        return Content(self.BOLD_DELIMITER).append(
            content.escape(self.BOLD_DELIMITER), self.BOLD_DELIMITER
        )

    def italic(self, content: Content) -> Content:
        return Content(self.ITALIC_DELIMITER).append(
            content.escape(self.ITALIC_DELIMITER), self.ITALIC_DELIMITER
        )

    def inline_code(self, content: Content) -> Content:
        if content.is_multiline():
            return self._code.code_block(content)
        return self._code.inline_code(content)

    def link(self, text: Content, url: Content) -> Content:
        # Pre-rendered badges are allowed as link labels.
        label = text if text.test(_INLINE_LINK) else text.escape(["[", "]"])
        return Content("[").append(label, "](", url.escape(")"), ")")

    def image(
        self,
        url: Content,
        alt_text: Content,
        *,
        width: Optional[str] = None,
        align: Optional[str] = None,
    ) -> Content:
        if width or align:
            result = Content('<img src="').append(url, '"')
            if width:
                result = result.append(f' width="{width}"')
            if align:
                result = result.append(f' align="{align}"')
            return result.append(' alt="', alt_text.escape(["[", "]"]), '" />')
        return Content("![").append(
            alt_text.escape(["[", "]"]), "](", url.escape(["[", "]"]), ")"
        )

    def badge(self, label: Content, url: Content) -> Content:
        return Content("![").append(
            label.escape([self.ITALIC_DELIMITER, ")"]),
            "](",
            url.escape([self.ITALIC_DELIMITER, ")"]),
            ")",
        )

    def comment(self, content: Content) -> Content:
        return Content("<!-- ").append(content.escape(["<!--", "-->"]), " -->")

    # ------------------------------------------------------------------
    # Sections

    def section(self, section: SectionIdentifier, content: Content) -> Content:
        start = self.section_start(section)
        end = self.section_end(section)
        if content.is_empty():
            return start.append(self.line_break(), end, self.line_break())
        return start.append(
            self.line_break(),
            self.line_break(),
            content.trim(),
            self.line_break(),
            self.line_break(),
            end,
            self.line_break(),
        )

    def section_start(self, section: SectionIdentifier) -> Content:
        return self.comment(Content(f"{SectionIdentifier(section).value}:start"))

    def section_end(self, section: SectionIdentifier) -> Content:
        return self.comment(Content(f"{SectionIdentifier(section).value}:end"))

    # ------------------------------------------------------------------
    # Internal helpers

    def _indent_list_continuations(self, content: Content) -> Content:
        """Indent lazy continuation lines of list items by two spaces."""
        if content.is_empty():
            return content
        output: List[Content] = []
        in_list = False
        in_fence = False
        for line in content.split_lines():
            stripped = line.trim_start()
            if self._code.is_fence_line(stripped):
                in_fence = not in_fence
                output.append(line)
                continue
            if in_fence:
                output.append(line)
                continue
            if stripped.test(_UNORDERED_ITEM) or stripped.test(_ORDERED_ITEM):
                in_list = True
                output.append(line)
                continue
            if in_list:
                if line.trim().is_empty():
                    in_list = False
                    output.append(line)
                elif line.starts_with(" ") or line.starts_with("\t"):
                    output.append(line)
                else:
                    output.append(Content("  ").append(line))
                continue
            output.append(line)
        result = Content.join(output, self.line_break())
        if content.ends_with("\n"):
            result = result.append(self.line_break())
        return result


__all__ = ["MarkdownFormatter"]
