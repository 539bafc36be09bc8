"""Formatter contract shared by renderers, generators and migrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence

from ..content import Content
from ..sections import SectionIdentifier


class FormatterLanguage(StrEnum):
    MARKDOWN = "markdown"


class LinkFormat(StrEnum):
    """How bare URLs in paragraphs are turned into links."""

    AUTO = "auto"
    FULL = "full"
    NONE = "none"


@dataclass(frozen=True)
class FormatterOptions:
    link_format: LinkFormat = LinkFormat.AUTO


class FormatterAdapter(ABC):
    """Turns semantic content into a concrete markup language."""

    @abstractmethod
    def supports_language(self, language: FormatterLanguage) -> bool:
        """Return True when this adapter renders ``language``."""

    @abstractmethod
    def set_options(self, options: FormatterOptions) -> None:
        """Replace the options that influence formatting."""

    @abstractmethod
    def heading(self, content: Content, level: int = 1) -> Content: ...

    @abstractmethod
    def paragraph(self, content: Content) -> Content: ...

    @abstractmethod
    def bold(self, content: Content) -> Content: ...

    @abstractmethod
    def italic(self, content: Content) -> Content: ...

    @abstractmethod
    def code(self, content: Content, language: Optional[Content] = None) -> Content: ...

    @abstractmethod
    def inline_code(self, content: Content) -> Content: ...

    @abstractmethod
    def link(self, text: Content, url: Content) -> Content: ...

    @abstractmethod
    def table(self, headers: Sequence[Content], rows: Sequence[Sequence[Content]]) -> Content: ...

    @abstractmethod
    def list(self, items: Sequence[Content], ordered: bool = False) -> Content: ...

    @abstractmethod
    def line_break(self) -> Content: ...

    @abstractmethod
    def comment(self, content: Content) -> Content: ...

    @abstractmethod
    def section(self, section: SectionIdentifier, content: Content) -> Content:
        """Wrap ``content`` in the start/end markers of ``section``."""

    @abstractmethod
    def section_start(self, section: SectionIdentifier) -> Content: ...

    @abstractmethod
    def section_end(self, section: SectionIdentifier) -> Content: ...

    def append_content(self, *parts: Content | str | bytes) -> Content:
        return Content.empty().append(*parts)


__all__ = [
    "FormatterAdapter",
    "FormatterLanguage",
    "FormatterOptions",
    "LinkFormat",
]
