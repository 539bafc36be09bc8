"""Formatter selection by destination file type."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from .base import FormatterAdapter, FormatterLanguage, FormatterOptions
from .markdown import MarkdownFormatter

_EXTENSIONS: Dict[str, FormatterLanguage] = {
    ".md": FormatterLanguage.MARKDOWN,
    ".markdown": FormatterLanguage.MARKDOWN,
}


class UnsupportedFormatError(ValueError):
    """Raised when no formatter handles a destination."""


class FormatterService:
    """Hands out formatters for destinations, keyed on the file extension."""

    def __init__(self, options: Optional[FormatterOptions] = None) -> None:
        self._options = options or FormatterOptions()

    def language_for(self, destination: Path | str) -> FormatterLanguage:
        suffix = Path(destination).suffix.lower()
        language = _EXTENSIONS.get(suffix)
        if language is None:
            supported = ", ".join(sorted(_EXTENSIONS))
            raise UnsupportedFormatError(
                f"Unsupported destination format '{suffix or Path(destination).name}'; "
                f"expected one of: {supported}"
            )
        return language

    def for_language(self, language: FormatterLanguage) -> FormatterAdapter:
        formatter = MarkdownFormatter(options=self._options)
        if not formatter.supports_language(language):
            raise UnsupportedFormatError(f"No formatter available for language '{language}'")
        return formatter

    def for_destination(self, destination: Path | str) -> FormatterAdapter:
        return self.for_language(self.language_for(destination))


__all__ = ["FormatterService", "UnsupportedFormatError"]
