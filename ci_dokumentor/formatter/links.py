"""Autolinking of bare URLs in Markdown prose."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..content import Content


@dataclass(frozen=True)
class _Segment:
    code: bool
    text: str


class MarkdownLinkGenerator:
    """Turns bare URLs into ``<url>`` autolinks or ``[url](url)`` links.

    URLs inside code (fenced blocks or inline spans), inside existing link
    constructs, or already wrapped in angle brackets are left alone.
    """

    _URL_PATTERN = re.compile(r"https?://[^\s<>)\]]{1,500}")
    _LINK_PATTERN = re.compile(r"\[([^\]]{0,200})\]\(([^)]{0,500})\)")
    _TRAILING_PUNCTUATION = re.compile(r"[.,;!?]+$")

    def transform_urls(self, content: Content, *, full_link_format: bool = False) -> Content:
        if content.is_empty():
            return content
        pieces: List[str] = []
        for segment in self._split_code_segments(content.text):
            if segment.code:
                pieces.append(segment.text)
            else:
                pieces.append(self._process_fragment(segment.text, full_link_format))
        return Content("".join(pieces))

    def _process_fragment(self, text: str, full_link_format: bool) -> str:
        if not text:
            return text
        links = list(self._LINK_PATTERN.finditer(text))
        if not links:
            return self._replace_urls(text, 0, len(text), full_link_format)

        output: List[str] = []
        last = 0
        for link in links:
            output.append(self._replace_urls(text, last, link.start(), full_link_format))
            output.append(link.group(0))
            last = link.end()
        output.append(self._replace_urls(text, last, len(text), full_link_format))
        return "".join(output)

    def _replace_urls(self, text: str, start: int, end: int, full_link_format: bool) -> str:
        """Replace URLs in ``text[start:end]``, consulting ``text`` for neighbours."""
        output: List[str] = []
        last = start
        for match in self._URL_PATTERN.finditer(text, start, end):
            output.append(text[last : match.start()])
            output.append(self._format_url(text, match, full_link_format))
            last = match.end()
        output.append(text[last:end])
        return "".join(output)

    def _format_url(self, text: str, match: re.Match, full_link_format: bool) -> str:
        url = match.group(0)
        before = text[match.start() - 1] if match.start() > 0 else ""
        after = text[match.end()] if match.end() < len(text) else ""
        if before == "<" and after == ">":
            return url
        clean = self._TRAILING_PUNCTUATION.sub("", url)
        trailing = url[len(clean) :]
        if not clean:
            return url
        if full_link_format:
            return f"[{clean}]({clean}){trailing}"
        return f"<{clean}>{trailing}"

    @staticmethod
    def _split_code_segments(text: str) -> List[_Segment]:
        segments: List[_Segment] = []
        index = 0
        length = len(text)
        while index < length:
            if text.startswith("```", index):
                close = text.find("```", index + 3)
                if close == -1:
                    segments.append(_Segment(code=True, text=text[index:]))
                    break
                segments.append(_Segment(code=True, text=text[index : close + 3]))
                index = close + 3
                continue

            if text[index] == "`":
                ticks = 1
                while index + ticks < length and text[index + ticks] == "`":
                    ticks += 1
                close = text.find("`" * ticks, index + ticks)
                if close == -1:
                    segments.append(_Segment(code=True, text=text[index:]))
                    break
                segments.append(_Segment(code=True, text=text[index : close + ticks]))
                index = close + ticks
                continue

            next_tick = text.find("`", index)
            stop = length if next_tick == -1 else next_tick
            segments.append(_Segment(code=False, text=text[index:stop]))
            index = stop
        return segments


__all__ = ["MarkdownLinkGenerator"]
