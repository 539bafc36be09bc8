"""Code fence and inline code span helpers for Markdown output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..content import Content

_TICK = 0x60
_NEW_LINE = 0x0A

_MIN_FENCE_LEN = 3
_HTML_NEW_LINE = "&#13;"
_DEFAULT_LANGUAGE = Content("text")
_FENCE_LINE = re.compile(r"^`{3,}")


@dataclass(frozen=True)
class CodeBlock:
    """Byte range of a fenced code block, fences included."""

    start: int
    end: int
    inner_start: int
    inner_end: int
    lang: Optional[Content] = None


@dataclass(frozen=True)
class InlineSpan:
    """Byte range of an inline backtick span, delimiters included."""

    start: int
    end: int
    delim_len: int


class MarkdownCodeGenerator:
    """Builds code fences and locates existing code in Markdown text."""

    def is_fence_line(self, line: Content) -> bool:
        return line.test(_FENCE_LINE)

    def backtick_fence_for(self, content: Content) -> Content:
        """Return a fence strictly longer than any backtick run in ``content``."""
        longest = 0
        current = 0
        for byte in content.to_bytes():
            if byte == _TICK:
                current += 1
                longest = max(longest, current)
            else:
                current = 0
        return Content("`" * max(_MIN_FENCE_LEN, longest + 1))

    def code_block(
        self,
        content: Content,
        language: Optional[Content] = None,
        *,
        to_html: bool = False,
    ) -> Content:
        if to_html:
            return self.html_code_block(content, language)
        resolved = language if language is not None and not language.is_empty() else _DEFAULT_LANGUAGE
        fence = self.backtick_fence_for(content)
        return fence.append(resolved, "\n", content.trim(), "\n", fence, "\n")

    def inline_code(self, content: Content) -> Content:
        return Content("`").append(content.escape(["`", "*"]), "`")

    def html_code_block(self, content: Content, language: Optional[Content] = None) -> Content:
        """Render code as a single physical line ``<pre>`` fragment.

        Line breaks become ``&#13;`` so the result can live inside one table
        row. Leading indentation collapses to a single space.
        """
        resolved = language if language is not None and not language.is_empty() else _DEFAULT_LANGUAGE
        result = Content('<pre lang="').append(resolved.html_escape(), '">')
        lines = [
            _collapse_indent(line.trim_end()).escape(["`", "*"]).html_escape()
            for line in content.split_lines()
        ]
        return result.append(Content.join(lines, _HTML_NEW_LINE), "</pre>")

    def find_inline_code(
        self, content: Content, existing: Sequence[CodeBlock] = ()
    ) -> List[InlineSpan]:
        """Locate backtick spans whose closing run matches the opening length."""
        spans: List[InlineSpan] = []
        data = content.to_bytes()
        size = len(data)
        pos = 0

        def inside_existing(index: int) -> bool:
            return any(block.start <= index < block.end for block in existing)

        while pos < size:
            idx = data.find(b"`", pos)
            if idx == -1:
                break
            if inside_existing(idx):
                pos = idx + 1
                continue
            run_end = idx
            while run_end < size and data[run_end] == _TICK:
                run_end += 1
            delim_len = run_end - idx

            found = -1
            search = run_end
            while search < size:
                nxt = data.find(b"`", search)
                if nxt == -1:
                    break
                if inside_existing(nxt):
                    search = nxt + 1
                    continue
                close_end = nxt
                while close_end < size and data[close_end] == _TICK:
                    close_end += 1
                if close_end - nxt == delim_len:
                    found = nxt
                    break
                search = close_end

            if found == -1:
                pos = run_end
                continue
            spans.append(InlineSpan(start=idx, end=found + delim_len, delim_len=delim_len))
            pos = found + delim_len
        return spans

    def find_code_blocks(self, content: Content) -> List[CodeBlock]:
        """Locate fenced blocks (``` or ~~~, three or more) starting at line starts."""
        blocks: List[CodeBlock] = []
        data = content.to_bytes()
        size = len(data)
        pos = 0
        while pos < size:
            tick = data.find(b"`", pos)
            tilde = data.find(b"~", pos)
            candidates = [index for index in (tick, tilde) if index != -1]
            if not candidates:
                break
            idx = min(candidates)
            marker = data[idx]
            if idx != 0 and data[idx - 1] != _NEW_LINE:
                pos = idx + 1
                continue

            run_end = idx
            while run_end < size and data[run_end] == marker:
                run_end += 1
            fence_len = run_end - idx
            if fence_len < _MIN_FENCE_LEN:
                pos = idx + 1
                continue

            info_end = data.find(b"\n", run_end)
            if info_end == -1:
                break
            inner_start = info_end + 1
            info = data[run_end:info_end].strip(b" \r")
            lang = Content(info) if info else None

            closing = self._find_closing_fence(data, inner_start, marker, fence_len)
            if closing is None:
                break
            fence_start, fence_end = closing
            line_end = data.find(b"\n", fence_end)
            end = fence_end if line_end == -1 else line_end + 1
            inner_end = fence_start - 1 if fence_start > 0 and data[fence_start - 1] == _NEW_LINE else fence_start
            blocks.append(
                CodeBlock(
                    start=idx,
                    end=end,
                    inner_start=inner_start,
                    inner_end=max(inner_start, inner_end),
                    lang=lang,
                )
            )
            pos = end
        return blocks

    @staticmethod
    def _find_closing_fence(
        data: bytes, start: int, marker: int, fence_len: int
    ) -> Optional[tuple[int, int]]:
        size = len(data)
        search = start
        needle = bytes([marker])
        while search < size:
            nxt = data.find(needle, search)
            if nxt == -1:
                return None
            if nxt != 0 and data[nxt - 1] != _NEW_LINE:
                search = nxt + 1
                continue
            run_end = nxt
            while run_end < size and data[run_end] == marker:
                run_end += 1
            if run_end - nxt >= fence_len:
                return nxt, run_end
            search = run_end + 1
        return None


def _collapse_indent(line: Content) -> Content:
    stripped = line.trim_start()
    if stripped.is_empty() or stripped.size == line.size:
        return stripped
    return Content(" ").append(stripped)


__all__ = ["CodeBlock", "InlineSpan", "MarkdownCodeGenerator"]
