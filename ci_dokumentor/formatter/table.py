"""Markdown table rendering with multi-line and code-aware cells."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..content import Content
from .code import MarkdownCodeGenerator

_NEW_LINE = 0x0A


class MarkdownTableGenerator:
    """Renders pipe tables where every physical row stays on one line.

    Cells may span several lines; each extra line becomes another table row.
    Fenced code (and inline spans that cross a line break) is folded into a
    single ``<pre>`` fragment so it never splits a row.
    """

    def __init__(self, code_generator: MarkdownCodeGenerator | None = None) -> None:
        self._code = code_generator or MarkdownCodeGenerator()

    def table(self, headers: Sequence[Content], rows: Sequence[Sequence[Content]]) -> Content:
        header_cells = list(headers)
        body = [list(row) for row in rows]
        column_count = max([len(header_cells)] + [len(row) for row in body]) or 1

        header_lines = [self._cell_lines(_cell_at(header_cells, column)) for column in range(column_count)]
        body_lines = [
            [self._cell_lines(_cell_at(row, column)) for column in range(column_count)]
            for row in body
        ]
        widths = self._column_widths(header_lines, body_lines)

        output: List[str] = []
        output.append(_render_row([lines[0] for lines in header_lines], widths))
        output.append(_render_row(["-" * width for width in widths], widths))
        header_height = max(len(lines) for lines in header_lines)
        for index in range(1, header_height):
            output.append(_render_row([_line_at(lines, index) for lines in header_lines], widths))
        for row_lines in body_lines:
            height = max(len(lines) for lines in row_lines)
            for index in range(height):
                output.append(_render_row([_line_at(lines, index) for lines in row_lines], widths))
        return Content("\n".join(output) + "\n")

    # ------------------------------------------------------------------
    # Cell handling

    def _cell_lines(self, cell: Content) -> List[str]:
        lines = [self._normalize(self._render_line(line)) for line in self._split_cell(cell)]
        return lines or [""]

    def _split_cell(self, cell: Content) -> List[Content]:
        """Split a cell into logical lines without breaking code constructs."""
        content = cell.trim()
        if content.is_empty():
            return [Content.empty()]

        fenced = self._code.find_code_blocks(content)
        spans = self._code.find_inline_code(content, fenced)
        protected: List[Tuple[int, int]] = [(block.start, block.end) for block in fenced]
        for span in spans:
            if any(start <= span.start < end for start, end in protected):
                continue
            protected.append((span.start, span.end))
        if not protected:
            return content.split_lines().to_list()

        data = content.to_bytes()
        lines: List[Content] = []
        start = 0
        for index, byte in enumerate(data):
            if byte != _NEW_LINE:
                continue
            # The newline closing a fenced block still ends the logical line.
            if any(begin <= index < end - 1 for begin, end in protected):
                continue
            lines.append(Content(data[start:index].rstrip(b"\r")))
            start = index + 1
        lines.append(Content(data[start:]))
        return lines

    def _render_line(self, line: Content) -> Content:
        if line.is_empty():
            return line
        blocks = self._code.find_code_blocks(line)
        if blocks:
            segments: List[Tuple[bool, Content, Content | None]] = []
            last = 0
            for block in blocks:
                if block.start > last:
                    segments.append((False, line.slice(last, block.start), None))
                segments.append((True, line.slice(block.inner_start, block.inner_end), block.lang))
                last = block.end
            if last < line.size:
                segments.append((False, line.slice(last), None))
            return self._join_segments(segments)
        if line.is_multiline():
            spans = self._code.find_inline_code(line)
            segments = []
            last = 0
            for span in spans:
                if span.start > last:
                    segments.append((False, line.slice(last, span.start), None))
                inner = line.slice(span.start + span.delim_len, span.end - span.delim_len)
                segments.append((True, inner, None))
                last = span.end
            if last < line.size:
                segments.append((False, line.slice(last), None))
            return self._join_segments(segments)
        return line

    def _join_segments(self, segments: Sequence[Tuple[bool, Content, Content | None]]) -> Content:
        parts: List[Content] = []
        for is_code, segment, lang in segments:
            if is_code:
                parts.append(self._code.html_code_block(segment, lang))
                continue
            text = segment.trim()
            if not text.is_empty():
                # Stray line breaks in prose would still split the row.
                parts.append(Content(" ".join(line.text for line in text.split_lines())).html_escape())
        return Content.join(parts, " ")

    @staticmethod
    def _normalize(line: Content) -> str:
        return line.trim().escape("|").text

    @staticmethod
    def _column_widths(
        header_lines: Sequence[Sequence[str]], body_lines: Sequence[Sequence[Sequence[str]]]
    ) -> List[int]:
        widths: List[int] = []
        for column, lines in enumerate(header_lines):
            width = max(len(line) for line in lines)
            for row in body_lines:
                width = max(width, max(len(line) for line in row[column]))
            widths.append(max(width, 1))
        return widths


def _cell_at(cells: Sequence[Content], index: int) -> Content:
    return cells[index] if index < len(cells) else Content.empty()


def _line_at(lines: Sequence[str], index: int) -> str:
    return lines[index] if index < len(lines) else ""


def _render_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
    return "| " + " | ".join(padded) + " |"


__all__ = ["MarkdownTableGenerator"]
