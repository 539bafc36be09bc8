"""Generic migration from foreign documentation markers to canonical sections."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple, Union

from ..content import Content
from ..formatter.base import FormatterAdapter
from ..logging import get_logger
from ..renderer.base import Renderer
from ..sections import DEFAULT_SECTIONS, SectionIdentifier
from ..storage import FileReader
from .descriptor import MigrationDescriptor, MigrationStrategy

_LOGGER = get_logger("migration")

CHUNK_SIZE = 8 * 1024
DETECTION_WINDOW = 8 * 1024

_HEADING_BOUNDARY = re.compile(r"^#{1,2}\s+\S")
_FENCE = re.compile(r"^(`{3,}|~{3,})")
_CANONICAL_START = re.compile(r"<!--\s*(\w+):start\s*-->")


class MigrationError(RuntimeError):
    """Raised when a descriptor cannot drive the strategy it selects."""


@dataclass
class _Block:
    section: SectionIdentifier
    lines: List[str] = field(default_factory=list)

    def body(self) -> str:
        return "\n".join(self.lines).strip()


_Item = Union[str, _Block]


def iter_decoded_lines(content: Content, chunk_size: int = CHUNK_SIZE) -> Iterator[str]:
    """Yield the lines of ``content`` decoding it chunk by chunk.

    Multi-byte sequences cut by a chunk boundary are carried over to the next
    chunk. A final line without a trailing newline is still yielded.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    data = content.to_bytes()
    pending = ""
    for offset in range(0, len(data), chunk_size):
        pending += decoder.decode(data[offset : offset + chunk_size])
        *complete, pending = pending.split("\n")
        for line in complete:
            yield line.removesuffix("\r")
    pending += decoder.decode(b"", final=True)
    if pending:
        yield pending.removesuffix("\r")


class MigrationAdapter:
    """Converts one foreign tool's documentation conventions.

    The tool-specific parts (marker or heading patterns and the key map) come
    from a :class:`MigrationDescriptor`; the conversion algorithm is shared.
    """

    def __init__(
        self,
        descriptor: MigrationDescriptor,
        *,
        reader: Optional[FileReader] = None,
        scaffold: bool = False,
    ) -> None:
        self.descriptor = descriptor
        self.reader = reader or FileReader()
        self.scaffold = scaffold

    def get_name(self) -> str:
        return self.descriptor.name

    def supports_destination(self, destination: Path | str) -> bool:
        """Return True when ``destination`` carries this tool's markers."""
        path = Path(destination)
        if not self.reader.exists(path):
            return False
        data = self.reader.read(path).to_bytes()
        pattern = self.descriptor.detection_pattern
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        window = ""
        for offset in range(0, len(data), CHUNK_SIZE):
            window += decoder.decode(data[offset : offset + CHUNK_SIZE])
            if pattern.search(window):
                return True
            # Keep a tail so matches spanning chunk boundaries are still seen.
            window = window[-DETECTION_WINDOW:]
        window += decoder.decode(b"", final=True)
        return pattern.search(window) is not None

    async def migrate_documentation(self, renderer: Renderer) -> None:
        """Rewrite the renderer's destination in canonical form.

        Empty destinations are left untouched.
        """
        existing = await renderer.read_existing_content()
        if existing.is_empty():
            _LOGGER.info("Nothing to migrate in %s", renderer.destination)
            return
        migrated = self.migrate_content(existing, renderer.formatter)
        await renderer.replace_content(migrated)
        _LOGGER.info("Migrated %s from %s", renderer.destination, self.get_name())

    def migrate_content(self, content: Content, formatter: FormatterAdapter) -> Content:
        lines = iter_decoded_lines(content)
        if self.descriptor.strategy is MigrationStrategy.HEADINGS:
            items = self._convert_headings(lines)
        else:
            items = self._convert_markers(lines)
        items = _merge_consecutive(items)
        result = _render(items, formatter)
        if self.scaffold:
            result = self._add_missing_sections(result, items, formatter)
        return result

    # ------------------------------------------------------------------
    # Heading strategy

    def _convert_headings(self, lines: Iterator[str]) -> List[_Item]:
        pattern = self.descriptor.heading_pattern
        if pattern is None:
            raise MigrationError(f"{self.get_name()} has no heading pattern")
        items: List[_Item] = []
        current: Optional[_Block] = None
        in_fence = False

        for line in lines:
            stripped = line.strip()
            if _FENCE.match(stripped):
                in_fence = not in_fence
            elif not in_fence and _HEADING_BOUNDARY.match(stripped):
                match = pattern.match(stripped)
                section = self.descriptor.map_key(match.group(2)) if match else None
                if section is not None:
                    current = _Block(section, [match.group(1)])
                    items.append(current)
                    continue
                current = None
            if current is not None:
                current.lines.append(line)
            else:
                items.append(line)
        return items

    # ------------------------------------------------------------------
    # Marker strategy

    def _convert_markers(self, lines: Iterator[str]) -> List[_Item]:
        items: List[_Item] = []
        current: Optional[_Block] = None

        def emit(text: str) -> None:
            if current is not None:
                current.lines.append(text)
            else:
                items.append(text)

        for line in lines:
            position = 0
            while True:
                found = self._next_marker(line, position)
                if found is None:
                    break
                match, opens, key = found
                before = line[position : match.start()]
                if before.strip():
                    emit(before)
                position = match.end()

                section = self.descriptor.map_key(key)
                if section is None:
                    _LOGGER.debug("Dropping unmapped %s marker '%s'", self.get_name(), key)
                    continue
                if opens is None:
                    opens = current is None or current.section != section
                if opens:
                    current = _Block(section)
                    items.append(current)
                elif current is not None and current.section == section:
                    current = None

            if position == 0:
                emit(line)
            elif line[position:].strip():
                emit(line[position:])

        if current is not None:
            _LOGGER.warning(
                "Unclosed %s marker for '%s'; section extends to end of file",
                self.get_name(),
                current.section,
            )
        return items

    def _next_marker(
        self, line: str, position: int
    ) -> Optional[Tuple[re.Match, Optional[bool], str]]:
        """Return the earliest marker at or after ``position``.

        The middle element is True for a start marker, False for an end
        marker and None when one syntax toggles between both.
        """
        start = self.descriptor.start_pattern
        end = self.descriptor.end_pattern
        if start is None or end is None:
            raise MigrationError(f"{self.get_name()} has no marker patterns")
        if self.descriptor.toggles:
            match = start.search(line, position)
            return (match, None, match.group(1)) if match else None
        candidates = []
        start_match = start.search(line, position)
        if start_match:
            candidates.append((start_match, True, start_match.group(1)))
        end_match = end.search(line, position)
        if end_match:
            candidates.append((end_match, False, end_match.group(1)))
        if not candidates:
            return None
        return min(candidates, key=lambda candidate: candidate[0].start())

    # ------------------------------------------------------------------
    # Scaffolding

    def _add_missing_sections(
        self, content: Content, items: List[_Item], formatter: FormatterAdapter
    ) -> Content:
        present: Set[str] = {item.section.value for item in items if isinstance(item, _Block)}
        present.update(match.group(1) for match in content.finditer(_CANONICAL_START))
        missing = [section for section in DEFAULT_SECTIONS if section.value not in present]
        if not missing:
            return content
        if not content.is_empty() and not content.ends_with(formatter.line_break()):
            content = content.append(formatter.line_break())
        for section in missing:
            content = content.append(formatter.line_break(), formatter.section(section, Content.empty()))
        return content


def _merge_consecutive(items: List[_Item]) -> List[_Item]:
    """Fold blocks of the same section separated only by blank lines."""
    merged: List[_Item] = []
    for item in items:
        if isinstance(item, _Block):
            index = len(merged) - 1
            while index >= 0 and isinstance(merged[index], str) and not merged[index].strip():
                index -= 1
            previous = merged[index] if index >= 0 else None
            if isinstance(previous, _Block) and previous.section == item.section:
                del merged[index + 1 :]
                body = item.body()
                if body:
                    if previous.body():
                        previous.lines = [previous.body(), body]
                    else:
                        previous.lines = [body]
                continue
        merged.append(item)
    return merged


def _render(items: List[_Item], formatter: FormatterAdapter) -> Content:
    parts: List[Content] = []
    for item in items:
        if isinstance(item, _Block):
            parts.append(formatter.section(item.section, Content(item.body())))
        else:
            parts.append(Content(item).append(formatter.line_break()))
    return Content.join(parts)


__all__ = ["CHUNK_SIZE", "MigrationAdapter", "MigrationError", "iter_decoded_lines"]
