"""Canonical section-marker replacement for Markdown documents."""

from __future__ import annotations

from enum import Enum
from typing import List

from ..content import Content
from ..formatter.base import FormatterAdapter
from ..logging import get_logger
from ..sections import SectionIdentifier

_LOGGER = get_logger("renderer.markers")


class _State(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"
    DONE = "done"


def replace_section(
    document: Content,
    formatter: FormatterAdapter,
    section: SectionIdentifier,
    content: Content,
) -> Content:
    """Return ``document`` with the first ``section`` region set to ``content``.

    Lines outside the region are kept and re-terminated with ``\\n``. Without
    a start marker the block is appended at the end of the document.
    """
    start = formatter.section_start(section).trim()
    end = formatter.section_end(section).trim()
    block = formatter.section(section, content)

    output: List[Content] = []
    state = _State.OUTSIDE
    for line in document.split_lines():
        marker = line.trim()
        if state is _State.OUTSIDE and marker == start:
            output.append(block)
            state = _State.INSIDE
            continue
        if state is _State.INSIDE:
            if marker == end:
                state = _State.DONE
            continue
        output.append(line.append("\n"))

    if state is _State.INSIDE:
        _LOGGER.warning(
            "Section '%s' has a start marker without an end marker; it now extends to end of file",
            section,
        )
    elif state is _State.OUTSIDE:
        output.append(block)
    return Content.join(output)


__all__ = ["replace_section"]
