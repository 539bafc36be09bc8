"""Renderer that rewrites the destination file in place."""

from __future__ import annotations

from typing import Optional

from ..content import Content
from ..logging import get_logger
from ..sections import SectionIdentifier
from .base import Renderer
from .markers import replace_section

_LOGGER = get_logger("renderer.file")


class FileRenderer(Renderer):
    """Read-modify-write of one file, serialised per path by the coordinator."""

    async def write_section(self, section: SectionIdentifier, content: Content) -> None:
        destination = self.destination
        formatter = self.formatter
        async with self.coordinator.lock(destination):
            current = await self._run_blocking(self._read_or_empty, destination)
            updated = replace_section(current, formatter, section, content)
            if updated == current:
                _LOGGER.debug("Section %s already up to date in %s", section, destination)
                return
            await self._run_blocking(self.writer.write_atomic, destination, updated)
            _LOGGER.debug("Wrote section %s to %s", section, destination)

    async def replace_content(self, content: Content) -> None:
        destination = self.destination
        async with self.coordinator.lock(destination):
            await self._run_blocking(self.writer.write_atomic, destination, content)
            _LOGGER.debug("Replaced content of %s", destination)

    async def read_existing_content(self) -> Content:
        destination = self.destination
        async with self.coordinator.lock(destination):
            return await self._run_blocking(self._read_or_empty, destination)

    async def finalize(self) -> Optional[str]:
        _LOGGER.debug("Finalized %s", self.destination)
        self._reset()
        return None


__all__ = ["FileRenderer"]
