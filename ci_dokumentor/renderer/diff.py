"""Renderer that previews changes as a unified diff."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Optional

from ..content import Content
from ..logging import get_logger
from ..sections import SectionIdentifier
from .base import Renderer, RendererError
from .file import FileRenderer

_LOGGER = get_logger("renderer.diff")


class DiffRenderer(Renderer):
    """Redirects every write to a scratch copy and never touches the destination."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._original = Content.empty()
        self._scratch: Optional[Path] = None
        self._inner: Optional[FileRenderer] = None

    async def _on_initialize(self) -> None:
        destination = self.destination
        self._original = await self._run_blocking(self._read_or_empty, destination)
        scratch = await self._run_blocking(self.writer.scratch_path, destination)
        self._scratch = scratch
        await self._run_blocking(self.writer.write_atomic, scratch, self._original)
        inner = FileRenderer(reader=self.reader, writer=self.writer, coordinator=self.coordinator)
        await inner.initialize(scratch, self.formatter)
        self._inner = inner
        _LOGGER.debug("Previewing %s through %s", destination, scratch)

    @property
    def scratch_path(self) -> Optional[Path]:
        return self._scratch

    def _delegate(self) -> FileRenderer:
        if self._inner is None:
            raise RendererError("Renderer is not initialized")
        return self._inner

    async def write_section(self, section: SectionIdentifier, content: Content) -> None:
        await self._delegate().write_section(section, content)

    async def replace_content(self, content: Content) -> None:
        await self._delegate().replace_content(content)

    async def read_existing_content(self) -> Content:
        return await self._delegate().read_existing_content()

    async def finalize(self) -> Optional[str]:
        destination = self.destination
        inner = self._delegate()
        scratch = inner.destination
        try:
            updated = await inner.read_existing_content()
            await inner.finalize()
            return build_diff(destination, self._original, updated)
        finally:
            await self._run_blocking(self.writer.delete, scratch)
            self._inner = None
            self._scratch = None
            self._original = Content.empty()
            self._reset()

    def _reset(self) -> None:
        super()._reset()
        if self._inner is None and self._scratch is not None:
            # A failed initialize leaves no inner renderer behind.
            self.writer.delete(self._scratch)
            self._scratch = None


def build_diff(destination: Path, original: Content, updated: Content) -> str:
    """Unified diff between two versions of ``destination``; empty when equal."""
    diff = difflib.unified_diff(
        original.text.splitlines(keepends=True),
        updated.text.splitlines(keepends=True),
        fromfile=f"{destination} (original)",
        tofile=f"{destination} (updated)",
    )
    return "".join(diff)


__all__ = ["DiffRenderer", "build_diff"]
