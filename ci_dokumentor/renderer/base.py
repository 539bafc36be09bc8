"""Renderer contract: place formatted sections into a destination."""

from __future__ import annotations

import asyncio
import functools
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from ..content import Content
from ..formatter.base import FormatterAdapter
from ..sections import SectionIdentifier
from ..storage import FileReader, FileWriter
from .coordinator import WriteCoordinator

_T = TypeVar("_T")


class RendererError(RuntimeError):
    """Raised when a renderer is used outside its initialize/finalize lifecycle."""


class Renderer(ABC):
    """Writes sections into one destination between initialize and finalize."""

    def __init__(
        self,
        *,
        reader: Optional[FileReader] = None,
        writer: Optional[FileWriter] = None,
        coordinator: Optional[WriteCoordinator] = None,
    ) -> None:
        self.reader = reader or FileReader()
        self.writer = writer or FileWriter()
        self.coordinator = coordinator or WriteCoordinator()
        self._destination: Optional[Path] = None
        self._formatter: Optional[FormatterAdapter] = None

    async def initialize(self, destination: Path | str, formatter: FormatterAdapter) -> None:
        if self._destination is not None:
            raise RendererError(f"Renderer already initialized for {self._destination}")
        self._destination = Path(destination)
        self._formatter = formatter
        try:
            await self._on_initialize()
        except BaseException:
            self._reset()
            raise

    @property
    def destination(self) -> Path:
        if self._destination is None:
            raise RendererError("Renderer is not initialized")
        return self._destination

    @property
    def formatter(self) -> FormatterAdapter:
        if self._formatter is None:
            raise RendererError("Renderer is not initialized")
        return self._formatter

    @property
    def initialized(self) -> bool:
        return self._destination is not None

    @abstractmethod
    async def write_section(self, section: SectionIdentifier, content: Content) -> None:
        """Replace (or append) the region of ``section`` with ``content``."""

    @abstractmethod
    async def replace_content(self, content: Content) -> None:
        """Overwrite the whole destination with ``content``."""

    @abstractmethod
    async def read_existing_content(self) -> Content:
        """Return the current destination content, empty when it does not exist."""

    @abstractmethod
    async def finalize(self) -> Optional[str]:
        """Release the destination; diff renderers return the pending patch."""

    async def _on_initialize(self) -> None:
        return None

    def _reset(self) -> None:
        self._destination = None
        self._formatter = None

    async def _run_blocking(self, func: Callable[..., _T], *args: Any) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    def _read_or_empty(self, path: Path) -> Content:
        if not self.reader.exists(path):
            return Content.empty()
        return self.reader.read(path)


__all__ = ["Renderer", "RendererError"]
