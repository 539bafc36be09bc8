"""Renderers placing formatted sections into destination files."""

from __future__ import annotations

from typing import Callable, Optional

from ..storage import FileReader, FileWriter
from .base import Renderer, RendererError
from .coordinator import WriteCoordinator
from .diff import DiffRenderer, build_diff
from .file import FileRenderer
from .markers import replace_section

RendererFactory = Callable[[bool], Renderer]


def create_renderer(
    dry_run: bool = False,
    *,
    reader: Optional[FileReader] = None,
    writer: Optional[FileWriter] = None,
    coordinator: Optional[WriteCoordinator] = None,
) -> Renderer:
    """Return a diff renderer for dry runs, a file renderer otherwise."""
    factory = DiffRenderer if dry_run else FileRenderer
    return factory(reader=reader, writer=writer, coordinator=coordinator)


__all__ = [
    "DiffRenderer",
    "FileRenderer",
    "Renderer",
    "RendererError",
    "RendererFactory",
    "WriteCoordinator",
    "build_diff",
    "create_renderer",
    "replace_section",
]
