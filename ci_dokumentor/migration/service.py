"""Registry of migration adapters and the per-destination migration flow."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..formatter.service import FormatterService
from ..logging import get_logger
from ..renderer import Renderer, RendererFactory, WriteCoordinator, create_renderer
from .adapter import MigrationAdapter

_LOGGER = get_logger("migration.service")


class MigrationService:
    """Looks up adapters by tool name and runs them through a renderer."""

    def __init__(
        self,
        adapters: Iterable[MigrationAdapter],
        *,
        formatter_service: Optional[FormatterService] = None,
        renderer_factory: Optional[RendererFactory] = None,
        coordinator: Optional[WriteCoordinator] = None,
    ) -> None:
        self._adapters: Dict[str, MigrationAdapter] = {}
        for adapter in adapters:
            self._adapters[adapter.get_name().lower()] = adapter
        self._formatters = formatter_service or FormatterService()
        self._coordinator = coordinator or WriteCoordinator()
        self._renderer_factory = renderer_factory or self._default_renderer

    def _default_renderer(self, dry_run: bool) -> Renderer:
        return create_renderer(dry_run, coordinator=self._coordinator)

    def supported_tools(self) -> List[str]:
        return list(self._adapters)

    def adapter_for_tool(self, name: str) -> Optional[MigrationAdapter]:
        return self._adapters.get(name.strip().lower())

    async def auto_detect(self, destination: Path | str) -> Optional[MigrationAdapter]:
        """Return the first adapter whose markers appear in ``destination``."""
        loop = asyncio.get_running_loop()
        for adapter in self._adapters.values():
            if await loop.run_in_executor(None, adapter.supports_destination, Path(destination)):
                _LOGGER.debug("Detected %s markers in %s", adapter.get_name(), destination)
                return adapter
        return None

    async def migrate(
        self,
        destination: Path | str,
        adapter: MigrationAdapter,
        *,
        dry_run: bool = False,
    ) -> Tuple[Path, Optional[str]]:
        path = Path(destination)
        formatter = self._formatters.for_destination(path)
        renderer = self._renderer_factory(dry_run)
        await renderer.initialize(path, formatter)
        try:
            await adapter.migrate_documentation(renderer)
        finally:
            data = await renderer.finalize()
        return path, data


__all__ = ["MigrationService"]
