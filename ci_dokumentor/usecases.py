"""Multi-file migrate and generate operations shared by the CLI and service."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .concurrency import DEFAULT_CONCURRENCY, FileResult, run_for_files
from .formatter.base import FormatterOptions, LinkFormat
from .formatter.service import FormatterService
from .generator import GeneratorService, SectionContentProvider
from .logging import get_logger
from .migration import MigrationService, build_adapters
from .renderer import WriteCoordinator
from .sections import SectionIdentifier

_LOGGER = get_logger("usecases")


class UnknownToolError(ValueError):
    """Raised when a migration tool name is not registered."""


class MigrationNotDetectedError(RuntimeError):
    """Raised when no migration tool recognises a destination."""


def build_migration_service(
    *,
    scaffold: bool = False,
    link_format: LinkFormat = LinkFormat.AUTO,
    coordinator: Optional[WriteCoordinator] = None,
) -> MigrationService:
    return MigrationService(
        build_adapters(scaffold=scaffold),
        formatter_service=FormatterService(FormatterOptions(link_format=link_format)),
        coordinator=coordinator,
    )


def build_generator_service(
    *,
    link_format: LinkFormat = LinkFormat.AUTO,
    coordinator: Optional[WriteCoordinator] = None,
) -> GeneratorService:
    return GeneratorService(
        formatter_service=FormatterService(FormatterOptions(link_format=link_format)),
        coordinator=coordinator,
    )


class MigrateDocumentationUseCase:
    """Migrates many destinations with bounded concurrency."""

    def __init__(self, service: MigrationService) -> None:
        self.service = service

    async def execute(
        self,
        destinations: Sequence[Path],
        *,
        tool: Optional[str] = None,
        dry_run: bool = False,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> List[FileResult]:
        adapter = None
        if tool:
            adapter = self.service.adapter_for_tool(tool)
            if adapter is None:
                supported = ", ".join(self.service.supported_tools())
                raise UnknownToolError(f"Unknown migration tool '{tool}'. Supported tools: {supported}")

        async def _migrate(destination: Path) -> Optional[str]:
            selected = adapter or await self.service.auto_detect(destination)
            if selected is None:
                raise MigrationNotDetectedError(f"No supported migration markers found in {destination}")
            _LOGGER.info("Migrating %s with %s", destination, selected.get_name())
            _, data = await self.service.migrate(destination, selected, dry_run=dry_run)
            return data

        return await run_for_files([Path(path) for path in destinations], _migrate, concurrency)


class GenerateDocumentationUseCase:
    """Generates sections into many destinations with bounded concurrency."""

    def __init__(self, generator: GeneratorService) -> None:
        self.generator = generator

    async def execute(
        self,
        destinations: Sequence[Path],
        provider: SectionContentProvider,
        *,
        sections: Optional[Sequence[SectionIdentifier]] = None,
        dry_run: bool = False,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> List[FileResult]:
        # Unknown sections fail before any file is touched.
        self.generator.resolve_sections(provider, sections)

        async def _generate(destination: Path) -> Optional[str]:
            _, data = await self.generator.generate(destination, provider, sections, dry_run=dry_run)
            return data

        return await run_for_files([Path(path) for path in destinations], _generate, concurrency)


__all__ = [
    "GenerateDocumentationUseCase",
    "MigrateDocumentationUseCase",
    "MigrationNotDetectedError",
    "UnknownToolError",
    "build_generator_service",
    "build_migration_service",
]
