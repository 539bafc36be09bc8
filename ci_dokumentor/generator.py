"""Section generation: ask a provider for content and place it via a renderer."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from .config import ConfigError, read_yaml
from .content import Content
from .formatter.base import FormatterAdapter
from .formatter.service import FormatterService
from .logging import get_logger
from .renderer import Renderer, RendererFactory, WriteCoordinator, create_renderer
from .sections import SectionIdentifier, ordered

_LOGGER = get_logger("generator")


class SectionContentProvider(Protocol):
    """Supplies the body of documentation sections."""

    def supported_sections(self) -> Sequence[SectionIdentifier]:
        ...

    def section_content(
        self, section: SectionIdentifier, formatter: FormatterAdapter
    ) -> Content:
        ...


class MappingSectionProvider:
    """Serves pre-written Markdown keyed by section identifier."""

    def __init__(self, sections: Mapping[SectionIdentifier, str]) -> None:
        self._sections: Dict[SectionIdentifier, str] = dict(sections)

    @classmethod
    def from_file(cls, path: Path) -> "MappingSectionProvider":
        """Load a YAML mapping of section identifier to Markdown text."""
        if not path.exists():
            raise ConfigError(f"Sections file not found: {path}")
        data = read_yaml(path)
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} must contain a mapping of section to content")
        return cls.from_mapping(data, source=path.name)

    @classmethod
    def from_mapping(cls, data: Mapping[object, object], *, source: str = "sections") -> "MappingSectionProvider":
        sections: Dict[SectionIdentifier, str] = {}
        for key, value in data.items():
            try:
                section = SectionIdentifier.parse(str(key))
            except ValueError as exc:
                raise ConfigError(f"{source}: {exc}") from None
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ConfigError(f"{source}: content for '{section}' must be a string")
            sections[section] = value
        return cls(sections)

    def supported_sections(self) -> Sequence[SectionIdentifier]:
        return ordered(self._sections)

    def section_content(
        self, section: SectionIdentifier, formatter: FormatterAdapter
    ) -> Content:
        return Content(self._sections.get(section, ""))


class GeneratorService:
    """Writes provider sections into a destination document."""

    def __init__(
        self,
        *,
        formatter_service: Optional[FormatterService] = None,
        renderer_factory: Optional[RendererFactory] = None,
        coordinator: Optional[WriteCoordinator] = None,
    ) -> None:
        self._formatters = formatter_service or FormatterService()
        self._coordinator = coordinator or WriteCoordinator()
        self._renderer_factory = renderer_factory or self._default_renderer

    def _default_renderer(self, dry_run: bool) -> Renderer:
        return create_renderer(dry_run, coordinator=self._coordinator)

    def resolve_sections(
        self,
        provider: SectionContentProvider,
        sections: Optional[Sequence[SectionIdentifier]] = None,
    ) -> List[SectionIdentifier]:
        supported = list(provider.supported_sections())
        if not sections:
            return ordered(supported)
        unsupported = [section for section in sections if section not in supported]
        if unsupported:
            names = ", ".join(str(section) for section in unsupported)
            raise ConfigError(f"Sections not provided: {names}")
        return ordered(sections)

    async def generate(
        self,
        destination: Path | str,
        provider: SectionContentProvider,
        sections: Optional[Sequence[SectionIdentifier]] = None,
        *,
        dry_run: bool = False,
    ) -> Tuple[Path, Optional[str]]:
        """Render ``sections`` into ``destination``; returns the diff in dry runs."""
        path = Path(destination)
        formatter = self._formatters.for_destination(path)
        wanted = self.resolve_sections(provider, sections)
        renderer = self._renderer_factory(dry_run)
        await renderer.initialize(path, formatter)

        async def _write(section: SectionIdentifier) -> None:
            await renderer.write_section(section, provider.section_content(section, formatter))

        try:
            # Same-file writes are serialised by the coordinator; every write
            # settles before the renderer is finalized.
            outcomes = await asyncio.gather(
                *(_write(section) for section in wanted), return_exceptions=True
            )
        finally:
            data = await renderer.finalize()
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        _LOGGER.info("Generated %d section(s) in %s", len(wanted), path)
        return path, data


__all__ = ["GeneratorService", "MappingSectionProvider", "SectionContentProvider"]
