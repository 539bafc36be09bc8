"""Tests for writing provider sections into documents."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Sequence

import pytest

from ci_dokumentor.config import ConfigError
from ci_dokumentor.content import Content
from ci_dokumentor.formatter.base import FormatterAdapter
from ci_dokumentor.generator import GeneratorService, MappingSectionProvider
from ci_dokumentor.renderer import Renderer, WriteCoordinator, create_renderer
from ci_dokumentor.sections import SectionIdentifier
from ci_dokumentor.storage import FileWriter
from tests._fixtures.doc_builder import DocBuilder


def test_provider_loads_yaml_mapping(tmp_path: Path, formatter) -> None:
    sections_file = tmp_path / "sections.yml"
    sections_file.write_text(
        "Inputs: |\n  | a |\noverview: About\nlicense:\n",
        encoding="utf-8",
    )

    provider = MappingSectionProvider.from_file(sections_file)

    assert provider.supported_sections() == [
        SectionIdentifier.OVERVIEW,
        SectionIdentifier.INPUTS,
        SectionIdentifier.LICENSE,
    ]
    assert provider.section_content(SectionIdentifier.INPUTS, formatter).text == "| a |\n"
    assert provider.section_content(SectionIdentifier.LICENSE, formatter).is_empty()


def test_provider_rejects_unknown_sections_and_bad_values(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unknown section 'nope'"):
        MappingSectionProvider.from_mapping({"nope": "x"})
    with pytest.raises(ConfigError, match="must be a string"):
        MappingSectionProvider.from_mapping({"inputs": ["x"]})
    with pytest.raises(ConfigError, match="not found"):
        MappingSectionProvider.from_file(tmp_path / "missing.yml")


def test_generate_writes_sections_in_canonical_order(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "# Action\n"})
    provider = MappingSectionProvider(
        {SectionIdentifier.INPUTS: "| a |", SectionIdentifier.OVERVIEW: "About"}
    )

    path, data = asyncio.run(GeneratorService().generate(doc_builder.path("README.md"), provider))

    assert path == doc_builder.path("README.md")
    assert data is None
    assert doc_builder.read("README.md") == (
        "# Action\n"
        "<!-- overview:start -->\n\nAbout\n\n<!-- overview:end -->\n"
        "<!-- inputs:start -->\n\n| a |\n\n<!-- inputs:end -->\n"
    )


def test_generate_only_selected_sections(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "<!-- usage:start -->\nold\n<!-- usage:end -->\n"})
    provider = MappingSectionProvider(
        {SectionIdentifier.USAGE: "new", SectionIdentifier.OVERVIEW: "About"}
    )

    asyncio.run(
        GeneratorService().generate(
            doc_builder.path("README.md"), provider, [SectionIdentifier.USAGE]
        )
    )

    assert doc_builder.read("README.md") == "<!-- usage:start -->\n\nnew\n\n<!-- usage:end -->\n"


def test_generate_dry_run_returns_diff(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "# Action\n"})
    provider = MappingSectionProvider({SectionIdentifier.USAGE: "Run it."})

    _, diff = asyncio.run(
        GeneratorService().generate(doc_builder.path("README.md"), provider, dry_run=True)
    )

    assert diff is not None
    assert "README.md (original)" in diff
    assert "+<!-- usage:start -->" in diff
    assert doc_builder.read("README.md") == "# Action\n"


def test_missing_sections_are_reported() -> None:
    provider = MappingSectionProvider({SectionIdentifier.USAGE: "x"})
    with pytest.raises(ConfigError, match="Sections not provided: inputs"):
        GeneratorService().resolve_sections(provider, [SectionIdentifier.INPUTS])


class _RecordingWriter(FileWriter):
    def __init__(self) -> None:
        self.scratch_paths: List[Path] = []

    def scratch_path(self, destination: Path) -> Path:
        path = super().scratch_path(destination)
        self.scratch_paths.append(path)
        return path


class _FailingProvider:
    """Serves usage and overview, but cannot produce overview content."""

    def supported_sections(self) -> Sequence[SectionIdentifier]:
        return [SectionIdentifier.OVERVIEW, SectionIdentifier.USAGE]

    def section_content(self, section: SectionIdentifier, formatter: FormatterAdapter) -> Content:
        if section is SectionIdentifier.OVERVIEW:
            raise RuntimeError("overview unavailable")
        return Content("Run it.")


def test_failed_section_settles_writes_and_removes_scratch_copy(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "# Action\n"})
    writer = _RecordingWriter()
    coordinator = WriteCoordinator()

    def factory(dry_run: bool) -> Renderer:
        return create_renderer(dry_run, writer=writer, coordinator=coordinator)

    service = GeneratorService(renderer_factory=factory, coordinator=coordinator)
    with pytest.raises(RuntimeError, match="overview unavailable"):
        asyncio.run(service.generate(doc_builder.path("README.md"), _FailingProvider(), dry_run=True))

    assert len(writer.scratch_paths) == 1
    assert not writer.scratch_paths[0].exists()
    assert coordinator.active_paths() == []
    assert doc_builder.read("README.md") == "# Action\n"


def test_failed_section_keeps_other_sections_written(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "# Action\n"})

    with pytest.raises(RuntimeError):
        asyncio.run(GeneratorService().generate(doc_builder.path("README.md"), _FailingProvider()))

    assert doc_builder.read("README.md") == (
        "# Action\n<!-- usage:start -->\n\nRun it.\n\n<!-- usage:end -->\n"
    )
