"""Tests for migrating foreign documentation markers."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

import pytest

from ci_dokumentor.content import Content
from ci_dokumentor.formatter import MarkdownFormatter
from ci_dokumentor.migration import (
    MigrationAdapter,
    MigrationDescriptor,
    MigrationError,
    iter_decoded_lines,
)
from ci_dokumentor.migration.descriptor import (
    ACTDOCS,
    ACTION_DOCS,
    AUTO_DOC,
    GITHUB_ACTION_README_GENERATOR,
)
from ci_dokumentor.renderer import FileRenderer
from tests._fixtures.doc_builder import DocBuilder

AUTO_DOC_INPUT = "## Inputs\n\n| Name |\n|---|\n"
AUTO_DOC_OUTPUT = "<!-- inputs:start -->\n\n## Inputs\n\n| Name |\n|---|\n\n<!-- inputs:end -->\n"


def _migrate(descriptor: MigrationDescriptor, text: str, *, scaffold: bool = False) -> str:
    adapter = MigrationAdapter(descriptor, scaffold=scaffold)
    return adapter.migrate_content(Content(text), MarkdownFormatter()).text


def test_auto_doc_heading_is_wrapped_in_canonical_markers() -> None:
    assert _migrate(AUTO_DOC, AUTO_DOC_INPUT) == AUTO_DOC_OUTPUT


def test_auto_doc_sections_end_at_next_heading() -> None:
    source = "# Action\n\n## Description\nDoes stuff.\n\n## Inputs\n| Name |\n## Other\ntext\n"
    assert _migrate(AUTO_DOC, source) == (
        "# Action\n\n"
        "<!-- overview:start -->\n\n## Description\nDoes stuff.\n\n<!-- overview:end -->\n"
        "<!-- inputs:start -->\n\n## Inputs\n| Name |\n\n<!-- inputs:end -->\n"
        "## Other\ntext\n"
    )


def test_auto_doc_ignores_headings_inside_code_fences() -> None:
    source = "## Outputs\n```md\n## Inputs\n```\n"
    assert _migrate(AUTO_DOC, source) == (
        "<!-- outputs:start -->\n\n## Outputs\n```md\n## Inputs\n```\n\n<!-- outputs:end -->\n"
    )


def test_action_docs_toggle_markers() -> None:
    source = (
        "# My Action\n"
        '<!-- action-docs-description source="action.yml" -->\n'
        "Does things.\n"
        '<!-- action-docs-description source="action.yml" -->\n'
        "<!-- action-docs-inputs source='action.yml' -->\n"
        "| name |\n"
        "<!-- action-docs-inputs source='action.yml' -->\n"
    )
    assert _migrate(ACTION_DOCS, source) == (
        "# My Action\n"
        "<!-- overview:start -->\n\nDoes things.\n\n<!-- overview:end -->\n"
        "<!-- inputs:start -->\n\n| name |\n\n<!-- inputs:end -->\n"
    )


def test_actdocs_markers_and_unmapped_keys() -> None:
    source = (
        "<!-- actdocs description start -->\n"
        "Description here\n"
        "<!-- actdocs description end -->\n"
        "<!-- actdocs unknown start -->\n"
        "kept text\n"
        "<!-- actdocs unknown end -->\n"
        "<!-- ACTDOCS permissions START -->\n"
        "Perm stuff\n"
        "<!-- actdocs permissions end -->\n"
    )
    assert _migrate(ACTDOCS, source) == (
        "<!-- overview:start -->\n\nDescription here\n\n<!-- overview:end -->\n"
        "kept text\n"
        "<!-- security:start -->\n\nPerm stuff\n\n<!-- security:end -->\n"
    )


def test_readme_generator_aliases_and_merges_header_blocks() -> None:
    source = (
        "<!-- start branding --><!-- end branding -->\n"
        "<!-- start title -->\n"
        "# Title\n"
        "<!-- end title -->\n"
        "<!-- start [.github/ghadocs/examples/] -->\n"
        "example\n"
        "<!-- end [.github/ghadocs/examples/] -->\n"
    )
    assert _migrate(GITHUB_ACTION_README_GENERATOR, source) == (
        "<!-- header:start -->\n\n# Title\n\n<!-- header:end -->\n"
        "<!-- examples:start -->\n\nexample\n\n<!-- examples:end -->\n"
    )


def test_unclosed_marker_extends_to_end_of_input() -> None:
    source = "<!-- actdocs inputs start -->\nrest\nof file\n"
    assert _migrate(ACTDOCS, source) == "<!-- inputs:start -->\n\nrest\nof file\n\n<!-- inputs:end -->\n"


def test_scaffolding_appends_missing_sections_in_canonical_order() -> None:
    result = _migrate(AUTO_DOC, AUTO_DOC_INPUT, scaffold=True)
    assert result.startswith(AUTO_DOC_OUTPUT + "\n<!-- header:start -->\n<!-- header:end -->\n")
    assert result.endswith("\n<!-- generated:start -->\n<!-- generated:end -->\n")
    assert result.count("<!-- inputs:start -->") == 1
    positions = [result.index(f"<!-- {name}:start -->") for name in ("header", "badges", "license")]
    assert positions == sorted(positions)


def test_iter_decoded_lines_survives_split_codepoints() -> None:
    content = Content("é\r\nbé")
    assert list(iter_decoded_lines(content, chunk_size=1)) == ["é", "bé"]
    assert list(iter_decoded_lines(Content.empty())) == []


def test_supports_destination_detects_markers(doc_builder: DocBuilder) -> None:
    doc_builder.write(
        {
            "actdocs.md": "<!-- actdocs inputs start -->\nx\n<!-- actdocs inputs end -->\n",
            "plain.md": "# Nothing here\n",
            "boundary.md": "x" * (8 * 1024 - 10) + "<!-- actdocs inputs start -->\n",
        }
    )
    adapter = MigrationAdapter(ACTDOCS)
    assert adapter.get_name() == "actdocs"
    assert adapter.supports_destination(doc_builder.path("actdocs.md"))
    assert adapter.supports_destination(doc_builder.path("boundary.md"))
    assert not adapter.supports_destination(doc_builder.path("plain.md"))
    assert not adapter.supports_destination(doc_builder.path("missing.md"))


def test_migrate_documentation_writes_through_renderer(doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": AUTO_DOC_INPUT, "EMPTY.md": ""})

    async def run(path: Path) -> None:
        renderer = FileRenderer()
        await renderer.initialize(path, MarkdownFormatter())
        await MigrationAdapter(AUTO_DOC).migrate_documentation(renderer)
        await renderer.finalize()

    asyncio.run(run(doc_builder.path("README.md")))
    asyncio.run(run(doc_builder.path("EMPTY.md")))
    assert doc_builder.read("README.md") == AUTO_DOC_OUTPUT
    assert doc_builder.read("EMPTY.md") == ""


def test_descriptor_requires_exactly_one_strategy() -> None:
    with pytest.raises(ValueError):
        MigrationDescriptor(name="broken", detection_pattern=AUTO_DOC.detection_pattern, section_map={})
    with pytest.raises(ValueError):
        MigrationDescriptor(
            name="both",
            detection_pattern=AUTO_DOC.detection_pattern,
            section_map={},
            heading_pattern=AUTO_DOC.heading_pattern,
            start_pattern=ACTDOCS.start_pattern,
            end_pattern=ACTDOCS.end_pattern,
        )


def test_descriptor_without_marker_patterns_raises_migration_error() -> None:
    broken = dataclasses.replace(ACTDOCS)
    object.__setattr__(broken, "start_pattern", None)
    object.__setattr__(broken, "end_pattern", None)

    with pytest.raises(MigrationError, match="actdocs has no marker patterns"):
        _migrate(broken, "<!-- actdocs inputs start -->\n")
