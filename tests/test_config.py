"""Tests for ci_dokumentor.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from ci_dokumentor.config import (
    ConfigError,
    DokumentorConfig,
    load_config,
    parse_concurrency,
    parse_link_format,
    parse_sections,
)
from ci_dokumentor.formatter.base import LinkFormat
from ci_dokumentor.sections import SectionIdentifier


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DokumentorConfig)
    assert config.root == tmp_path.resolve()
    assert config.formatter.link_format is LinkFormat.AUTO
    assert config.concurrency == 5
    assert config.migration.tool is None
    assert config.migration.scaffold is False
    assert config.generate.sections_file is None
    assert config.generate.sections == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".ci-dokumentor.yml"
    config_file.write_text(
        """
formatter:
  link_format: full
concurrency: 2
migration:
  tool: actdocs
  scaffold: yes
generate:
  sections_file: docs/sections.yml
  sections: [Usage, inputs, usage]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.formatter.link_format is LinkFormat.FULL
    assert config.concurrency == 2
    assert config.migration.tool == "actdocs"
    assert config.migration.scaffold is True
    assert config.generate.sections_file == tmp_path.resolve() / "docs" / "sections.yml"
    assert config.generate.sections == [SectionIdentifier.USAGE, SectionIdentifier.INPUTS]


def test_load_config_accepts_blank_file(tmp_path: Path) -> None:
    (tmp_path / ".ci-dokumentor.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).concurrency == 5


@pytest.mark.parametrize(
    "body, message",
    [
        ("- a\n- b\n", "mapping at the root"),
        ("formatter: [x]\n", "'formatter' must be a mapping"),
        ("formatter:\n  link_format: sometimes\n", "Invalid link format"),
        ("concurrency: 0\n", "at least 1"),
        ("migration:\n  scaffold: maybe\n", "migration.scaffold"),
        ("generate:\n  sections: [unknown]\n", "Unknown section"),
        ("formatter: {\n", "Failed to parse"),
        ("generate:\n  sections: 5\n", "'generate.sections' must be a list"),
        ("generate:\n  sections: [{a: 1}]\n", "'generate.sections' must be a list"),
        ("generate:\n  sections: {inputs: x}\n", "'generate.sections' must be a list"),
        ("generate:\n  sections_file: [a, b]\n", "'generate.sections_file' must be a string"),
        ("migration:\n  tool: 3\n", "'migration.tool' must be a string"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, body: str, message: str) -> None:
    (tmp_path / ".ci-dokumentor.yml").write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_value_parsers() -> None:
    assert parse_link_format(" NONE ") is LinkFormat.NONE
    assert parse_concurrency("3") == 3
    with pytest.raises(ConfigError):
        parse_concurrency(True)
    with pytest.raises(ConfigError):
        parse_concurrency("many")
    assert parse_sections(["header", "HEADER", "license"]) == [
        SectionIdentifier.HEADER,
        SectionIdentifier.LICENSE,
    ]
