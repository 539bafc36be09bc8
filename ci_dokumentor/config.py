"""Configuration loading for ci-dokumentor (.ci-dokumentor.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .concurrency import DEFAULT_CONCURRENCY
from .formatter.base import LinkFormat
from .sections import SectionIdentifier

CONFIG_FILENAME = ".ci-dokumentor.yml"


class ConfigError(RuntimeError):
    """Raised when a configuration or options file cannot be used."""


@dataclass
class FormatterConfig:
    """Formatter options from .ci-dokumentor.yml."""

    link_format: LinkFormat = LinkFormat.AUTO


@dataclass
class MigrationConfig:
    """Defaults for the migrate command."""

    tool: Optional[str] = None
    scaffold: bool = False


@dataclass
class GenerateConfig:
    """Defaults for the generate command."""

    sections_file: Optional[Path] = None
    sections: List[SectionIdentifier] = field(default_factory=list)


@dataclass
class DokumentorConfig:
    """Represents the settings defined in .ci-dokumentor.yml."""

    root: Path
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    concurrency: int = DEFAULT_CONCURRENCY
    migration: MigrationConfig = field(default_factory=MigrationConfig)
    generate: GenerateConfig = field(default_factory=GenerateConfig)


def load_config(config_path: Path) -> DokumentorConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DokumentorConfig(root=root)

    data = read_yaml(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    formatter_data = _as_dict(data.get("formatter"), "formatter")
    formatter = FormatterConfig()
    if "link_format" in formatter_data:
        formatter.link_format = parse_link_format(formatter_data["link_format"])

    concurrency = DEFAULT_CONCURRENCY
    if data.get("concurrency") is not None:
        concurrency = parse_concurrency(data["concurrency"])

    migration_data = _as_dict(data.get("migration"), "migration")
    migration = MigrationConfig(
        tool=_as_str(migration_data.get("tool"), "migration.tool"),
        scaffold=_as_bool(migration_data.get("scaffold"), "migration.scaffold") or False,
    )

    generate_data = _as_dict(data.get("generate"), "generate")
    sections_file_str = _as_str(generate_data.get("sections_file"), "generate.sections_file")
    generate = GenerateConfig(
        sections_file=root / sections_file_str if sections_file_str else None,
        sections=parse_sections(_as_str_list(generate_data.get("sections"), "generate.sections")),
    )

    return DokumentorConfig(
        root=root,
        formatter=formatter,
        concurrency=concurrency,
        migration=migration,
        generate=generate,
    )


def read_yaml(path: Path) -> Any:
    """Parse a YAML file, returning an empty mapping for blank files."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def parse_link_format(value: Any) -> LinkFormat:
    try:
        return LinkFormat(str(value).strip().lower())
    except ValueError:
        known = ", ".join(member.value for member in LinkFormat)
        raise ConfigError(f"Invalid link format '{value}'. Expected one of: {known}") from None


def parse_concurrency(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"Concurrency must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"Concurrency must be a positive integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"Concurrency must be at least 1, got {number}")
    return number


def parse_sections(values: Sequence[str]) -> List[SectionIdentifier]:
    sections: List[SectionIdentifier] = []
    for value in values:
        try:
            section = SectionIdentifier.parse(value)
        except ValueError as exc:
            raise ConfigError(str(exc)) from None
        if section not in sections:
            sections.append(section)
    return sections


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _as_str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {value!r}")
    return value if value.strip() else None


def _as_bool(value: Any, key: str) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return list(value)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DokumentorConfig",
    "FormatterConfig",
    "GenerateConfig",
    "MigrationConfig",
    "load_config",
    "parse_concurrency",
    "parse_link_format",
    "parse_sections",
    "read_yaml",
]
