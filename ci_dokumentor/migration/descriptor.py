"""Static descriptions of the foreign documentation tools we can migrate from."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Pattern

from ..sections import SectionIdentifier


class MigrationStrategy(StrEnum):
    MARKERS = "markers"
    HEADINGS = "headings"


@dataclass(frozen=True)
class MigrationDescriptor:
    """Everything a migration needs to know about one foreign tool.

    Marker-based tools set ``start_pattern`` and ``end_pattern`` (the same
    pattern object when the tool uses one syntax for both). Heading-based
    tools set ``heading_pattern`` instead; its first group is the heading
    line and its second group the section key.
    """

    name: str
    detection_pattern: Pattern[str]
    section_map: Mapping[str, SectionIdentifier]
    start_pattern: Optional[Pattern[str]] = None
    end_pattern: Optional[Pattern[str]] = None
    heading_pattern: Optional[Pattern[str]] = None
    key_normalizer: Optional[Callable[[str], str]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Migration descriptor requires a name")
        has_markers = self.start_pattern is not None or self.end_pattern is not None
        if has_markers == (self.heading_pattern is not None):
            raise ValueError(
                f"Migration descriptor '{self.name}' needs either marker patterns or a heading pattern"
            )
        if has_markers and (self.start_pattern is None or self.end_pattern is None):
            raise ValueError(f"Migration descriptor '{self.name}' needs both start and end patterns")
        object.__setattr__(self, "section_map", MappingProxyType(dict(self.section_map)))

    @property
    def strategy(self) -> MigrationStrategy:
        if self.heading_pattern is not None:
            return MigrationStrategy.HEADINGS
        return MigrationStrategy.MARKERS

    @property
    def toggles(self) -> bool:
        """True when one marker syntax alternately opens and closes sections."""
        return self.start_pattern is not None and self.start_pattern is self.end_pattern

    def map_key(self, key: str) -> Optional[SectionIdentifier]:
        if self.key_normalizer is not None:
            key = self.key_normalizer(key)
        return self.section_map.get(key.strip().lower())


def _ghadocs_key(key: str) -> str:
    return "examples" if ".github/ghadocs/examples" in key.lower() else key


_ACTION_DOCS_MARKER = re.compile(r"<!--\s*action-docs-(\w+)\s+source=[\"'][^\"']+[\"']\s*-->")

ACTION_DOCS = MigrationDescriptor(
    name="action-docs",
    detection_pattern=re.compile(r"<!--\s*action-docs-\w+\s+source=[\"'][^\"']+[\"']\s*-->"),
    start_pattern=_ACTION_DOCS_MARKER,
    end_pattern=_ACTION_DOCS_MARKER,
    section_map={
        "header": SectionIdentifier.HEADER,
        "description": SectionIdentifier.OVERVIEW,
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "runs": SectionIdentifier.USAGE,
    },
)

ACTDOCS = MigrationDescriptor(
    name="actdocs",
    detection_pattern=re.compile(r"<!--\s*actdocs\s+\w+\s+(start|end)\s*-->", re.IGNORECASE),
    start_pattern=re.compile(r"<!--\s*actdocs\s+(\w+)\s+start\s*-->", re.IGNORECASE),
    end_pattern=re.compile(r"<!--\s*actdocs\s+(\w+)\s+end\s*-->", re.IGNORECASE),
    section_map={
        "description": SectionIdentifier.OVERVIEW,
        "inputs": SectionIdentifier.INPUTS,
        "secrets": SectionIdentifier.SECRETS,
        "outputs": SectionIdentifier.OUTPUTS,
        "permissions": SectionIdentifier.SECURITY,
    },
)

AUTO_DOC = MigrationDescriptor(
    name="auto-doc",
    detection_pattern=re.compile(r"^##\s+(Inputs|Outputs|Secrets|Description)\s*$", re.MULTILINE),
    heading_pattern=re.compile(r"^(##\s+(Inputs|Outputs|Secrets|Description))\s*$", re.IGNORECASE),
    section_map={
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "secrets": SectionIdentifier.SECRETS,
        "description": SectionIdentifier.OVERVIEW,
    },
)

GITHUB_ACTION_README_GENERATOR = MigrationDescriptor(
    name="github-action-readme-generator",
    detection_pattern=re.compile(r"<!--\s*(start|end)\s+[\w\[\]/.-]+\s*-->"),
    start_pattern=re.compile(r"<!--\s*start\s+([\w\[\]/.-]+)\s*-->", re.IGNORECASE),
    end_pattern=re.compile(r"<!--\s*end\s+([\w\[\]/.-]+)\s*-->", re.IGNORECASE),
    key_normalizer=_ghadocs_key,
    section_map={
        "branding": SectionIdentifier.HEADER,
        "title": SectionIdentifier.HEADER,
        "badges": SectionIdentifier.BADGES,
        "description": SectionIdentifier.OVERVIEW,
        "usage": SectionIdentifier.USAGE,
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "examples": SectionIdentifier.EXAMPLES,
    },
)

BUILTIN_DESCRIPTORS: List[MigrationDescriptor] = [
    ACTION_DOCS,
    ACTDOCS,
    AUTO_DOC,
    GITHUB_ACTION_README_GENERATOR,
]


def builtin_descriptors() -> Dict[str, MigrationDescriptor]:
    return {descriptor.name.lower(): descriptor for descriptor in BUILTIN_DESCRIPTORS}


__all__ = [
    "ACTDOCS",
    "ACTION_DOCS",
    "AUTO_DOC",
    "BUILTIN_DESCRIPTORS",
    "GITHUB_ACTION_README_GENERATOR",
    "MigrationDescriptor",
    "MigrationStrategy",
    "builtin_descriptors",
]
