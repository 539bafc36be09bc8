"""Canonical documentation section identifiers."""

from __future__ import annotations

from enum import StrEnum
from typing import Iterable, List


class SectionIdentifier(StrEnum):
    """Closed set of documentation regions, in scaffolding order."""

    HEADER = "header"
    BADGES = "badges"
    OVERVIEW = "overview"
    USAGE = "usage"
    INPUTS = "inputs"
    OUTPUTS = "outputs"
    SECRETS = "secrets"
    EXAMPLES = "examples"
    CONTRIBUTING = "contributing"
    SECURITY = "security"
    LICENSE = "license"
    GENERATED = "generated"

    @classmethod
    def parse(cls, value: str) -> "SectionIdentifier":
        """Resolve ``value`` case-insensitively, raising ValueError if unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            known = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown section '{value}'. Expected one of: {known}") from None


DEFAULT_SECTIONS: List[SectionIdentifier] = list(SectionIdentifier)


def ordered(sections: Iterable[SectionIdentifier]) -> List[SectionIdentifier]:
    """Return ``sections`` de-duplicated and sorted in canonical order."""
    wanted = set(sections)
    return [section for section in DEFAULT_SECTIONS if section in wanted]


__all__ = ["DEFAULT_SECTIONS", "SectionIdentifier", "ordered"]
