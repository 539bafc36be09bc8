"""Migration of foreign documentation markers to canonical sections."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Iterable, List, Optional

from ..storage import FileReader
from .adapter import MigrationAdapter, MigrationError, iter_decoded_lines
from .descriptor import (
    BUILTIN_DESCRIPTORS,
    MigrationDescriptor,
    MigrationStrategy,
    builtin_descriptors,
)
from .service import MigrationService

_ENTRY_POINT_GROUP = "ci_dokumentor.migrations"


def discover_descriptors() -> List[MigrationDescriptor]:
    """Return built-in descriptors followed by those registered as plugins.

    Plugins register a :class:`MigrationDescriptor` (or a callable returning
    one) under the ``ci_dokumentor.migrations`` entry point group. A plugin
    cannot shadow a built-in tool name.
    """
    descriptors: Dict[str, MigrationDescriptor] = builtin_descriptors()
    for entry in _iter_entry_points():
        loaded = entry.load()
        descriptor = loaded() if callable(loaded) and not isinstance(loaded, MigrationDescriptor) else loaded
        if not isinstance(descriptor, MigrationDescriptor):
            raise TypeError(
                f"Migration entry point '{entry.name}' must provide a MigrationDescriptor"
            )
        descriptors.setdefault(descriptor.name.lower(), descriptor)
    return list(descriptors.values())


def build_adapters(
    *, scaffold: bool = False, reader: Optional[FileReader] = None
) -> List[MigrationAdapter]:
    return [
        MigrationAdapter(descriptor, reader=reader, scaffold=scaffold)
        for descriptor in discover_descriptors()
    ]


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BUILTIN_DESCRIPTORS",
    "MigrationAdapter",
    "MigrationDescriptor",
    "MigrationError",
    "MigrationService",
    "MigrationStrategy",
    "build_adapters",
    "discover_descriptors",
    "iter_decoded_lines",
]
