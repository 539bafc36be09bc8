"""Per-destination write serialisation."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Dict, List


@dataclass
class _Entry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class WriteCoordinator:
    """Serialises read-modify-write cycles that target the same file.

    Each resolved path gets its own lock; writes to different paths never wait
    on each other. An entry is dropped as soon as nobody holds or awaits it.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}

    @staticmethod
    def key_for(path: Path | str) -> str:
        return str(Path(path).resolve())

    @contextlib.asynccontextmanager
    async def lock(self, path: Path | str) -> AsyncIterator[None]:
        key = self.key_for(path)
        entry = self._entries.get(key)
        if entry is None:
            entry = _Entry()
            self._entries[key] = entry
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def active_paths(self) -> List[str]:
        return sorted(self._entries)


__all__ = ["WriteCoordinator"]
