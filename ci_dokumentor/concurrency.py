"""Bounded concurrent execution of per-file operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from .logging import get_logger

_LOGGER = get_logger("concurrency")

DEFAULT_CONCURRENCY = 5

_T = TypeVar("_T")


@dataclass(frozen=True)
class FileResult:
    """Outcome of one destination in a batch operation."""

    destination: Path
    success: bool
    data: Optional[str] = None
    error: Optional[str] = None


class BatchError(RuntimeError):
    """Raised when at least one destination of a batch failed."""

    def __init__(self, results: Sequence[FileResult]) -> None:
        self.results = list(results)
        self.failures = [result for result in self.results if not result.success]
        super().__init__(format_failures(self.results))


async def run_with_limit(
    tasks: Sequence[Callable[[], Awaitable[_T]]],
    limit: int = DEFAULT_CONCURRENCY,
) -> List[Union[_T, BaseException]]:
    """Run task factories with at most ``limit`` in flight.

    Results come back in input order. A failing task yields its exception in
    place of a result and never cancels its siblings.
    """
    if limit < 1:
        raise ValueError("concurrency limit must be at least 1")
    semaphore = asyncio.Semaphore(limit)

    async def _guarded(task: Callable[[], Awaitable[_T]]) -> _T:
        async with semaphore:
            return await task()

    return await asyncio.gather(*(_guarded(task) for task in tasks), return_exceptions=True)


async def run_for_files(
    destinations: Sequence[Path],
    operation: Callable[[Path], Awaitable[Optional[str]]],
    limit: int = DEFAULT_CONCURRENCY,
) -> List[FileResult]:
    """Apply ``operation`` to every destination and collect one result each."""

    def _factory(destination: Path) -> Callable[[], Awaitable[Optional[str]]]:
        return lambda: operation(destination)

    outcomes = await run_with_limit([_factory(path) for path in destinations], limit)
    results: List[FileResult] = []
    for destination, outcome in zip(destinations, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            _LOGGER.error("Failed to process %s: %s", destination, outcome)
            results.append(FileResult(destination=destination, success=False, error=str(outcome)))
        else:
            results.append(FileResult(destination=destination, success=True, data=outcome))
    return results


def format_failures(results: Sequence[FileResult]) -> str:
    """Summarise failed results; empty string when everything succeeded."""
    failures = [result for result in results if not result.success]
    if not failures:
        return ""
    lines = [f"  - {result.destination}: {result.error}" for result in failures]
    header = f"Failed to process {len(failures)} of {len(results)} files:"
    return "\n".join([header, *lines])


def raise_for_failures(results: Sequence[FileResult]) -> None:
    if any(not result.success for result in results):
        raise BatchError(results)


__all__ = [
    "BatchError",
    "DEFAULT_CONCURRENCY",
    "FileResult",
    "format_failures",
    "raise_for_failures",
    "run_for_files",
    "run_with_limit",
]
