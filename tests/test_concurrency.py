"""Tests for bounded batch execution."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

import pytest

from ci_dokumentor.concurrency import (
    BatchError,
    FileResult,
    format_failures,
    raise_for_failures,
    run_for_files,
    run_with_limit,
)


def test_run_with_limit_caps_in_flight_tasks() -> None:
    active = 0
    peak = 0

    async def task(value: int) -> int:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return value * 2

    results = asyncio.run(run_with_limit([lambda v=v: task(v) for v in range(10)], limit=3))

    assert results == [value * 2 for value in range(10)]
    assert peak == 3


def test_run_with_limit_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        asyncio.run(run_with_limit([], limit=0))


def test_run_for_files_isolates_failures() -> None:
    seen: List[Path] = []

    async def operation(destination: Path) -> str:
        seen.append(destination)
        if destination.name == "bad.md":
            raise RuntimeError("boom")
        return destination.name

    paths = [Path("a.md"), Path("bad.md"), Path("c.md")]
    results = asyncio.run(run_for_files(paths, operation, limit=2))

    assert sorted(seen) == sorted(paths)
    assert results[0] == FileResult(destination=Path("a.md"), success=True, data="a.md")
    assert results[1] == FileResult(destination=Path("bad.md"), success=False, error="boom")
    assert results[2].success


def test_failure_summary_and_batch_error() -> None:
    results = [
        FileResult(destination=Path("a.md"), success=True),
        FileResult(destination=Path("b.md"), success=False, error="nope"),
    ]

    assert format_failures(results) == "Failed to process 1 of 2 files:\n  - b.md: nope"
    assert format_failures(results[:1]) == ""
    raise_for_failures(results[:1])
    with pytest.raises(BatchError) as excinfo:
        raise_for_failures(results)
    assert [failure.destination for failure in excinfo.value.failures] == [Path("b.md")]
